"""Scoring and ordering of nomenclature items against a query."""

from __future__ import annotations

from classtrib.config import RankingWeights
from classtrib.normalize import normalize_code, normalize_text
from classtrib.types import NomenclatureItem


def score_item(
    item: NomenclatureItem,
    code_query: str,
    text_query: str,
    weights: RankingWeights,
) -> int:
    """Score one item against an already normalized query."""
    score = 0

    if code_query:
        if item.normalized_code == code_query:
            score += weights.exact_code
        elif item.normalized_code.startswith(code_query):
            score += weights.prefix_code
        elif code_query in item.normalized_code:
            score += weights.substring_code

    if text_query and text_query in item.normalized_description:
        score += weights.description

    return score


def rank_items(
    items: list[NomenclatureItem],
    query: str,
    weights: RankingWeights | None = None,
) -> list[NomenclatureItem]:
    """Return the items matching ``query``, best first.

    Ties are broken by normalized code so the order is deterministic.
    Items scoring zero are left out; the list is not capped.
    """
    if weights is None:
        weights = RankingWeights()

    code_query = normalize_code(query)
    text_query = normalize_text(query)

    scored: list[tuple[int, NomenclatureItem]] = []
    for item in items:
        score = score_item(item, code_query, text_query, weights)
        if score > 0:
            scored.append((score, item))

    scored.sort(key=lambda pair: (-pair[0], pair[1].normalized_code))
    return [item for _, item in scored]
