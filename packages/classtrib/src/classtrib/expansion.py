"""Expansion of ranked items into classification result rows."""

from __future__ import annotations

from classtrib.config import SearchConfig
from classtrib.normalize import keywords, normalize_text
from classtrib.types import ClassificationEntry, NomenclatureItem, ResultRow


def score_classification(
    entry: ClassificationEntry,
    item_keywords: set[str],
    normalized_description: str,
    config: SearchConfig,
) -> int:
    """Score a classification entry for one item's combined keyword set."""
    weights = config.expansion
    score = 0
    for keyword in item_keywords:
        # A keyword counts once: exact token hit or, failing that, substring
        if keyword in entry.keyword_set:
            score += weights.keyword_hit
        elif keyword in entry.normalized_full_text:
            score += weights.substring_hit

    if (
        score == 0
        and normalized_description
        and normalized_description in entry.normalized_full_text
    ):
        score = weights.description_fallback

    return score


def candidates_for_item(
    item: NomenclatureItem,
    classifications: list[ClassificationEntry],
    query_keywords: set[str],
    config: SearchConfig,
) -> list[tuple[int, ClassificationEntry]]:
    """Best-scoring classification entries for ``item``, capped per item."""
    item_keywords = keywords(item.normalized_description, config.normalization) | query_keywords

    scored: list[tuple[int, ClassificationEntry]] = []
    for entry in classifications:
        score = score_classification(
            entry, item_keywords, item.normalized_description, config
        )
        if score > 0:
            scored.append((score, entry))

    scored.sort(key=lambda pair: (-pair[0], pair[1].code))
    return scored[: config.expansion.max_per_item]


def expand_results(
    ranked_items: list[NomenclatureItem],
    classifications: list[ClassificationEntry],
    query: str,
    config: SearchConfig | None = None,
) -> list[ResultRow]:
    """Join each ranked item with its candidate classifications.

    Rows stay grouped in ranked item order. An item without any candidate
    still yields one row with no classification.
    """
    if config is None:
        config = SearchConfig()

    query_keywords = keywords(normalize_text(query), config.normalization)

    rows: list[ResultRow] = []
    for item in ranked_items:
        candidates = candidates_for_item(item, classifications, query_keywords, config)
        if not candidates:
            rows.append(ResultRow(item=item))
            continue
        for score, entry in candidates:
            rows.append(ResultRow(item=item, classification=entry, match_score=score))
    return rows
