"""Main orchestration: index building, ranking, expansion, limiting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from classtrib.config import SearchConfig
from classtrib.expansion import expand_results
from classtrib.index import build_classification_index, build_nomenclature_index
from classtrib.ranking import rank_items
from classtrib.types import (
    ClassificationEntry,
    LimitedRows,
    NomenclatureItem,
    ResultRow,
    SearchResult,
    SearchState,
)

log = structlog.get_logger()


def limit_rows(rows: list[ResultRow], max_results: int = 200) -> LimitedRows:
    """Cap the row list, keeping the full count for the caller."""
    total = len(rows)
    if total > max_results:
        return LimitedRows(rows=rows[:max_results], total_count=total, truncated=True)
    return LimitedRows(rows=list(rows), total_count=total, truncated=False)


@dataclass
class SearchStats:
    """Statistics collected across searches."""

    items: int = 0
    classifications: int = 0
    queries: int = 0
    truncated: int = 0
    states: dict[str, int] = field(default_factory=lambda: {
        "EMPTY": 0, "NO_MATCH": 0, "RESULTS": 0
    })


class ClassificationSearch:
    """Tax classification search over static nomenclature tables."""

    def __init__(self, config: SearchConfig | None = None) -> None:
        self.config = config or SearchConfig()
        self.items: list[NomenclatureItem] = []
        self.classifications: list[ClassificationEntry] = []
        self.state: SearchState = "IDLE"
        self.stats = SearchStats()

    @classmethod
    def from_files(
        cls,
        goods_path: str | Path,
        services_path: str | Path,
        classifications_path: str | Path,
        config: SearchConfig | None = None,
    ) -> ClassificationSearch:
        """Build a search engine from reference table files."""
        from classtrib.io import load_table

        search = cls(config)
        schema = search.config.schema
        search.load(
            load_table(goods_path, wrapper_key=schema.goods.wrapper_key),
            load_table(services_path, wrapper_key=schema.services.wrapper_key),
            load_table(classifications_path),
        )
        return search

    def load(self, goods: Any, services: Any, classifications: Any) -> None:
        """Build both indices from the raw reference tables."""
        log.info("build_indices_start")
        self.items = build_nomenclature_index(goods, services, self.config)
        self.classifications = build_classification_index(classifications, self.config)
        self.stats.items = len(self.items)
        self.stats.classifications = len(self.classifications)
        log.info(
            "build_indices_done",
            items=self.stats.items,
            classifications=self.stats.classifications,
        )

    def search(self, query: str | None) -> SearchResult:
        """Run the full pipeline for one query."""
        self.stats.queries += 1
        text = (query or "").strip()

        if not text:
            return self._finish(SearchResult(query=query or "", state="EMPTY"))

        ranked = rank_items(self.items, text, self.config.ranking)
        log.debug("ranking_done", query=text, ranked=len(ranked))
        if not ranked:
            return self._finish(SearchResult(query=query, state="NO_MATCH"))

        rows = expand_results(ranked, self.classifications, text, self.config)
        limited = limit_rows(rows, self.config.limits.max_results)
        log.debug(
            "expansion_done",
            query=text,
            rows=limited.total_count,
            truncated=limited.truncated,
        )

        return self._finish(SearchResult(
            query=query,
            state="RESULTS",
            rows=limited.rows,
            total_count=limited.total_count,
            truncated=limited.truncated,
        ))

    def _finish(self, result: SearchResult) -> SearchResult:
        self.state = result.state
        self.stats.states[result.state] += 1
        if result.truncated:
            self.stats.truncated += 1
        return result
