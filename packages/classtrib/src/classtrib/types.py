"""Core types for the classtrib search engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ItemKind = Literal["GOODS", "SERVICE"]


@dataclass(frozen=True)
class NomenclatureItem:
    kind: ItemKind
    original_code: str
    normalized_code: str
    description: str
    normalized_description: str


@dataclass(frozen=True)
class ClassificationEntry:
    code: str
    description: str
    situation_code: str
    situation_description: str
    legal_reference: str
    rate_reduction_summary: str
    last_updated: str
    url: str
    normalized_full_text: str
    keyword_set: frozenset[str]
    name: str = ""
    rate_type: str = ""
    drafting_text: str = ""
    ibs_reduction: str = ""
    cbs_reduction: str = ""


@dataclass
class ResultRow:
    item: NomenclatureItem
    classification: ClassificationEntry | None = None
    match_score: int | None = None


@dataclass
class LimitedRows:
    rows: list[ResultRow]
    total_count: int
    truncated: bool


SearchState = Literal["IDLE", "EMPTY", "NO_MATCH", "RESULTS"]


@dataclass
class SearchResult:
    query: str
    state: SearchState
    rows: list[ResultRow] = field(default_factory=list)
    total_count: int = 0
    truncated: bool = False
