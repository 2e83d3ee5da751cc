"""classtrib - Tax classification lookup for NCM/NBS codes."""

from classtrib.config import SearchConfig
from classtrib.search import ClassificationSearch, SearchStats, limit_rows
from classtrib.types import (
    ClassificationEntry,
    NomenclatureItem,
    ResultRow,
    SearchResult,
)

__all__ = [
    "ClassificationEntry",
    "ClassificationSearch",
    "NomenclatureItem",
    "ResultRow",
    "SearchConfig",
    "SearchResult",
    "SearchStats",
    "limit_rows",
]
