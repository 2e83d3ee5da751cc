"""Text and code normalization shared by indexing and querying."""

from __future__ import annotations

import re
import unicodedata

from classtrib.config import NormalizationConfig

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def normalize_text(text: object) -> str:
    """Canonicalize free text for comparison.

    Decomposes to NFD, drops combining marks and lower-cases, so
    "Veículos" and "VEICULOS" compare equal. Idempotent.
    """
    if not text:
        return ""
    # Lower-case before decomposing: "İ".lower() yields a combining mark
    s = unicodedata.normalize("NFD", str(text).lower())
    return "".join(ch for ch in s if unicodedata.category(ch) != "Mn")


def normalize_code(value: object) -> str:
    """Reduce a nomenclature or classification code to its digits."""
    if not value:
        return ""
    return _NON_DIGIT_RE.sub("", str(value))


def keywords(normalized_text: str, config: NormalizationConfig | None = None) -> set[str]:
    """Split normalized text into its filtered keyword set."""
    if config is None:
        config = NormalizationConfig()
    if not normalized_text:
        return set()
    return {
        token
        for token in normalized_text.split()
        if len(token) >= config.min_token_length and token not in config.stopwords
    }
