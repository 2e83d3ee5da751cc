"""Reference index builders for nomenclature items and tax classifications."""

from __future__ import annotations

import math
from typing import Any

import structlog

from classtrib.config import (
    ClassificationSchema,
    NomenclatureSchema,
    NormalizationConfig,
    SearchConfig,
)
from classtrib.normalize import keywords, normalize_code, normalize_text
from classtrib.types import ClassificationEntry, ItemKind, NomenclatureItem

log = structlog.get_logger()

NO_REDUCTION = "Sem redução"


def _rows(table: Any, wrapper_key: str | None = None) -> list[Any]:
    """Return the row list of a table, or [] when it is not a sequence."""
    if wrapper_key and isinstance(table, dict):
        table = table.get(wrapper_key)
    if isinstance(table, (list, tuple)):
        return list(table)
    return []


def _text(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _is_reduction(value: str) -> bool:
    """A reduction percentage counts only when present and non-zero."""
    if not value:
        return False
    try:
        number = float(value.replace("%", "").replace(",", "."))
    except ValueError:
        return value != "0"
    # "NaN" and "inf" parse but carry no percentage
    return math.isfinite(number) and number != 0


def _format_percent(value: str) -> str:
    return value if value.endswith("%") else f"{value}%"


def summarize_reductions(ibs: str, cbs: str) -> str:
    """Human-readable summary of the IBS/CBS rate reductions."""
    parts: list[str] = []
    if _is_reduction(ibs):
        parts.append(f"IBS {_format_percent(ibs)}")
    if _is_reduction(cbs):
        parts.append(f"CBS {_format_percent(cbs)}")
    if not parts:
        return NO_REDUCTION
    return " | ".join(parts)


def _classification_entry(
    record: dict[str, Any],
    schema: ClassificationSchema,
    normalization: NormalizationConfig,
) -> ClassificationEntry:
    description = _text(record, schema.description)
    situation_description = _text(record, schema.situation_description)
    drafting_text = _text(record, schema.drafting_text)
    ibs = _text(record, schema.ibs_reduction)
    cbs = _text(record, schema.cbs_reduction)

    full_text = normalize_text(
        " ".join(part for part in (description, situation_description, drafting_text) if part)
    )

    return ClassificationEntry(
        code=_text(record, schema.code),
        description=description,
        situation_code=_text(record, schema.situation_code),
        situation_description=situation_description,
        legal_reference=_text(record, schema.legal_reference),
        rate_reduction_summary=summarize_reductions(ibs, cbs),
        last_updated=_text(record, schema.last_updated),
        url=_text(record, schema.url),
        normalized_full_text=full_text,
        keyword_set=frozenset(keywords(full_text, normalization)),
        name=_text(record, schema.name),
        rate_type=_text(record, schema.rate_type),
        drafting_text=drafting_text,
        ibs_reduction=ibs,
        cbs_reduction=cbs,
    )


def build_classification_index(
    records: Any, config: SearchConfig | None = None
) -> list[ClassificationEntry]:
    """Turn raw classification records into searchable entries.

    Every dict record becomes one entry; entries are not deduplicated by
    code. Anything that is not a dict is skipped.
    """
    if config is None:
        config = SearchConfig()
    schema = config.schema.classifications

    entries: list[ClassificationEntry] = []
    skipped = 0
    for position, record in enumerate(_rows(records)):
        if not isinstance(record, dict):
            skipped += 1
            log.debug("classification_record_skipped", position=position)
            continue
        entries.append(_classification_entry(record, schema, config.normalization))

    log.info(
        "build_classification_index_done",
        entries=len(entries),
        skipped=skipped,
    )
    return entries


def _collect_items(
    table: Any,
    kind: ItemKind,
    schema: NomenclatureSchema,
    seen: set[tuple[str, str]],
    items: list[NomenclatureItem],
) -> int:
    """Append the table's new items to ``items``; return the skipped count."""
    skipped = 0
    for position, row in enumerate(_rows(table, schema.wrapper_key)):
        raw_code = row.get(schema.code_field) if isinstance(row, dict) else None
        if not isinstance(raw_code, str):
            skipped += 1
            log.debug("nomenclature_row_skipped", kind=kind, position=position, reason="no_code")
            continue

        normalized = normalize_code(raw_code)
        if not normalized:
            skipped += 1
            log.debug("nomenclature_row_skipped", kind=kind, position=position, reason="empty_code")
            continue

        key = (kind, normalized)
        if key in seen:
            skipped += 1
            log.debug("nomenclature_row_skipped", kind=kind, position=position, reason="duplicate")
            continue
        seen.add(key)

        description = _text(row, schema.description_field)
        items.append(NomenclatureItem(
            kind=kind,
            original_code=raw_code,
            normalized_code=normalized,
            description=description,
            normalized_description=normalize_text(description),
        ))
    return skipped


def build_nomenclature_index(
    goods: Any, services: Any, config: SearchConfig | None = None
) -> list[NomenclatureItem]:
    """Merge the goods and service tables into one deduplicated item list.

    Goods come before services and source order is kept. Within a kind the
    first row for a normalized code wins.
    """
    if config is None:
        config = SearchConfig()

    items: list[NomenclatureItem] = []
    seen: set[tuple[str, str]] = set()
    skipped_goods = _collect_items(goods, "GOODS", config.schema.goods, seen, items)
    goods_count = len(items)
    skipped_services = _collect_items(
        services, "SERVICE", config.schema.services, seen, items
    )

    log.info(
        "build_nomenclature_index_done",
        goods=goods_count,
        services=len(items) - goods_count,
        skipped_goods=skipped_goods,
        skipped_services=skipped_services,
    )
    return items
