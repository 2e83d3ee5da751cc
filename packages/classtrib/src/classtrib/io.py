"""Loading of reference tables from JSON, JSONL, CSV and Excel files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pandas as pd

DATA_DIR = Path(os.environ.get("CLASSTRIB_DATA") or "data")

DEFAULT_GOODS_FILE = "Tabela_NCM_Vigente.json"
DEFAULT_SERVICES_FILE = "Tabela_NBS.json"
DEFAULT_CLASSIFICATIONS_FILE = "cclass-trib-publicacao.json"


def default_path(filename: str) -> Path:
    """Resolve a reference file name inside the data directory."""
    return DATA_DIR / filename


def load_table(path: str | Path, wrapper_key: str | None = None) -> Any:
    """Read a reference table.

    JSON files are returned as parsed (a row list, or a dict wrapping one).
    The other formats yield a list of dict rows with every cell as a string.
    When ``wrapper_key`` is given, tabular rows are wrapped under it so the
    result has the same shape as the JSON export.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"reference table not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    if suffix == ".jsonl":
        rows = _read_jsonl(path)
    elif suffix == ".csv":
        rows = _records(pd.read_csv(path, dtype=str, keep_default_na=False))
    elif suffix in (".xlsx", ".xls"):
        rows = _records(pd.read_excel(path, dtype=str, keep_default_na=False))
    else:
        raise ValueError(f"unsupported reference table format: {path.suffix}")

    if wrapper_key:
        return {wrapper_key: rows}
    return rows


def _read_jsonl(path: Path) -> list[Any]:
    rows: list[Any] = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append(json.loads(line))
    return rows


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")
