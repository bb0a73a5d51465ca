"""Record input helpers for the command line."""

# Module responsibilities:
# - Load record lists from JSON/YAML documents or tabular CSV/XLSX files.
# - Fold dotted tabular column names into nested mappings that field paths can walk.

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import yaml

from .errors import ConfigError
from .schema import PATH_SEPARATOR
from .utils.log import get_logger

logger = get_logger("records")

SheetType = Union[str, int, None]
TABULAR_SUFFIXES = {".csv", ".xlsx", ".xlsm"}
DOCUMENT_SUFFIXES = {".json", ".yaml", ".yml"}


def unflatten(row: Dict[str, Any]) -> Dict[str, Any]:
    """Turn ``{"dept.name": "IT"}`` into ``{"dept": {"name": "IT"}}``."""

    nested: Dict[str, Any] = {}
    for key, value in row.items():
        target = nested
        *parents, leaf = str(key).split(PATH_SEPARATOR)
        for part in parents:
            child = target.setdefault(part, {})
            if not isinstance(child, dict):
                raise ConfigError(f"Column '{key}' conflicts with scalar column '{part}'")
            target = child
        target[leaf] = value
    return nested


def read_table(path: Path, sheet: SheetType = 0) -> pd.DataFrame:
    """Load a DataFrame from a CSV file or an Excel workbook.

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When pandas fails to parse the requested sheet.
    """

    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")

    logger.info("Reading tabular records", extra={"path": str(path), "sheet": sheet})
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path)
    else:
        df = pd.read_excel(path, sheet_name=sheet)

    if isinstance(df, dict):
        # pandas returns a dict when sheet_name is a list; this API expects a single sheet.
        raise ValueError("read_table expects a single sheet; received multiple sheets")
    return df


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame into nested record mappings, NaN becoming ``None``."""

    cleaned = df.astype(object).where(pd.notna(df), None)
    return [unflatten(row) for row in cleaned.to_dict(orient="records")]


def load_records(path: Path, *, sheet: SheetType = 0, key: Optional[str] = None) -> List[Any]:
    """Load records from ``path``.

    Args:
        path: JSON/YAML document holding a list, or a CSV/XLSX table.
        sheet: Worksheet name or index for Excel inputs.
        key: For JSON/YAML documents holding a mapping, the key of the record list.

    Raises:
        ConfigError: When the format is unsupported or the document is not a list.
    """

    suffix = path.suffix.lower()
    if suffix in TABULAR_SUFFIXES:
        records: Any = frame_to_records(read_table(path, sheet))
    elif suffix in DOCUMENT_SUFFIXES:
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            records = json.load(fh) if suffix == ".json" else yaml.safe_load(fh)
        if key is not None:
            if not isinstance(records, dict) or key not in records:
                raise ConfigError(f"Document {path} has no '{key}' entry")
            records = records[key]
    else:
        raise ConfigError(f"Unsupported record file type: {path.suffix or path.name}")

    if records is None:
        records = []
    if not isinstance(records, list):
        raise ConfigError(f"Expected a list of records in {path}")

    logger.info("Records loaded", extra={"path": str(path), "rows": len(records)})
    return records
