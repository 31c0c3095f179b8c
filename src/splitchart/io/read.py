from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from splitchart.analysis.records import DATE_DISPLAY_KEY, DATE_KEY, Row
from splitchart.config import ColumnsConfig
from splitchart.io.schema import frame_to_rows, normalize_columns


def _normalize_item(item: Any, columns: ColumnsConfig) -> Row:
    if not isinstance(item, dict):
        raise ValueError("Each data item must be an object")
    row = dict(item)
    if columns.date != DATE_KEY and columns.date in row:
        row[DATE_KEY] = row.pop(columns.date)
    if columns.date_display != DATE_DISPLAY_KEY and columns.date_display in row:
        row[DATE_DISPLAY_KEY] = row.pop(columns.date_display)

    date = row.get(DATE_KEY)
    date_display = row.get(DATE_DISPLAY_KEY)
    if not date and not date_display:
        raise ValueError("Each data item needs a date or date_display field")
    row[DATE_KEY] = date or date_display
    row[DATE_DISPLAY_KEY] = date_display or date
    return row


def parse_input_rows(text: str, columns: ColumnsConfig | None = None) -> list[Row]:
    """Parse a JSON array of row objects, filling either date key from the other."""
    columns = columns or ColumnsConfig()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON input") from exc

    if not isinstance(parsed, list):
        raise ValueError("Input data must be a JSON array")
    return [_normalize_item(item, columns) for item in parsed]


def load_rows(path: Path, columns: ColumnsConfig | None = None) -> list[Row]:
    columns = columns or ColumnsConfig()
    if path.suffix == ".json":
        return parse_input_rows(path.read_text(encoding="utf-8"), columns)
    if path.suffix == ".csv":
        # utf-8-sig drops a leading BOM.
        df = pd.read_csv(
            path,
            encoding="utf-8-sig",
            dtype={columns.date: str, columns.date_display: str},
        )
        normalized = normalize_columns(df=df, columns=columns)
        return [_normalize_item(row, ColumnsConfig()) for row in frame_to_rows(normalized)]
    raise ValueError(f"Unsupported rows file type: {path.suffix}")



def load_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported table file type: {path.suffix}")
