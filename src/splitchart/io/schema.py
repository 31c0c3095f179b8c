from __future__ import annotations

from typing import Any, Mapping, Sequence

import pandas as pd

from splitchart.analysis.records import DATE_DISPLAY_KEY, DATE_KEY, RESERVED_KEYS, is_finite_number
from splitchart.config import ColumnsConfig


def extract_series_fields(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    """Numeric, non-reserved keys of the first row, in key order."""
    if not rows:
        return []
    first = rows[0]
    return [
        key
        for key, value in first.items()
        if key not in RESERVED_KEYS and is_finite_number(value)
    ]


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Rename configured date columns to the reserved row keys."""
    rename_map = {
        columns.date: DATE_KEY,
        columns.date_display: DATE_DISPLAY_KEY,
    }
    present = {source: target for source, target in rename_map.items() if source in df.columns}
    if not present:
        missing_str = ", ".join(rename_map)
        raise ValueError(f"Missing required date columns: {missing_str}")
    return df.rename(columns=present)


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for record in df.to_dict(orient="records"):
        row: dict[str, Any] = {}
        for key, value in record.items():
            if isinstance(value, float) and pd.isna(value):
                row[key] = None
            elif hasattr(value, "item"):
                row[key] = value.item()
            else:
                row[key] = value
        rows.append(row)
    return rows
