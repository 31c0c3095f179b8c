from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

import pandas as pd

from splitchart.analysis.records import DATE_DISPLAY_KEY, DATE_KEY, Row, is_finite_number
from splitchart.config import UnitConfig
from splitchart.io.schema import extract_series_fields

LEADING_YEAR_RE = re.compile(r"^(\d{4})")
BARE_YEAR_RE = re.compile(r"^\d{4}$")


def parse_date(value: Any) -> pd.Timestamp | None:
    """Parse a row date key as a naive wall-clock timestamp; failures give None.

    An explicit offset is dropped rather than converted, so buckets follow the
    calendar date written in the data.
    """
    if value is None or value == "":
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed


def group_key(timestamp: pd.Timestamp, datetime_type: str) -> str:
    if datetime_type == "minute":
        return timestamp.strftime("%Y-%m-%d %H:%M")
    if datetime_type == "hour":
        return timestamp.strftime("%Y-%m-%d %H:00")
    if datetime_type == "day":
        return timestamp.strftime("%Y-%m-%d")
    if datetime_type == "week":
        iso = timestamp.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}"
    if datetime_type == "month":
        return timestamp.strftime("%Y-%m")
    if datetime_type == "quarter":
        return f"{timestamp.year}-Q{(timestamp.month - 1) // 3 + 1}"
    if datetime_type == "year":
        return timestamp.strftime("%Y")
    raise ValueError(f"Unsupported datetime_type: {datetime_type}")


def format_date_for_x_axis(label: str) -> str:
    """Shorten a leading 4-digit year to 2 digits, leaving bare years alone."""
    if not label or BARE_YEAR_RE.match(label):
        return label
    return LEADING_YEAR_RE.sub(lambda match: match.group(1)[2:], label, count=1)


def filter_rows_by_date_range(
    rows: Sequence[Mapping[str, Any]],
    unit: UnitConfig,
) -> list[Row]:
    if not unit.datetime_start and not unit.datetime_end:
        return [dict(row) for row in rows]

    start = parse_date(unit.datetime_start)
    end = parse_date(unit.datetime_end)
    if unit.datetime_start and start is None:
        raise ValueError(f"Invalid unit.datetime_start: {unit.datetime_start}")
    if unit.datetime_end and end is None:
        raise ValueError(f"Invalid unit.datetime_end: {unit.datetime_end}")

    kept: list[Row] = []
    for row in rows:
        timestamp = parse_date(row.get(DATE_KEY))
        if timestamp is None:
            # Undated rows are not range-filtered.
            kept.append(dict(row))
            continue
        if start is not None and timestamp < start:
            continue
        if end is not None and timestamp > end:
            continue
        kept.append(dict(row))
    return kept


def aggregate_rows_by_unit(
    rows: Sequence[Mapping[str, Any]],
    unit: UnitConfig,
) -> list[Row]:
    """Sum every numeric series field into one row per datetime bucket."""
    if not rows:
        return []

    fields = extract_series_fields(rows)
    groups: dict[str, Row] = {}
    for row in rows:
        timestamp = parse_date(row.get(DATE_KEY))
        if timestamp is None:
            continue
        key = group_key(timestamp, unit.datetime_type)
        group = groups.setdefault(key, {DATE_KEY: key, DATE_DISPLAY_KEY: key})
        for field in fields:
            value = row.get(field)
            current = group.get(field) or 0.0
            group[field] = current + (float(value) if is_finite_number(value) else 0.0)

    return [groups[key] for key in sorted(groups)]


def prepare_rows(rows: Sequence[Mapping[str, Any]], unit: UnitConfig) -> list[Row]:
    if not unit.enabled:
        return [dict(row) for row in rows]
    filtered = filter_rows_by_date_range(rows, unit)
    return aggregate_rows_by_unit(filtered, unit)
