from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from splitchart.analysis.layout import compute_region_heights
from splitchart.analysis.quality import (
    analyze_data_quality_extended,
    analyze_dual_axis,
    fences_frame,
    missing_frame,
    outlier_summary,
    outliers_frame,
    region_frame,
)
from splitchart.analysis.records import ExtendedAnalysisResult, Row
from splitchart.config import AppConfig
from splitchart.features.aggregates import sum_by_field, sum_by_field_and_year
from splitchart.io.read import load_rows
from splitchart.io.schema import extract_series_fields
from splitchart.io.write import write_summary, write_table
from splitchart.paths import build_output_paths
from splitchart.preprocess.time import prepare_rows

LOGGER = logging.getLogger(__name__)


def resolve_fields(rows: Sequence[Row], config: AppConfig) -> list[str]:
    if config.analysis.fields:
        return list(config.analysis.fields)
    return extract_series_fields(rows)


def analyze_rows(
    rows: Sequence[Row],
    fields: Sequence[str],
    config: AppConfig,
) -> ExtendedAnalysisResult:
    if config.analysis.dual_axis_placements:
        return analyze_dual_axis(rows, fields, config.analysis.dual_axis_placements)
    return analyze_data_quality_extended(rows, fields, all_fields=config.analysis.all_fields)


def region_fields(fields: Sequence[str], all_fields: Sequence[str] | None = None) -> list[str]:
    """Analyzed fields followed by passthrough fields kept in the normal region."""
    analyzed = list(fields)
    return analyzed + [field for field in (all_fields or []) if field not in analyzed]


def build_analysis_tables(
    rows: Sequence[Row],
    fields: Sequence[str],
    result: ExtendedAnalysisResult,
    all_fields: Sequence[str] | None = None,
) -> dict[str, pd.DataFrame]:
    tables: dict[str, pd.DataFrame] = {
        "outliers": outliers_frame(result.outliers),
        "missing": missing_frame(result.missing),
        "fences": fences_frame(result.fences),
        "pie_sums": pd.DataFrame(sum_by_field(rows, fields), columns=["name", "value"]),
        "two_level_pie_outer": pd.DataFrame(
            sum_by_field_and_year(rows, fields)["outerData"],
            columns=["name", "value", "series"],
        ),
    }
    if result.classified is not None:
        columns = region_fields(fields, all_fields)
        for region_name in ("upper", "normal", "lower"):
            region = getattr(result.classified, region_name)
            tables[f"region_{region_name}"] = region_frame(region, columns)
    return tables


def load_and_analyze(
    rows_path: Path,
    config: AppConfig,
) -> tuple[list[Row], list[str], ExtendedAnalysisResult]:
    raw_rows = load_rows(rows_path, columns=config.columns)
    rows = prepare_rows(raw_rows, config.unit)
    fields = resolve_fields(rows, config)
    LOGGER.info("Analyzing %d rows across %d fields", len(rows), len(fields))
    if not fields:
        LOGGER.warning("No numeric series fields found in %s", rows_path)
    return rows, fields, analyze_rows(rows, fields, config)


def run_analysis(rows_path: Path, out_dir: Path, config: AppConfig) -> dict[str, Any]:
    """Load rows, run the split-chart analysis and write tables plus a JSON summary."""
    rows, fields, result = load_and_analyze(rows_path, config)
    paths = build_output_paths(out_dir)
    tables = build_analysis_tables(rows, fields, result, all_fields=config.analysis.all_fields)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    for name, table in tables.items():
        write_table(table, paths.tables / f"{name}.{extension}", fmt=config.outputs.tables_format)

    summary = outlier_summary(result)
    summary["n_rows"] = len(rows)
    summary["fields"] = list(fields)
    if result.classified is not None:
        heights = compute_region_heights(
            result.classified,
            total_height=config.layout.total_height,
            min_height=config.layout.min_height,
        )
        summary["heights"] = {
            "upper": heights.upper,
            "normal": heights.normal,
            "lower": heights.lower,
        }
    write_summary(summary, paths.summary / "analysis.json")
    LOGGER.info(
        "Found %d outliers and %d missing values",
        summary["n_outliers"],
        summary["n_missing"],
    )
    return summary
