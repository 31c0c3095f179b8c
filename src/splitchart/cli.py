from __future__ import annotations

from pathlib import Path

import typer

from splitchart.analysis.layout import compute_region_heights
from splitchart.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from splitchart.io.mock_data import PRESETS, MockDataOptions, generate_mock_rows
from splitchart.io.write import write_rows
from splitchart.logging import configure_logging
from splitchart.pipeline.run_all import load_and_analyze, run_analysis

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        if DEFAULT_CONFIG_PATH.exists():
            return load_config(DEFAULT_CONFIG_PATH)
        return AppConfig()
    return load_config(config_path)


def _parse_fields(fields: str | None) -> list[str] | None:
    if not fields:
        return None
    parsed = [field.strip() for field in fields.split(",") if field.strip()]
    if not parsed:
        raise typer.BadParameter("--fields must name at least one field")
    return parsed


@app.command()
def analyze(
    rows: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    fields: str | None = typer.Option(
        None,
        help="Comma-separated series fields to analyze. Defaults to every numeric field.",
    ),
) -> None:
    """Detect outliers and build split-chart regions for a JSON or CSV dataset."""
    configure_logging()
    cfg = _load_app_config(config)
    selected = _parse_fields(fields)
    if selected is not None:
        cfg.analysis.fields = selected
    try:
        summary = run_analysis(rows_path=rows, out_dir=out, config=cfg)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(
        f"Analysis complete. Outliers: {summary['n_outliers']}, "
        f"missing: {summary['n_missing']}"
    )


@app.command("generate-mock")
def generate_mock(
    out: Path = typer.Option(..., resolve_path=True),
    preset: str | None = typer.Option(None, help=f"One of: {', '.join(sorted(PRESETS))}."),
    count: int = typer.Option(30, min=1),
    seed: int = typer.Option(42, min=0),
    include_outliers: bool = typer.Option(False),
    null_probability: float = typer.Option(0.0, min=0.0, max=1.0),
) -> None:
    """Write a synthetic JSON dataset for trying the analysis."""
    configure_logging()
    if preset is not None:
        if preset not in PRESETS:
            raise typer.BadParameter(f"Unknown preset: {preset}")
        data = PRESETS[preset]()
    else:
        data = generate_mock_rows(
            MockDataOptions(
                count=count,
                seed=seed,
                include_outliers=include_outliers,
                null_probability=null_probability,
            )
        )
    write_rows(data, out)
    typer.echo(f"Wrote {len(data)} rows to {out}")


@app.command()
def heights(
    rows: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    total_height: float | None = typer.Option(
        None, min=0.0, help="Defaults to layout.total_height from the config."
    ),
    min_height: float | None = typer.Option(
        None, min=0.0, help="Defaults to layout.min_height from the config."
    ),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print the upper/normal/lower pixel heights for a dataset."""
    configure_logging()
    cfg = _load_app_config(config)
    try:
        _, _, result = load_and_analyze(rows, cfg)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if result.classified is None:
        raise typer.BadParameter("No series fields to analyze")

    allocated = compute_region_heights(
        result.classified,
        total_height=cfg.layout.total_height if total_height is None else total_height,
        min_height=cfg.layout.min_height if min_height is None else min_height,
    )
    typer.echo(
        f"upper={allocated.upper:g} normal={allocated.normal:g} lower={allocated.lower:g}"
    )


if __name__ == "__main__":
    app()
