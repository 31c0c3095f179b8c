from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from splitchart.config import DEFAULT_CONFIG_PATH, AppConfig, load_config

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_default_config_file_loads() -> None:
    config = load_config(REPO_ROOT / DEFAULT_CONFIG_PATH)

    assert config.columns.date == "date"
    assert config.analysis.fields is None
    assert config.unit.enabled is False
    assert config.layout.total_height == 400
    assert config.layout.min_height == 50
    assert config.outputs.tables_format == "parquet"


def test_load_config_overrides_and_empty_file(tmp_path: Path) -> None:
    empty_path = tmp_path / "empty.yaml"
    empty_path.write_text("", encoding="utf-8")
    assert load_config(empty_path) == AppConfig()

    override = {
        "columns": {"date": "period", "date_display": "label"},
        "analysis": {
            "fields": ["revenue", "cost"],
            "dual_axis_placements": {"cost": "right"},
        },
        "unit": {"enabled": True, "datetime_type": "quarter"},
        "layout": {"total_height": 600, "min_height": 40},
        "outputs": {"tables_format": "csv"},
    }
    override_path = tmp_path / "override.yaml"
    override_path.write_text(yaml.safe_dump(override), encoding="utf-8")

    config = load_config(override_path)
    assert config.columns.date == "period"
    assert config.analysis.fields == ["revenue", "cost"]
    assert config.analysis.dual_axis_placements == {"cost": "right"}
    assert config.unit.datetime_type == "quarter"
    assert config.layout.total_height == 600
    assert config.outputs.tables_format == "csv"


@pytest.mark.parametrize(
    "data",
    [
        {"unknown_section": {}},
        {"layout": {"total_height": 0}},
        {"layout": {"total_height": 100, "min_height": 200}},
        {"unit": {"datetime_type": "decade"}},
        {"analysis": {"dual_axis_placements": {"a": "middle"}}},
        {"outputs": {"tables_format": "xlsx"}},
    ],
)
def test_invalid_config_values_are_rejected(data: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate(data)
