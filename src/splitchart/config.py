from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

DatetimeType = Literal["minute", "hour", "day", "week", "month", "quarter", "year"]
AxisPlacement = Literal["left", "right"]


class ColumnsConfig(BaseModel):
    date: str = "date"
    date_display: str = "date_display"


class AnalysisConfig(BaseModel):
    fields: list[str] | None = None
    all_fields: list[str] | None = None
    dual_axis_placements: dict[str, AxisPlacement] | None = None


class UnitConfig(BaseModel):
    enabled: bool = False
    datetime_type: DatetimeType = "month"
    datetime_start: str | None = None
    datetime_end: str | None = None


class LayoutConfig(BaseModel):
    total_height: float = Field(default=400.0, gt=0)
    min_height: float = Field(default=50.0, ge=0)

    @model_validator(mode="after")
    def _check_min_height(self) -> LayoutConfig:
        if self.min_height > self.total_height:
            raise ValueError("layout.min_height must not exceed layout.total_height")
        return self


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    unit: UnitConfig = Field(default_factory=UnitConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
