"""Configuration helpers for SheetFlow comparison runs.

Comparison settings (alignment mode, manual column pairs, key columns and the
report block) can be kept in a YAML file so repeated comparisons of the same
workbook layout do not need to be re-entered on the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sheetflow.core.errors import ConfigError
from sheetflow.services.table_ops.models import ColumnMapping, ComparisonOptions, ReportOptions


class ColumnMappingConfig(BaseModel):
    """One manual column pair as written in YAML."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_column_index: Any = Field(alias="first")
    second_column_index: Any = Field(alias="second")
    label: Optional[str] = None


class ReportConfig(BaseModel):
    """Report block of the comparison file."""

    model_config = ConfigDict(extra="ignore")

    sheet_name: str = ""
    include_unique_from_first: bool = True
    include_unique_from_second: bool = True
    include_modified_rows: bool = True
    highlight_changes: bool = True

    def to_options(self) -> ReportOptions:
        return ReportOptions(**self.model_dump())


class ComparisonConfig(BaseModel):
    """Complete comparison file model."""

    model_config = ConfigDict(extra="allow")

    alignment_mode: Literal["auto", "manual"] = "auto"
    manual_column_mappings: List[ColumnMappingConfig] = Field(default_factory=list)
    key_columns: List[str] = Field(default_factory=list)
    keep_modified_in_unique: bool = False
    report: ReportConfig = Field(default_factory=ReportConfig)

    def to_options(self) -> ComparisonOptions:
        return ComparisonOptions(
            alignment_mode=self.alignment_mode,
            manual_column_mappings=[
                ColumnMapping(
                    first_column_index=item.first_column_index,
                    second_column_index=item.second_column_index,
                    label=item.label,
                )
                for item in self.manual_column_mappings
            ],
            key_columns=[str(name) for name in self.key_columns],
            keep_modified_in_unique=self.keep_modified_in_unique,
        )


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"配置文件未找到: {path}")
    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.load(handle) or {}
    except YAMLError as exc:
        raise ConfigError(f"配置文件解析失败: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("配置必须是字典结构")
    return data


def load_comparison_config(path: str | Path) -> ComparisonConfig:
    """Load and validate a comparison YAML file."""

    data = _load_yaml(Path(path))
    try:
        return ComparisonConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"对比配置无效: {exc}") from exc


__all__ = [
    "ColumnMappingConfig",
    "ComparisonConfig",
    "ReportConfig",
    "load_comparison_config",
]
