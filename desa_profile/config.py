"""
Configuration models and YAML I/O for desa-profile.

This module defines the Pydantic models that map 1:1 to a sheets
config YAML file, plus helpers for loading, saving and building the
default config.

Key models:
- SheetsConfig: Top-level config (base URL + sources + fetch policy + output).
- SourceConfig: One data source (village name + sheet gid).
- OutputConfig: Export directory and format.

Key functions:
- load_config(path) -> SheetsConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- default_config() -> SheetsConfig: The published village sheets.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from desa_profile.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vT4PI3gOy7YrVetI4fSvAW6yWmEDB9vwHDkY1oC_-oTXlspYFJVWG62n3FyAtRtMX5W_wWDWhD5Yr6c"
    "/pub?output=csv"
)

FetchPolicy = Literal["all_or_nothing", "partial"]


class SourceConfig(BaseModel):
    """One named data source: a tab of the published spreadsheet."""

    model_config = {"frozen": True}

    name: str = Field(..., min_length=1, description="Village name shown to users")
    gid: str = Field("", description="Sheet tab id; empty means the first tab")


class OutputConfig(BaseModel):
    """Export settings."""

    output_dir: str = Field("outputs/", description="Directory for exported files")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Export format"
    )


class SheetsConfig(BaseModel):
    """Top-level configuration for desa-profile.

    ``sources`` is the declared order: it fixes the registry's indices.
    """

    base_url: str = Field(DEFAULT_BASE_URL, description="Published CSV URL")
    sources: list[SourceConfig] = Field(..., min_length=1)
    layout: str = Field("village_profile", description="Built-in layout name")
    fetch_policy: FetchPolicy = Field(
        "all_or_nothing",
        description=(
            "'all_or_nothing' fails the whole load if any source fails; "
            "'partial' keeps the sources that loaded"
        ),
    )
    timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")
    max_workers: int = Field(4, ge=1, description="Concurrent fetches")
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="after")
    def _check_unique_names(self) -> SheetsConfig:
        names = [s.name for s in self.sources]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate source names: {dupes}")
        return self

    @property
    def source_names(self) -> list[str]:
        return [s.name for s in self.sources]


def default_config() -> SheetsConfig:
    """The three village tabs of the published profile spreadsheet."""
    return SheetsConfig(
        sources=[
            SourceConfig(name="Kampangar", gid="0"),
            SourceConfig(name="Kuntang", gid="1348203775"),
            SourceConfig(name="Pulo Dua", gid="363769630"),
        ],
    )


def load_config(path: str | Path) -> SheetsConfig:
    """Load and validate a sheets config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return SheetsConfig.model_validate(raw)


def save_config(config: SheetsConfig, path: str | Path) -> None:
    """Serialize a SheetsConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# desa-profile configuration\n")
        f.write("# Sources are listed in display order.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
