"""
Exporter for desa-profile.

Flattens decoded profiles into a long-form table (one row per
extracted value) and writes it, plus each source's raw grid, to the
output directory as CSV or Parquet.

Output file naming convention:
  profiles.{format}               -- every decoded value of every source
  grid_{index}_{source}.{format}  -- the raw grid of one source; {index} is
                                     its declared position, so names that
                                     slug alike still get distinct files

CSV files are written with ``utf-8-sig`` encoding (BOM) so that
non-ASCII text displays correctly when opened in Excel.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal

import pandas as pd

from desa_profile.dataset import DatasetRegistry
from desa_profile.exceptions import ExportError
from desa_profile.models import VillageProfile
from desa_profile.tokenizer import Grid

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}

PROFILE_COLUMNS = ["source", "section", "category", "kind", "position", "title", "value"]


def profile_to_frame(name: str, profile: VillageProfile) -> pd.DataFrame:
    """Flatten one profile to long form.

    Sections:
      - ``description``: a single row (kept even when empty).
      - ``profile``: one row per item, ``title`` + ``value`` (body).
      - ``school``: ``kind`` is ``name`` or ``address``.
      - ``category``: one row per list entry, ``kind`` is ``issues`` /
        ``potentials`` / ``projects`` and ``position`` its index in the list.
    """
    records: list[dict] = [
        {"section": "description", "category": None, "kind": None,
         "position": 0, "title": None, "value": profile.description},
    ]
    for pos, item in enumerate(profile.profile_items):
        records.append({"section": "profile", "category": None, "kind": None,
                        "position": pos, "title": item.title, "value": item.body})
    for kind in ("name", "address"):
        records.append({"section": "school", "category": None, "kind": kind,
                        "position": 0, "title": None,
                        "value": getattr(profile.school, kind)})
    for cat in profile.categories:
        for kind in ("issues", "potentials", "projects"):
            for pos, value in enumerate(getattr(cat, kind)):
                records.append({"section": "category", "category": cat.name,
                                "kind": kind, "position": pos, "title": None,
                                "value": value})

    df = pd.DataFrame.from_records(records)
    df.insert(0, "source", name)
    df["position"] = df["position"].astype("int64")
    return df[PROFILE_COLUMNS]


def registry_to_frame(registry: DatasetRegistry) -> pd.DataFrame:
    """Long-form table for every loaded source, in declared order."""
    frames = [profile_to_frame(name, profile) for name, profile in registry]
    if not frames:
        return pd.DataFrame(columns=PROFILE_COLUMNS)
    return pd.concat(frames, ignore_index=True)


def grid_to_frame(grid: Grid) -> pd.DataFrame:
    """The raw grid as a string DataFrame, short rows padded with ``""``.

    Columns are positional (``c0``, ``c1``, ...) since the header row is
    just another row of the fixed layout.
    """
    width = max((len(r) for r in grid), default=0)
    padded = [list(r) + [""] * (width - len(r)) for r in grid]
    return pd.DataFrame(padded, columns=[f"c{i}" for i in range(width)], dtype=str)


def _slug(name: str) -> str:
    return re.sub(r"[^0-9A-Za-z]+", "_", name).strip("_").lower() or "source"


def grid_file_name(index: int, name: str, output_format: str) -> str:
    """File name for the grid of the source at declared position *index*."""
    return f"grid_{index}_{_slug(name)}.{output_format}"


def _write_dataframe(
    df: pd.DataFrame,
    path: Path,
    output_format: str,
) -> None:
    """Write a single DataFrame to disk.

    Raises:
        ExportError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8-sig")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc


def export_profiles(
    registry: DatasetRegistry,
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
    include_grids: bool = True,
) -> list[str]:
    """Write the profiles table (and optionally raw grids) to disk.

    Args:
        registry: A filled registry.
        output_dir: Directory to write into (created if needed).
        output_format: ``"csv"`` or ``"parquet"``.
        include_grids: Also write one ``grid_<index>_<source>`` file per source.

    Returns:
        Paths written, ``profiles`` first then grids in declared order.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: list[str] = []

    profiles_df = registry_to_frame(registry)
    profiles_path = out / f"profiles.{output_format}"
    _write_dataframe(profiles_df, profiles_path, output_format)
    written.append(str(profiles_path))
    logger.info("Exported profiles -> %s (%d rows)", profiles_path.name, len(profiles_df))

    if include_grids:
        for index, name in enumerate(registry.names):
            dataset = registry.dataset(index)
            if dataset is None:
                continue
            grid_df = grid_to_frame(dataset.grid)
            grid_path = out / grid_file_name(index, name, output_format)
            _write_dataframe(grid_df, grid_path, output_format)
            written.append(str(grid_path))
            logger.info(
                "Exported grid '%s' -> %s (%d rows, %d cols)",
                name, grid_path.name, len(grid_df), len(grid_df.columns),
            )

    return written
