"""
Layout loader for desa-profile.

Loads layout YAML files from desa_profile/layouts/ and provides
structured access via Pydantic models.  A layout is the fixed
coordinate schema of the village profile spreadsheet, expressed as one
named rule per extracted field or list:

- description_cell: a single cell holding the short description
- profile_items: a row range with a title column and a body column
- school: two single cells (name, address)
- categories: four thematic categories, each a row range (open-ended
  by default) with an issues / potentials / projects column

Why YAML instead of hardcoded indices:
- The sheet's coordinates are an implicit contract with whoever edits
  the spreadsheet; keeping them in one data file makes that contract
  visible and editable without touching the decoder.
- Each rule can be tested on its own.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from desa_profile.exceptions import LayoutError

logger = logging.getLogger(__name__)

# Directory containing layout YAML files (sibling package)
_LAYOUTS_DIR = Path(__file__).parent / "layouts"

DEFAULT_LAYOUT_NAME = "village_profile"


class CellCoord(BaseModel):
    """A single cell address."""
    model_config = ConfigDict(frozen=True)

    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


class RowRange(BaseModel):
    """An inclusive row range.  ``row_end=None`` means "to the last row"."""
    model_config = ConfigDict(frozen=True)

    row_start: int = Field(..., ge=0)
    row_end: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> RowRange:
        if self.row_end is not None and self.row_end < self.row_start:
            raise ValueError(
                f"row_end ({self.row_end}) is before row_start ({self.row_start})"
            )
        return self

    def rows(self, n_rows: int) -> range:
        """Row indices of this range that exist in a grid of *n_rows* rows."""
        stop = n_rows if self.row_end is None else min(self.row_end + 1, n_rows)
        return range(self.row_start, max(stop, self.row_start))


class ProfileItemsRule(RowRange):
    """Title/body pairs listed one per row."""
    title_col: int = Field(..., ge=0)
    body_col: int = Field(..., ge=0)


class SchoolRule(BaseModel):
    """Name and address cells of the school record."""
    model_config = ConfigDict(frozen=True)

    name: CellCoord
    address: CellCoord


class CategoryRule(RowRange):
    """One thematic category: three independent list columns."""
    name: str
    issues_col: int = Field(..., ge=0)
    potentials_col: int = Field(..., ge=0)
    projects_col: int = Field(..., ge=0)

    @property
    def columns(self) -> dict[str, int]:
        """Target list name -> column index."""
        return {
            "issues": self.issues_col,
            "potentials": self.potentials_col,
            "projects": self.projects_col,
        }


class Layout(BaseModel):
    """A complete layout definition loaded from YAML.

    Frozen: ``get_layout`` hands the same cached instance to every caller.
    Use ``model_copy(update=...)`` to derive a variant.
    """
    model_config = ConfigDict(frozen=True)

    layout_name: str
    description: str = ""
    description_cell: CellCoord
    profile_items: ProfileItemsRule
    school: SchoolRule
    categories: tuple[CategoryRule, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_category_names(self) -> Layout:
        names = [c.name for c in self.categories]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate category names in layout: {names}")
        return self


def load_layout(path: str | Path) -> Layout:
    """Load a single layout YAML file.

    Raises:
        LayoutError: If the file is missing, empty, or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise LayoutError(f"Layout file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise LayoutError(f"Layout file is empty: {path}")
    try:
        layout = Layout.model_validate(raw)
    except ValidationError as exc:
        raise LayoutError(f"Invalid layout {path.name}: {exc}") from exc
    logger.debug("Loaded layout: %s from %s", layout.layout_name, path)
    return layout


@lru_cache(maxsize=None)
def get_layout(name: str = DEFAULT_LAYOUT_NAME) -> Layout:
    """Return a built-in layout by name (cached; layouts are read-only).

    Raises:
        LayoutError: If no built-in layout has that name.
    """
    path = _LAYOUTS_DIR / f"{name}.yaml"
    if not path.exists():
        available = sorted(p.stem for p in _LAYOUTS_DIR.glob("*.yaml"))
        raise LayoutError(
            f"Unknown layout '{name}'. Available layouts: {available}"
        )
    return load_layout(path)
