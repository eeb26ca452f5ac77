"""
Layout decoder for desa-profile.

Turns a tokenized ``Grid`` into a ``VillageProfile`` by reading the
fixed cell coordinates of a ``Layout``.  No header-name lookup or
reflowing is done: every value is addressed by absolute row/column.

Missing rows or columns are treated as absent values, never as errors,
so ``decode`` is total over all grids.  A cell is "present" when it is
non-empty after stripping whitespace; present values are kept raw
(untrimmed), only the presence check strips.
"""

from __future__ import annotations

import logging

from desa_profile.layout_registry import (
    CategoryRule,
    CellCoord,
    Layout,
    ProfileItemsRule,
    get_layout,
)
from desa_profile.models import (
    ProfileItem,
    SchoolInfo,
    ThematicCategory,
    VillageProfile,
)
from desa_profile.tokenizer import Grid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cell access
# ---------------------------------------------------------------------------

def cell(grid: Grid, row: int, col: int) -> str | None:
    """Return the raw field at (*row*, *col*), or ``None`` if out of range."""
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        return grid[row][col]
    return None


def is_present(value: str | None) -> bool:
    """True when *value* exists and is not blank."""
    return value is not None and bool(value.strip())


def _cell_or_empty(grid: Grid, coord: CellCoord) -> str:
    value = cell(grid, coord.row, coord.col)
    return value if value is not None else ""


# ---------------------------------------------------------------------------
# Per-rule extraction
# ---------------------------------------------------------------------------

def decode_profile_items(grid: Grid, rule: ProfileItemsRule) -> tuple[ProfileItem, ...]:
    """Title/body pairs from *rule*'s row range; rows with a blank title are skipped."""
    items: list[ProfileItem] = []
    for r in rule.rows(len(grid)):
        title = cell(grid, r, rule.title_col)
        if not is_present(title):
            continue
        body = cell(grid, r, rule.body_col)
        items.append(ProfileItem(title=title, body=body or ""))
    return tuple(items)


def decode_category(grid: Grid, rule: CategoryRule) -> ThematicCategory:
    """Fill the three lists of one category, each column independently."""
    lists: dict[str, list[str]] = {target: [] for target in rule.columns}
    for r in rule.rows(len(grid)):
        for target, col in rule.columns.items():
            value = cell(grid, r, col)
            if is_present(value):
                lists[target].append(value)
    logger.debug(
        "Category %s: %d issues, %d potentials, %d projects",
        rule.name,
        len(lists["issues"]),
        len(lists["potentials"]),
        len(lists["projects"]),
    )
    return ThematicCategory(
        name=rule.name,
        issues=tuple(lists["issues"]),
        potentials=tuple(lists["potentials"]),
        projects=tuple(lists["projects"]),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def decode(grid: Grid, layout: Layout | None = None) -> VillageProfile:
    """Decode *grid* into a ``VillageProfile`` using *layout*.

    Args:
        grid: Output of ``tokenize()``.
        layout: Coordinate schema; defaults to the built-in
            ``village_profile`` layout.

    Returns:
        A new, immutable ``VillageProfile``.  Pure: the same grid always
        decodes to an equal value.
    """
    if layout is None:
        layout = get_layout()

    profile = VillageProfile(
        description=_cell_or_empty(grid, layout.description_cell),
        profile_items=decode_profile_items(grid, layout.profile_items),
        school=SchoolInfo(
            name=_cell_or_empty(grid, layout.school.name),
            address=_cell_or_empty(grid, layout.school.address),
        ),
        categories=tuple(decode_category(grid, rule) for rule in layout.categories),
    )
    logger.debug(
        "Decoded %d rows with layout %s: %d profile items",
        len(grid),
        layout.layout_name,
        len(profile.profile_items),
    )
    return profile
