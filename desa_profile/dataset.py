"""
Dataset and registry for desa-profile.

A ``Dataset`` is one source's tokenized grid split into a header row
and body rows.  The ``DatasetRegistry`` holds one dataset/profile pair
per named source, in the declared source order, and lets a consumer
pick the active profile by index.

The registry is write-once per source and read-many afterwards.  It
performs no I/O; filling it is the pipeline's job (see ``_pipeline``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from desa_profile.exceptions import RegistryError
from desa_profile.models import VillageProfile
from desa_profile.tokenizer import Grid, Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """One named source's grid.

    Attributes:
        name: Source name.
        grid: The full tokenized grid.
        header_row: ``grid[0]``, or an empty row when the grid is empty.
        body_rows: ``grid[1:]``.
    """

    name: str
    grid: Grid
    header_row: Row = ()
    body_rows: Grid = ()

    @classmethod
    def from_grid(cls, name: str, grid: Grid) -> Dataset:
        return cls(
            name=name,
            grid=grid,
            header_row=grid[0] if grid else (),
            body_rows=grid[1:],
        )

    @property
    def is_empty(self) -> bool:
        return not self.grid


@dataclass(frozen=True)
class _Entry:
    dataset: Dataset
    profile: VillageProfile


class DatasetRegistry:
    """Named slots, in declared order, each filled at most once.

    Attributes:
        names: Source names in declared order (fixes the indices).
    """

    def __init__(self, names: list[str]) -> None:
        if len(names) != len(set(names)):
            raise RegistryError(f"Duplicate source names: {names}")
        self._names = list(names)
        self._entries: dict[str, _Entry] = {}

    def __repr__(self) -> str:
        return (
            f"DatasetRegistry(names={self._names}, "
            f"loaded={[n for n in self._names if n in self._entries]})"
        )

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def is_complete(self) -> bool:
        """True once every declared source has been registered."""
        return len(self._entries) == len(self._names)

    # -- Write side ---------------------------------------------------------

    def register(self, name: str, dataset: Dataset, profile: VillageProfile) -> None:
        """Fill the slot for *name*.

        Raises:
            RegistryError: If *name* was not declared or is already set.
        """
        if name not in self._names:
            raise RegistryError(
                f"Unknown source '{name}'. Declared sources: {self._names}"
            )
        if name in self._entries:
            raise RegistryError(f"Source '{name}' is already registered")
        self._entries[name] = _Entry(dataset=dataset, profile=profile)
        logger.debug("Registered source %s", name)

    # -- Read side ----------------------------------------------------------

    def select(self, index: int) -> VillageProfile | None:
        """Profile at *index*, or ``None`` if out of range or not loaded."""
        entry = self._entry_at(index)
        return entry.profile if entry is not None else None

    def dataset(self, index: int) -> Dataset | None:
        """Dataset at *index*, or ``None`` if out of range or not loaded."""
        entry = self._entry_at(index)
        return entry.dataset if entry is not None else None

    def get(self, name: str) -> VillageProfile | None:
        """Profile for source *name*, or ``None``."""
        entry = self._entries.get(name)
        return entry.profile if entry is not None else None

    def __iter__(self) -> Iterator[tuple[str, VillageProfile]]:
        """Yield ``(name, profile)`` for loaded sources in declared order."""
        for name in self._names:
            entry = self._entries.get(name)
            if entry is not None:
                yield name, entry.profile

    def _entry_at(self, index: int) -> _Entry | None:
        # Negative indices are out of range, not Python-style offsets
        if not 0 <= index < len(self._names):
            return None
        return self._entries.get(self._names[index])
