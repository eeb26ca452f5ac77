"""
Decoded document types for desa-profile.

All types are frozen dataclasses with tuple members, so a decoded
``VillageProfile`` is immutable and compares by value: decoding the
same grid twice yields equal profiles.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProfileItem:
    """One entry of the "Profil Desa" list."""
    title: str
    body: str = ""


@dataclass(frozen=True)
class SchoolInfo:
    """The school record; ``name`` may be empty when the sheet has none."""
    name: str = ""
    address: str = ""


@dataclass(frozen=True)
class ThematicCategory:
    """One thematic analysis category.

    The three lists are filled independently from their own columns.
    They are not paired by row and may have different lengths.
    """
    name: str
    issues: tuple[str, ...] = ()
    potentials: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.issues or self.potentials or self.projects)


@dataclass(frozen=True)
class VillageProfile:
    """The fully decoded document for one source.

    Attributes:
        description: Short village description (``""`` if absent).
        profile_items: Title/body pairs, blank titles dropped.
        school: Always present; consumers decide whether to show it.
        categories: The thematic categories in layout order, always
            emitted even when every list is empty.
    """
    description: str = ""
    profile_items: tuple[ProfileItem, ...] = ()
    school: SchoolInfo = field(default_factory=SchoolInfo)
    categories: tuple[ThematicCategory, ...] = ()

    def category(self, name: str) -> ThematicCategory | None:
        """Look up a category by name (case-insensitive)."""
        wanted = name.casefold()
        for cat in self.categories:
            if cat.name.casefold() == wanted:
                return cat
        return None
