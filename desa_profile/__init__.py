"""
desa-profile: decode village profile spreadsheets published as CSV.

Public API surface:

- ``tokenize(text)`` -- permissive CSV tokenizer, returns a ``Grid``.
- ``decode(grid, layout=None)`` -- fixed-layout decoder, returns a
  ``VillageProfile``.
- ``load(config=None, fetch_text=None)`` -- **recommended entry point**.
  Fetches every configured source, decodes it, and returns a filled
  ``DatasetRegistry``.
- ``open(path, ...)`` -- same as ``load()`` with the config read from a
  YAML file.
- ``decode_text(text)`` -- tokenize + decode in one call.
"""

from __future__ import annotations

import logging
from pathlib import Path

from desa_profile._pipeline import build_dataset, build_registry
from desa_profile.config import SheetsConfig, SourceConfig, default_config, load_config
from desa_profile.dataset import Dataset, DatasetRegistry
from desa_profile.decoder import decode
from desa_profile.fetch import FetchText
from desa_profile.layout_registry import Layout, get_layout
from desa_profile.models import ProfileItem, SchoolInfo, ThematicCategory, VillageProfile
from desa_profile.tokenizer import Grid, tokenize

__all__ = [
    "open",
    "load",
    "decode_text",
    "tokenize",
    "decode",
    "build_dataset",
    "Dataset",
    "DatasetRegistry",
    "SheetsConfig",
    "SourceConfig",
    "VillageProfile",
    "ProfileItem",
    "SchoolInfo",
    "ThematicCategory",
    "Grid",
    "Layout",
    "get_layout",
]

logger = logging.getLogger(__name__)


def load(
    config: SheetsConfig | None = None,
    fetch_text: FetchText | None = None,
) -> DatasetRegistry:
    """Fetch, tokenize and decode every source of *config*.

    Args:
        config: Sources and policies.  Defaults to ``default_config()``,
            the published village sheets.
        fetch_text: Optional retrieval override, ``(SourceConfig) -> str``.
            Defaults to an HTTP GET of the published CSV.

    Returns:
        A ``DatasetRegistry`` in declared source order.  Use
        ``registry.names`` for the tab labels and
        ``registry.select(index)`` for the active profile.

    Raises:
        AggregateFetchError: If any source fails under the default
            ``all_or_nothing`` policy.

    Examples::

        registry = desa_profile.load()
        for i, name in enumerate(registry.names):
            profile = registry.select(i)
            print(name, profile.description)
    """
    if config is None:
        config = default_config()
    logger.info(
        "load() -- %d source(s), policy=%s",
        len(config.sources),
        config.fetch_policy,
    )
    return build_registry(config, fetch_text)


def open(
    path: str | Path,
    fetch_text: FetchText | None = None,
) -> DatasetRegistry:
    """Load a sheets config from YAML and run ``load()`` on it.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the config fails schema validation.
    """
    logger.info("open() -- loading config from %s", path)
    return load(load_config(path), fetch_text=fetch_text)


def decode_text(text: str, layout: Layout | None = None) -> VillageProfile:
    """Tokenize CSV *text* and decode it with *layout* (default layout if None)."""
    return decode(tokenize(text), layout)
