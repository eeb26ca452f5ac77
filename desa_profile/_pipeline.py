"""
Internal pipeline orchestration for desa-profile.

fetch -> tokenize -> Dataset -> decode -> register, for every source
of a ``SheetsConfig``.  Shared by the module-level ``load()`` and
``open()`` functions.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging

from desa_profile.config import SheetsConfig
from desa_profile.dataset import Dataset, DatasetRegistry
from desa_profile.decoder import decode
from desa_profile.fetch import FetchText, fetch_all, make_http_fetcher
from desa_profile.layout_registry import Layout, get_layout
from desa_profile.models import VillageProfile
from desa_profile.tokenizer import tokenize

logger = logging.getLogger(__name__)


def build_dataset(
    name: str,
    text: str,
    layout: Layout | None = None,
) -> tuple[Dataset, VillageProfile]:
    """Tokenize and decode one source's CSV text."""
    grid = tokenize(text)
    dataset = Dataset.from_grid(name, grid)
    profile = decode(grid, layout)
    logger.info(
        "Decoded %s: %d rows, %d profile items",
        name,
        len(grid),
        len(profile.profile_items),
    )
    return dataset, profile


def build_registry(
    config: SheetsConfig,
    fetch_text: FetchText | None = None,
) -> DatasetRegistry:
    """Fetch every configured source and fill a ``DatasetRegistry``.

    Args:
        config: Sources, fetch policy and layout name.
        fetch_text: Override for retrieval; defaults to an HTTP fetcher
            bound to ``config.base_url`` and ``config.timeout``.

    Returns:
        A registry whose slots follow ``config.sources`` order.  Under the
        ``partial`` policy, failed sources stay unfilled.

    Raises:
        AggregateFetchError: Under ``all_or_nothing`` when any source fails.
        LayoutError: If ``config.layout`` is not a known layout.
    """
    layout = get_layout(config.layout)
    if fetch_text is None:
        fetch_text = make_http_fetcher(config.base_url, timeout=config.timeout)

    results = fetch_all(
        config.sources,
        fetch_text,
        policy=config.fetch_policy,
        max_workers=config.max_workers,
    )

    registry = DatasetRegistry(config.source_names)
    for result in results:
        dataset, profile = build_dataset(result.source.name, result.text or "", layout)
        registry.register(result.source.name, dataset, profile)

    logger.info(
        "Registry ready: %d/%d sources loaded",
        sum(1 for _ in registry),
        len(registry),
    )
    return registry
