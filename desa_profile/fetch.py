"""
Retrieval of the published CSV text for each source.

The core only needs a ``fetch_text(source) -> str`` callable.  This
module supplies the default one (``http_fetch_text`` over
``requests``) and the multi-source combinators.

Aggregation policy is explicit:
- ``all_or_nothing``: if any source fails, raise a single
  ``AggregateFetchError`` naming every failed source.  This matches
  the behaviour of the published site, which shows one error page
  instead of partial data.
- ``partial``: log each failure and keep the sources that loaded.

Fetches run concurrently on a thread pool, one task per source.  The
results are joined before anything is tokenized, and always come back
in declared source order regardless of completion order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlsplit

import requests

from desa_profile.config import FetchPolicy, SourceConfig
from desa_profile.exceptions import AggregateFetchError, FetchError

logger = logging.getLogger(__name__)

FetchText = Callable[[SourceConfig], str]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one source: either ``text`` or ``error``."""
    source: SourceConfig
    text: str | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# HTTP fetcher
# ---------------------------------------------------------------------------

def build_source_url(base_url: str, source: SourceConfig) -> str:
    """Append the source's ``gid`` to the published CSV URL."""
    if not source.gid:
        return base_url
    sep = "&" if urlsplit(base_url).query else "?"
    return f"{base_url}{sep}gid={source.gid}"


def http_fetch_text(
    source: SourceConfig,
    base_url: str,
    timeout: float = 30.0,
) -> str:
    """GET the CSV text for *source*.

    Raises:
        FetchError: On a transport error or a non-2xx response.
    """
    url = build_source_url(base_url, source)
    logger.debug("GET %s", url)
    try:
        res = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(source.name, f"Failed to fetch {source.name}: {exc}") from exc
    if not res.ok:
        raise FetchError(
            source.name,
            f"Failed to fetch {source.name}: {res.status_code} {res.reason}",
        )
    # Sheets exports are UTF-8 but often omit the charset header
    if "charset" not in res.headers.get("Content-Type", ""):
        res.encoding = "utf-8"
    return res.text


def make_http_fetcher(base_url: str, timeout: float = 30.0) -> FetchText:
    """Bind *base_url* and *timeout* into a ``fetch_text`` callable."""
    def fetch_text(source: SourceConfig) -> str:
        return http_fetch_text(source, base_url, timeout=timeout)
    return fetch_text


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------

def _fetch_one(fetch_text: FetchText, source: SourceConfig) -> FetchResult:
    try:
        return FetchResult(source=source, text=fetch_text(source))
    except FetchError as exc:
        return FetchResult(source=source, error=exc)
    except Exception as exc:
        # Any failure of a user-supplied fetcher counts against its source
        return FetchResult(
            source=source,
            error=FetchError(source.name, f"Failed to fetch {source.name}: {exc}"),
        )


def combine_all_or_nothing(results: list[FetchResult]) -> list[FetchResult]:
    """Return *results* unchanged if all succeeded.

    Raises:
        AggregateFetchError: If any result failed.
    """
    errors = [r.error for r in results if r.error is not None]
    if errors:
        raise AggregateFetchError(errors)
    return results


def combine_partial(results: list[FetchResult]) -> list[FetchResult]:
    """Keep only the successful results, logging each failure."""
    kept: list[FetchResult] = []
    for r in results:
        if r.error is not None:
            logger.warning("Skipping source %s: %s", r.source.name, r.error)
            continue
        kept.append(r)
    return kept


_COMBINERS: dict[str, Callable[[list[FetchResult]], list[FetchResult]]] = {
    "all_or_nothing": combine_all_or_nothing,
    "partial": combine_partial,
}


def fetch_all(
    sources: list[SourceConfig],
    fetch_text: FetchText,
    policy: FetchPolicy = "all_or_nothing",
    max_workers: int = 4,
) -> list[FetchResult]:
    """Fetch every source concurrently and fold the results by *policy*.

    Args:
        sources: Sources in declared order.
        fetch_text: Callable returning the CSV text for one source.
        policy: ``"all_or_nothing"`` or ``"partial"``.
        max_workers: Thread pool size.

    Returns:
        Successful results in declared order.

    Raises:
        ValueError: If *policy* is unknown.
        AggregateFetchError: Under ``all_or_nothing`` when any source fails.
    """
    combine = _COMBINERS.get(policy)
    if combine is None:
        raise ValueError(
            f"Unknown fetch policy: '{policy}'. Supported: {sorted(_COMBINERS)}"
        )
    if not sources:
        return []

    workers = min(max_workers, len(sources))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda s: _fetch_one(fetch_text, s), sources))

    n_failed = sum(1 for r in results if not r.ok)
    logger.info(
        "Fetched %d/%d sources (policy=%s)",
        len(results) - n_failed,
        len(results),
        policy,
    )
    return combine(results)
