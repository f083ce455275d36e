from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable, Iterable, Sequence, TypeVar

import httpx

from contracts.artwork import ArtworkCandidate, MuseumSource

from .adapters import (
    search_aic,
    search_cleveland,
    search_harvard,
    search_met,
    search_rijksmuseum,
    search_va,
)
from .contracts import MuseumApiConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

Adapter = Callable[..., Awaitable[list[ArtworkCandidate]]]
SourceErrorHook = Callable[[MuseumSource, BaseException], None]

DEFAULT_LIMIT = 24

# Insertion order is the interleaving order.
ADAPTERS: dict[MuseumSource, Adapter] = {
    MuseumSource.AIC: search_aic,
    MuseumSource.MET: search_met,
    MuseumSource.RIJKSMUSEUM: search_rijksmuseum,
    MuseumSource.CLEVELAND: search_cleveland,
    MuseumSource.HARVARD: search_harvard,
    MuseumSource.VA: search_va,
}


def interleave(lists: Sequence[Sequence[T]]) -> list[T]:
    """
    Round-robin merge: the i-th item of every list that has one, for i = 0, 1, ...

    interleave([[a1, a2, a3], [b1]]) == [a1, b1, a2, a3]
    """

    out: list[T] = []
    longest = max((len(items) for items in lists), default=0)
    for i in range(longest):
        for items in lists:
            if i < len(items):
                out.append(items[i])
    return out


def interleave_by_source(candidates: Iterable[ArtworkCandidate]) -> list[ArtworkCandidate]:
    """Group by source in the fixed `MuseumSource` order, then interleave."""

    by_source: dict[MuseumSource, list[ArtworkCandidate]] = {s: [] for s in MuseumSource}
    for c in candidates:
        by_source[c.source].append(c)
    return interleave(list(by_source.values()))


def per_source_limit(limit: int, n_sources: int) -> int:
    return max(1, math.ceil(limit / max(1, n_sources)))


async def _run_adapter(
    adapter: Adapter,
    client: httpx.AsyncClient,
    *,
    query: str,
    limit: int,
    config: MuseumApiConfig,
) -> list[ArtworkCandidate]:
    call = adapter(client, query=query, limit=limit, config=config)
    if config.source_timeout_s is None:
        return await call
    return await asyncio.wait_for(call, timeout=config.source_timeout_s)


async def search_all(
    client: httpx.AsyncClient,
    *,
    query: str,
    limit: int = DEFAULT_LIMIT,
    config: MuseumApiConfig,
    on_source_error: SourceErrorHook | None = None,
) -> list[ArtworkCandidate]:
    """
    Query every source concurrently and interleave what comes back.

    Each source is capped at ceil(limit / number of sources). A failing source (HTTP
    error, missing key, timeout) contributes nothing; it is logged and reported to
    `on_source_error`. Never raises because of a source.
    """

    sources = list(ADAPTERS)
    cap = per_source_limit(limit, len(sources))

    results = await asyncio.gather(
        *(
            _run_adapter(ADAPTERS[s], client, query=query, limit=cap, config=config)
            for s in sources
        ),
        return_exceptions=True,
    )

    lists: list[list[ArtworkCandidate]] = []
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("museum source %s failed: %r", source.value, result)
            if on_source_error is not None:
                try:
                    on_source_error(source, result)
                except Exception:
                    logger.exception("on_source_error hook failed for %s", source.value)
            continue
        lists.append(result)

    return interleave_by_source(c for items in lists for c in items)


async def search_one(
    client: httpx.AsyncClient,
    source: MuseumSource | str,
    *,
    query: str,
    limit: int = DEFAULT_LIMIT,
    config: MuseumApiConfig,
) -> list[ArtworkCandidate]:
    """Query a single source. Unknown source -> ValueError; adapter errors propagate."""

    try:
        key = MuseumSource(source)
    except ValueError as e:
        raise ValueError(f"Unknown museum source: {source!r}") from e

    adapter = ADAPTERS.get(key)
    if adapter is None:
        raise ValueError(f"Unknown museum source: {source!r}")
    return await adapter(client, query=query, limit=limit, config=config)
