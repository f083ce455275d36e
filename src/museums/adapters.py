from __future__ import annotations

import asyncio
import re
from typing import Any, Iterable, Mapping

import httpx

from contracts.artwork import ArtworkCandidate, MuseumSource

from .contracts import (
    MUSEUM_SOURCES,
    UNKNOWN_ARTIST,
    UNTITLED,
    MissingApiKeyError,
    MuseumApiConfig,
)

AIC_FIELDS = "id,title,artist_title,date_start,date_display,medium_display,dimensions,image_id"
AIC_IMAGE_WIDTH = 843
VA_IMAGE_SIZE = "!600,600"

# Fixed AIC selection shown before the user searches anything.
CURATED_AIC_IDS: tuple[int, ...] = (
    27992, 28560, 111628, 6565, 87479, 80607, 16568, 16487, 14598, 20684, 76244, 24306,
)

_RIJKS_YEAR_RE = re.compile(r"\b(c\.\s*)?\d{4}\b")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _first(items: Any) -> Mapping[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        return items[0]
    return {}


def _candidate(
    source: MuseumSource,
    *,
    native_id: Any,
    id_prefix: str,
    title: Any,
    artist: Any,
    year: Any,
    medium: Any,
    dimensions: Any,
    image_url: str,
) -> ArtworkCandidate:
    info = MUSEUM_SOURCES[source]
    return ArtworkCandidate(
        id=f"{id_prefix}-{native_id}",
        title=_text(title) or UNTITLED,
        artist=_text(artist) or UNKNOWN_ARTIST,
        year=_text(year),
        museum=info.name,
        museum_city=info.city,
        museum_country=info.country,
        medium=_text(medium),
        dimensions=_text(dimensions),
        image_url=image_url,
        source=source,
    )


async def _get_json(
    client: httpx.AsyncClient, url: str, *, params: Mapping[str, Any], config: MuseumApiConfig
) -> Any:
    resp = await client.get(
        url,
        params=params,
        timeout=config.timeout_s,
        headers={"User-Agent": config.user_agent},
    )
    resp.raise_for_status()
    return resp.json()


# --- Art Institute of Chicago ---


def aic_image_url(image_id: str, *, config: MuseumApiConfig, width: int = AIC_IMAGE_WIDTH) -> str:
    return f"{config.aic_iiif_url}/{image_id}/full/{width},/0/default.jpg"


def _aic_candidates(items: Iterable[Mapping[str, Any]], config: MuseumApiConfig) -> list[ArtworkCandidate]:
    out: list[ArtworkCandidate] = []
    for item in items:
        image_id = item.get("image_id")
        if not image_id:
            continue
        date_start = item.get("date_start")
        out.append(
            _candidate(
                MuseumSource.AIC,
                native_id=item.get("id"),
                id_prefix="aic",
                title=item.get("title"),
                artist=item.get("artist_title"),
                year=item.get("date_display") or (str(date_start) if date_start else ""),
                medium=item.get("medium_display"),
                dimensions=item.get("dimensions"),
                image_url=aic_image_url(image_id, config=config),
            )
        )
    return out


async def search_aic(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    data = await _get_json(
        client,
        f"{config.aic_base_url}/artworks/search",
        params={"q": query, "fields": AIC_FIELDS, "limit": limit},
        config=config,
    )
    return _aic_candidates(data.get("data") or [], config)


async def load_aic_curated(
    client: httpx.AsyncClient,
    *,
    config: MuseumApiConfig,
    ids: Iterable[int] = CURATED_AIC_IDS,
) -> list[ArtworkCandidate]:
    """Fetch a fixed AIC selection by object id (records without an image are dropped)."""

    data = await _get_json(
        client,
        f"{config.aic_base_url}/artworks",
        params={"ids": ",".join(str(i) for i in ids), "fields": AIC_FIELDS},
        config=config,
    )
    return _aic_candidates(data.get("data") or [], config)


# --- The Metropolitan Museum of Art ---


async def _met_object(
    client: httpx.AsyncClient, object_id: int, *, config: MuseumApiConfig
) -> Mapping[str, Any] | None:
    resp = await client.get(
        f"{config.met_base_url}/objects/{object_id}",
        timeout=config.timeout_s,
        headers={"User-Agent": config.user_agent},
    )
    if resp.is_success:
        return resp.json()
    return None


async def search_met(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    """
    Search ids first, then fetch object records in small concurrent batches.

    A failed object fetch (transport error, non-2xx, bad JSON) drops only that object.
    """

    data = await _get_json(
        client,
        f"{config.met_base_url}/search",
        params={"q": query, "hasImages": "true"},
        config=config,
    )
    ids = list(data.get("objectIDs") or [])[:limit]

    out: list[ArtworkCandidate] = []
    for start in range(0, len(ids), config.met_batch_size):
        batch = ids[start : start + config.met_batch_size]
        records = await asyncio.gather(
            *(_met_object(client, object_id, config=config) for object_id in batch),
            return_exceptions=True,
        )
        for obj in records:
            if isinstance(obj, BaseException) or not obj or not obj.get("primaryImage"):
                continue
            out.append(
                _candidate(
                    MuseumSource.MET,
                    native_id=obj.get("objectID"),
                    id_prefix="met",
                    title=obj.get("title"),
                    artist=obj.get("artistDisplayName"),
                    year=obj.get("objectDate"),
                    medium=obj.get("medium"),
                    dimensions=obj.get("dimensions"),
                    image_url=obj["primaryImage"],
                )
            )
    return out


# --- Rijksmuseum ---


def rijksmuseum_year(long_title: str | None) -> str:
    """Year as printed in the object's long title ("..., c. 1665" -> "c. 1665")."""
    if not long_title:
        return ""
    m = _RIJKS_YEAR_RE.search(long_title)
    return m.group(0) if m else ""


async def search_rijksmuseum(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    if not config.rijksmuseum_key:
        raise MissingApiKeyError(MuseumSource.RIJKSMUSEUM)

    data = await _get_json(
        client,
        f"{config.rijksmuseum_base_url}/collection",
        params={
            "key": config.rijksmuseum_key,
            "q": query,
            "imgonly": "True",
            "ps": limit,
            "culture": "en",
        },
        config=config,
    )

    out: list[ArtworkCandidate] = []
    for item in data.get("artObjects") or []:
        image_url = (item.get("webImage") or {}).get("url")
        if not image_url:
            continue
        out.append(
            _candidate(
                MuseumSource.RIJKSMUSEUM,
                native_id=item.get("objectNumber"),
                id_prefix="rijks",
                title=item.get("title"),
                artist=item.get("principalOrFirstMaker"),
                year=rijksmuseum_year(item.get("longTitle")),
                medium="",
                dimensions="",
                image_url=image_url,
            )
        )
    return out


# --- Cleveland Museum of Art ---


async def search_cleveland(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    data = await _get_json(
        client,
        f"{config.cleveland_base_url}/artworks/",
        params={"q": query, "has_image": 1, "limit": limit},
        config=config,
    )

    out: list[ArtworkCandidate] = []
    for item in data.get("data") or []:
        image_url = ((item.get("images") or {}).get("web") or {}).get("url")
        if not image_url:
            continue
        dims = item.get("dimensions") or {}
        if not isinstance(dims, Mapping):
            dims = {}
        out.append(
            _candidate(
                MuseumSource.CLEVELAND,
                native_id=item.get("id"),
                id_prefix="cma",
                title=item.get("title"),
                artist=_first(item.get("creators")).get("description"),
                year=item.get("creation_date"),
                medium=item.get("technique"),
                dimensions=dims.get("framed") or dims.get("unframed"),
                image_url=image_url,
            )
        )
    return out


# --- Harvard Art Museums ---


async def search_harvard(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    if not config.harvard_key:
        raise MissingApiKeyError(MuseumSource.HARVARD)

    data = await _get_json(
        client,
        f"{config.harvard_base_url}/object",
        params={"apikey": config.harvard_key, "q": query, "hasimage": 1, "size": limit},
        config=config,
    )

    out: list[ArtworkCandidate] = []
    for item in data.get("records") or []:
        image_url = item.get("primaryimageurl")
        if not image_url:
            continue
        out.append(
            _candidate(
                MuseumSource.HARVARD,
                native_id=item.get("objectid"),
                id_prefix="harvard",
                title=item.get("title"),
                artist=_first(item.get("people")).get("name"),
                year=item.get("dated"),
                medium=item.get("medium"),
                dimensions=item.get("dimensions"),
                image_url=image_url,
            )
        )
    return out


# --- Victoria and Albert Museum ---


def va_image_url(image_id: str, *, config: MuseumApiConfig) -> str:
    return f"{config.va_iiif_url}/{image_id}/full/{VA_IMAGE_SIZE}/0/default.jpg"


async def search_va(
    client: httpx.AsyncClient, *, query: str, limit: int, config: MuseumApiConfig
) -> list[ArtworkCandidate]:
    data = await _get_json(
        client,
        f"{config.va_base_url}/objects/search",
        params={"q": query, "images_exist": "true", "page_size": limit},
        config=config,
    )

    out: list[ArtworkCandidate] = []
    for item in data.get("records") or []:
        image_id = item.get("_primaryImageId")
        if not image_id:
            continue
        out.append(
            _candidate(
                MuseumSource.VA,
                native_id=item.get("systemNumber"),
                id_prefix="va",
                title=item.get("_primaryTitle"),
                artist=(item.get("_primaryMaker") or {}).get("name"),
                year=item.get("_primaryDate"),
                medium="",
                dimensions="",
                image_url=va_image_url(image_id, config=config),
            )
        )
    return out
