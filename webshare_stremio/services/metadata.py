"""Resolve Stremio ids (``tt…``, ``tmdb:…``) into show descriptors.

TMDB supplies the Czech, Slovak and (for non-English originals) English
names; Cinemeta is the fallback when TMDB is not configured or has nothing.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import unquote

import httpx

from webshare_stremio.models import MediaType, ShowDescriptor
from webshare_stremio.services.provider import MetadataResolver
from webshare_stremio.services.year_filter import extract_year
from webshare_stremio.settings import settings

log = logging.getLogger("webshare_stremio.metadata")

LOCALIZED_LANGUAGES = ("cs", "sk")


@dataclass
class StremioID:
    base: str
    season: Optional[str]
    episode: Optional[str]


def parse_stremio_id(raw_id: str) -> StremioID:
    """Parse Stremio IDs that may be URL-encoded once or twice.

    Examples of incoming IDs:
    - tt0369179                   (movie)
    - tt0369179:1:2               (series S01E02)
    - tmdb:1399:1:2               (series by TMDB id)
    - tt0369179%3A1%3A2           (encoded once)
    """
    s = raw_id or ""
    # Decode up to twice to handle cases like %253A -> %3A -> :
    for _ in range(2):
        decoded = unquote(s)
        if decoded == s:
            break
        s = decoded

    if s.startswith("tmdb:"):
        s = s[len("tmdb:"):]
    parts = s.split(":")
    base = parts[0] if parts else s
    season = parts[1] if len(parts) > 1 and parts[1] else None
    episode = parts[2] if len(parts) > 2 and parts[2] else None
    return StremioID(base=base, season=season, episode=episode)


class TmdbCinemetaResolver(MetadataResolver):
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        tmdb_api_key: Optional[str] = None,
        tmdb_api_base: Optional[str] = None,
        cinemeta_url: Optional[str] = None,
    ):
        self._client = client
        self.tmdb_api_key = tmdb_api_key if tmdb_api_key is not None else settings.tmdb_api_key
        self.tmdb_api_base = (tmdb_api_base or settings.tmdb_api_base).rstrip("/")
        self.cinemeta_url = (cinemeta_url or settings.cinemeta_url).rstrip("/")

    async def describe(self, media_type: MediaType | str, media_id: str) -> Optional[ShowDescriptor]:
        media_type = MediaType(media_type)
        is_tmdb = (media_id or "").startswith("tmdb:")
        sid = parse_stremio_id(media_id)
        if media_type is MediaType.SERIES and not (sid.season and sid.episode):
            log.info("Series id %s has no season/episode", media_id)
            return None

        if self._client is not None:
            return await self._describe(self._client, media_type, sid, is_tmdb)
        async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
            return await self._describe(client, media_type, sid, is_tmdb)

    async def _describe(
        self,
        client: httpx.AsyncClient,
        media_type: MediaType,
        sid: StremioID,
        is_tmdb: bool,
    ) -> Optional[ShowDescriptor]:
        if self.tmdb_api_key:
            descriptor = await self._from_tmdb(client, media_type, sid, is_tmdb)
            if descriptor:
                return descriptor
        if is_tmdb:
            # Cinemeta only knows IMDb ids
            return None
        return await self._from_cinemeta(client, media_type, sid)

    async def _get_json(self, client: httpx.AsyncClient, url: str, params: Optional[dict] = None) -> Optional[dict]:
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            log.warning("Metadata request to %s failed: %s", url, exc)
            return None
        if resp.status_code != 200:
            log.info("Metadata request to %s returned HTTP %s", url, resp.status_code)
            return None
        try:
            payload = resp.json()
        except ValueError:
            log.warning("Metadata response from %s is not JSON", url)
            return None
        return payload if isinstance(payload, dict) else None

    async def _tmdb_record(
        self,
        client: httpx.AsyncClient,
        media_type: MediaType,
        sid: StremioID,
        is_tmdb: bool,
        language: Optional[str],
    ) -> Optional[dict]:
        params = {"api_key": self.tmdb_api_key}
        if language:
            params["language"] = language
        if is_tmdb:
            kind = "movie" if media_type is MediaType.MOVIE else "tv"
            return await self._get_json(client, f"{self.tmdb_api_base}/{kind}/{sid.base}", params)

        params["external_source"] = "imdb_id"
        payload = await self._get_json(client, f"{self.tmdb_api_base}/find/{sid.base}", params)
        if not payload:
            return None
        key = "movie_results" if media_type is MediaType.MOVIE else "tv_results"
        results = payload.get(key) or []
        return results[0] if results else None

    async def _from_tmdb(
        self,
        client: httpx.AsyncClient,
        media_type: MediaType,
        sid: StremioID,
        is_tmdb: bool,
    ) -> Optional[ShowDescriptor]:
        records = await asyncio.gather(
            *[self._tmdb_record(client, media_type, sid, is_tmdb, lang) for lang in LOCALIZED_LANGUAGES]
        )
        primary = next((record for record in records if record), None)
        if not primary:
            return None

        title_key = "title" if media_type is MediaType.MOVIE else "name"
        original_key = "original_title" if media_type is MediaType.MOVIE else "original_name"
        names: List[Optional[str]] = [record.get(title_key) if record else None for record in records]

        if primary.get("original_language") and primary.get("original_language") != "en":
            english = await self._tmdb_record(client, media_type, sid, is_tmdb, None)
            names.append(english.get(title_key) if english else None)
        names.append(primary.get(original_key))

        year = extract_year(primary.get("release_date")) if media_type is MediaType.MOVIE else None
        log.info("TMDB resolved %s to %s", sid.base, [name for name in names if name])
        return ShowDescriptor.build(media_type, names, year=year, series=sid.season, episode=sid.episode)

    async def _from_cinemeta(
        self,
        client: httpx.AsyncClient,
        media_type: MediaType,
        sid: StremioID,
    ) -> Optional[ShowDescriptor]:
        payload = await self._get_json(client, f"{self.cinemeta_url}/meta/{media_type.value}/{sid.base}.json")
        meta = (payload or {}).get("meta") or {}
        if not meta.get("name"):
            log.warning("No metadata found for %s", sid.base)
            return None
        year = None
        if media_type is MediaType.MOVIE:
            year = extract_year(str(meta.get("releaseInfo") or meta.get("year") or ""))
        return ShowDescriptor.build(media_type, [meta["name"]], year=year, series=sid.season, episode=sid.episode)


def create_resolver() -> TmdbCinemetaResolver:
    return TmdbCinemetaResolver()
