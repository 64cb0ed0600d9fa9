"""Search orchestration: queries, fan-out, scoring, filtering, ranking and enrichment."""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from webshare_stremio.errors import ProviderError
from webshare_stremio.models import RawCandidate, ScoredCandidate, SearchConfig, ShowDescriptor, StreamResult
from webshare_stremio.services.filtering import filter_candidates
from webshare_stremio.services.provider import SearchProvider
from webshare_stremio.services.quality import determine_resolution, estimate_speed_from_size
from webshare_stremio.services.queries import build_queries
from webshare_stremio.services.ranking import rank
from webshare_stremio.services.scoring import score_candidates
from webshare_stremio.services.stream_enricher import enrich_with_deadline
from webshare_stremio.settings import Settings, settings as default_settings

log = logging.getLogger("webshare_stremio.search")

SearchCall = Callable[[str], Awaitable[List[RawCandidate]]]


class QueryFanOut(ABC):
    """Runs one search per query and returns the hit lists in query order.

    A failed query contributes an empty list. When every query failed the
    last :class:`ProviderError` is raised.
    """

    @abstractmethod
    async def run(self, queries: Sequence[str], search: SearchCall) -> List[List[RawCandidate]]:
        pass

    @staticmethod
    def _raise_if_all_failed(queries: Sequence[str], errors: List[ProviderError]) -> None:
        if queries and len(errors) == len(queries):
            raise errors[-1]


class SequentialFanOut(QueryFanOut):
    def __init__(self, delay: float = 0.1):
        self.delay = delay

    async def run(self, queries: Sequence[str], search: SearchCall) -> List[List[RawCandidate]]:
        results: List[List[RawCandidate]] = []
        errors: List[ProviderError] = []
        for index, query in enumerate(queries):
            try:
                results.append(await search(query))
            except ProviderError as exc:
                log.warning("Query failed for %r: %s", query, exc)
                errors.append(exc)
                results.append([])
            if index < len(queries) - 1 and self.delay > 0:
                await asyncio.sleep(self.delay)
        self._raise_if_all_failed(queries, errors)
        return results


class ConcurrentFanOut(QueryFanOut):
    def __init__(self, limit: int = 3):
        self.limit = max(1, limit)

    async def run(self, queries: Sequence[str], search: SearchCall) -> List[List[RawCandidate]]:
        semaphore = asyncio.Semaphore(self.limit)
        errors: List[ProviderError] = []

        async def _one(query: str) -> List[RawCandidate]:
            async with semaphore:
                try:
                    return await search(query)
                except ProviderError as exc:
                    log.warning("Query failed for %r: %s", query, exc)
                    errors.append(exc)
                    return []

        results = await asyncio.gather(*[_one(query) for query in queries])
        self._raise_if_all_failed(queries, errors)
        return list(results)


def fan_out_from_settings(config: Settings) -> QueryFanOut:
    if (config.query_fan_out or "").strip().lower() == "concurrent":
        return ConcurrentFanOut(config.query_concurrency)
    return SequentialFanOut(config.query_delay)


def dedupe(batches: Sequence[Sequence[RawCandidate]]) -> List[RawCandidate]:
    """Flatten per-query hits keeping one entry per ident; a later hit replaces an earlier one in place."""
    unique: Dict[str, RawCandidate] = {}
    for batch in batches:
        for candidate in batch:
            unique[candidate.ident] = candidate
    return list(unique.values())


def binge_group(scored: ScoredCandidate) -> str:
    parsed = scored.parsed
    return f"WebshareStremio|{parsed.language}|{parsed.resolution}|{parsed.source}"


def playback_url(ident: str, token: Optional[str], base_url: str) -> str:
    return f"{base_url}/getUrl/{ident}?token={token or ''}"


def to_stream_result(scored: ScoredCandidate, token: Optional[str], base_url: str) -> StreamResult:
    candidate = scored.candidate
    return StreamResult(
        ident=candidate.ident,
        filename=candidate.name,
        size=candidate.size,
        playback_url=playback_url(candidate.ident, token, base_url),
        resolution_label=determine_resolution(candidate.name, candidate.size),
        binge_group_key=binge_group(scored),
        pos_votes=candidate.pos_votes,
        neg_votes=candidate.neg_votes,
        language=scored.parsed.language,
        strong_match=scored.strong_match,
        bandwidth_hint=estimate_speed_from_size(candidate.size),
    )


async def search_streams(
    descriptor: ShowDescriptor,
    provider: SearchProvider,
    token: Optional[str],
    config: Optional[SearchConfig] = None,
    *,
    fan_out: Optional[QueryFanOut] = None,
    settings: Optional[Settings] = None,
) -> List[StreamResult]:
    """Find, rank and enrich Webshare files for a movie or an episode.

    Raises ProviderError only when every search query failed.
    """
    settings = settings or default_settings
    config = config or SearchConfig.from_user_config(None, settings.default_sort_method)
    fan_out = fan_out or fan_out_from_settings(settings)
    started = time.perf_counter()

    queries = build_queries(descriptor, include_year=settings.movie_year_queries)
    if not queries:
        log.info("No queries for %s, nothing to search", descriptor)
        return []
    log.info("Searching %d queries for %s (%s)", len(queries), queries[0], descriptor.type.value)

    batches = await fan_out.run(queries, lambda query: provider.search(query, token))
    candidates = dedupe(batches)

    scored = score_candidates(candidates, queries, descriptor)
    kept = filter_candidates(scored, descriptor, year_tolerance=settings.year_tolerance)
    ranked = rank(kept, config.sort_method, limit=settings.result_limit)
    log.info(
        "Ranked %d of %d unique candidates in %.0fms",
        len(ranked),
        len(candidates),
        (time.perf_counter() - started) * 1000,
    )

    results = [to_stream_result(item, token, settings.base_url) for item in ranked]
    await enrich_with_deadline(
        results,
        lambda ident: provider.get_details(ident, token),
        timeout=settings.enrichment_timeout,
        chunk_size=settings.enrich_chunk_size,
        chunk_delay=settings.enrich_chunk_delay,
    )
    log.info("Search finished in %.0fms with %d streams", (time.perf_counter() - started) * 1000, len(results))
    return results


async def direct_search(query: str, provider: SearchProvider, token: Optional[str]) -> List[RawCandidate]:
    """Raw provider hits for a free-text query, unscored and unranked."""
    query = (query or "").strip()
    if not query:
        return []
    return await provider.search(query, token)
