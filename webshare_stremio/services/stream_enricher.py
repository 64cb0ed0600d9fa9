import asyncio
import time
from typing import Awaitable, Callable, List, Optional

from webshare_stremio.logger import logger
from webshare_stremio.models import FileDetails, StreamResult
from webshare_stremio.services.quality import determine_resolution, format_speed

FetchDetails = Callable[[str], Awaitable[Optional[FileDetails]]]


def apply_details(stream: StreamResult, details: FileDetails) -> None:
    """Refresh display fields of ``stream`` from its file_info record."""
    stream.bitrate = details.bitrate or None
    stream.width = details.width or None
    stream.height = details.height or None
    stream.resolution_label = determine_resolution(
        details.filename or stream.filename,
        stream.size,
        details.width,
        details.height,
    )
    if stream.bitrate:
        speed = format_speed(stream.bitrate)
        if speed:
            stream.bandwidth_hint = speed


async def _enrich_one(stream: StreamResult, fetch_details: FetchDetails) -> bool:
    try:
        details = await fetch_details(stream.ident)
    except Exception as exc:
        logger.warning(f"file_info failed for {stream.ident}: {exc}")
        return False
    if not details:
        return False
    apply_details(stream, details)
    return True


async def enrich_streams(
    streams: List[StreamResult],
    fetch_details: FetchDetails,
    *,
    chunk_size: int = 15,
    chunk_delay: float = 0.025,
) -> List[StreamResult]:
    """
    Enrich every ranked stream with bitrate and dimensions.

    Args:
        streams: Ranked results; mutated in place, never reordered
        fetch_details: Coroutine returning the file_info record for an ident
        chunk_size: Number of concurrent detail fetches
        chunk_delay: Pause between chunks in seconds

    Returns:
        The same list, in the same order
    """
    if not streams:
        return streams

    chunk_size = max(1, chunk_size)
    chunks = [streams[i:i + chunk_size] for i in range(0, len(streams), chunk_size)]
    started = time.perf_counter()
    enriched = 0

    for index, chunk in enumerate(chunks):
        chunk_started = time.perf_counter()
        results = await asyncio.gather(*[_enrich_one(stream, fetch_details) for stream in chunk])
        enriched += sum(1 for ok in results if ok)
        logger.debug(
            f"Enrichment chunk {index + 1}/{len(chunks)} ({len(chunk)} streams) "
            f"done in {(time.perf_counter() - chunk_started) * 1000:.0f}ms"
        )
        if index < len(chunks) - 1 and chunk_delay > 0:
            await asyncio.sleep(chunk_delay)

    logger.info(
        f"Enriched {enriched}/{len(streams)} streams in "
        f"{(time.perf_counter() - started) * 1000:.0f}ms"
    )
    return streams


async def enrich_with_deadline(
    streams: List[StreamResult],
    fetch_details: FetchDetails,
    *,
    timeout: Optional[float],
    chunk_size: int = 15,
    chunk_delay: float = 0.025,
) -> List[StreamResult]:
    """Run :func:`enrich_streams` under ``timeout``; on expiry keep what was enriched so far."""
    pipeline = enrich_streams(streams, fetch_details, chunk_size=chunk_size, chunk_delay=chunk_delay)
    if not timeout:
        return await pipeline
    try:
        return await asyncio.wait_for(pipeline, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Enrichment exceeded {timeout}s, returning partially enriched streams")
        return streams
