from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

from webshare_stremio.models import ScoredCandidate, ShowDescriptor
from webshare_stremio.services.year_filter import is_year_match

log = logging.getLogger("webshare_stremio.filtering")

PART_MARKER = "part"


def _as_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _requested_part(descriptor: ShowDescriptor) -> bool:
    return any(PART_MARKER in name.lower() for name in descriptor.localized_names)


def rejection_reason(
    scored: ScoredCandidate,
    descriptor: ShowDescriptor,
    *,
    year_tolerance: int = 1,
) -> Optional[str]:
    """Why ``scored`` is dropped from the results, or ``None`` when it stays."""
    if scored.candidate.protected:
        return "protected"
    if not (scored.strong_match or scored.weak_match):
        return "low_match"
    if not is_year_match(scored.query_title_year, scored.title_year, tolerance=year_tolerance):
        return "year"

    season_episode = scored.parsed.season_episode
    if descriptor.is_movie:
        if season_episode is None:
            return None
        # Part-numbered movies ("Deathly Hallows - Part 1") look like episodes
        is_part = PART_MARKER in scored.candidate.name.lower() and _requested_part(descriptor)
        return None if is_part else "episode_in_movie"

    wanted = (_as_int(descriptor.series), _as_int(descriptor.episode))
    if season_episode is None or (season_episode.season, season_episode.episode) != wanted:
        return "wrong_episode"
    return None


def include(scored: ScoredCandidate, descriptor: ShowDescriptor, *, year_tolerance: int = 1) -> bool:
    return rejection_reason(scored, descriptor, year_tolerance=year_tolerance) is None


def filter_candidates(
    candidates: Sequence[ScoredCandidate],
    descriptor: ShowDescriptor,
    *,
    year_tolerance: int = 1,
) -> List[ScoredCandidate]:
    kept: List[ScoredCandidate] = []
    dropped: Counter = Counter()
    for scored in candidates:
        reason = rejection_reason(scored, descriptor, year_tolerance=year_tolerance)
        if reason is None:
            kept.append(scored)
        else:
            dropped[reason] += 1
    if dropped:
        log.info("Filtered %d of %d candidates: %s", sum(dropped.values()), len(candidates), dict(dropped))
    return kept
