"""Similarity scoring of search hits against the requested titles."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from rapidfuzz import fuzz

from webshare_stremio.models import RawCandidate, ScoredCandidate, ShowDescriptor
from webshare_stremio.services.filename_parser import parse_filename
from webshare_stremio.services.queries import query_titles
from webshare_stremio.services.text import clean_title
from webshare_stremio.services.year_filter import has_year

log = logging.getLogger("webshare_stremio.scoring")


def similarity(left: Optional[str], right: Optional[str]) -> float:
    """Normalized similarity in ``[0, 1]``; empty input never matches."""
    if not left or not right:
        return 0.0
    return fuzz.ratio(left, right) / 100.0


def best_similarity(text: Optional[str], targets: Sequence[str]) -> float:
    return max((similarity(text, target) for target in targets), default=0.0)


def comparison_targets(titles: Sequence[str], year_suffix: str = "") -> List[str]:
    """Primary, original, secondary and the two ``A/B`` combinations, cleaned."""
    if not titles:
        return []
    primary = titles[0]
    original = titles[-1]
    secondary = titles[1] if len(titles) > 2 else None

    raw = [primary, original, secondary]
    if secondary:
        raw.append(f"{secondary}/{original}")
    if len(titles) > 1:
        raw.append(f"{primary}/{original}")

    targets: List[str] = []
    for value in raw:
        if not value:
            continue
        cleaned = clean_title(value)
        if not cleaned:
            continue
        target = f"{cleaned} {year_suffix}".strip() if year_suffix else cleaned
        if target not in targets:
            targets.append(target)
    return targets


def score(candidate: RawCandidate, queries: Sequence[str], descriptor: ShowDescriptor) -> ScoredCandidate:
    parsed = parse_filename(candidate.name)

    title_year = ""
    query_title_year = ""
    # Titles that carry their own year ("Wonder Woman 1984") skip the year comparison
    if (
        descriptor.is_movie
        and parsed.year
        and descriptor.year
        and queries
        and not has_year(queries[0])
    ):
        title_year = str(parsed.year)
        query_title_year = str(descriptor.year)

    cleaned_title = clean_title(parsed.title) or ""
    if title_year:
        cleaned_title = f"{cleaned_title} {title_year}".strip()
    cleaned_name = clean_title(candidate.name) or ""

    targets = comparison_targets(query_titles(queries, descriptor), query_title_year)
    title_match = best_similarity(cleaned_title, targets)
    name_match = best_similarity(cleaned_name, targets)
    log.debug(
        "Scored %s %r: title=%.3f name=%.3f targets=%s",
        candidate.ident,
        cleaned_title,
        title_match,
        name_match,
        targets,
    )
    return ScoredCandidate(
        candidate=candidate,
        parsed=parsed,
        title_match=title_match,
        name_match=name_match,
        title_year=title_year,
        query_title_year=query_title_year,
        cleaned_title=cleaned_title,
    )


def score_candidates(
    candidates: Sequence[RawCandidate],
    queries: Sequence[str],
    descriptor: ShowDescriptor,
) -> List[ScoredCandidate]:
    return [score(candidate, queries, descriptor) for candidate in candidates]
