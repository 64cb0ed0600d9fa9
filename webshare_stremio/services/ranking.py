from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Tuple

from webshare_stremio.models import ScoredCandidate, SortMethod
from webshare_stremio.services.quality import determine_resolution, resolution_priority

log = logging.getLogger("webshare_stremio.ranking")


def _resolution_weight(scored: ScoredCandidate) -> int:
    label = determine_resolution(scored.candidate.name, scored.candidate.size)
    return resolution_priority(label)


# Keys are negated so an ascending stable sort puts the best first
_METHOD_KEYS: Dict[SortMethod, Callable[[ScoredCandidate], Tuple]] = {
    SortMethod.VOTES: lambda s: (-s.title_match, -s.candidate.pos_votes, -s.candidate.size),
    SortMethod.FILESIZE: lambda s: (-s.candidate.size, -s.title_match, -s.candidate.pos_votes),
    SortMethod.RESOLUTION: lambda s: (
        -_resolution_weight(s),
        -s.title_match,
        -s.candidate.size,
        -s.candidate.pos_votes,
    ),
}


def sort_key(scored: ScoredCandidate, sort_method: SortMethod) -> Tuple:
    tier = 0 if scored.strong_match else 1
    # fulltext only separates weak matches; strong ones keep their method order
    fulltext = 0.0 if scored.strong_match else -scored.fulltext_match
    return (tier, *_METHOD_KEYS[sort_method](scored), fulltext)


def rank(
    candidates: Sequence[ScoredCandidate],
    sort_method: SortMethod = SortMethod.VOTES,
    *,
    limit: int = 100,
) -> List[ScoredCandidate]:
    """Strong matches first, then the sort method's keys, truncated to ``limit``."""
    method = SortMethod.parse(sort_method)
    ordered = sorted(candidates, key=lambda scored: sort_key(scored, method))
    if log.isEnabledFor(logging.DEBUG):
        for scored in ordered:
            log.debug("Rank %s %s key=%s", method.value, scored.ident, sort_key(scored, method))
    return ordered[:limit]
