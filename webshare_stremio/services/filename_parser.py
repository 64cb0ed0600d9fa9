"""Free-text filename parsing: language tags, season/episode markers and release info.

Both extractors are ordered lists of independent strategies. Season/episode
takes the first strategy that matches; language takes the first strategy that
yields anything, the last one being a union of every positional pattern.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Callable, Iterable, List, Optional, Set

from PTT import parse_title

from webshare_stremio.models import ParsedFilename, SeasonEpisode

log = logging.getLogger("webshare_stremio.filename_parser")

LANGUAGE_MAP = {
    # Czech
    "CZECH": "CZ",
    "CZ": "CZ",
    "CZE": "CZ",
    "CS": "CZ",
    "CES": "CZ",
    "ČEŠTINA": "CZ",
    "ČESKY": "CZ",
    "CZDAB": "CZ",
    # English
    "ENGLISH": "EN",
    "EN": "EN",
    "ENG": "EN",
    # Slovak
    "SLOVAK": "SK",
    "SK": "SK",
    "SLO": "SK",
    "SLK": "SK",
    "SLOVENČINA": "SK",
    "SKDAB": "SK",
}

SUBTITLE_KEYWORDS = ["titulky", "subs", "tit", "sub"]
AUDIO_KEYWORDS = ["dabing", "audio", "dub"]

VIDEO_EXTENSIONS = [
    "mkv", "mp4", "avi", "mov", "wmv", "flv", "webm", "m4v", "ts", "mts", "m2ts", "vob",
    "ogm", "ogv", "asf", "rm", "rmvb", "3gp", "3g2", "f4v", "f4p", "f4a", "f4b",
]

# Longest first so alternations prefer "ENG" over "EN"
_CODES = "|".join(re.escape(code) for code in sorted(LANGUAGE_MAP, key=len, reverse=True))
_KEYWORDS = "|".join(sorted(SUBTITLE_KEYWORDS + AUDIO_KEYWORDS, key=len, reverse=True))
_EXTENSIONS = "|".join(VIDEO_EXTENSIONS)

# A code must not touch another letter, in any script
_NOT_AFTER_LETTER = r"(?<![^\W\d_])"
_NOT_BEFORE_LETTER = r"(?![^\W\d_])"

COMMA_RE = re.compile(
    rf"{_NOT_AFTER_LETTER}({_CODES})\s*,\s*({_CODES}){_NOT_BEFORE_LETTER}", re.IGNORECASE
)
WHITESPACE_RE = re.compile(
    rf"{_NOT_AFTER_LETTER}({_CODES})\s+({_CODES})(?:\s+({_CODES}))?{_NOT_BEFORE_LETTER}", re.IGNORECASE
)
KEYWORD_ADJACENT_RE = re.compile(
    rf"{_NOT_AFTER_LETTER}(?:(?:{_KEYWORDS})[\s_.]+(?:{_CODES})|(?:{_CODES})[\s_.]+(?:{_KEYWORDS})){_NOT_BEFORE_LETTER}",
    re.IGNORECASE,
)
KEYWORD_CONCATENATED_RE = re.compile(
    rf"{_NOT_AFTER_LETTER}({_CODES})({_KEYWORDS}){_NOT_BEFORE_LETTER}", re.IGNORECASE
)

POSITIONAL_PATTERNS = [
    # Codes right before the container extension: Movie.CZ.EN.mkv
    re.compile(rf"{_NOT_AFTER_LETTER}(?:{_CODES})(?:\.(?:{_CODES}))*(?=\.(?:{_EXTENSIONS})$)", re.IGNORECASE),
    # Delimited by brackets, dots, dashes or underscores
    re.compile(rf"(?<=[\[(.])(?:{_CODES})(?=[.)\]\-_])", re.IGNORECASE),
    # Trailing code
    re.compile(rf"(?<=[\[(.])(?:{_CODES})$", re.IGNORECASE),
    # After a space
    re.compile(rf"(?<=\s)(?:{_CODES})(?=[.\s)\]\-_])", re.IGNORECASE),
    # [LANG] or (LANG)
    re.compile(rf"(?<=[\[(])(?:{_CODES})(?=[)\]])", re.IGNORECASE),
    # DUAL-CZ, MULTI.EN
    re.compile(rf"(?:DUAL|MULTI)[\-.\s]((?:{_CODES})){_NOT_BEFORE_LETTER}", re.IGNORECASE),
    # Any code surrounded by separators
    re.compile(rf"(?<=[^a-zA-Z0-9])(?:{_CODES})(?=[^a-zA-Z0-9])", re.IGNORECASE),
    # CZ-EN, SK_CZ_EN, CZ.SK
    re.compile(
        rf"{_NOT_AFTER_LETTER}(?:{_CODES})[\-_.](?:{_CODES})(?:[\-_.](?:{_CODES}))?{_NOT_BEFORE_LETTER}",
        re.IGNORECASE,
    ),
]

_SPLIT_RE = re.compile(r"[\s\[\]().,\-_]+")


def _canonical(tokens: Iterable[str]) -> Set[str]:
    found: Set[str] = set()
    for token in tokens:
        code = LANGUAGE_MAP.get(token.strip().upper())
        if code:
            found.add(code)
    return found


def _joined(codes: Set[str]) -> Optional[str]:
    return "|".join(sorted(codes)) if codes else None


def _tag(code: str, text: str) -> str:
    lowered = text.lower()
    is_audio = any(keyword in lowered for keyword in AUDIO_KEYWORDS)
    return code if is_audio else f"{code} titulky"


def _comma_separated(filename: str) -> Optional[str]:
    match = COMMA_RE.search(filename)
    return _joined(_canonical(match.groups())) if match else None


def _whitespace_separated(filename: str) -> Optional[str]:
    match = WHITESPACE_RE.search(filename)
    if not match:
        return None
    return _joined(_canonical(group for group in match.groups() if group))


def _keyword_adjacent(filename: str) -> Optional[str]:
    match = KEYWORD_ADJACENT_RE.search(filename)
    if not match:
        return None
    for word in re.split(r"[\s_.]+", match.group(0)):
        code = LANGUAGE_MAP.get(word.upper())
        if code:
            return _tag(code, match.group(0))
    return None


def _keyword_concatenated(filename: str) -> Optional[str]:
    match = KEYWORD_CONCATENATED_RE.search(filename)
    if not match:
        return None
    return _tag(LANGUAGE_MAP[match.group(1).upper()], match.group(0))


def _positional(filename: str) -> Optional[str]:
    found: Set[str] = set()
    for pattern in POSITIONAL_PATTERNS:
        for match in pattern.finditer(filename):
            text = match.group(1) if match.groups() else match.group(0)
            found |= _canonical(_SPLIT_RE.split(text))
    return _joined(found)


LANGUAGE_STRATEGIES: List[Callable[[str], Optional[str]]] = [
    _comma_separated,
    _whitespace_separated,
    _keyword_adjacent,
    _keyword_concatenated,
    _positional,
]


def extract_language(filename: Optional[str]) -> Optional[str]:
    """Canonical language codes found in ``filename`` joined by ``|``, e.g. ``CZ|EN``."""
    if not filename:
        return None
    for strategy in LANGUAGE_STRATEGIES:
        result = strategy(filename)
        if result:
            return result
    return None


STANDARD_RE = re.compile(
    r"(?:^|[^a-zA-Z0-9])"
    r"(?:(?:s|season\s*)(\d{1,3})(?:\s*(?:\.|-|_|\s|$))?\s*(?:episode\s*|ep|e)(\d{1,3})"
    r"|(\d{1,2})(?:x|\s*×\s*)(\d{1,3}))"
    r"(?:[^a-zA-Z0-9]|$)",
    re.IGNORECASE,
)
EPISODE_ONLY_RE = re.compile(r"(?:^|[^a-zA-Z0-9])(?:episode|ep|e|#)\s*(\d{1,3})(?:[^a-zA-Z0-9]|$)", re.IGNORECASE)
PART_RE = re.compile(r"(?:^|[^a-zA-Z0-9])(?:part|pt)\s*\.?\s*(\d{1,2})(?:[^a-zA-Z0-9]|$)", re.IGNORECASE)


def _standard(filename: str) -> Optional[SeasonEpisode]:
    match = STANDARD_RE.search(filename)
    if not match:
        return None
    season, episode = (match.group(1), match.group(2)) if match.group(1) else (match.group(3), match.group(4))
    return SeasonEpisode(int(season), int(episode))


def _episode_only(filename: str) -> Optional[SeasonEpisode]:
    match = EPISODE_ONLY_RE.search(filename)
    return SeasonEpisode(1, int(match.group(1))) if match else None


def _part(filename: str) -> Optional[SeasonEpisode]:
    match = PART_RE.search(filename)
    return SeasonEpisode(1, int(match.group(1))) if match else None


# Most structured first; bare numeric runs like "101" are never read as S01E01
SEASON_EPISODE_STRATEGIES: List[Callable[[str], Optional[SeasonEpisode]]] = [
    _standard,
    _episode_only,
    _part,
]


def extract_season_episode(filename: Optional[str]) -> Optional[SeasonEpisode]:
    if not filename:
        return None
    for strategy in SEASON_EPISODE_STRATEGIES:
        result = strategy(filename)
        if result:
            return result
    return None


@lru_cache(maxsize=2048)
def _parse_release(name: str) -> dict:
    try:
        return parse_title(name) or {}
    except Exception as exc:  # noqa: BLE001
        log.debug("PTT could not parse %r: %s", name, exc)
        return {}


def _as_int(value) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def parse_filename(name: str) -> ParsedFilename:
    """Title, year, season/episode, resolution, source and language of a file name."""
    release = _parse_release(name or "")
    season_episode = extract_season_episode(name)
    return ParsedFilename(
        title=release.get("title") or name or "",
        year=_as_int(release.get("year")),
        season=season_episode.season if season_episode else None,
        episode=season_episode.episode if season_episode else None,
        resolution=release.get("resolution") or None,
        source=release.get("quality") or None,
        language=extract_language(name),
    )
