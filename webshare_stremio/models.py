"""Typed records passed between the search stages."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from webshare_stremio.constants import STREAM_NAME
from webshare_stremio.services.quality import format_size

STRONG_MATCH_THRESHOLD = 0.5
WEAK_MATCH_THRESHOLD = 0.3


class MediaType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"


class SortMethod(str, Enum):
    VOTES = "votes"
    FILESIZE = "filesize"
    RESOLUTION = "resolution"

    @classmethod
    def parse(cls, raw: object) -> "SortMethod":
        if isinstance(raw, cls):
            return raw
        try:
            # hand-edited configs may carry numbers or lists here
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.VOTES


@dataclass(frozen=True)
class ShowDescriptor:
    type: MediaType
    localized_names: Tuple[str, ...]
    year: Optional[str] = None
    series: Optional[str] = None
    episode: Optional[str] = None

    @classmethod
    def build(
        cls,
        type: MediaType | str,
        names: Iterable[Optional[str]],
        year: Optional[str] = None,
        series: Optional[str] = None,
        episode: Optional[str] = None,
    ) -> "ShowDescriptor":
        """Order-preserving de-duplication of names; empty names are dropped."""
        unique: Dict[str, None] = {}
        for name in names:
            if name and name.strip():
                unique.setdefault(name.strip(), None)
        return cls(
            type=MediaType(type),
            localized_names=tuple(unique),
            year=str(year) if year else None,
            series=str(series) if series is not None else None,
            episode=str(episode) if episode is not None else None,
        )

    @property
    def is_movie(self) -> bool:
        return self.type is MediaType.MOVIE


@dataclass(frozen=True)
class SeasonEpisode:
    season: int
    episode: int


@dataclass
class RawCandidate:
    ident: str
    name: str
    size: int = 0
    pos_votes: int = 0
    neg_votes: int = 0
    img: Optional[str] = None
    protected: bool = False


@dataclass(frozen=True)
class ParsedFilename:
    title: str
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    resolution: Optional[str] = None
    source: Optional[str] = None
    language: Optional[str] = None

    @property
    def season_episode(self) -> Optional[SeasonEpisode]:
        if self.season is None or self.episode is None:
            return None
        return SeasonEpisode(self.season, self.episode)


@dataclass
class ScoredCandidate:
    candidate: RawCandidate
    parsed: ParsedFilename
    title_match: float
    name_match: float
    title_year: str = ""
    query_title_year: str = ""
    cleaned_title: str = ""

    @property
    def ident(self) -> str:
        return self.candidate.ident

    @property
    def strong_match(self) -> bool:
        return self.title_match > STRONG_MATCH_THRESHOLD

    @property
    def weak_match(self) -> bool:
        return self.name_match > WEAK_MATCH_THRESHOLD

    @property
    def fulltext_match(self) -> float:
        # half up, so 0.25 groups with 0.3
        return math.floor(self.name_match * 10 + 0.5) / 10


@dataclass
class FileDetails:
    ident: str
    filename: str
    size: int
    pos_votes: int = 0
    neg_votes: int = 0
    description: str = ""
    stripe: Optional[str] = None
    bitrate: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    protected: bool = False


@dataclass
class StreamResult:
    ident: str
    filename: str
    size: int
    playback_url: str
    resolution_label: str
    binge_group_key: str
    pos_votes: int = 0
    neg_votes: int = 0
    language: Optional[str] = None
    strong_match: bool = False
    bandwidth_hint: Optional[str] = None
    bitrate: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def display_name(self) -> str:
        mark = " ✅" if self.strong_match else ""
        return f"{STREAM_NAME}{mark} {self.resolution_label or ''}".rstrip()

    @property
    def description(self) -> str:
        lines = [self.filename]
        if self.language:
            lines.append(f"🌐 {self.language}")
        lines.append(f"👍 {self.pos_votes} 👎 {self.neg_votes}")
        lines.append(f"💾 {format_size(self.size)}")
        if self.bandwidth_hint:
            lines.append(f"⚡ {self.bandwidth_hint}")
        return "\n".join(lines)

    def to_stremio(self) -> dict:
        return {
            "name": self.display_name,
            "description": self.description,
            "url": self.playback_url,
            "behaviorHints": {
                "bingeGroup": self.binge_group_key,
                "videoSize": self.size,
                "filename": self.filename,
            },
        }


@dataclass(frozen=True)
class SearchConfig:
    sort_method: SortMethod = SortMethod.VOTES

    @classmethod
    def from_user_config(cls, user_config: Optional[dict], default: str = "votes") -> "SearchConfig":
        raw = (user_config or {}).get("sortMethod") or default
        return cls(sort_method=SortMethod.parse(raw))
