from __future__ import annotations

from typing import Dict, List, Sequence

from webshare_stremio.models import ShowDescriptor
from webshare_stremio.services.year_filter import has_year


def _pad(value: str | None) -> str:
    return str(value or "").strip().zfill(2)


def build_queries(descriptor: ShowDescriptor, *, include_year: bool = False) -> List[str]:
    """Search strings for every localized name, primary name first, original title last.

    Series get ``"Name S01E03"`` followed by ``"Name 01x03"`` per name. Movies get
    the bare name and, with ``include_year``, a ``"Name 2024"`` variant for names
    that do not already carry a year.
    """
    queries: List[str] = []
    if not descriptor.is_movie:
        season = _pad(descriptor.series)
        episode = _pad(descriptor.episode)
        for name in descriptor.localized_names:
            queries.append(f"{name} S{season}E{episode}")
            queries.append(f"{name} {season}x{episode}")
        return queries

    for name in descriptor.localized_names:
        queries.append(name)
        if include_year and descriptor.year and not has_year(name):
            queries.append(f"{name} {descriptor.year}")
    return queries


def query_titles(queries: Sequence[str], descriptor: ShowDescriptor) -> List[str]:
    """Bare titles behind ``queries``, in order, without duplicates."""
    titles: Dict[str, None] = {}
    year_suffix = f" {descriptor.year}" if descriptor.year else None
    for query in queries:
        title = query.strip()
        if not descriptor.is_movie:
            # drop the trailing "S01E03" / "01x03" token
            title = title.rsplit(" ", 1)[0] if " " in title else title
        elif year_suffix and title.endswith(year_suffix) and title[: -len(year_suffix)] in descriptor.localized_names:
            title = title[: -len(year_suffix)]
        if title:
            titles.setdefault(title, None)
    return list(titles)
