from __future__ import annotations

import re
from typing import Iterator, Optional

YEAR_PATTERN = re.compile(r"(?<!\d)(?:19\d{2}|20\d{2})(?!\d)")


def _iter_year_strings(text: Optional[str]) -> Iterator[str]:
    if not text:
        return
    for match in YEAR_PATTERN.finditer(text):
        yield match.group(0)


def _coerce_year(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        candidate = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if len(text) != 4 or not text.isdigit():
            extracted = next(_iter_year_strings(text), None)
            if extracted is None:
                return None
            text = extracted
        candidate = int(text)
    if 1900 <= candidate <= 2099:
        return candidate
    return None


def extract_year(text: Optional[str]) -> Optional[str]:
    """Return the first four-digit year detected in the provided text."""
    return next(_iter_year_strings(text), None)


def has_year(text: Optional[str]) -> bool:
    return extract_year(text) is not None


def is_year_match(
    target_year: str | int | None,
    candidate_year: str | int | None,
    *,
    tolerance: int = 0,
) -> bool:
    """Compare the year recorded for a filename with the one recorded for the query.

    Both sides empty means no year comparison applies. When only one side
    carries a year the pair is treated as a mismatch.
    """
    normalized_target = _coerce_year(target_year)
    normalized_candidate = _coerce_year(candidate_year)
    if normalized_target is None and normalized_candidate is None:
        return True
    if normalized_target is None or normalized_candidate is None:
        return False
    return abs(normalized_candidate - normalized_target) <= tolerance
