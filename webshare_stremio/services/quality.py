"""Resolution labels and bandwidth hints derived from filenames, file_info data or sizes."""

from __future__ import annotations

import math
import re
from typing import Optional

GB = 1_000_000_000
MB = 1_000_000

# Checked in order; the first token found in the filename wins.
# (label, substrings, whole-word tokens); "hd" alone must not match "HDR"
_FILENAME_RESOLUTIONS = [
    ("2160p", ("2160p", "4k", "uhd"), ()),
    ("1440p", ("1440p",), ()),
    ("1080p", ("1080p",), ("fhd",)),
    ("720p", ("720p",), ("hd",)),
    ("480p", ("480p",), ()),
    ("360p", ("360p",), ()),
]


def _token_pattern(substrings, words):
    parts = [re.escape(token) for token in substrings]
    parts += [r"(?<![a-z0-9])" + re.escape(word) + r"(?![a-z0-9])" for word in words]
    return re.compile("|".join(parts))


_TOKEN_PATTERNS = [
    (label, _token_pattern(substrings, words))
    for label, substrings, words in _FILENAME_RESOLUTIONS
]
CUSTOM_RESOLUTION_RE = re.compile(r"(\d{3,4})x(\d{3,4})")

# (minimum height, label)
_HEIGHT_BUCKETS = [
    (2160, "2160p"),
    (1440, "1440p"),
    (1080, "1080p"),
    (720, "720p"),
    (480, "480p"),
    (360, "360p"),
]

# (exclusive lower bound in bytes, label)
_SIZE_RESOLUTIONS = [
    (8 * GB, "2160p"),
    (3 * GB, "1080p"),
    (int(1.5 * GB), "720p"),
    (500 * MB, "480p"),
]

_SIZE_SPEEDS = [
    (8 * GB, 25),
    (4 * GB, 15),
    (2 * GB, 10),
    (1 * GB, 8),
    (500 * MB, 5),
    (200 * MB, 3),
]

_SIZE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB"]


def resolution_from_filename(filename: Optional[str]) -> Optional[str]:
    name = (filename or "").lower()
    if not name:
        return None
    for label, pattern in _TOKEN_PATTERNS:
        if pattern.search(name):
            return label
    match = CUSTOM_RESOLUTION_RE.search(name)
    if match:
        return f"{match.group(1)}x{match.group(2)}"
    return None


def resolution_from_dimensions(width: Optional[int], height: Optional[int]) -> Optional[str]:
    if not width or not height:
        return None
    for minimum, label in _HEIGHT_BUCKETS:
        if height >= minimum:
            return label
    return f"{width}x{height}"


def resolution_from_size(size_bytes: int) -> str:
    for bound, label in _SIZE_RESOLUTIONS:
        if size_bytes > bound:
            return label
    return "SD"


def determine_resolution(
    filename: Optional[str],
    size_bytes: int,
    api_width: Optional[int] = None,
    api_height: Optional[int] = None,
) -> str:
    """Three-level fallback: filename tokens, then file_info dimensions, then file size."""
    return (
        resolution_from_filename(filename)
        or resolution_from_dimensions(api_width, api_height)
        or resolution_from_size(size_bytes or 0)
    )


def resolution_priority(resolution: Optional[str]) -> int:
    """Sort weight for a resolution label (higher is better)."""
    if not resolution:
        return 0
    res = resolution.lower()
    if "2160p" in res or "4k" in res:
        return 10
    if "1440p" in res:
        return 9
    if "1080p" in res:
        return 8
    if "720p" in res:
        return 7
    if "480p" in res:
        return 6
    if "360p" in res:
        return 5
    custom = re.search(r"(\d+)x(\d+)", res)
    if custom:
        height = int(custom.group(2))
        for weight, (minimum, _label) in zip(range(10, 4, -1), _HEIGHT_BUCKETS):
            if height >= minimum:
                return weight
        return 4
    return 1


def format_speed(bitrate: Optional[int], safety: float = 1.2) -> Optional[str]:
    """Recommended download speed for a bitrate in bits per second."""
    if not bitrate:
        return None
    mbps = (float(bitrate) / 1_000_000) * safety
    rounded = math.floor(mbps * 10 + 0.5) / 10
    return f"{rounded:g} Mbps"


def estimate_speed_from_size(size_bytes: int) -> str:
    """Coarse speed hint when the bitrate is unknown."""
    for bound, mbps in _SIZE_SPEEDS:
        if (size_bytes or 0) > bound:
            return f"{mbps} Mbps"
    return "2 Mbps"


def format_size(size_bytes: Optional[int]) -> str:
    """Human readable size in decimal units, e.g. ``2.5 GB``."""
    value = float(size_bytes or 0)
    unit = 0
    while value >= 1000 and unit < len(_SIZE_UNITS) - 1:
        value /= 1000
        unit += 1
    rounded = round(value, 2)
    return f"{rounded:g} {_SIZE_UNITS[unit]}"
