from __future__ import annotations

import re
import unicodedata
from typing import Optional

_KEYWORDS_RE = re.compile(r"subtitles|titulky", re.IGNORECASE)
# Anything that is not a letter or digit in any script, underscore included
_NON_ALNUM_RE = re.compile(r"[\W_]+", re.UNICODE)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> Optional[str]:
    """Accent and case insensitive form of ``text`` ("Pelíšky" -> "pelisky")."""
    if text is None:
        return None
    decomposed = unicodedata.normalize("NFD", text.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def clean_title(text: Optional[str]) -> Optional[str]:
    """Normalized title with punctuation and subtitle keywords removed."""
    if text is None:
        return None
    # Fold accents first so decomposed input keeps its base letters
    stripped = _KEYWORDS_RE.sub("", normalize(text))
    stripped = _NON_ALNUM_RE.sub(" ", stripped)
    return _WHITESPACE_RE.sub(" ", stripped).strip()
