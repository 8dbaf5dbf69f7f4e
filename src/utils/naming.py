"""Name normalisation used by entity resolution, plus filename helpers."""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9\s]")
_WS_PATTERN = re.compile(r"\s+")
_SANITIZE_PATTERN = re.compile(r"[^\w\s-]")
_FILENAME_WS_PATTERN = re.compile(r"[-\s]+")
# Qualification / status markers appended to team names in standings tables: "(C)", "(a)"
_TRAILING_MARKER_PATTERN = re.compile(r"\s*\([a-z]{1,2}\)\s*$", re.IGNORECASE)


def normalize_name(value: str | None) -> str:
    """Fold a display name to a comparison key.

    Decomposes Unicode, drops combining marks, lowercases, strips everything
    except ``[a-z0-9]`` and whitespace, then collapses whitespace.
    ``"Atlético  Madrid"`` -> ``"atletico madrid"``.
    """
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    folded = _NON_ALNUM_PATTERN.sub("", stripped.lower())
    return _WS_PATTERN.sub(" ", folded).strip()


def strip_team_markers(value: str) -> str:
    return _TRAILING_MARKER_PATTERN.sub("", value).strip()


def sanitize(value: str) -> str:
    value = _SANITIZE_PATTERN.sub("", value).strip()
    return _FILENAME_WS_PATTERN.sub("_", value)
