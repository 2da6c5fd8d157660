"""Utility helpers for the locality search backend."""

from __future__ import annotations

import re
from typing import Optional


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_leading_number(text: Optional[str]) -> Optional[float]:
    """Return the numeric prefix of ``text`` ("1.5 miles away" -> 1.5), or None."""
    if not text:
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


# PostgREST treats these as syntax inside filter expressions
_RESERVED = re.compile(r"[,.:()\"'*{}\\]")


def search_phrase(text: str) -> str:
    """The whole query with filter syntax removed, for a single substring clause."""
    return collapse_whitespace(_RESERVED.sub("", (text or "").lower()))


def search_terms(text: str, min_len: int = 3) -> list[str]:
    """Split a query into deduplicated terms safe to embed in a PostgREST filter."""
    seen: set[str] = set()
    terms: list[str] = []
    for word in collapse_whitespace(text.lower()).split(" "):
        word = _RESERVED.sub("", word)
        if len(word) < min_len or word in seen:
            continue
        seen.add(word)
        terms.append(word)
    return terms
