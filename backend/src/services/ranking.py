from __future__ import annotations

from typing import List, Sequence

from models import Recommendation
from utils import collapse_whitespace


def extract_query_tags(query: str) -> List[str]:
    """Candidate tags derived from a query, from broadest to narrowest.

    The full query, single words longer than two characters, adjacent-word
    bigrams and, for queries of three or more words, the query trimmed by one
    word at either end.
    """
    normalized = collapse_whitespace((query or "").lower())
    if not normalized:
        return []
    words = normalized.split(" ")
    candidates: list[str] = [normalized]
    candidates.extend(w for w in words if len(w) > 2)
    for first, second in zip(words, words[1:]):
        bigram = f"{first} {second}"
        if len(bigram) > 3:
            candidates.append(bigram)
    if len(words) >= 3:
        candidates.append(" ".join(words[1:]))
        candidates.append(" ".join(words[:-1]))

    seen: set[str] = set()
    unique: list[str] = []
    for tag in candidates:
        if tag not in seen:
            seen.add(tag)
            unique.append(tag)
    return unique


def tag_matches(item: Recommendation, candidates: Sequence[str]) -> bool:
    for tag in item.tags:
        lower = tag.lower()
        if any(candidate in lower for candidate in candidates):
            return True
    return False


def rank_by_tag_match(items: Sequence[Recommendation], query: str) -> List[Recommendation]:
    """Move items whose tags match the query ahead of the rest; otherwise keep order."""
    candidates = extract_query_tags(query)
    if not candidates:
        return list(items)
    # sorted() is stable, so ties keep their resolved order
    return sorted(items, key=lambda item: 0 if tag_matches(item, candidates) else 1)
