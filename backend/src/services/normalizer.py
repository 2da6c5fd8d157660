from __future__ import annotations

from typing import Optional

from search_tables import SearchTables
from utils import collapse_whitespace


class TextNormalizer:
    """Rewrites raw query text into the canonical vocabulary of the search tables.

    Synonyms are replaced as literal substrings in table order, each pass
    working on the output of the previous one. Replacement is not
    word-boundary aware ("top" inside "laptop" is rewritten too); this matches
    how the tables have always been applied and is kept as-is.
    """

    def __init__(self, tables: Optional[SearchTables] = None) -> None:
        self.tables = tables or SearchTables.default()

    def normalize(self, raw: str) -> str:
        text = collapse_whitespace((raw or "").lower())
        for canonical, synonyms in self.tables.synonyms:
            for synonym in synonyms:
                if synonym and synonym in text:
                    text = text.replace(synonym, canonical)
        if self._needs_locality(text):
            text = f"{text}{self.tables.locality_suffix}"
        return text

    def strip_locality(self, text: str) -> str:
        suffix = self.tables.locality_suffix
        if suffix and text.endswith(suffix):
            return text[: -len(suffix)].strip()
        return text.strip()

    def _needs_locality(self, text: str) -> bool:
        if any(marker in text for marker in self.tables.locality_markers):
            return False
        return any(keyword in text for keyword in self.tables.venue_keywords)
