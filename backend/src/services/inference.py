from __future__ import annotations

from typing import Optional, Tuple

from loguru import logger

from models import Category
from search_tables import SearchTables

# layers reported by infer_with_reason, in precedence order
CALLER = "caller"
DIRECT = "direct"
PATTERN = "pattern"
SECONDARY = "secondary"
DEFAULT = "default"


class CategoryInferenceEngine:
    """Maps normalized query text onto a single category.

    Precedence is strict and layered: an explicit caller category, then the
    direct keyword rules, then the ordered pattern table, then the secondary
    keyword rules, and finally ``all``. The first layer that produces a
    category wins, even when a later layer would match more of the text.
    """

    def __init__(self, tables: Optional[SearchTables] = None) -> None:
        self.tables = tables or SearchTables.default()

    def infer(self, text: str, caller_category: Category | str = Category.ALL) -> Category:
        category, _ = self.infer_with_reason(text, caller_category)
        return category

    def infer_with_reason(
        self, text: str, caller_category: Category | str = Category.ALL
    ) -> Tuple[Category, str]:
        caller = Category.parse(caller_category)
        if caller != Category.ALL:
            return caller, CALLER

        lower = (text or "").lower()

        for rule in self.tables.direct_rules:
            if rule.matches(lower):
                logger.debug("inference direct rule -> {} for {!r}", rule.category.value, lower)
                return rule.category, DIRECT

        for rule in self.tables.pattern_rules:
            if rule.matches(lower):
                logger.debug(
                    "inference pattern {} -> {} for {!r}", rule.pattern.pattern, rule.category.value, lower
                )
                return rule.category, PATTERN

        for rule in self.tables.secondary_rules:
            if rule.matches(lower):
                logger.debug("inference secondary rule -> {} for {!r}", rule.category.value, lower)
                return rule.category, SECONDARY

        return Category.ALL, DEFAULT
