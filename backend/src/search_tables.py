"""Keyword, synonym and pattern tables used to normalize and classify queries.

The tables are plain immutable data. ``SearchTables.default()`` builds the
stock set; ``SearchTables.from_file`` overlays a JSON document on top of it so
deployments (and tests) can substitute their own vocabulary.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple

from models import Category


@dataclass(frozen=True)
class KeywordRule:
    category: Category
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class PatternRule:
    category: Category
    pattern: Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class SpecializedRule:
    """Routes a query straight to a curated dataset when category or keywords line up."""

    dataset: str
    categories: Tuple[Category, ...] = ()
    keywords: Tuple[str, ...] = ()

    def matches(self, text: str, category: Category) -> bool:
        if category in self.categories:
            return True
        return any(keyword in text for keyword in self.keywords)


SYNONYMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("restaurant", ("dining", "eatery", "bistro", "diner", "fusion", "seafood", "spice garden")),
    ("cafe", ("coffee shop", "café", "espresso bar")),
    ("near", ("around", "close to", "nearby", "in the vicinity of")),
    ("salon", ("hair salon", "beauty parlor", "stylist")),
    ("best", ("top", "highly rated", "excellent", "premium")),
)

VENUE_KEYWORDS: Tuple[str, ...] = (
    "cafe",
    "café",
    "restaurant",
    "salon",
    "plumber",
    "yoga",
    "biryani",
    "fusion",
    "ocean",
    "seafood",
    "spice",
    "garden",
)

LOCALITY_MARKERS: Tuple[str, ...] = ("near", "in ")

LOCALITY_SUFFIX = " near me"

DIRECT_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(Category.FITNESS, ("yoga",)),
    KeywordRule(Category.RESTAURANTS, ("restaurant", "food", "cuisine", "fusion", "seafood")),
    KeywordRule(Category.CAFES, ("café", "cafe", "coffee")),
)

PATTERN_RULES: Tuple[PatternRule, ...] = (
    PatternRule(Category.FITNESS, re.compile(r"yoga|meditation|fitness|gym")),
    PatternRule(
        Category.RESTAURANTS,
        re.compile(r"restaurant|food|dinner|lunch|eat|cuisine|fusion|seafood|spice|garden|ocean"),
    ),
    PatternRule(Category.CAFES, re.compile(r"cafe|coffee|bakery")),
    PatternRule(Category.SALONS, re.compile(r"salon|haircut|barber|spa")),
    PatternRule(Category.HEALTH, re.compile(r"doctor|clinic|hospital|dentist")),
    PatternRule(Category.SHOPPING, re.compile(r"shop|store|market|mall")),
    PatternRule(Category.HOTELS, re.compile(r"hotel|stay|accommodation")),
    PatternRule(Category.MUSIC, re.compile(r"flute|guitar|piano|violin|tabla|music|singing")),
    PatternRule(Category.EDUCATION, re.compile(r"tutor|tuition|coaching")),
)

SECONDARY_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(Category.SALONS, ("salon", "haircut")),
    KeywordRule(Category.SERVICES, ("plumber",)),
    KeywordRule(
        Category.RESTAURANTS,
        (
            "biryani",
            "food",
            "dinner",
            "lunch",
            "breakfast",
            "spice",
            "garden",
            "fusion",
            "ocean",
            "seafood",
        ),
    ),
)

SPECIALIZED_RULES: Tuple[SpecializedRule, ...] = (
    SpecializedRule(dataset="yoga_fitness", categories=(Category.FITNESS,), keywords=("yoga",)),
)

CATEGORY_DATASETS: Dict[Category, str] = {
    Category.FITNESS: "yoga_fitness",
    Category.MUSIC: "music_teachers",
}

EVENT_FOCUS_KEYWORDS: Tuple[str, ...] = ("yoga",)


@dataclass(frozen=True)
class SearchTables:
    synonyms: Tuple[Tuple[str, Tuple[str, ...]], ...] = SYNONYMS
    venue_keywords: Tuple[str, ...] = VENUE_KEYWORDS
    locality_markers: Tuple[str, ...] = LOCALITY_MARKERS
    locality_suffix: str = LOCALITY_SUFFIX
    direct_rules: Tuple[KeywordRule, ...] = DIRECT_RULES
    pattern_rules: Tuple[PatternRule, ...] = PATTERN_RULES
    secondary_rules: Tuple[KeywordRule, ...] = SECONDARY_RULES
    specialized_rules: Tuple[SpecializedRule, ...] = SPECIALIZED_RULES
    category_datasets: Tuple[Tuple[Category, str], ...] = tuple(CATEGORY_DATASETS.items())
    event_focus_keywords: Tuple[str, ...] = EVENT_FOCUS_KEYWORDS

    @classmethod
    def default(cls) -> "SearchTables":
        return cls()

    def dataset_for(self, category: Category) -> Optional[str]:
        for cat, dataset in self.category_datasets:
            if cat == category:
                return dataset
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchTables":
        """Build tables from a JSON-shaped mapping; absent keys keep their defaults."""
        kwargs: dict[str, Any] = {}
        if "synonyms" in data:
            kwargs["synonyms"] = tuple(
                (str(canonical).lower(), tuple(str(s).lower() for s in synonyms))
                for canonical, synonyms in _pairs(data["synonyms"])
            )
        for key in ("venue_keywords", "locality_markers", "event_focus_keywords"):
            if key in data:
                kwargs[key] = tuple(str(x).lower() for x in data[key])
        if "locality_suffix" in data:
            kwargs["locality_suffix"] = str(data["locality_suffix"])
        for key in ("direct_rules", "secondary_rules"):
            if key in data:
                kwargs[key] = tuple(
                    KeywordRule(_category(item.get("category")), tuple(str(k).lower() for k in item.get("keywords", [])))
                    for item in data[key]
                )
        if "pattern_rules" in data:
            rules: list[PatternRule] = []
            for item in data["pattern_rules"]:
                try:
                    pattern = re.compile(str(item.get("pattern") or ""))
                except re.error as exc:
                    raise ValueError(f"invalid pattern {item.get('pattern')!r}: {exc}")
                rules.append(PatternRule(_category(item.get("category")), pattern))
            kwargs["pattern_rules"] = tuple(rules)
        if "specialized_rules" in data:
            kwargs["specialized_rules"] = tuple(
                SpecializedRule(
                    dataset=str(item["dataset"]),
                    categories=tuple(_category(c) for c in item.get("categories", [])),
                    keywords=tuple(str(k).lower() for k in item.get("keywords", [])),
                )
                for item in data["specialized_rules"]
            )
        if "category_datasets" in data:
            kwargs["category_datasets"] = tuple(
                (_category(cat), str(dataset)) for cat, dataset in _pairs(data["category_datasets"])
            )
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> "SearchTables":
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"search tables file {path} could not be read: {exc}")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"search tables file {path} is not valid JSON: {exc}")
        if not isinstance(data, dict):
            raise ValueError(f"search tables file {path} must contain an object")
        return cls.from_dict(data)


def load_tables(path: Optional[str] = None) -> SearchTables:
    if not path:
        return SearchTables.default()
    return SearchTables.from_file(path)


def _category(value: Any) -> Category:
    text = str(value or "").strip().lower()
    if text not in {c.value for c in Category}:
        raise ValueError(f"unknown category {value!r}")
    return Category(text)


def _pairs(value: Any) -> list[tuple[Any, Any]]:
    # JSON objects keep insertion order, which is the replacement order
    if isinstance(value, Mapping):
        return list(value.items())
    return [tuple(pair) for pair in value]
