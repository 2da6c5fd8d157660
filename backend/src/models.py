"""Data models for the locality search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Category(str, Enum):
    ALL = "all"
    RESTAURANTS = "restaurants"
    CAFES = "cafes"
    SALONS = "salons"
    SERVICES = "services"
    FITNESS = "fitness"
    HEALTH = "health"
    SHOPPING = "shopping"
    HOTELS = "hotels"
    MUSIC = "music"
    EDUCATION = "education"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Case-insensitive lookup; unknown or empty values map to ``all``."""
        if isinstance(value, Category):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.ALL

    @property
    def label(self) -> str:
        # catalog tables store categories capitalized ("Fitness")
        return self.value[:1].upper() + self.value[1:]


@dataclass
class Recommendation:
    id: str
    name: str
    category: Category = Category.ALL
    tags: list[str] = field(default_factory=list)
    rating: float = 0.0
    address: str = ""
    distance: Optional[str] = None  # free text, e.g. "0.5 miles away"
    image: str = ""
    images: list[str] = field(default_factory=list)
    description: str = ""
    phone: Optional[str] = None
    open_now: Optional[bool] = None
    hours: Optional[str] = None
    price_level: Optional[str] = None  # tier encoded by length, "$$"
    review_count: Optional[int] = None

    def __post_init__(self) -> None:
        self.category = Category.parse(self.category)
        self.rating = max(0.0, min(5.0, float(self.rating)))
        if self.review_count is not None:
            self.review_count = max(0, int(self.review_count))


@dataclass
class Event:
    id: str
    title: str
    date: str = ""
    time: str = ""
    location: str = ""
    description: str = ""
    image: str = ""
    attendees: int = 0

    def __post_init__(self) -> None:
        self.attendees = max(0, int(self.attendees or 0))


@dataclass
class MarketplaceListing:
    id: str
    title: str
    description: str = ""
    price: float = 0.0
    category: str = ""  # free text, listings do not use the place categories
    condition: str = ""
    images: list[str] = field(default_factory=list)
    seller_name: str = ""
    seller_rating: float = 0.0
    seller_phone: Optional[str] = None
    location: str = ""
    tags: list[str] = field(default_factory=list)
    review_count: int = 0
    created_at: str = ""

    def __post_init__(self) -> None:
        self.price = max(0.0, float(self.price or 0))
        self.seller_rating = max(0.0, min(5.0, float(self.seller_rating or 0)))
        self.review_count = max(0, int(self.review_count or 0))


DISTANCE_UNITS = ("km", "mi")


@dataclass
class FilterOptions:
    max_distance: float = 5.0
    min_rating: float = 0.0
    price_level: int = 4
    open_now_only: bool = False
    distance_unit: str = "mi"

    def __post_init__(self) -> None:
        if self.max_distance <= 0:
            raise ValueError("max_distance must be positive")
        if not 0.0 <= self.min_rating <= 5.0:
            raise ValueError("min_rating must be between 0 and 5")
        if self.price_level < 1:
            raise ValueError("price_level must be a positive tier count")
        if self.distance_unit not in DISTANCE_UNITS:
            raise ValueError(f"distance_unit must be one of {DISTANCE_UNITS}")


@dataclass
class ProcessedQuery:
    raw: str
    processed_query: str
    inferred_category: Category = Category.ALL


@dataclass
class Resolution:
    items: List[Recommendation] = field(default_factory=list)
    tier: Optional[str] = None  # None when every tier came back empty
