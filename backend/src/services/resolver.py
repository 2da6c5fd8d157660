from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from loguru import logger

from models import Category, Event, MarketplaceListing, Recommendation, Resolution
from search_tables import SearchTables
from seed_catalog import SeedCatalog
from services.catalog import CatalogClient, CatalogError
from services.normalizer import TextNormalizer
from services.relevance import rank_listings
from utils import search_terms

T = TypeVar("T")

# Tier callables return None when they do not apply to the query (skipped),
# an empty list when they ran and found nothing.
Tier = Tuple[str, Callable[[], Awaitable[Optional[List[Any]]]]]

PRIMARY = "primary"
SPECIALIZED = "specialized"
DIRECTORY = "directory"
CURATED = "curated"
GENERIC = "generic"

REMOTE_EVENTS = "remote_events"
FOCUSED_EVENTS = "focused_events"
GENERIC_EVENTS = "generic_events"

REMOTE_LISTINGS = "remote_listings"
STATIC_LISTINGS = "static_listings"


class PipelineExhausted(RuntimeError):
    pass


def match_corpus(items: Sequence[Recommendation], query: str, category: Category) -> List[Recommendation]:
    """Generic text/category match over an in-memory corpus, preserving corpus order."""
    text = (query or "").strip().lower()
    terms = search_terms(text)
    matched: list[Recommendation] = []
    for item in items:
        if category != Category.ALL and item.category != category:
            continue
        if not text:
            matched.append(item)
            continue
        name_match = text in item.name.lower()
        desc_match = text in item.description.lower()
        tag_match = any(term in tag.lower() for tag in item.tags for term in terms)
        if name_match or desc_match or tag_match:
            matched.append(item)
    return matched


def match_events(events: Sequence[Event], query: str) -> List[Event]:
    text = (query or "").strip().lower()
    return [
        e
        for e in events
        if text in e.title.lower() or text in e.description.lower() or text in e.location.lower()
    ]


class _TieredResolver:
    def __init__(
        self,
        catalog: Optional[CatalogClient],
        seed: Optional[SeedCatalog] = None,
        tables: Optional[SearchTables] = None,
        normalizer: Optional[TextNormalizer] = None,
        *,
        timeout_sec: float = 12.0,
    ) -> None:
        self.catalog = catalog
        self.seed = seed if seed is not None else SeedCatalog.default()
        self.tables = tables or SearchTables.default()
        self.normalizer = normalizer or TextNormalizer(self.tables)
        self.timeout_sec = timeout_sec

    async def _remote(self, fn: Callable[..., T], *args: Any) -> T:
        # requests is blocking; run it off-loop and bound it so a slow source reads as empty
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.timeout_sec)

    async def _run_tiers(self, tiers: Sequence[Tier], label: str) -> Tuple[Optional[str], List[Any]]:
        attempted = 0
        failed = 0
        for name, tier in tiers:
            try:
                items = await tier()
            except (CatalogError, asyncio.TimeoutError) as exc:
                attempted += 1
                failed += 1
                logger.warning("{} tier {} unavailable: {}", label, name, str(exc) or type(exc).__name__)
                continue
            except Exception:
                attempted += 1
                failed += 1
                logger.exception("{} tier {} failed", label, name)
                continue
            if items is None:
                continue
            attempted += 1
            if items:
                logger.debug("{} resolved by tier {} with {} items", label, name, len(items))
                return name, list(items)
        if attempted and failed == attempted:
            raise PipelineExhausted(f"all {label} tiers failed")
        logger.debug("{} tiers exhausted without results", label)
        return None, []


class DataSourceResolver(_TieredResolver):
    """Resolves a processed query into recommendations through ordered fallback tiers.

    Tiers run in a fixed order and the first one that yields at least one item
    wins; results from different tiers are never merged:

    1. primary remote places search
    2. specialized curated dataset (e.g. fitness / "yoga")
    3. remote service-provider directory, scoped by category
    4. the category's dedicated curated subset
    5. generic text match over the mock corpus
    """

    def __init__(
        self,
        catalog: Optional[CatalogClient],
        seed: Optional[SeedCatalog] = None,
        tables: Optional[SearchTables] = None,
        normalizer: Optional[TextNormalizer] = None,
        *,
        timeout_sec: float = 12.0,
        generic_delay_sec: float = 0.0,
    ) -> None:
        super().__init__(catalog, seed, tables, normalizer, timeout_sec=timeout_sec)
        self.generic_delay_sec = generic_delay_sec

    async def resolve(self, query: str, category: Category | str = Category.ALL) -> List[Recommendation]:
        resolution = await self.resolve_with_tier(query, category)
        return resolution.items

    async def resolve_with_tier(self, query: str, category: Category | str = Category.ALL) -> Resolution:
        cat = Category.parse(category)
        text = (query or "").lower()
        tiers: list[Tier] = [
            (PRIMARY, lambda: self._primary(text, cat)),
            (SPECIALIZED, lambda: self._specialized(text, cat)),
            (DIRECTORY, lambda: self._directory(text, cat)),
            (CURATED, lambda: self._curated(cat)),
            (GENERIC, lambda: self._generic(text, cat)),
        ]
        tier, items = await self._run_tiers(tiers, "recommendations")
        return Resolution(items=items, tier=tier)

    async def default_results(self, limit: int = 6) -> List[Recommendation]:
        """Top-rated items with no text or category filter, used for the empty query."""
        if self.catalog is not None:
            try:
                items = await self._remote(self.catalog.top_rated, limit)
            except (CatalogError, asyncio.TimeoutError) as exc:
                logger.warning("default results unavailable from catalog: {}", str(exc) or type(exc).__name__)
            else:
                if items:
                    return list(items)[:limit]
        corpus = self.seed.recommendations()
        return sorted(corpus, key=lambda item: item.rating, reverse=True)[:limit]

    async def _primary(self, text: str, category: Category) -> Optional[List[Recommendation]]:
        if self.catalog is None:
            return None
        return await self._remote(self.catalog.search_places, self.normalizer.strip_locality(text), category)

    async def _specialized(self, text: str, category: Category) -> Optional[List[Recommendation]]:
        for rule in self.tables.specialized_rules:
            if rule.matches(text, category):
                return self.seed.dataset(rule.dataset)
        return None

    async def _directory(self, text: str, category: Category) -> Optional[List[Recommendation]]:
        if self.catalog is None or category == Category.ALL:
            return None
        return await self._remote(self.catalog.search_services, self.normalizer.strip_locality(text), category)

    async def _curated(self, category: Category) -> Optional[List[Recommendation]]:
        dataset = self.tables.dataset_for(category)
        if dataset is None:
            return None
        return self.seed.dataset(dataset)

    async def _generic(self, text: str, category: Category) -> List[Recommendation]:
        if self.generic_delay_sec > 0:
            await asyncio.sleep(self.generic_delay_sec)
        return match_corpus(self.seed.recommendations(), self.normalizer.strip_locality(text), category)


class EventResolver(_TieredResolver):
    """Resolves events independently of recommendations: remote, focus keywords, generic."""

    async def resolve_events(self, query: str) -> List[Event]:
        text = (query or "").lower()
        tiers: list[Tier] = [
            (REMOTE_EVENTS, lambda: self._remote_events(text)),
            (FOCUSED_EVENTS, lambda: self._focused(text)),
            (GENERIC_EVENTS, lambda: self._generic(text)),
        ]
        _, items = await self._run_tiers(tiers, "events")
        return items

    async def _remote_events(self, text: str) -> Optional[List[Event]]:
        if self.catalog is None:
            return None
        return await self._remote(self.catalog.search_events, self.normalizer.strip_locality(text))

    async def _focused(self, text: str) -> Optional[List[Event]]:
        hits: Optional[List[Event]] = None
        for keyword in self.tables.event_focus_keywords:
            if keyword not in text:
                continue
            hits = [
                e
                for e in self.seed.event_list()
                if keyword in e.title.lower() or keyword in e.description.lower()
            ]
            if hits:
                return hits
        return hits

    async def _generic(self, text: str) -> List[Event]:
        return match_events(self.seed.event_list(), self.normalizer.strip_locality(text))


class ListingResolver(_TieredResolver):
    """Marketplace listings: remote catalog, then the static listing corpus, both ranked by relevance."""

    async def resolve_listings(self, query: str) -> List[MarketplaceListing]:
        text = self.normalizer.strip_locality((query or "").lower())
        tiers: list[Tier] = [
            (REMOTE_LISTINGS, lambda: self._remote_listings(text)),
            (STATIC_LISTINGS, lambda: self._static(text)),
        ]
        _, items = await self._run_tiers(tiers, "listings")
        return items

    async def _remote_listings(self, text: str) -> Optional[List[MarketplaceListing]]:
        if self.catalog is None:
            return None
        items = await self._remote(self.catalog.search_listings, text)
        return rank_listings(items, text)

    async def _static(self, text: str) -> List[MarketplaceListing]:
        return rank_listings(self.seed.listing_list(), text)
