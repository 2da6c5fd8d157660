from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from config import Configuration
from models import Category, Event, MarketplaceListing, ProcessedQuery, Recommendation
from search_tables import SearchTables, load_tables
from seed_catalog import SeedCatalog
from services.catalog import CatalogClient
from services.inference import CategoryInferenceEngine
from services.normalizer import TextNormalizer
from services.ranking import rank_by_tag_match
from services.resolver import DataSourceResolver, EventResolver, ListingResolver


@dataclass
class SearchOutcome:
    query: ProcessedQuery
    recommendations: List[Recommendation] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    listings: List[MarketplaceListing] = field(default_factory=list)
    tier: Optional[str] = None


class SearchPipeline:
    def __init__(
        self,
        normalizer: TextNormalizer,
        inference: CategoryInferenceEngine,
        resolver: DataSourceResolver,
        event_resolver: EventResolver,
        listing_resolver: ListingResolver,
        *,
        default_limit: int = 6,
        tag_boost: bool = True,
    ) -> None:
        self.normalizer = normalizer
        self.inference = inference
        self.resolver = resolver
        self.event_resolver = event_resolver
        self.listing_resolver = listing_resolver
        self.default_limit = default_limit
        self.tag_boost = tag_boost

    def process(self, raw: str, category: Category | str = Category.ALL) -> ProcessedQuery:
        """Normalize the text and infer its category; the caller decides what to do with both."""
        processed = self.normalizer.normalize(raw)
        inferred = self.inference.infer(processed, category)
        logger.debug("processed {!r} -> {!r} category={}", raw, processed, inferred.value)
        return ProcessedQuery(raw=raw, processed_query=processed, inferred_category=inferred)

    async def resolve(self, processed: ProcessedQuery) -> SearchOutcome:
        """Run all three resolvers concurrently; any of them raising fails the whole outcome.

        Listings are matched on the raw text: synonym rewriting targets the
        place vocabulary and would corrupt item words ("laptop").
        """
        resolution, events, listings = await asyncio.gather(
            self.resolver.resolve_with_tier(processed.processed_query, processed.inferred_category),
            self.event_resolver.resolve_events(processed.processed_query),
            self.listing_resolver.resolve_listings(processed.raw),
        )
        items = resolution.items
        if self.tag_boost and items:
            items = rank_by_tag_match(items, self.normalizer.strip_locality(processed.processed_query))
        return SearchOutcome(
            query=processed,
            recommendations=items,
            events=events,
            listings=listings,
            tier=resolution.tier,
        )

    async def search(self, raw: str, category: Category | str = Category.ALL) -> SearchOutcome:
        return await self.resolve(self.process(raw, category))

    async def default_results(self) -> List[Recommendation]:
        return await self.resolver.default_results(self.default_limit)


def build_pipeline(
    cfg: Configuration,
    *,
    catalog: Optional[CatalogClient] = None,
    seed: Optional[SeedCatalog] = None,
    tables: Optional[SearchTables] = None,
) -> SearchPipeline:
    tables = tables or load_tables(cfg.search_tables_path)
    seed = seed if seed is not None else SeedCatalog.default()
    if catalog is None and cfg.catalog_enabled:
        catalog = CatalogClient(cfg)
    if catalog is None:
        logger.info("catalog not configured; resolving from in-memory tiers only")

    normalizer = TextNormalizer(tables)
    return SearchPipeline(
        normalizer,
        CategoryInferenceEngine(tables),
        DataSourceResolver(
            catalog,
            seed,
            tables,
            normalizer,
            timeout_sec=cfg.source_timeout_sec,
            generic_delay_sec=cfg.generic_tier_delay_sec,
        ),
        EventResolver(catalog, seed, tables, normalizer, timeout_sec=cfg.source_timeout_sec),
        ListingResolver(catalog, seed, tables, normalizer, timeout_sec=cfg.source_timeout_sec),
        default_limit=cfg.default_results_limit,
        tag_boost=cfg.tag_boost_enabled,
    )
