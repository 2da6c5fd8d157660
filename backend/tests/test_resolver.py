from __future__ import annotations

import asyncio
import time
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from config import Configuration
from models import Category, Event, MarketplaceListing, Recommendation
from seed_catalog import SeedCatalog
from services.catalog import CatalogClient, CatalogError
from services.resolver import (
    CURATED,
    DIRECTORY,
    GENERIC,
    PRIMARY,
    SPECIALIZED,
    DataSourceResolver,
    EventResolver,
    ListingResolver,
    PipelineExhausted,
    match_corpus,
)


class FakeCatalog:
    def __init__(
        self,
        places: Optional[List[Recommendation]] = None,
        services: Optional[List[Recommendation]] = None,
        events: Optional[List[Event]] = None,
        top: Optional[List[Recommendation]] = None,
        listings: Optional[List[MarketplaceListing]] = None,
        fail: tuple = (),
        delay: float = 0.0,
    ) -> None:
        self.places = places or []
        self.services = services or []
        self.events = events or []
        self.top = top or []
        self.listings = listings or []
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple] = []

    def _maybe_fail(self, name: str) -> None:
        if self.delay:
            time.sleep(self.delay)
        if name in self.fail:
            raise CatalogError(f"{name} down")

    def search_places(self, query, category):
        self.calls.append(("places", query, category))
        self._maybe_fail("places")
        return list(self.places)

    def search_services(self, query, category):
        self.calls.append(("services", query, category))
        self._maybe_fail("services")
        return list(self.services)

    def search_events(self, query):
        self.calls.append(("events", query))
        self._maybe_fail("events")
        return list(self.events)

    def search_listings(self, query):
        self.calls.append(("listings", query))
        self._maybe_fail("listings")
        return list(self.listings)

    def top_rated(self, limit=6):
        self.calls.append(("top", limit))
        self._maybe_fail("top")
        return list(self.top)


class BrokenSeed(SeedCatalog):
    def recommendations(self) -> List[Recommendation]:
        raise RuntimeError("corpus unavailable")


def _ids(items) -> list[str]:
    return [i.id for i in items]


def test_primary_hit_short_circuits_later_tiers() -> None:
    catalog = FakeCatalog(places=[Recommendation(id="r1", name="Remote Yoga")])
    resolver = DataSourceResolver(catalog)

    resolution = asyncio.run(resolver.resolve_with_tier("yoga near me", Category.FITNESS))

    assert resolution.tier == PRIMARY
    assert _ids(resolution.items) == ["r1"]
    # locality suffix never reaches the remote filter; directory never called
    assert catalog.calls == [("places", "yoga", Category.FITNESS)]


def test_primary_failure_falls_through_to_specialized() -> None:
    catalog = FakeCatalog(fail=("places",))
    resolver = DataSourceResolver(catalog)

    resolution = asyncio.run(resolver.resolve_with_tier("yoga near me", Category.ALL))

    assert resolution.tier == SPECIALIZED
    assert _ids(resolution.items) == ["yoga1", "yoga2", "yoga3"]


def test_directory_tier_scoped_by_category() -> None:
    catalog = FakeCatalog(services=[Recommendation(id="s1", name="Quick Plumbing", category="services")])
    resolver = DataSourceResolver(catalog)

    resolution = asyncio.run(resolver.resolve_with_tier("plumber near me", Category.SERVICES))

    assert resolution.tier == DIRECTORY
    assert _ids(resolution.items) == ["s1"]
    assert catalog.calls[-1] == ("services", "plumber", Category.SERVICES)


def test_directory_skipped_for_all_category() -> None:
    catalog = FakeCatalog()
    resolver = DataSourceResolver(catalog)

    asyncio.run(resolver.resolve_with_tier("plumber near me", Category.ALL))

    assert [c[0] for c in catalog.calls] == ["places"]


def test_curated_category_subset_without_catalog() -> None:
    resolution = asyncio.run(DataSourceResolver(None).resolve_with_tier("flute classes", Category.MUSIC))
    assert resolution.tier == CURATED
    assert _ids(resolution.items) == ["8", "9", "10"]


def test_generic_corpus_match() -> None:
    resolution = asyncio.run(DataSourceResolver(None).resolve_with_tier("salon near me", Category.SALONS))
    assert resolution.tier == GENERIC
    assert _ids(resolution.items) == ["1", "2", "3"]


def test_exhaustion_returns_empty_not_error() -> None:
    catalog = FakeCatalog(fail=("places",))
    resolution = asyncio.run(DataSourceResolver(catalog).resolve_with_tier("zzzz", Category.ALL))
    assert resolution.tier is None
    assert resolution.items == []


def test_every_tier_failing_raises() -> None:
    catalog = FakeCatalog(fail=("places", "services"))
    resolver = DataSourceResolver(catalog, BrokenSeed.default())

    with pytest.raises(PipelineExhausted):
        asyncio.run(resolver.resolve("haircut", Category.SALONS))


def test_slow_source_treated_as_unavailable() -> None:
    catalog = FakeCatalog(places=[Recommendation(id="late", name="Late")], delay=0.2)
    resolver = DataSourceResolver(catalog, timeout_sec=0.05)

    resolution = asyncio.run(resolver.resolve_with_tier("yoga", Category.ALL))

    assert resolution.tier == SPECIALIZED


def test_default_results_offline_top_rated() -> None:
    items = asyncio.run(DataSourceResolver(None).default_results(6))
    assert _ids(items) == ["6", "8", "1", "10", "4", "7"]


def test_default_results_prefers_catalog_and_falls_back() -> None:
    remote = FakeCatalog(top=[Recommendation(id="t1", name="Top", rating=5.0)])
    assert _ids(asyncio.run(DataSourceResolver(remote).default_results(6))) == ["t1"]

    broken = FakeCatalog(fail=("top",))
    assert len(asyncio.run(DataSourceResolver(broken).default_results(6))) == 6


def test_match_corpus_tag_terms() -> None:
    items = SeedCatalog.default().recommendations()
    assert _ids(match_corpus(items, "carnatic", Category.ALL)) == ["10"]
    assert len(match_corpus(items, "", Category.MUSIC)) == 3


def test_focused_events_for_yoga() -> None:
    events = asyncio.run(EventResolver(None).resolve_events("yoga near me"))
    assert _ids(events) == ["event3", "event4"]


def test_generic_events_text_match() -> None:
    events = asyncio.run(EventResolver(None).resolve_events("food near me"))
    assert _ids(events) == ["event1", "event5", "event6"]


def test_remote_events_win_and_failures_fall_through() -> None:
    remote = FakeCatalog(events=[Event(id="e1", title="Remote Jam")])
    assert _ids(asyncio.run(EventResolver(remote).resolve_events("jam"))) == ["e1"]

    broken = FakeCatalog(fail=("events",))
    assert _ids(asyncio.run(EventResolver(broken).resolve_events("yoga"))) == ["event3", "event4"]


def _unfiltered_table_session(rows: list) -> MagicMock:
    # answers like PostgREST: no text filter means the whole table comes back
    def get(url, headers=None, params=None, timeout=None):
        resp = MagicMock()
        resp.status_code = 200
        resp.ok = True
        resp.json.return_value = [] if "or" in (params or {}) else rows
        return resp

    session = MagicMock()
    session.get.side_effect = get
    return session


def test_short_query_does_not_match_whole_remote_table() -> None:
    rows = [{"id": "u1", "name": "Unrelated Bakery"}, {"id": "u2", "name": "Random Gym"}]
    session = _unfiltered_table_session(rows)
    client = CatalogClient(Configuration(catalog_base_url="https://db.example.co"), session=session)

    resolution = asyncio.run(DataSourceResolver(client).resolve_with_tier("dj", Category.ALL))
    events = asyncio.run(EventResolver(client).resolve_events("dj"))

    assert resolution.tier != PRIMARY
    assert resolution.items == []
    assert events == []
    assert session.get.call_count == 2
    assert all("or" in call.kwargs["params"] for call in session.get.call_args_list)


def test_static_listings_ranked_by_relevance() -> None:
    listings = asyncio.run(ListingResolver(None).resolve_listings("guitar near me"))
    assert _ids(listings) == ["listing1"]


def test_empty_listing_query_returns_whole_corpus() -> None:
    listings = asyncio.run(ListingResolver(None).resolve_listings(""))
    assert _ids(listings) == ["listing1", "listing2", "listing3", "listing4", "listing5"]


def test_short_listing_query_does_not_return_whole_corpus() -> None:
    assert asyncio.run(ListingResolver(None).resolve_listings("dj")) == []


def test_remote_listings_win_and_failures_fall_through() -> None:
    remote = FakeCatalog(listings=[MarketplaceListing(id="m1", title="Used Guitar")])
    assert _ids(asyncio.run(ListingResolver(remote).resolve_listings("guitar"))) == ["m1"]
    assert remote.calls == [("listings", "guitar")]

    broken = FakeCatalog(fail=("listings",))
    assert _ids(asyncio.run(ListingResolver(broken).resolve_listings("guitar"))) == ["listing1"]


def test_remote_listings_below_relevance_are_dropped() -> None:
    remote = FakeCatalog(listings=[MarketplaceListing(id="m1", title="Sofa", description="Three seater")])
    # nothing relevant remotely, so the static corpus answers
    assert _ids(asyncio.run(ListingResolver(remote).resolve_listings("bansuri"))) == ["listing2"]
