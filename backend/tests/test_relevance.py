from __future__ import annotations

from models import MarketplaceListing
from seed_catalog import SeedCatalog
from services.relevance import MIN_RELEVANCE, listing_relevance, query_words, rank_listings


def _listings():
    return SeedCatalog.default().listing_list()


def _ids(items) -> list[str]:
    return [i.id for i in items]


def test_query_words_drop_connectors_and_short_words() -> None:
    assert query_words("guitar near Indiranagar, cheap") == ["guitar", "indiranagar", "cheap"]
    assert query_words("a dj in the park") == ["park"]


def test_best_match_first() -> None:
    assert _ids(rank_listings(_listings(), "acoustic guitar"))[0] == "listing1"
    assert _ids(rank_listings(_listings(), "yoga mat koramangala")) == ["listing3"]


def test_unrelated_query_keeps_nothing() -> None:
    assert rank_listings(_listings(), "xyzzy") == []


def test_empty_query_keeps_order() -> None:
    listings = _listings()
    assert _ids(rank_listings(listings, "  ")) == _ids(listings)


def test_short_words_match_whole_phrase() -> None:
    controller = MarketplaceListing(id="dj1", title="DJ Controller")
    assert _ids(rank_listings(_listings() + [controller], "dj")) == ["dj1"]


def test_adjacent_words_score_higher() -> None:
    guitar = _listings()[0]
    assert listing_relevance(guitar, ["acoustic", "guitar"]) > listing_relevance(guitar, ["guitar", "acoustic"])


def test_hits_across_fields_score_higher() -> None:
    description_only = MarketplaceListing(id="a", title="Stand", description="guitar amp")
    title_and_tags = MarketplaceListing(id="b", title="Guitar", tags=["Amp"])
    words = ["guitar", "amp"]
    assert listing_relevance(title_and_tags, words) > listing_relevance(description_only, words)


def test_threshold_is_strict() -> None:
    rug = MarketplaceListing(id="r", title="Misc", description="a rug")
    words = ["sofa", "table", "lamp", "chair", "rug"]
    assert listing_relevance(rug, words) == MIN_RELEVANCE
    assert rank_listings([rug], " ".join(words)) == []
