from __future__ import annotations

from typing import List, Sequence, Tuple

from models import MarketplaceListing

STOPWORDS = frozenset(
    {"in", "at", "near", "around", "by", "the", "a", "an", "for", "with", "to", "from", "and", "or"}
)

MIN_WORD_LEN = 3
MIN_RELEVANCE = 0.2

# per-field bonuses, scaled by the share of query words matching in that field
TITLE_BONUS = 0.5
LOCATION_BONUS = 0.4
SELLER_BONUS = 0.3
TAG_BONUS = 0.5

ALL_WORDS_BONUS = 0.5
CONSECUTIVE_BONUS = 0.4
CROSS_FIELD_BONUS = 0.6


def query_words(query: str) -> List[str]:
    """Listing search words: commas split words, connectors and short words dropped."""
    words = (query or "").lower().replace(",", " ").split()
    return [w for w in words if w not in STOPWORDS and len(w) >= MIN_WORD_LEN]


def _listing_text(listing: MarketplaceListing) -> str:
    parts = (
        listing.title,
        listing.description,
        listing.category,
        listing.location,
        listing.seller_name,
        " ".join(listing.tags),
    )
    return " ".join(parts).lower()


def _share(words: Sequence[str], haystack: str) -> float:
    return sum(1 for w in words if w in haystack) / len(words)


def _crosses_fields(listing: MarketplaceListing, words: Sequence[str]) -> bool:
    title = set(listing.title.lower().split())
    location = set(listing.location.lower().split())
    description = set(listing.description.lower().split())
    tags = {part for tag in listing.tags for part in tag.lower().split()}

    in_title = any(w in title for w in words)
    in_place_or_desc = any(w in location or w in description for w in words)
    in_tags = any(w in tags for w in words)
    in_location = any(w in location for w in words)
    return (in_title and (in_place_or_desc or in_tags)) or (in_tags and in_location)


def listing_relevance(listing: MarketplaceListing, words: Sequence[str]) -> float:
    """Score a listing against query words.

    The base is the share of words found anywhere in the listing. Title,
    location, seller and tag hits add weighted bonuses, as do matching every
    word, each adjacent word pair appearing together, and (for two or more
    words) hits spread across separate fields.
    """
    if not words:
        return 0.0
    text = _listing_text(listing)
    matched = sum(1 for w in words if w in text)

    score = matched / len(words)
    score += _share(words, listing.title.lower()) * TITLE_BONUS
    score += _share(words, listing.location.lower()) * LOCATION_BONUS
    score += _share(words, listing.seller_name.lower()) * SELLER_BONUS
    tag_hits = sum(1 for w in words if any(w in tag.lower() for tag in listing.tags))
    score += tag_hits / len(words) * TAG_BONUS

    if matched == len(words):
        score += ALL_WORDS_BONUS
    for first, second in zip(words, words[1:]):
        if f"{first} {second}" in text:
            score += CONSECUTIVE_BONUS
    if len(words) >= 2 and _crosses_fields(listing, words):
        score += CROSS_FIELD_BONUS
    return score


def score_listings(listings: Sequence[MarketplaceListing], query: str) -> List[Tuple[MarketplaceListing, float]]:
    words = query_words(query)
    return [(listing, listing_relevance(listing, words)) for listing in listings]


def rank_listings(listings: Sequence[MarketplaceListing], query: str) -> List[MarketplaceListing]:
    """Keep listings scoring above MIN_RELEVANCE, best first; ties keep input order.

    An empty query leaves the listings untouched. A query made only of short
    words or connectors keeps the listings containing it as a whole.
    """
    phrase = " ".join((query or "").lower().split())
    if not phrase:
        return list(listings)
    if not query_words(phrase):
        return [listing for listing in listings if phrase in _listing_text(listing)]
    scored = [(listing, score) for listing, score in score_listings(listings, query) if score > MIN_RELEVANCE]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [listing for listing, _ in scored]
