from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import requests

from config import Configuration
from models import Category, Event, MarketplaceListing, Recommendation
from utils import search_phrase, search_terms

PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1501339847302-ac426a4a7cbb"
DEFAULT_RATING = 4.5
DEFAULT_HOURS = "Until 8:00 PM"
DEFAULT_PRICE_LEVEL = "$$"
PLACEHOLDER_DISTANCE = "0.5 miles away"


class CatalogError(RuntimeError):
    pass


@dataclass
class _RetryPolicy:
    retries: int = 0
    base_delay: float = 0.5


def or_filter(
    fields: Iterable[str],
    terms: Iterable[str],
    *,
    tags_field: Optional[str] = None,
    phrase: Optional[str] = None,
) -> Optional[str]:
    """Build a PostgREST ``or=(...)`` expression.

    The whole ``phrase`` is matched as one substring in every field, then each
    term on its own; tags must contain a term exactly.
    """
    fields = tuple(fields)
    clauses: list[str] = []
    if phrase:
        clauses.extend(f"{name}.ilike.*{phrase}*" for name in fields)
    for term in terms:
        clauses.extend(f"{name}.ilike.*{term}*" for name in fields)
        if tags_field:
            clauses.append(f'{tags_field}.cs.{{"{term}"}}')
    if not clauses:
        return None
    return "(" + ",".join(dict.fromkeys(clauses)) + ")"


def price_tier(range_max: Any) -> str:
    if not isinstance(range_max, (int, float)) or isinstance(range_max, bool):
        return DEFAULT_PRICE_LEVEL
    if range_max > 2000:
        return "$$$$"
    if range_max > 1000:
        return "$$$"
    if range_max > 500:
        return "$$"
    return "$"


class CatalogClient:
    """Thin PostgREST client for the places, service-provider, events and listings tables."""

    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        cfg.require_catalog()
        self.cfg = cfg
        self.base = (cfg.catalog_base_url or "").rstrip("/")
        self.session = session or requests.Session()

    def _get(self, table: str, params: dict) -> List[dict]:
        url = f"{self.base}/rest/v1/{table}"
        headers = {"Accept": "application/json"}
        if self.cfg.catalog_api_key:
            headers["apikey"] = self.cfg.catalog_api_key
            headers["Authorization"] = f"Bearer {self.cfg.catalog_api_key}"
        policy = _RetryPolicy(retries=max(0, self.cfg.catalog_retries))
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.get(url, headers=headers, params=params, timeout=self.cfg.catalog_timeout)
            except requests.RequestException as exc:  # network error
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise CatalogError(f"request error: {exc}")

            if resp.status_code in (429, 500, 502, 503, 504) and attempt <= policy.retries:
                time.sleep(policy.base_delay * attempt)
                continue

            if not resp.ok:
                snippet = resp.text[:300]
                raise CatalogError(f"upstream {resp.status_code}: {snippet}")

            try:
                payload = resp.json()
            except ValueError:
                raise CatalogError("invalid json response")
            if not isinstance(payload, list):
                raise CatalogError("unexpected payload shape")
            return [row for row in payload if isinstance(row, dict)]

    @staticmethod
    def _text_filter(params: dict, query: str, fields: Iterable[str], tags_field: Optional[str] = None) -> bool:
        """Add the ``or`` text filter to ``params``.

        Returns False when the query has text but nothing that can be filtered
        on; the caller must then skip the request, since an unfiltered table
        scan would read as a match.
        """
        phrase = search_phrase(query)
        pattern = or_filter(fields, search_terms(phrase), tags_field=tags_field, phrase=phrase)
        if pattern:
            params["or"] = pattern
            return True
        return not (query or "").strip()

    def search_places(self, query: str, category: Category) -> List[Recommendation]:
        """Primary structured search over the general places catalog."""
        params: dict[str, Any] = {"select": "*"}
        if category != Category.ALL:
            params["category"] = f"eq.{category.value}"
        if not self._text_filter(params, query, ("name", "description", "category"), tags_field="tags"):
            return []
        return [self._parse_place(row) for row in self._get(self.cfg.places_table, params)]

    def search_services(self, query: str, category: Category) -> List[Recommendation]:
        """Service-provider directory scoped by the capitalized category label."""
        params: dict[str, Any] = {"select": "*", "approval_status": "eq.approved"}
        if category != Category.ALL:
            params["category"] = f"eq.{category.label}"
        if not self._text_filter(params, query, ("name", "description"), tags_field="tags"):
            return []
        return [self._parse_service(row) for row in self._get(self.cfg.services_table, params)]

    def search_events(self, query: str) -> List[Event]:
        params: dict[str, Any] = {"select": "*"}
        if not self._text_filter(params, query, ("title", "description", "location")):
            return []
        return [self._parse_event(row) for row in self._get(self.cfg.events_table, params)]

    def search_listings(self, query: str) -> List[MarketplaceListing]:
        """Approved marketplace listings, newest first."""
        params: dict[str, Any] = {
            "select": "*",
            "approval_status": "eq.approved",
            "order": "created_at.desc",
        }
        if not self._text_filter(params, query, ("title", "description"), tags_field="tags"):
            return []
        return [self._parse_listing(row) for row in self._get(self.cfg.listings_table, params)]

    def top_rated(self, limit: int = 6) -> List[Recommendation]:
        params = {"select": "*", "order": "rating.desc.nullslast", "limit": max(1, limit)}
        return [self._parse_place(row) for row in self._get(self.cfg.places_table, params)]

    def _parse_place(self, row: dict) -> Recommendation:
        rating = row.get("rating")
        return Recommendation(
            id=str(row.get("id") or ""),
            name=str(row.get("name") or ""),
            category=Category.parse(row.get("category")),
            tags=[str(t) for t in (row.get("tags") or [])],
            rating=float(rating) if isinstance(rating, (int, float)) and rating else DEFAULT_RATING,
            address=str(row.get("address") or ""),
            distance=(str(row["distance"]) if row.get("distance") else None),
            image=str(row.get("image") or PLACEHOLDER_IMAGE),
            images=[str(i) for i in (row.get("images") or []) if i],
            description=str(row.get("description") or ""),
            phone=(str(row["phone"]) if row.get("phone") else None),
            open_now=bool(row.get("open_now") or False),
            hours=str(row.get("hours") or DEFAULT_HOURS),
            price_level=str(row.get("price_level") or DEFAULT_PRICE_LEVEL),
            review_count=(int(row["review_count"]) if isinstance(row.get("review_count"), int) else None),
        )

    def _parse_service(self, row: dict) -> Recommendation:
        rating = row.get("rating")
        image_url = row.get("image_url")
        images = [str(i) for i in (row.get("images") or []) if i]
        if not images and image_url:
            images = [str(image_url)]
        address = row.get("address")
        if not address:
            address = ", ".join(str(p) for p in (row.get("area"), row.get("city")) if p)
        return Recommendation(
            id=str(row.get("id") or ""),
            name=str(row.get("name") or ""),
            category=Category.parse(row.get("category")),
            tags=[str(t) for t in (row.get("tags") or [])],
            rating=float(rating) if isinstance(rating, (int, float)) and rating else DEFAULT_RATING,
            address=str(address or ""),
            distance=str(row.get("distance") or PLACEHOLDER_DISTANCE),
            image=str(image_url or (images[0] if images else PLACEHOLDER_IMAGE)),
            images=images,
            description=str(row.get("description") or ""),
            phone=(str(row["contact_phone"]) if row.get("contact_phone") else None),
            open_now=bool(row.get("open_now") or False),
            hours=str(row.get("hours") or DEFAULT_HOURS),
            price_level=(
                price_tier(row.get("price_range_max"))
                if row.get("price_range_min") and row.get("price_range_max")
                else DEFAULT_PRICE_LEVEL
            ),
            review_count=(int(row["review_count"]) if isinstance(row.get("review_count"), int) else None),
        )

    def _parse_listing(self, row: dict) -> MarketplaceListing:
        price = row.get("price")
        seller_rating = row.get("seller_rating")
        review_count = row.get("review_count")
        return MarketplaceListing(
            id=str(row.get("id") or ""),
            title=str(row.get("title") or ""),
            description=str(row.get("description") or ""),
            price=float(price) if isinstance(price, (int, float)) else 0.0,
            category=str(row.get("category") or ""),
            condition=str(row.get("condition") or ""),
            images=[str(i) for i in (row.get("images") or []) if i],
            seller_name=str(row.get("seller_name") or ""),
            seller_rating=float(seller_rating) if isinstance(seller_rating, (int, float)) else 0.0,
            seller_phone=(str(row["seller_phone"]) if row.get("seller_phone") else None),
            location=str(row.get("location") or ""),
            tags=[str(t) for t in (row.get("tags") or [])],
            review_count=int(review_count) if isinstance(review_count, int) else 0,
            created_at=str(row.get("created_at") or ""),
        )

    def _parse_event(self, row: dict) -> Event:
        attendees = row.get("attendees")
        return Event(
            id=str(row.get("id") or ""),
            title=str(row.get("title") or ""),
            date=str(row.get("date") or ""),
            time=str(row.get("time") or ""),
            location=str(row.get("location") or ""),
            description=str(row.get("description") or ""),
            image=str(row.get("image") or ""),
            attendees=int(attendees) if isinstance(attendees, (int, float)) else 0,
        )
