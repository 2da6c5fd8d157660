from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import Category, Event, FilterOptions, MarketplaceListing, Recommendation
from services.filters import filter_recommendations
from services.pipeline import build_pipeline
from services.resolver import PipelineExhausted

UNAVAILABLE_DETAIL = "Failed to fetch recommendations. Please try again later."


app = FastAPI(title="Locality Search")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchRequest(BaseModel):
    query: str = Field("", description="Free-text search; empty returns the top-rated defaults")
    category: str = Field("all", description="Caller-selected category; 'all' lets the query decide")


class RecommendationPayload(BaseModel):
    id: str
    name: str
    category: str = "all"
    tags: List[str] = []
    rating: float = 0.0
    address: str = ""
    distance: Optional[str] = None
    image: str = ""
    images: List[str] = []
    description: str = ""
    phone: Optional[str] = None
    open_now: Optional[bool] = None
    hours: Optional[str] = None
    price_level: Optional[str] = None
    review_count: Optional[int] = None


class EventPayload(BaseModel):
    id: str
    title: str
    date: str = ""
    time: str = ""
    location: str = ""
    description: str = ""
    image: str = ""
    attendees: int = 0


class ListingPayload(BaseModel):
    id: str
    title: str
    description: str = ""
    price: float = 0.0
    category: str = ""
    condition: str = ""
    images: List[str] = []
    seller_name: str = ""
    seller_rating: float = 0.0
    seller_phone: Optional[str] = None
    location: str = ""
    tags: List[str] = []
    review_count: int = 0
    created_at: str = ""


class SearchResponse(BaseModel):
    query: str
    processed_query: str
    inferred_category: str
    tier: Optional[str] = None
    recommendations: List[RecommendationPayload]
    events: List[EventPayload]
    listings: List[ListingPayload] = []


class FilterOptionsPayload(BaseModel):
    max_distance: float = 5.0
    min_rating: float = 0.0
    price_level: int = 4
    open_now_only: bool = False
    distance_unit: str = "mi"


class FilterRequest(BaseModel):
    items: List[RecommendationPayload]
    options: FilterOptionsPayload = FilterOptionsPayload()


class FilterResponse(BaseModel):
    items: List[RecommendationPayload]


def _recommendation_payload(item: Recommendation) -> RecommendationPayload:
    data = asdict(item)
    data["category"] = item.category.value
    return RecommendationPayload(**data)


def _event_payload(event: Event) -> EventPayload:
    return EventPayload(**asdict(event))


def _listing_payload(listing: MarketplaceListing) -> ListingPayload:
    return ListingPayload(**asdict(listing))


def _to_recommendation(payload: RecommendationPayload) -> Recommendation:
    return Recommendation(**payload.model_dump())


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok", "catalog": cfg.catalog_enabled}


@app.post("/search", response_model=SearchResponse)
async def search(req: SearchRequest) -> SearchResponse:
    try:
        cfg = Configuration.from_env()
        pipeline = build_pipeline(cfg)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    category = Category.parse(req.category)
    try:
        if not req.query.strip():
            items = await pipeline.default_results()
            return SearchResponse(
                query=req.query,
                processed_query="",
                inferred_category=category.value,
                tier=None,
                recommendations=[_recommendation_payload(i) for i in items],
                events=[],
                listings=[],
            )

        outcome = await pipeline.search(req.query, category)
    except PipelineExhausted as exc:
        logger.warning("search {!r} exhausted: {}", req.query, exc)
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL)
    except Exception as exc:
        logger.exception("search failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    logger.info(
        "search query={!r} category={} tier={} recommendations={} events={} listings={}",
        outcome.query.processed_query,
        outcome.query.inferred_category.value,
        outcome.tier,
        len(outcome.recommendations),
        len(outcome.events),
        len(outcome.listings),
    )
    return SearchResponse(
        query=outcome.query.raw,
        processed_query=outcome.query.processed_query,
        inferred_category=outcome.query.inferred_category.value,
        tier=outcome.tier,
        recommendations=[_recommendation_payload(i) for i in outcome.recommendations],
        events=[_event_payload(e) for e in outcome.events],
        listings=[_listing_payload(l) for l in outcome.listings],
    )


@app.post("/filter", response_model=FilterResponse)
def filter_items(req: FilterRequest) -> FilterResponse:
    try:
        opts = FilterOptions(**req.options.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    kept = filter_recommendations((_to_recommendation(p) for p in req.items), opts)
    return FilterResponse(items=[_recommendation_payload(i) for i in kept])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
