from __future__ import annotations

import asyncio

import pytest

from config import Configuration
from models import Category
from services.pipeline import build_pipeline
from services.resolver import CURATED, SPECIALIZED


@pytest.fixture()
def pipeline():
    return build_pipeline(Configuration())


def test_process_normalizes_and_infers(pipeline) -> None:
    processed = pipeline.process("Yoga", "all")
    assert processed.raw == "Yoga"
    assert processed.processed_query == "yoga near me"
    assert processed.inferred_category == Category.FITNESS

    assert pipeline.process("Yoga", "restaurants").inferred_category == Category.RESTAURANTS


def test_search_resolves_recommendations_and_events(pipeline) -> None:
    outcome = asyncio.run(pipeline.search("yoga"))
    assert outcome.tier == SPECIALIZED
    assert [r.id for r in outcome.recommendations] == ["yoga1", "yoga2", "yoga3"]
    assert [e.id for e in outcome.events] == ["event3", "event4"]
    assert [l.id for l in outcome.listings] == ["listing3"]


def test_search_without_event_hits(pipeline) -> None:
    outcome = asyncio.run(pipeline.search("flute"))
    assert outcome.query.inferred_category == Category.MUSIC
    assert outcome.tier == CURATED
    assert [r.id for r in outcome.recommendations] == ["8", "9", "10"]
    assert outcome.events == []
    assert [l.id for l in outcome.listings] == ["listing2"]


def test_default_results(pipeline) -> None:
    items = asyncio.run(pipeline.default_results())
    assert len(items) == 6
    assert items[0].rating >= items[-1].rating


def test_default_results_limit_from_config() -> None:
    small = build_pipeline(Configuration(default_results_limit=2))
    assert len(asyncio.run(small.default_results())) == 2
