from __future__ import annotations

import pytest

from models import Category
from services.inference import CALLER, DEFAULT, DIRECT, PATTERN, SECONDARY, CategoryInferenceEngine


@pytest.fixture()
def engine() -> CategoryInferenceEngine:
    return CategoryInferenceEngine()


def test_caller_category_wins(engine: CategoryInferenceEngine) -> None:
    assert engine.infer_with_reason("yoga near me", "restaurants") == (Category.RESTAURANTS, CALLER)
    assert engine.infer("yoga near me", Category.MUSIC) == Category.MUSIC


def test_direct_rules_are_ordered(engine: CategoryInferenceEngine) -> None:
    # yoga is checked before restaurant even though both appear
    assert engine.infer_with_reason("yoga restaurant near me") == (Category.FITNESS, DIRECT)
    assert engine.infer_with_reason("cafe near me") == (Category.CAFES, DIRECT)


def test_pattern_table(engine: CategoryInferenceEngine) -> None:
    assert engine.infer_with_reason("flute classes") == (Category.MUSIC, PATTERN)
    assert engine.infer_with_reason("haircut near me") == (Category.SALONS, PATTERN)
    assert engine.infer("maths tuition") == Category.EDUCATION
    assert engine.infer("dentist") == Category.HEALTH


def test_secondary_rules(engine: CategoryInferenceEngine) -> None:
    assert engine.infer_with_reason("plumber near me") == (Category.SERVICES, SECONDARY)
    assert engine.infer_with_reason("biryani near me") == (Category.RESTAURANTS, SECONDARY)


def test_default_is_all(engine: CategoryInferenceEngine) -> None:
    assert engine.infer_with_reason("xyz") == (Category.ALL, DEFAULT)
    assert engine.infer("", "all") == Category.ALL


def test_unknown_caller_category_is_ignored(engine: CategoryInferenceEngine) -> None:
    assert engine.infer("flute", "spaceships") == Category.MUSIC
