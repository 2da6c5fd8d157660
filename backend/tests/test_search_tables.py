from __future__ import annotations

import json

import pytest

from models import Category
from search_tables import LOCALITY_SUFFIX, SearchTables, load_tables


def test_defaults() -> None:
    tables = SearchTables.default()
    assert tables.locality_suffix == LOCALITY_SUFFIX
    assert tables.dataset_for(Category.MUSIC) == "music_teachers"
    assert tables.dataset_for(Category.FITNESS) == "yoga_fitness"
    assert tables.dataset_for(Category.CAFES) is None


def test_from_dict_overrides_only_given_keys() -> None:
    tables = SearchTables.from_dict(
        {
            "synonyms": {"cafe": ["Coffee"]},
            "pattern_rules": [{"category": "Music", "pattern": "sitar"}],
        }
    )
    assert tables.synonyms == (("cafe", ("coffee",)),)
    assert tables.pattern_rules[0].category == Category.MUSIC
    assert tables.pattern_rules[0].matches("sitar lessons")
    assert tables.venue_keywords == SearchTables.default().venue_keywords


def test_from_dict_rejects_unknown_category() -> None:
    with pytest.raises(ValueError):
        SearchTables.from_dict({"direct_rules": [{"category": "spaceships", "keywords": ["x"]}]})


def test_from_dict_rejects_bad_pattern() -> None:
    with pytest.raises(ValueError):
        SearchTables.from_dict({"pattern_rules": [{"category": "music", "pattern": "("}]})


def test_load_tables_from_file(tmp_path) -> None:
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({"category_datasets": {"cafes": "coffee_spots"}}), encoding="utf-8")

    tables = load_tables(str(path))
    assert tables.dataset_for(Category.CAFES) == "coffee_spots"
    assert tables.dataset_for(Category.MUSIC) is None


def test_load_tables_invalid_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_tables(str(path))


def test_load_tables_missing_file(tmp_path) -> None:
    with pytest.raises(ValueError, match="could not be read"):
        load_tables(str(tmp_path / "missing.json"))


def test_load_tables_without_path_is_default() -> None:
    assert load_tables(None) == SearchTables.default()
