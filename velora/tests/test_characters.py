########## Character Store Tests ##########
# Persistence round trips against a throwaway sqlite file, plus the catalog.

from __future__ import annotations

import random
import re
from typing import Iterator

import pytest

from velora.core import config, db
from velora.core.characters import (
    CharacterCatalog,
    create_user_character_template,
    delete_user_character,
    generate_character_id,
    get_user_character,
    get_user_characters,
    save_user_character,
)
from velora.core.types import TRAIT_AXES, Character, CharacterValidationError


@pytest.fixture(autouse=True)
def _isolated_db(tmp_path, monkeypatch) -> Iterator[None]:
    """Point the store at a fresh sqlite file for every test."""

    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "characters_test.sqlite"))
    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    db._ENGINE = None  # reset cached engine for isolated test
    yield
    db._ENGINE = None


def _record(**overrides: object) -> dict:
    record = {"name": "Nova Reyes", "type": "modern", "description": "A street medic with a quick temper."}
    record.update(overrides)
    return record


def test_generated_ids_follow_the_pattern() -> None:
    """Ids carry the prefix, a millisecond stamp, and nine base36 characters."""

    character_id = generate_character_id(random.Random(1))
    assert re.fullmatch(r"user-char-\d+-[0-9a-z]{9}", character_id)


def test_save_fills_defaults_and_reads_back() -> None:
    """Blank optional fields get defaults and the record survives a reload."""

    # 1 Save a minimal record, then fetch it by id.                            # steps
    saved = save_user_character(_record(), random.Random(2))
    assert saved.id.startswith(config.USER_CHARACTER_ID_PREFIX)
    assert saved.mood == "neutral"
    assert saved.talkativeness == config.TALKATIVENESS_DEFAULT
    assert saved.thinking_speed == config.THINKING_SPEED_DEFAULT
    assert all(saved.trait(axis) == config.TRAIT_DEFAULT for axis in TRAIT_AXES)
    assert saved.opening_line == "Hello, I'm Nova Reyes."
    assert saved.is_user_created is True
    assert saved.updated_at is None
    loaded = get_user_character(saved.id)
    assert loaded is not None
    assert loaded.name == "Nova Reyes"
    assert loaded.created_at == saved.created_at


def test_missing_required_fields_are_rejected() -> None:
    """Name, type, and description are all required."""

    with pytest.raises(CharacterValidationError):
        save_user_character({"name": "Nobody", "type": "modern"})
    assert get_user_characters() == []


def test_saving_an_existing_id_updates_in_place() -> None:
    """Same id keeps created_at and gains updated_at."""

    first = save_user_character(_record(), random.Random(3))
    second = save_user_character(_record(id=first.id, description="Now a field surgeon.", talkativeness=8))
    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.updated_at is not None
    stored = get_user_characters()
    assert len(stored) == 1
    assert stored[0].description == "Now a field surgeon."
    assert stored[0].talkativeness == 8


def test_delete_reports_whether_anything_matched() -> None:
    """Deleting twice succeeds once."""

    saved = save_user_character(_record(), random.Random(4))
    assert delete_user_character(saved.id) is True
    assert delete_user_character(saved.id) is False
    assert get_user_character(saved.id) is None


def test_template_is_blank_but_complete() -> None:
    """The form template carries every axis and the requested type."""

    template = create_user_character_template("fantasy")
    assert template["type"] == "fantasy"
    assert template["name"] == ""
    assert set(template["personality"]) == set(TRAIT_AXES)


def test_catalog_lookup_and_user_merge() -> None:
    """Catalog names match case-insensitively and win over user clashes."""

    # 1 Load the bundled seeds, then store one clash and one new character.    # steps
    catalog = CharacterCatalog()
    assert len(catalog) == 7
    thor = catalog.by_name("thor")
    assert thor is not None and thor.type == "superhero"
    assert {character.name for character in catalog.by_type("SUPERHERO")} >= {"Iron Man", "Hulk"}
    save_user_character(_record(name="Thor", type="superhero"), random.Random(5))
    save_user_character(_record(), random.Random(6))
    merged = [character.name for character in catalog.with_user_characters()]
    assert merged.count("Thor") == 1
    assert merged[-1] == "Nova Reyes"


def test_catalog_accepts_explicit_characters() -> None:
    """A catalog can be built from characters in memory."""

    catalog = CharacterCatalog([Character(name="Ada", type="modern")])
    assert catalog.names() == ["Ada"]
    assert catalog.by_name("missing") is None
