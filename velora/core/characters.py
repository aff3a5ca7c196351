########## Character Store ##########
# User-authored characters in sqlite plus the read-only catalog of predefined ones.

from __future__ import annotations

import json
import random
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from . import config
from .db import character_exists, delete_character_row, load_character_row, load_character_rows, upsert_character_row
from .runtime import log_run_event
from .types import TRAIT_AXES, Character, CharacterValidationError, PersistedCharacter

REQUIRED_FIELDS: List[str] = ["name", "type", "description"]
BASE36_DIGITS: str = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36_suffix(rng: random.Random, length: int = 9) -> str:
    return "".join(BASE36_DIGITS[rng.randrange(36)] for _ in range(length))


def generate_character_id(rng: Optional[random.Random] = None) -> str:
    """Build an id of the form user-char-<ms>-<9 base36 chars>."""

    source = rng or random.Random()
    millis = int(time.time() * 1000)
    return f"{config.USER_CHARACTER_ID_PREFIX}-{millis}-{_base36_suffix(source)}"


def _validate(record: Dict[str, object]) -> None:
    """Reject records that miss a required field."""

    missing = [field for field in REQUIRED_FIELDS if not record.get(field)]
    if missing:
        raise CharacterValidationError(f"Character is missing required fields: {', '.join(missing)}")


def _with_defaults(record: Dict[str, object]) -> Dict[str, object]:
    """Fill the optional fields a user form may leave blank."""

    # 1 Copy so the caller's dict stays untouched.                           # steps
    # 2 Only fill keys that are absent or empty.                             # steps
    payload = dict(record)
    name = str(payload["name"])
    if not payload.get("mood"):
        payload["mood"] = "neutral"
    if not payload.get("catchphrases"):
        payload["catchphrases"] = []
    if payload.get("talkativeness") is None:
        payload["talkativeness"] = config.TALKATIVENESS_DEFAULT
    if payload.get("thinkingSpeed") is None and payload.get("thinking_speed") is None:
        payload["thinkingSpeed"] = config.THINKING_SPEED_DEFAULT
    personality = dict(payload.get("personality") or {})
    for axis in TRAIT_AXES:
        if personality.get(axis) is None:
            personality[axis] = config.TRAIT_DEFAULT
    payload["personality"] = personality
    if not payload.get("opening_line"):
        payload["opening_line"] = f"Hello, I'm {name}."
    return payload


def _from_row(row: Dict[str, str]) -> PersistedCharacter:
    return PersistedCharacter.model_validate_json(row["payload"])


########## User Characters ##########


def save_user_character(record: Dict[str, object], rng: Optional[random.Random] = None) -> PersistedCharacter:
    """Validate, default, and store a user character; existing ids are updated in place."""

    # 1 Validate required fields before anything touches sqlite.             # steps
    # 2 Reuse the stored created_at when the id already exists.               # steps
    # 3 Persist the aliased JSON payload and return the typed record.         # steps
    _validate(record)
    payload = _with_defaults(record)
    now = datetime.utcnow()
    character_id = payload.get("id")
    existing: Optional[PersistedCharacter] = None
    if character_id and character_exists(str(character_id)):
        row = load_character_row(str(character_id))
        existing = _from_row(row) if row else None
    if existing is not None:
        payload["createdAt"] = existing.created_at
        payload["updatedAt"] = now
    else:
        payload["id"] = character_id or generate_character_id(rng)
        payload["createdAt"] = now
        payload.pop("updatedAt", None)
        payload.pop("updated_at", None)
    payload["isUserCreated"] = True
    payload.pop("created_at", None)
    payload.pop("is_user_created", None)
    character = PersistedCharacter.model_validate(payload)
    upsert_character_row(
        character.id,
        character.name,
        character.type,
        character.model_dump_json(by_alias=True),
        character.created_at,
        character.updated_at,
    )
    verb = "Updated" if existing is not None else "Saved"
    log_run_event(f"[Characters] {verb} user character {character.name} ({character.id})")
    return character


def get_user_characters() -> List[PersistedCharacter]:
    return [_from_row(row) for row in load_character_rows()]


def get_user_character(character_id: str) -> Optional[PersistedCharacter]:
    row = load_character_row(character_id)
    if row is None:
        return None
    return _from_row(row)


def delete_user_character(character_id: str) -> bool:
    """Delete by id; False when no record matched."""

    removed = delete_character_row(character_id)
    if removed:
        log_run_event(f"[Characters] Deleted user character {character_id}")
    return removed


def create_user_character_template(character_type: str = "modern") -> Dict[str, object]:
    """Blank record for a character creation form."""

    return {
        "name": "",
        "description": "",
        "avatar": "",
        "mood": "neutral",
        "type": character_type,
        "personality": {axis: config.TRAIT_DEFAULT for axis in TRAIT_AXES},
        "voiceStyle": "",
        "catchphrases": [],
        "talkativeness": config.TALKATIVENESS_DEFAULT,
        "thinkingSpeed": config.THINKING_SPEED_DEFAULT,
        "isUserCreated": True,
    }


########## Catalog ##########


def load_seed_characters(seed_file: Optional[str] = None) -> List[Character]:
    """Read predefined characters from the JSON seed file."""

    path = Path(seed_file or config.CATALOG_SEED_FILE)
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return [Character.model_validate(entry) for entry in raw]


class CharacterCatalog:
    """Read-only set of predefined characters, queried by name or type."""

    def __init__(self, characters: Optional[List[Character]] = None, seed_file: Optional[str] = None) -> None:
        if characters is None:
            characters = load_seed_characters(seed_file)
        self._characters: List[Character] = list(characters)
        self._by_name: Dict[str, Character] = {character.name.lower(): character for character in self._characters}

    def all(self) -> List[Character]:
        return list(self._characters)

    def by_name(self, name: str) -> Optional[Character]:
        return self._by_name.get(name.lower())

    def by_type(self, character_type: str) -> List[Character]:
        wanted = character_type.lower()
        return [character for character in self._characters if character.type.lower() == wanted]

    def names(self) -> List[str]:
        return [character.name for character in self._characters]

    def with_user_characters(self) -> List[Character]:
        """Catalog entries followed by stored user characters; catalog names win on clashes."""

        merged = self.all()
        for character in get_user_characters():
            if character.name.lower() not in self._by_name:
                merged.append(character)
        return merged

    def __len__(self) -> int:
        return len(self._characters)
