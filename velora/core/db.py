########## Database Utilities ##########
# SQLite persistence for user-authored characters and the room event log.

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import Engine, create_engine, text

from . import config

_ENGINE: Optional[Engine] = None


def _db_path() -> Path:
    """Return the configured sqlite path and ensure its directory exists."""

    # 1 Resolve the configured path under the project workspace.               # steps
    # 2 Create parent directories when needed.                                 # steps
    path = Path(config.DB_FILE).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_engine() -> Engine:
    """Create or reuse the SQLAlchemy engine."""

    # 1 Cache the engine so future calls reuse the same connection pool.       # steps
    global _ENGINE
    if _ENGINE is None:
        path = _db_path()
        _ENGINE = create_engine(f"sqlite:///{path}", echo=config.DB_ECHO, future=True)
    return _ENGINE


def ensure_schema() -> None:
    """Create tables when they do not exist."""

    engine = get_engine()
    with engine.begin() as connection:
        for statement in _schema_statements():
            connection.execute(text(statement))


def _schema_statements() -> List[str]:
    """Provide the schema definitions for idempotent creation."""

    user_characters = """
    CREATE TABLE IF NOT EXISTS user_characters (
        character_id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        payload TEXT NOT NULL,
        is_user_created INTEGER DEFAULT 1,
        created_at TEXT,
        updated_at TEXT
    )
    """
    event_log = """
    CREATE TABLE IF NOT EXISTS event_log (
        event_id INTEGER PRIMARY KEY AUTOINCREMENT,
        actor TEXT,
        target TEXT,
        type TEXT,
        data TEXT,
        ts TEXT
    )
    """
    return [user_characters, event_log]


########## User Characters ##########


def upsert_character_row(
    character_id: str,
    name: str,
    character_type: str,
    payload_json: str,
    created_at: datetime,
    updated_at: Optional[datetime],
) -> None:
    """Insert or replace the stored payload for one character id."""

    # 1 ON CONFLICT keeps created_at from the first insert.                    # steps
    ensure_schema()
    engine = get_engine()
    statement = text(
        """
        INSERT INTO user_characters (character_id, name, type, payload, is_user_created, created_at, updated_at)
        VALUES (:character_id, :name, :type, :payload, 1, :created_at, :updated_at)
        ON CONFLICT(character_id)
        DO UPDATE SET name = :name, type = :type, payload = :payload, updated_at = :updated_at
        """
    )
    parameters = {
        "character_id": character_id,
        "name": name,
        "type": character_type,
        "payload": payload_json,
        "created_at": created_at.isoformat(),
        "updated_at": updated_at.isoformat() if updated_at else None,
    }
    with engine.begin() as connection:
        connection.execute(statement, parameters)


def character_exists(character_id: str) -> bool:
    ensure_schema()
    engine = get_engine()
    statement = text("SELECT 1 FROM user_characters WHERE character_id = :character_id")
    with engine.begin() as connection:
        row = connection.execute(statement, {"character_id": character_id}).first()
    return row is not None


def load_character_rows() -> List[Dict[str, str]]:
    """Every stored character payload in creation order."""

    ensure_schema()
    engine = get_engine()
    statement = text(
        """
        SELECT character_id, payload, created_at, updated_at
        FROM user_characters
        ORDER BY created_at ASC
        """
    )
    with engine.begin() as connection:
        rows = connection.execute(statement).mappings().all()
    return [dict(row) for row in rows]


def load_character_row(character_id: str) -> Optional[Dict[str, str]]:
    ensure_schema()
    engine = get_engine()
    statement = text(
        """
        SELECT character_id, payload, created_at, updated_at
        FROM user_characters
        WHERE character_id = :character_id
        """
    )
    with engine.begin() as connection:
        row = connection.execute(statement, {"character_id": character_id}).mappings().first()
    if row is None:
        return None
    return dict(row)


def delete_character_row(character_id: str) -> bool:
    """Remove one stored character; False when nothing matched."""

    ensure_schema()
    engine = get_engine()
    statement = text("DELETE FROM user_characters WHERE character_id = :character_id")
    with engine.begin() as connection:
        result = connection.execute(statement, {"character_id": character_id})
    return result.rowcount > 0


########## Event Log ##########


def log_event(actor: str, target: Optional[str], event_type: str, data_json: str, timestamp: datetime) -> None:
    """Persist an event to the event_log table."""

    # 1 Insert a row with explicit parameters.                                # steps
    ensure_schema()
    engine = get_engine()
    statement = text(
        """
        INSERT INTO event_log (actor, target, type, data, ts)
        VALUES (:actor, :target, :type, :data, :ts)
        """
    )
    parameters = {
        "actor": actor,
        "target": target,
        "type": event_type,
        "data": data_json,
        "ts": timestamp.isoformat(),
    }
    with engine.begin() as connection:
        connection.execute(statement, parameters)


def fetch_events(limit: Optional[int] = None) -> List[Dict[str, str]]:
    """Return recent events, oldest first, for export."""

    ensure_schema()
    engine = get_engine()
    query = "SELECT actor, target, type, data, ts FROM event_log ORDER BY event_id DESC"
    if limit is not None:
        query += " LIMIT :limit"
    params = {"limit": limit} if limit is not None else {}
    with engine.begin() as connection:
        rows = connection.execute(text(query), params).mappings().all()
    payloads: List[Dict[str, str]] = []
    for row in rows:
        payloads.append(
            {
                "actor": row["actor"],
                "target": row["target"],
                "type": row["type"],
                "data": row["data"],
                "ts": row["ts"],
            }
        )
    payloads.reverse()
    return payloads
