"""SQLite storage for agents, portfolios and teams attached to a horizon."""

import sqlite3

from pydantic import BaseModel

from horizon.models.entities import Agent, Portfolio, Team

ENTITY_MODELS: dict[str, type[BaseModel]] = {
    "agent": Agent,
    "portfolio": Portfolio,
    "team": Team,
}


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        create table if not exists entities (
            entity_id text primary key,
            kind text not null,
            horizon_id text not null,
            is_active integer not null default 1,
            entity_json text not null,
            created_at text not null
        )
        """
    )
    conn.execute(
        "create index if not exists idx_entities_horizon_kind on entities(horizon_id, kind, is_active)"
    )


def upsert_entity(conn: sqlite3.Connection, kind: str, entity: Agent | Portfolio | Team) -> None:
    conn.execute(
        """
        insert into entities (entity_id, kind, horizon_id, is_active, entity_json, created_at)
        values (?, ?, ?, ?, ?, ?)
        on conflict(entity_id) do update set
            is_active = excluded.is_active,
            entity_json = excluded.entity_json
        """,
        (
            entity.id,
            kind,
            entity.horizon_id,
            int(entity.is_active),
            entity.model_dump_json(),
            entity.created_at,
        ),
    )


def get_entity(conn: sqlite3.Connection, kind: str, entity_id: str):
    row = conn.execute(
        "select entity_json from entities where entity_id = ? and kind = ?",
        (entity_id, kind),
    ).fetchone()
    if not row:
        return None
    return ENTITY_MODELS[kind].model_validate_json(row["entity_json"])


def list_entities(conn: sqlite3.Connection, kind: str, horizon_id: str) -> list:
    """active entities of one kind in a horizon, newest first."""
    rows = conn.execute(
        """
        select entity_json
        from entities
        where horizon_id = ? and kind = ? and is_active = 1
        order by created_at desc, rowid desc
        """,
        (horizon_id, kind),
    ).fetchall()
    model = ENTITY_MODELS[kind]
    return [model.model_validate_json(row["entity_json"]) for row in rows]


def count_entities(conn: sqlite3.Connection, kind: str, horizon_id: str) -> int:
    row = conn.execute(
        """
        select count(*) as n
        from entities
        where horizon_id = ? and kind = ? and is_active = 1
        """,
        (horizon_id, kind),
    ).fetchone()
    return row["n"]
