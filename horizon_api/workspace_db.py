"""SQLite storage for horizons."""

import sqlite3

from horizon.models.workspace import Workspace


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        create table if not exists horizons (
            horizon_id text primary key,
            user_id text not null,
            is_active integer not null default 1,
            horizon_json text not null,
            created_at text not null,
            updated_at text not null
        )
        """
    )
    conn.execute(
        "create index if not exists idx_horizons_user_id on horizons(user_id)"
    )
    conn.execute(
        "create index if not exists idx_horizons_updated_at on horizons(updated_at)"
    )


def upsert_workspace(conn: sqlite3.Connection, workspace: Workspace) -> None:
    """insert or update a horizon."""
    conn.execute(
        """
        insert into horizons (horizon_id, user_id, is_active, horizon_json, created_at, updated_at)
        values (?, ?, ?, ?, ?, ?)
        on conflict(horizon_id) do update set
            is_active = excluded.is_active,
            horizon_json = excluded.horizon_json,
            updated_at = excluded.updated_at
        """,
        (
            workspace.id,
            workspace.user_id,
            int(workspace.is_active),
            workspace.model_dump_json(),
            workspace.created_at,
            workspace.updated_at,
        ),
    )


def get_workspace(conn: sqlite3.Connection, horizon_id: str) -> Workspace | None:
    row = conn.execute(
        "select horizon_json from horizons where horizon_id = ?",
        (horizon_id,),
    ).fetchone()
    if not row:
        return None
    return Workspace.model_validate_json(row["horizon_json"])


def list_active_workspaces(conn: sqlite3.Connection) -> list[Workspace]:
    """all active horizons, most recently updated first."""
    rows = conn.execute(
        """
        select horizon_json
        from horizons
        where is_active = 1
        order by updated_at desc
        """
    ).fetchall()
    return [Workspace.model_validate_json(row["horizon_json"]) for row in rows]
