"""SQLite storage for graph nodes.

Each node is stored as its JSON document plus the scalar columns the graph
queries filter on. Callers own the connection so several writes can share
one transaction.
"""

import sqlite3

from horizon.models.node import Node, NodeType


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        create table if not exists nodes (
            node_id text primary key,
            horizon_id text not null,
            user_id text not null,
            type text not null,
            parent_id text,
            is_active integer not null default 1,
            node_json text not null,
            created_at text not null,
            updated_at text not null
        )
        """
    )
    # descendant lookup
    conn.execute(
        "create index if not exists idx_nodes_horizon_parent on nodes(horizon_id, parent_id)"
    )
    # output history
    conn.execute(
        """
        create index if not exists idx_nodes_horizon_type_created
        on nodes(horizon_id, type, created_at)
        """
    )
    conn.execute(
        "create index if not exists idx_nodes_horizon_active on nodes(horizon_id, is_active)"
    )


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


def _row(node: Node) -> tuple:
    return (
        node.id,
        node.horizon_id,
        node.user_id,
        node.type.value,
        node.parent_id,
        int(node.is_active),
        node.model_dump_json(),
        node.created_at,
        node.updated_at,
    )


def insert_nodes(conn: sqlite3.Connection, nodes: list[Node]) -> None:
    """insert new nodes; a reused id raises sqlite3.IntegrityError."""
    if not nodes:
        return
    conn.executemany(
        """
        insert into nodes (
            node_id,
            horizon_id,
            user_id,
            type,
            parent_id,
            is_active,
            node_json,
            created_at,
            updated_at
        )
        values (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [_row(node) for node in nodes],
    )


def insert_node(conn: sqlite3.Connection, node: Node) -> None:
    insert_nodes(conn, [node])


def save_nodes(conn: sqlite3.Connection, nodes: list[Node]) -> None:
    """write back full documents of existing nodes."""
    if not nodes:
        return
    conn.executemany(
        """
        update nodes
        set type = ?, parent_id = ?, is_active = ?, node_json = ?, updated_at = ?
        where node_id = ?
        """,
        [
            (
                node.type.value,
                node.parent_id,
                int(node.is_active),
                node.model_dump_json(),
                node.updated_at,
                node.id,
            )
            for node in nodes
        ],
    )


def save_node(conn: sqlite3.Connection, node: Node) -> None:
    save_nodes(conn, [node])


def get_node(conn: sqlite3.Connection, node_id: str) -> Node | None:
    row = conn.execute(
        "select node_json from nodes where node_id = ?",
        (node_id,),
    ).fetchone()
    if not row:
        return None
    return Node.model_validate_json(row["node_json"])


def get_nodes(conn: sqlite3.Connection, node_ids: list[str]) -> list[Node]:
    """load several nodes, in creation order."""
    if not node_ids:
        return []
    rows = conn.execute(
        f"""
        select node_json
        from nodes
        where node_id in ({_placeholders(node_ids)})
        order by created_at asc, rowid asc
        """,
        tuple(node_ids),
    ).fetchall()
    return [Node.model_validate_json(row["node_json"]) for row in rows]


def existing_ids(conn: sqlite3.Connection, node_ids: list[str]) -> set[str]:
    """which of the given ids are already taken, active or not, in any horizon."""
    if not node_ids:
        return set()
    rows = conn.execute(
        f"select node_id from nodes where node_id in ({_placeholders(node_ids)})",
        tuple(node_ids),
    ).fetchall()
    return {row["node_id"] for row in rows}


def list_nodes(
    conn: sqlite3.Connection,
    horizon_id: str,
    include_inactive: bool = False,
) -> list[Node]:
    """nodes of a horizon in creation order."""
    if include_inactive:
        rows = conn.execute(
            """
            select node_json
            from nodes
            where horizon_id = ?
            order by created_at asc, rowid asc
            """,
            (horizon_id,),
        ).fetchall()
    else:
        rows = conn.execute(
            """
            select node_json
            from nodes
            where horizon_id = ? and is_active = 1
            order by created_at asc, rowid asc
            """,
            (horizon_id,),
        ).fetchall()
    return [Node.model_validate_json(row["node_json"]) for row in rows]


def list_nodes_for_horizons(
    conn: sqlite3.Connection,
    horizon_ids: list[str],
) -> dict[str, list[Node]]:
    """active nodes grouped by horizon, for listing previews."""
    grouped: dict[str, list[Node]] = {horizon_id: [] for horizon_id in horizon_ids}
    if not horizon_ids:
        return grouped
    rows = conn.execute(
        f"""
        select horizon_id, node_json
        from nodes
        where horizon_id in ({_placeholders(horizon_ids)}) and is_active = 1
        order by created_at asc, rowid asc
        """,
        tuple(horizon_ids),
    ).fetchall()
    for row in rows:
        grouped[row["horizon_id"]].append(Node.model_validate_json(row["node_json"]))
    return grouped


def active_child_ids(
    conn: sqlite3.Connection,
    horizon_id: str,
    parent_ids: list[str],
) -> list[str]:
    """ids of active nodes whose parent is any of parent_ids."""
    if not parent_ids:
        return []
    rows = conn.execute(
        f"""
        select node_id
        from nodes
        where horizon_id = ? and is_active = 1 and parent_id in ({_placeholders(parent_ids)})
        order by created_at asc, rowid asc
        """,
        (horizon_id, *parent_ids),
    ).fetchall()
    return [row["node_id"] for row in rows]


def list_outputs(
    conn: sqlite3.Connection,
    horizon_id: str,
    parent_id: str,
    include_inactive: bool = True,
) -> list[Node]:
    """output nodes under a parent, newest first."""
    query = """
        select node_json
        from nodes
        where horizon_id = ? and type = ? and parent_id = ?
    """
    if not include_inactive:
        query += " and is_active = 1"
    query += " order by created_at desc, rowid desc"
    rows = conn.execute(query, (horizon_id, NodeType.output.value, parent_id)).fetchall()
    return [Node.model_validate_json(row["node_json"]) for row in rows]


def count_active(conn: sqlite3.Connection, horizon_id: str) -> int:
    row = conn.execute(
        "select count(*) as n from nodes where horizon_id = ? and is_active = 1",
        (horizon_id,),
    ).fetchone()
    return row["n"]


def count_linked(conn: sqlite3.Connection, horizon_id: str) -> int:
    """active nodes with a parent, i.e. the stored tree edge count."""
    row = conn.execute(
        """
        select count(*) as n
        from nodes
        where horizon_id = ? and is_active = 1 and parent_id is not null
        """,
        (horizon_id,),
    ).fetchone()
    return row["n"]
