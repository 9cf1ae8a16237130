"""Mutation sync: reconcile a client's node list with the stored horizon.

Last write wins per field. Nodes present on both sides get type, position,
data and selected overwritten; nodes only the client has are created with
the client's ids; nodes only the store has are reported as stale and, if
configured, cascade-deleted. A submitted node is never deactivated by that
cascade; it loses its stale parent and becomes a root.
"""

import logging
import sqlite3

from horizon.errors import ConflictError
from horizon.graph.sync import plan_sync
from horizon.models.node import Node, SyncNode
from horizon.models.workspace import SyncResult, Workspace
from horizon.utils.identifiers import utc_timestamp
from horizon_api import config, graph_engine, node_db

logger = logging.getLogger(__name__)


def sync_workspace_nodes(
    conn: sqlite3.Connection,
    workspace: Workspace,
    client_nodes: list[SyncNode],
    user_id: str,
    deactivate_missing: bool | None = None,
) -> SyncResult:
    """Apply a bulk save to a horizon the caller may edit.

    Raises:
        ConflictError: a new client id is already used by another node
        InvalidRequestError: the submission repeats an id
    """
    if deactivate_missing is None:
        deactivate_missing = config.SYNC_DEACTIVATE_MISSING

    stored = node_db.list_nodes(conn, workspace.id)
    plan = plan_sync([node.id for node in stored], client_nodes)

    taken = node_db.existing_ids(conn, [item.id for item in plan.to_create])
    if taken:
        raise ConflictError(f"Node ids already exist: {', '.join(sorted(taken))}")

    now = utc_timestamp()
    by_id = {node.id: node for node in stored}

    updated = []
    for item in plan.to_update:
        node = by_id[item.id]
        node.type = item.type
        node.position = item.position
        node.data = item.data
        node.selected = item.selected
        node.updated_at = now
        updated.append(node)
    node_db.save_nodes(conn, updated)

    created = [
        Node(
            id=item.id,
            horizon_id=workspace.id,
            user_id=user_id,
            type=item.type,
            position=item.position,
            data=item.data,
            selected=item.selected,
            created_at=now,
            updated_at=now,
        )
        for item in plan.to_create
    ]
    node_db.insert_nodes(conn, created)

    deactivated = []
    if deactivate_missing:
        submitted = {item.id for item in client_nodes}
        for stale_id in plan.stale_ids:
            # an earlier cascade in this loop may already have taken it
            stale = node_db.get_node(conn, stale_id)
            if stale is None or not stale.is_active:
                continue
            graph_engine.cascade_delete(conn, stale_id, keep_ids=submitted)
            deactivated.append(stale_id)

    stats = graph_engine.refresh_stats(conn, workspace)
    logger.info(
        "synced horizon %s: %d created, %d updated, %d stale, %d deactivated",
        workspace.id,
        len(created),
        len(updated),
        len(plan.stale_ids),
        len(deactivated),
    )
    return SyncResult(
        created=[node.id for node in created],
        updated=[node.id for node in updated],
        stale_ids=plan.stale_ids,
        deactivated=deactivated,
        stats=stats,
    )
