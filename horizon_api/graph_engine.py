"""Graph integrity engine.

Keeps the flat node store referentially sound while clients send partial
updates: descendant discovery, cascading soft deletes, orphan repair,
output supersession and parent reassignment. Every function works on a
caller-owned connection, so the writes of one operation share a single
transaction and commit or roll back together.

The children list on each node mirrors parent_id. parent_id is the source
of truth; repair rebuilds children from it.
"""

import logging
import sqlite3
from collections.abc import Collection
from dataclasses import dataclass, field

from horizon.errors import ConflictError, InvalidRequestError, NotFoundError
from horizon.graph.traversal import collect_descendants, find_orphans, rebuild_children
from horizon.models.node import Node, NodeCreate, NodeType, NodeUpdate, Position
from horizon.models.workspace import Workspace, WorkspaceStats
from horizon.utils.identifiers import generate_node_id, utc_timestamp
from horizon_api import entity_db, node_db, workspace_db
from horizon_api.guards import require_active_node, require_workspace

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """What a repair pass had to correct."""

    cleared_parent_ids: list[str] = field(default_factory=list)
    rebuilt_children_ids: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.cleared_parent_ids or self.rebuilt_children_ids)


def _unlink_child(parent: Node, child_id: str) -> bool:
    if child_id not in parent.children:
        return False
    parent.children = [c for c in parent.children if c != child_id]
    return True


def _link_child(parent: Node, child_id: str, make_current: bool = False) -> None:
    """Add a child id; make_current moves it to the end (the current output slot)."""
    if make_current:
        parent.children = [c for c in parent.children if c != child_id] + [child_id]
    elif child_id not in parent.children:
        parent.children = parent.children + [child_id]


# --- integrity operations ---


def find_descendants(
    conn: sqlite3.Connection,
    node_id: str,
    horizon_id: str,
    keep_ids: Collection[str] = (),
) -> list[str]:
    """Ids of all active nodes below node_id, nearest levels first.

    Nodes in keep_ids are not returned and their subtrees are not entered.
    """
    return collect_descendants(
        node_id,
        lambda frontier: [
            child_id
            for child_id in node_db.active_child_ids(conn, horizon_id, frontier)
            if child_id not in keep_ids
        ],
    )


def repair_nodes(conn: sqlite3.Connection, nodes: list[Node]) -> RepairReport:
    """Repair a loaded set of a horizon's active nodes in place and persist fixes.

    Clears parent_id on orphans, then rebuilds the children mirrors. Nothing
    is written when the graph is already sound.
    """
    report = RepairReport()
    by_id = {node.id: node for node in nodes}
    dirty: dict[str, Node] = {}

    for orphan in find_orphans(nodes):
        logger.debug("clearing orphaned parent %s on node %s", orphan.parent_id, orphan.id)
        orphan.parent_id = None
        dirty[orphan.id] = orphan
        report.cleared_parent_ids.append(orphan.id)

    for node_id, children in rebuild_children(nodes).items():
        logger.debug("rebuilding children of node %s", node_id)
        by_id[node_id].children = children
        dirty[node_id] = by_id[node_id]
        report.rebuilt_children_ids.append(node_id)

    if dirty:
        now = utc_timestamp()
        for node in dirty.values():
            node.updated_at = now
        node_db.save_nodes(conn, list(dirty.values()))
    return report


def repair_orphans(conn: sqlite3.Connection, horizon_id: str) -> RepairReport:
    """Clear dangling parent references in a horizon. Idempotent."""
    return repair_nodes(conn, node_db.list_nodes(conn, horizon_id))


def cascade_delete(conn: sqlite3.Connection, node_id: str, keep_ids: Collection[str] = ()) -> int:
    """Deactivate a node and its whole subtree.

    Descendants are written first and the target last, then the horizon is
    swept for orphans. Deleting an already inactive node is a no-op, so
    overlapping deletes converge on the same state. Subtrees rooted at a
    node in keep_ids stay active; the sweep turns those nodes into roots.

    Returns:
        number of descendants deactivated along with the node
    """
    node = node_db.get_node(conn, node_id)
    if node is None:
        raise NotFoundError(f"Node not found: {node_id}")
    if not node.is_active:
        return 0

    descendant_ids = find_descendants(conn, node.id, node.horizon_id, keep_ids)
    now = utc_timestamp()

    descendants = node_db.get_nodes(conn, descendant_ids)
    for descendant in descendants:
        descendant.is_active = False
        descendant.updated_at = now
    node_db.save_nodes(conn, descendants)

    if node.parent_id and node.parent_id != node.id:
        parent = node_db.get_node(conn, node.parent_id)
        if parent is not None and _unlink_child(parent, node.id):
            parent.updated_at = now
            node_db.save_node(conn, parent)

    node.is_active = False
    node.updated_at = now
    node_db.save_node(conn, node)

    repair_orphans(conn, node.horizon_id)

    logger.info("deleted node %s and %d descendants", node.id, len(descendant_ids))
    return len(descendant_ids)


def reactivate(conn: sqlite3.Connection, node_id: str) -> Node:
    """Bring an output revision back; it becomes its parent's current output."""
    node = node_db.get_node(conn, node_id)
    if node is None:
        raise NotFoundError(f"Output node not found: {node_id}")
    if node.type != NodeType.output:
        raise InvalidRequestError("Only output nodes can be reactivated")

    now = utc_timestamp()
    node.is_active = True
    node.updated_at = now

    if node.parent_id:
        parent = node_db.get_node(conn, node.parent_id)
        if parent is not None and parent.is_active and parent.horizon_id == node.horizon_id:
            _link_child(parent, node.id, make_current=True)
            parent.updated_at = now
            node_db.save_node(conn, parent)

    node_db.save_node(conn, node)
    return node


def refresh_stats(conn: sqlite3.Connection, workspace: Workspace) -> WorkspaceStats:
    """Recompute horizon counters from live state and store them."""
    workspace.stats = WorkspaceStats(
        node_count=node_db.count_active(conn, workspace.id),
        edge_count=node_db.count_linked(conn, workspace.id),
        agent_count=entity_db.count_entities(conn, "agent", workspace.id),
        portfolio_count=entity_db.count_entities(conn, "portfolio", workspace.id),
    )
    workspace.updated_at = utc_timestamp()
    workspace_db.upsert_workspace(conn, workspace)
    return workspace.stats


def deactivate_horizon_nodes(conn: sqlite3.Connection, horizon_id: str) -> int:
    """Soft delete every node of a horizon (used when the horizon goes away)."""
    nodes = node_db.list_nodes(conn, horizon_id)
    now = utc_timestamp()
    for node in nodes:
        node.is_active = False
        node.updated_at = now
    node_db.save_nodes(conn, nodes)
    return len(nodes)


def _supersede_outputs(conn: sqlite3.Connection, parent: Node, keep_id: str, now: str) -> list[str]:
    """Deactivate the parent's other active outputs; keep_id becomes the only one."""
    previous = [
        output
        for output in node_db.list_outputs(conn, parent.horizon_id, parent.id, include_inactive=False)
        if output.id != keep_id
    ]
    for output in previous:
        output.is_active = False
        output.updated_at = now
        _unlink_child(parent, output.id)
    node_db.save_nodes(conn, previous)
    if previous:
        logger.info("superseded %d output(s) of node %s", len(previous), parent.id)
    return [output.id for output in previous]


def _reassign_parent(conn: sqlite3.Connection, node: Node, new_parent_id: str | None, now: str) -> None:
    new_parent = None
    if new_parent_id:
        if new_parent_id == node.id:
            raise InvalidRequestError("A node cannot be its own parent")
        new_parent = require_active_node(conn, new_parent_id, node.horizon_id, label="Parent node")
        if new_parent_id in find_descendants(conn, node.id, node.horizon_id):
            raise InvalidRequestError(
                f"Cannot move node {node.id} under its own descendant {new_parent_id}"
            )

    if node.parent_id:
        old_parent = node_db.get_node(conn, node.parent_id)
        if old_parent is not None and _unlink_child(old_parent, node.id):
            old_parent.updated_at = now
            node_db.save_node(conn, old_parent)

    if new_parent is not None:
        is_output = node.type == NodeType.output
        if is_output:
            _supersede_outputs(conn, new_parent, node.id, now)
        _link_child(new_parent, node.id, make_current=is_output)
        new_parent.updated_at = now
        node_db.save_node(conn, new_parent)

    node.parent_id = new_parent_id


# --- node operations behind the REST routes ---


def create_node(conn: sqlite3.Connection, user_id: str, request: NodeCreate) -> Node:
    """Create a node in a horizon, optionally under a parent.

    A new output under a parent supersedes the parent's earlier outputs.
    """
    if not request.horizon_id or request.type is None:
        raise InvalidRequestError("Missing required fields: horizonId, type")

    workspace = require_workspace(conn, request.horizon_id, user_id, "editor")

    parent = None
    if request.parent_id:
        parent = require_active_node(conn, request.parent_id, workspace.id, label="Parent node")

    if request.id and node_db.existing_ids(conn, [request.id]):
        raise ConflictError(f"Node id already exists: {request.id}")

    now = utc_timestamp()
    node = Node(
        id=request.id or generate_node_id(),
        horizon_id=workspace.id,
        user_id=user_id,
        type=request.type,
        parent_id=parent.id if parent else None,
        input_node_ids=request.input_node_ids or [],
        child_node_ids=(request.child_node_ids or []) if request.type == NodeType.block else [],
        position=request.position or Position(),
        data=request.data or {},
        execution_order=request.execution_order or 0,
        created_at=now,
        updated_at=now,
    )
    node_db.insert_node(conn, node)

    if parent is not None:
        is_output = node.type == NodeType.output
        if is_output:
            _supersede_outputs(conn, parent, node.id, now)
        _link_child(parent, node.id, make_current=is_output)
        parent.updated_at = now
        node_db.save_node(conn, parent)

    refresh_stats(conn, workspace)
    return node


def update_node(conn: sqlite3.Connection, user_id: str, node_id: str, update: NodeUpdate) -> Node:
    """Apply the fields present in a partial update."""
    node = require_active_node(conn, node_id)
    workspace = require_workspace(conn, node.horizon_id, user_id, "editor")

    fields = update.model_fields_set
    now = utc_timestamp()

    if "type" in fields and update.type is not None:
        node.type = update.type
    if "position" in fields and update.position is not None:
        node.position = update.position
    if "data" in fields and update.data is not None:
        node.data = update.data
    if "execution_order" in fields and update.execution_order is not None:
        node.execution_order = update.execution_order
    if "selected" in fields and update.selected is not None:
        node.selected = update.selected
    if "input_node_ids" in fields and update.input_node_ids is not None:
        node.input_node_ids = update.input_node_ids
    if "child_node_ids" in fields and update.child_node_ids is not None and node.type == NodeType.block:
        node.child_node_ids = update.child_node_ids

    if "parent_id" in fields:
        new_parent_id = update.parent_id or None
        if new_parent_id != node.parent_id:
            _reassign_parent(conn, node, new_parent_id, now)

    node.updated_at = now
    node_db.save_node(conn, node)
    refresh_stats(conn, workspace)
    return node


def delete_node(conn: sqlite3.Connection, user_id: str, node_id: str) -> int:
    """Cascade-delete a node; returns how many descendants went with it."""
    node = require_active_node(conn, node_id)
    workspace = require_workspace(conn, node.horizon_id, user_id, "editor")
    deleted = cascade_delete(conn, node.id)
    refresh_stats(conn, workspace)
    return deleted


def reactivate_output(conn: sqlite3.Connection, user_id: str, node_id: str) -> Node:
    node = node_db.get_node(conn, node_id)
    if node is None:
        raise NotFoundError(f"Output node not found: {node_id}")
    workspace = require_workspace(conn, node.horizon_id, user_id, "editor")
    node = reactivate(conn, node_id)
    refresh_stats(conn, workspace)
    return node


def output_history(
    conn: sqlite3.Connection,
    user_id: str,
    horizon_id: str,
    agent_node_id: str,
) -> list[Node]:
    """Every output revision produced under an agent node, newest first."""
    require_workspace(conn, horizon_id, user_id, "viewer")
    return node_db.list_outputs(conn, horizon_id, agent_node_id)
