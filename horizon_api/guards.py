"""Caller identity and lookup-or-fail helpers shared by the services."""

import sqlite3

from fastapi import Header, HTTPException

from horizon.errors import ForbiddenError, NotFoundError
from horizon.models.node import Node
from horizon.models.workspace import Workspace
from horizon_api import node_db, workspace_db


def current_user(x_user_id: str | None = Header(default=None)) -> str:
    """The calling user's id.

    Authentication happens upstream; the gateway forwards the verified
    principal in the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def require_workspace(
    conn: sqlite3.Connection,
    horizon_id: str,
    user_id: str,
    role: str = "viewer",
) -> Workspace:
    """Load an active horizon the user holds `role` on."""
    workspace = workspace_db.get_workspace(conn, horizon_id)
    if workspace is None or not workspace.is_active:
        raise NotFoundError(f"Horizon not found: {horizon_id}")
    if not workspace.has_access(user_id, role):
        raise ForbiddenError("Access denied")
    return workspace


def require_active_node(
    conn: sqlite3.Connection,
    node_id: str,
    horizon_id: str | None = None,
    label: str = "Node",
) -> Node:
    """Load an active node, optionally checking it belongs to a horizon."""
    node = node_db.get_node(conn, node_id)
    if node is None or not node.is_active:
        raise NotFoundError(f"{label} not found: {node_id}")
    if horizon_id is not None and node.horizon_id != horizon_id:
        raise NotFoundError(f"{label} not found: {node_id}")
    return node
