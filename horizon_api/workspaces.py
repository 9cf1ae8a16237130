"""Horizon lifecycle: create, list, update (with bulk node save), delete."""

import math
import sqlite3

from horizon.errors import ForbiddenError, InvalidRequestError, NotFoundError
from horizon.models.workspace import (
    NodePreview,
    Pagination,
    SyncResult,
    Viewport,
    Workspace,
    WorkspaceCreate,
    WorkspaceListItem,
    WorkspacePage,
    WorkspaceUpdate,
)
from horizon.utils.identifiers import generate_horizon_id, utc_timestamp
from horizon_api import config, graph_engine, node_db, workspace_db
from horizon_api.guards import require_workspace
from horizon_api.sync import sync_workspace_nodes


def create_workspace(conn: sqlite3.Connection, user_id: str, request: WorkspaceCreate) -> Workspace:
    name = request.name.strip()
    if not name:
        raise InvalidRequestError("Horizon name is required")

    now = utc_timestamp()
    workspace = Workspace(
        id=generate_horizon_id(),
        user_id=user_id,
        name=name,
        description=request.description,
        tags=request.tags,
        viewport=request.viewport or Viewport(),
        is_public=request.is_public,
        shared_with=[
            share.model_copy(update={"shared_at": share.shared_at or now})
            for share in request.shared_with
        ],
        created_at=now,
        updated_at=now,
    )
    workspace_db.upsert_workspace(conn, workspace)
    return workspace


def _matches(workspace: Workspace, search: str, tags: list[str]) -> bool:
    if tags and not set(tags) & set(workspace.tags):
        return False
    if search:
        needle = search.lower()
        haystack = [workspace.name, workspace.description, *workspace.tags]
        return any(needle in text.lower() for text in haystack)
    return True


def list_workspaces(
    conn: sqlite3.Connection,
    user_id: str,
    page: int = 1,
    limit: int | None = None,
    search: str = "",
    tags: list[str] | None = None,
) -> WorkspacePage:
    """Horizons the user owns, is shared on, or that are public; newest first."""
    page = max(page, 1)
    limit = min(max(limit or config.DEFAULT_PAGE_SIZE, 1), config.MAX_PAGE_SIZE)

    visible = [
        workspace
        for workspace in workspace_db.list_active_workspaces(conn)
        if workspace.has_access(user_id, "viewer") and _matches(workspace, search, tags or [])
    ]
    total = len(visible)
    window = visible[(page - 1) * limit : page * limit]

    previews = node_db.list_nodes_for_horizons(conn, [w.id for w in window])
    items = [
        WorkspaceListItem(
            **workspace.model_dump(),
            nodes=[
                NodePreview(id=n.id, type=n.type, position=n.position, parent_id=n.parent_id)
                for n in previews[workspace.id]
            ],
        )
        for workspace in window
    ]
    return WorkspacePage(
        items=items,
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


def update_workspace(
    conn: sqlite3.Connection,
    user_id: str,
    horizon_id: str,
    update: WorkspaceUpdate,
) -> tuple[Workspace, SyncResult | None]:
    """Apply a partial horizon update; a `nodes` list triggers a bulk sync."""
    workspace = require_workspace(conn, horizon_id, user_id, "editor")
    fields = update.model_fields_set

    if "name" in fields and update.name is not None:
        name = update.name.strip()
        if not name:
            raise InvalidRequestError("Horizon name is required")
        workspace.name = name
    if "description" in fields and update.description is not None:
        workspace.description = update.description
    if "tags" in fields and update.tags is not None:
        workspace.tags = update.tags
    if "viewport" in fields and update.viewport is not None:
        workspace.viewport = update.viewport
    if "is_public" in fields and update.is_public is not None:
        workspace.is_public = update.is_public
    if "shared_with" in fields and update.shared_with is not None:
        now = utc_timestamp()
        workspace.shared_with = [
            share.model_copy(update={"shared_at": share.shared_at or now})
            for share in update.shared_with
        ]

    sync_result = None
    if "nodes" in fields and update.nodes is not None:
        sync_result = sync_workspace_nodes(conn, workspace, update.nodes, user_id)

    workspace.version += 1
    graph_engine.refresh_stats(conn, workspace)
    return workspace, sync_result


def delete_workspace(conn: sqlite3.Connection, user_id: str, horizon_id: str) -> int:
    """Soft delete a horizon and all of its nodes. Owner only."""
    workspace = workspace_db.get_workspace(conn, horizon_id)
    if workspace is None or not workspace.is_active:
        raise NotFoundError(f"Horizon not found: {horizon_id}")
    if workspace.user_id != user_id:
        raise ForbiddenError("Only the owner can delete a horizon")

    workspace.is_active = False
    workspace.updated_at = utc_timestamp()
    workspace_db.upsert_workspace(conn, workspace)
    return graph_engine.deactivate_horizon_nodes(conn, workspace.id)
