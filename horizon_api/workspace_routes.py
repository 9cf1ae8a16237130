"""API routes for horizons."""

from fastapi import APIRouter, Depends, Query

from horizon.models.workspace import (
    Workspace,
    WorkspaceCreate,
    WorkspacePage,
    WorkspaceUpdate,
    WorkspaceView,
)
from horizon_api import aggregator, workspaces
from horizon_api.db import transaction
from horizon_api.guards import current_user

router = APIRouter()


@router.get("/horizons")
def list_horizons(
    page: int = 1,
    limit: int | None = None,
    search: str = "",
    tags: list[str] = Query(default=[]),
    user_id: str = Depends(current_user),
) -> WorkspacePage:
    """list horizons visible to the caller, with a node preview each."""
    with transaction() as conn:
        return workspaces.list_workspaces(conn, user_id, page=page, limit=limit, search=search, tags=tags)


@router.get("/horizons/{horizon_id}")
def get_horizon(horizon_id: str, user_id: str = Depends(current_user)) -> WorkspaceView:
    """full horizon view: repaired nodes, derived edges and related entities."""
    with transaction() as conn:
        return aggregator.get_workspace_view(conn, horizon_id, user_id)


@router.post("/horizons", status_code=201)
def create_horizon(request: WorkspaceCreate, user_id: str = Depends(current_user)) -> Workspace:
    with transaction() as conn:
        return workspaces.create_workspace(conn, user_id, request)


@router.put("/horizons/{horizon_id}")
def update_horizon(
    horizon_id: str,
    request: WorkspaceUpdate,
    user_id: str = Depends(current_user),
) -> dict:
    """update horizon fields; a `nodes` list is synced into the node store.

    Edges are never accepted from the client, they are derived on read.
    """
    with transaction() as conn:
        workspace, sync_result = workspaces.update_workspace(conn, user_id, horizon_id, request)
    return {
        "horizon": workspace.model_dump(by_alias=True),
        "sync": sync_result.model_dump(by_alias=True) if sync_result else None,
    }


@router.delete("/horizons/{horizon_id}")
def delete_horizon(horizon_id: str, user_id: str = Depends(current_user)) -> dict:
    """soft delete a horizon and all its nodes."""
    with transaction() as conn:
        deactivated = workspaces.delete_workspace(conn, user_id, horizon_id)
    return {"deleted": horizon_id, "deactivatedNodes": deactivated}
