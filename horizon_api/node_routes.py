"""API routes for graph nodes."""

from fastapi import APIRouter, Depends, HTTPException, Query

from horizon.models.node import Node, NodeCreate, NodeUpdate
from horizon_api import graph_engine
from horizon_api.db import transaction
from horizon_api.guards import current_user

router = APIRouter()


@router.post("/nodes", status_code=201)
def create_node(request: NodeCreate, user_id: str = Depends(current_user)) -> Node:
    """create a node, linking it under its parent when one is given."""
    with transaction() as conn:
        return graph_engine.create_node(conn, user_id, request)


@router.put("/nodes/{node_id}")
def update_node(node_id: str, request: NodeUpdate, user_id: str = Depends(current_user)) -> Node:
    """partially update a node; a new parentId moves it in the tree."""
    with transaction() as conn:
        return graph_engine.update_node(conn, user_id, node_id, request)


@router.delete("/nodes/{node_id}")
def delete_node(node_id: str, user_id: str = Depends(current_user)) -> dict:
    """soft delete a node and every node below it."""
    with transaction() as conn:
        deleted = graph_engine.delete_node(conn, user_id, node_id)
    return {
        "deletedCount": deleted,
        "message": f"Node and {deleted} descendants deleted successfully",
    }


@router.patch("/nodes/{node_id}/reactivate")
def reactivate_output(node_id: str, user_id: str = Depends(current_user)) -> Node:
    """reactivate an output revision."""
    with transaction() as conn:
        return graph_engine.reactivate_output(conn, user_id, node_id)


@router.get("/nodes/by-agent/{agent_node_id}")
def list_agent_outputs(
    agent_node_id: str,
    horizon_id: str | None = Query(default=None, alias="horizonId"),
    user_id: str = Depends(current_user),
) -> dict:
    """all output revisions of an agent node, newest first."""
    if not horizon_id:
        raise HTTPException(status_code=400, detail="horizonId query parameter is required")
    with transaction() as conn:
        outputs = graph_engine.output_history(conn, user_id, horizon_id, agent_node_id)
    return {
        "agentNodeId": agent_node_id,
        "total": len(outputs),
        "outputs": [output.model_dump(by_alias=True) for output in outputs],
    }
