"""Horizon - node graph core for the pipeline builder backend."""

from horizon.errors import (
    ConflictError,
    ForbiddenError,
    HorizonError,
    InvalidRequestError,
    NotFoundError,
)
from horizon.graph import build_edges, collect_descendants, find_orphans, plan_sync
from horizon.models import Node, NodeType, Workspace, WorkspaceView

__all__ = [
    # Errors
    "ConflictError",
    "ForbiddenError",
    "HorizonError",
    "InvalidRequestError",
    "NotFoundError",
    # Models
    "Node",
    "NodeType",
    "Workspace",
    "WorkspaceView",
    # Graph algorithms
    "build_edges",
    "collect_descendants",
    "find_orphans",
    "plan_sync",
]
