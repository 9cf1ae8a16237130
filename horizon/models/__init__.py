"""Core data models for horizon graphs."""

from horizon.models.entities import (
    Agent,
    AgentCreate,
    AgentSummary,
    AgentSystem,
    Portfolio,
    PortfolioCreate,
    PortfolioSummary,
    Team,
    TeamCreate,
    TeamSummary,
)
from horizon.models.node import (
    Node,
    NodeCreate,
    NodeType,
    NodeUpdate,
    Position,
    SyncNode,
)
from horizon.models.workspace import (
    Edge,
    EdgeKind,
    SharedWith,
    ShareRole,
    SyncResult,
    Viewport,
    Workspace,
    WorkspaceCreate,
    WorkspacePage,
    WorkspaceStats,
    WorkspaceUpdate,
    WorkspaceView,
)

__all__ = [
    # Nodes
    "Node",
    "NodeCreate",
    "NodeType",
    "NodeUpdate",
    "Position",
    "SyncNode",
    # Horizons
    "Edge",
    "EdgeKind",
    "SharedWith",
    "ShareRole",
    "SyncResult",
    "Viewport",
    "Workspace",
    "WorkspaceCreate",
    "WorkspacePage",
    "WorkspaceStats",
    "WorkspaceUpdate",
    "WorkspaceView",
    # Related entities
    "Agent",
    "AgentCreate",
    "AgentSummary",
    "AgentSystem",
    "Portfolio",
    "PortfolioCreate",
    "PortfolioSummary",
    "Team",
    "TeamCreate",
    "TeamSummary",
]
