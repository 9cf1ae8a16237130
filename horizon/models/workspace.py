"""Data model for horizons (workspaces) and their assembled read view.

Edges are never stored: they are synthesized from node fields on every read.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from horizon.models.entities import AgentSummary, PortfolioSummary, TeamSummary
from horizon.models.node import CAMEL_CONFIG, Node, NodeType, Position, SyncNode


class ShareRole(str, Enum):
    viewer = "viewer"
    editor = "editor"


class SharedWith(BaseModel):
    """a user the horizon is shared with."""

    model_config = CAMEL_CONFIG

    user_id: str
    role: ShareRole = ShareRole.viewer
    shared_at: str | None = None


class Viewport(BaseModel):
    x: float = 0
    y: float = 0
    zoom: float = 0.9


class WorkspaceStats(BaseModel):
    """counters derived from live node and entity state."""

    model_config = CAMEL_CONFIG

    node_count: int = 0
    edge_count: int = 0  # active nodes with a parent
    agent_count: int = 0
    portfolio_count: int = 0


class Workspace(BaseModel):
    """A user-owned container for a node graph (a "Horizon")."""

    model_config = CAMEL_CONFIG

    id: str
    user_id: str  # owner
    name: str
    description: str = ""
    tags: list[str] = []
    viewport: Viewport = Viewport()

    is_public: bool = False
    is_active: bool = True
    shared_with: list[SharedWith] = []

    stats: WorkspaceStats = WorkspaceStats()
    version: int = 1

    created_at: str
    updated_at: str

    def has_access(self, user_id: str, required_role: str = "viewer") -> bool:
        """Check whether a user may view or edit this horizon.

        Owners can do anything, public horizons are viewable by everyone,
        and shared users get the role they were granted.
        """
        if self.user_id == user_id:
            return True

        if self.is_public and required_role == ShareRole.viewer:
            return True

        shared = next((s for s in self.shared_with if s.user_id == user_id), None)
        if shared is None:
            return False

        if required_role == ShareRole.viewer:
            return True
        if required_role == ShareRole.editor:
            return shared.role == ShareRole.editor
        return False


class WorkspaceCreate(BaseModel):
    """request body for creating a horizon."""

    model_config = CAMEL_CONFIG

    name: str
    description: str = ""
    tags: list[str] = []
    viewport: Viewport | None = None
    is_public: bool = False
    shared_with: list[SharedWith] = []


class WorkspaceUpdate(BaseModel):
    """Partial update of a horizon.

    When `nodes` is present the submitted list is reconciled against the
    stored nodes (bulk save).
    """

    model_config = CAMEL_CONFIG

    name: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    viewport: Viewport | None = None
    is_public: bool | None = None
    shared_with: list[SharedWith] | None = None
    nodes: list[SyncNode] | None = None


class EdgeKind(str, Enum):
    parent = "parent"  # tree edge from parent_id
    input = "input"  # data-flow edge from input_node_ids


class Edge(BaseModel):
    """a presentation-layer edge, derived and never persisted."""

    id: str
    source: str
    target: str
    kind: EdgeKind
    type: str = "custom"
    animated: bool = False
    data: dict[str, Any] = {}


class WorkspaceView(Workspace):
    """Everything the client needs to render a horizon."""

    nodes: list[Node] = []
    edges: list[Edge] = []
    portfolios: list[PortfolioSummary] = []
    teams: list[TeamSummary] = []
    data_agents: list[AgentSummary] = []
    analyzer_agents: list[AgentSummary] = []
    available_agents: list[AgentSummary] = []  # same as data_agents, kept for older clients
    custom_agents: list[AgentSummary] = []


class NodePreview(BaseModel):
    """light node shape attached to horizon listings."""

    model_config = CAMEL_CONFIG

    id: str
    type: NodeType
    position: Position
    parent_id: str | None = None


class WorkspaceListItem(Workspace):
    nodes: list[NodePreview] = []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class WorkspacePage(BaseModel):
    items: list[WorkspaceListItem]
    pagination: Pagination


class SyncResult(BaseModel):
    """Outcome of reconciling a client node list with stored nodes."""

    model_config = CAMEL_CONFIG

    created: list[str] = []
    updated: list[str] = []
    stale_ids: list[str] = []  # stored but absent from the submission
    deactivated: list[str] = []
    stats: WorkspaceStats = WorkspaceStats()
