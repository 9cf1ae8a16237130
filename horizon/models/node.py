"""Data model for graph nodes.

Nodes are stored flat, one document per node. The tree is expressed by
`parent_id` back-references; `children` mirrors the reverse relation for
traversal convenience and is rebuilt from `parent_id` on repair.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

# camelCase on the wire, snake_case in python; both accepted on input
CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class NodeType(str, Enum):
    """Kinds of nodes a user can place on a horizon."""

    agent = "agent"
    portfolio = "portfolio"
    team = "team"
    custom = "custom"
    output = "output"
    block = "block"

    @classmethod
    def _missing_(cls, value: object):
        # older clients send "agentNode", "outputNode", ...
        if isinstance(value, str) and value.endswith("Node"):
            return cls.__members__.get(value[: -len("Node")])
        return None


class Position(BaseModel):
    """canvas coordinate, no effect on graph logic."""

    x: float = 0
    y: float = 0


class Node(BaseModel):
    """A vertex in a horizon graph."""

    model_config = {**CAMEL_CONFIG, "extra": "forbid"}

    # identifiers
    id: str
    horizon_id: str
    user_id: str

    type: NodeType = NodeType.agent

    # structure
    parent_id: str | None = None
    children: list[str] = []
    input_node_ids: list[str] = []  # data-flow inputs, not tree parents
    child_node_ids: list[str] = []  # block nodes only

    position: Position = Position()
    data: dict[str, Any] = {}  # opaque payload keyed by type

    selected: bool = False
    is_active: bool = True
    execution_order: int = 0

    created_at: str
    updated_at: str


class NodeCreate(BaseModel):
    """Request body for creating a node.

    horizon_id and type are checked by the engine rather than by pydantic so
    that a missing field is reported as a 400 before anything is written.
    """

    model_config = CAMEL_CONFIG

    id: str | None = None  # client-minted id for optimistic creation
    horizon_id: str | None = None
    type: NodeType | None = None
    parent_id: str | None = None
    position: Position | None = None
    data: dict[str, Any] | None = None
    execution_order: int | None = None
    input_node_ids: list[str] | None = None
    child_node_ids: list[str] | None = None


class NodeUpdate(BaseModel):
    """Partial update of a node; only fields present in the request apply."""

    model_config = CAMEL_CONFIG

    type: NodeType | None = None
    parent_id: str | None = None
    position: Position | None = None
    data: dict[str, Any] | None = None
    execution_order: int | None = None
    selected: bool | None = None
    input_node_ids: list[str] | None = None
    child_node_ids: list[str] | None = None


class SyncNode(BaseModel):
    """One node as submitted by the client in a bulk horizon save."""

    model_config = CAMEL_CONFIG

    id: str
    type: NodeType = NodeType.agent
    position: Position = Position()
    data: dict[str, Any] = {}
    selected: bool = False
