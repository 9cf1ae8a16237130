"""Edge synthesis for rendering a horizon.

Edges are derived from node fields on every read:

1. parent_id gives a tree edge parent -> node. Output nodes only get one
   when they are their parent's current output; superseded revisions stay
   linked by parent_id but are not drawn.
2. input_node_ids give data-flow edges input -> node, skipped when the same
   (source, target) pair was already emitted.
"""

import logging
from collections.abc import Iterable

from horizon.models.node import Node, NodeType
from horizon.models.workspace import Edge, EdgeKind

logger = logging.getLogger(__name__)


def current_output_id(parent: Node, node_map: dict[str, Node]) -> str | None:
    """The output most recently recorded in the parent's children list."""
    for child_id in reversed(parent.children):
        child = node_map.get(child_id)
        if child is not None and child.type == NodeType.output:
            return child_id
    return None


def _edge(source: str, target: str, kind: EdgeKind, output=None) -> Edge:
    return Edge(
        id=f"edge-{source}-{target}",
        source=source,
        target=target,
        kind=kind,
        data={"output": output},
    )


def build_edges(nodes: Iterable[Node]) -> list[Edge]:
    """Build the edge list for a horizon's active nodes.

    Order follows node iteration order (tree edges first, then input
    edges), so the same input always yields the same list.
    """
    nodes = [node for node in nodes if node.is_active]
    node_map = {node.id: node for node in nodes}

    edges: list[Edge] = []
    seen: set[tuple[str, str]] = set()

    for node in nodes:
        if not node.parent_id:
            continue

        if node.type == NodeType.output:
            parent = node_map.get(node.parent_id)
            if parent is None or current_output_id(parent, node_map) != node.id:
                logger.debug(
                    "skipping edge for output %s: not the current output of %s",
                    node.id,
                    node.parent_id,
                )
                continue

        pair = (node.parent_id, node.id)
        if pair in seen:
            continue
        seen.add(pair)
        edges.append(_edge(node.parent_id, node.id, EdgeKind.parent, node.data.get("output")))

    for node in nodes:
        for input_id in node.input_node_ids:
            pair = (input_id, node.id)
            # inputs must be live nodes of this horizon
            if pair in seen or input_id not in node_map:
                continue
            seen.add(pair)
            edges.append(_edge(input_id, node.id, EdgeKind.input))

    return edges
