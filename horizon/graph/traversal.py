"""Tree traversal and structural repair over flat node documents.

Everything here is pure: callers load nodes (or provide a lookup for the
next level of children) and persist whatever comes back.
"""

from collections.abc import Callable, Iterable

from horizon.models.node import Node


def collect_descendants(
    root_id: str,
    children_of: Callable[[list[str]], Iterable[str]],
) -> list[str]:
    """Breadth-first walk down parent_id links.

    Args:
        root_id: node whose descendants are wanted (not included in the result)
        children_of: returns ids of active nodes whose parent_id is in the
            given frontier; called once per tree level

    Returns:
        descendant ids in discovery order

    Ids already seen are never enqueued again, so a corrupt cycle ends the
    walk instead of looping forever.
    """
    visited = {root_id}
    descendants: list[str] = []
    frontier = [root_id]

    while frontier:
        next_frontier = []
        for child_id in children_of(frontier):
            if child_id in visited:
                continue
            visited.add(child_id)
            descendants.append(child_id)
            next_frontier.append(child_id)
        frontier = next_frontier

    return descendants


def descendants_in(nodes: Iterable[Node], root_id: str) -> list[str]:
    """Same walk as collect_descendants over an in-memory node list."""
    by_parent: dict[str, list[str]] = {}
    for node in nodes:
        if node.is_active and node.parent_id:
            by_parent.setdefault(node.parent_id, []).append(node.id)

    def children_of(frontier: list[str]) -> list[str]:
        found = []
        for parent_id in frontier:
            found.extend(by_parent.get(parent_id, []))
        return found

    return collect_descendants(root_id, children_of)


def find_orphans(nodes: Iterable[Node]) -> list[Node]:
    """Active nodes whose parent_id does not name another active node in the list.

    `nodes` is expected to be one horizon's node set; a node pointing at
    itself counts as orphaned.
    """
    nodes = list(nodes)
    active_ids = {node.id for node in nodes if node.is_active}
    return [
        node
        for node in nodes
        if node.is_active
        and node.parent_id is not None
        and (node.parent_id not in active_ids or node.parent_id == node.id)
    ]


def rebuild_children(nodes: Iterable[Node]) -> dict[str, list[str]]:
    """Recompute the children mirror from parent_id.

    Existing order is kept for ids that are still valid children; missing
    ones are appended in the order the nodes are given (creation order).

    Returns:
        {node_id: children} for nodes whose stored list differs
    """
    nodes = [node for node in nodes if node.is_active]
    expected: dict[str, list[str]] = {node.id: [] for node in nodes}
    for node in nodes:
        if node.parent_id in expected and node.parent_id != node.id:
            expected[node.parent_id].append(node.id)

    changes = {}
    for node in nodes:
        actual = expected[node.id]
        wanted = set(actual)
        kept = [child_id for child_id in dict.fromkeys(node.children) if child_id in wanted]
        already = set(kept)
        rebuilt = kept + [child_id for child_id in actual if child_id not in already]
        if rebuilt != node.children:
            changes[node.id] = rebuilt
    return changes
