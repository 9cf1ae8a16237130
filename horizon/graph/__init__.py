"""Pure graph algorithms: traversal, repair planning, edge synthesis, sync planning."""

from horizon.graph.edges import build_edges, current_output_id
from horizon.graph.sync import SyncPlan, plan_sync
from horizon.graph.traversal import (
    collect_descendants,
    descendants_in,
    find_orphans,
    rebuild_children,
)

__all__ = [
    "build_edges",
    "collect_descendants",
    "current_output_id",
    "descendants_in",
    "find_orphans",
    "plan_sync",
    "rebuild_children",
    "SyncPlan",
]
