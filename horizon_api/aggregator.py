"""Workspace aggregator: the full read view of a horizon.

Reads self-heal: orphaned parent references are cleared (and persisted)
before edges are synthesized, so the client never sees a dangling link.
"""

import logging
import sqlite3

from horizon.graph.edges import build_edges
from horizon.models.entities import AgentSystem
from horizon.models.workspace import WorkspaceView
from horizon_api import entity_db, graph_engine, node_db
from horizon_api.guards import require_workspace

logger = logging.getLogger(__name__)


def get_workspace_view(conn: sqlite3.Connection, horizon_id: str, user_id: str) -> WorkspaceView:
    workspace = require_workspace(conn, horizon_id, user_id, "viewer")

    nodes = node_db.list_nodes(conn, workspace.id)
    report = graph_engine.repair_nodes(conn, nodes)
    if report.changed:
        logger.debug(
            "horizon %s: cleared %d orphaned parents, rebuilt %d children lists",
            workspace.id,
            len(report.cleared_parent_ids),
            len(report.rebuilt_children_ids),
        )

    edges = build_edges(nodes)
    logger.debug("horizon %s: %d nodes, %d edges", workspace.id, len(nodes), len(edges))

    agents = entity_db.list_entities(conn, "agent", workspace.id)
    data_agents = [agent.summary() for agent in agents if agent.system == AgentSystem.data]
    analyzer_agents = [agent.summary() for agent in agents if agent.system == AgentSystem.analyzer]

    return WorkspaceView(
        **workspace.model_dump(),
        nodes=nodes,
        edges=edges,
        portfolios=[p.summary() for p in entity_db.list_entities(conn, "portfolio", workspace.id)],
        teams=[t.summary() for t in entity_db.list_entities(conn, "team", workspace.id)],
        data_agents=data_agents,
        analyzer_agents=analyzer_agents,
        available_agents=data_agents,
        custom_agents=[a for a in data_agents + analyzer_agents if not a.is_builtin],
    )
