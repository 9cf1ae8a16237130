"""Shared fixtures: a throwaway SQLite database per test."""

import pytest

from horizon.models.node import Node, NodeCreate, NodeType
from horizon.models.workspace import Workspace, WorkspaceCreate
from horizon_api import db, graph_engine, node_db, workspaces

OWNER = "user-a"
STRANGER = "user-b"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the store at a fresh database file."""
    path = tmp_path / "horizon.db"
    monkeypatch.setattr(db, "DB_PATH", path)
    db.init_all()
    return path


@pytest.fixture
def workspace(db_path) -> Workspace:
    with db.transaction() as conn:
        return workspaces.create_workspace(conn, OWNER, WorkspaceCreate(name="Research"))


@pytest.fixture
def make_node(workspace):
    """Create a node through the engine, the way the API does."""

    def _make(
        node_type: NodeType = NodeType.agent,
        parent_id: str | None = None,
        horizon_id: str | None = None,
        user_id: str = OWNER,
        **fields,
    ) -> Node:
        request = NodeCreate(
            horizon_id=horizon_id or workspace.id,
            type=node_type,
            parent_id=parent_id,
            **fields,
        )
        with db.transaction() as conn:
            return graph_engine.create_node(conn, user_id, request)

    return _make


@pytest.fixture
def load_node(db_path):
    """Read a node straight from the store."""

    def _load(node_id: str) -> Node:
        with db.transaction() as conn:
            return node_db.get_node(conn, node_id)

    return _load


@pytest.fixture
def client(db_path):
    from fastapi.testclient import TestClient

    from horizon_api.app import app

    with TestClient(app) as test_client:
        yield test_client
