"""Tests for model serialization and access rules."""

import pytest
from pydantic import ValidationError

from horizon.errors import InvalidRequestError
from horizon.graph.sync import plan_sync
from horizon.models.node import Node, NodeCreate, NodeType, SyncNode
from horizon.models.workspace import SharedWith, ShareRole, Workspace
from horizon.utils.identifiers import utc_timestamp


def _workspace(**fields) -> Workspace:
    now = utc_timestamp()
    return Workspace(id="h1", user_id="owner", name="Research", created_at=now, updated_at=now, **fields)


class TestNodeSerialization:
    def test_dumps_camel_case(self):
        now = utc_timestamp()
        node = Node(
            id="n1",
            horizon_id="h1",
            user_id="u1",
            parent_id="p1",
            input_node_ids=["d1"],
            created_at=now,
            updated_at=now,
        )
        dumped = node.model_dump(by_alias=True)

        assert dumped["parentId"] == "p1"
        assert dumped["horizonId"] == "h1"
        assert dumped["inputNodeIds"] == ["d1"]
        assert dumped["isActive"] is True

    def test_accepts_camel_and_snake_case(self):
        camel = NodeCreate.model_validate({"horizonId": "h1", "type": "agent", "parentId": "p1"})
        snake = NodeCreate.model_validate({"horizon_id": "h1", "type": "agent", "parent_id": "p1"})
        assert camel == snake

    def test_legacy_type_names(self):
        """older clients send agentNode / outputNode."""
        request = NodeCreate.model_validate({"horizonId": "h1", "type": "outputNode"})
        assert request.type == NodeType.output

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            NodeCreate.model_validate({"horizonId": "h1", "type": "spaceship"})

    def test_store_round_trip_keeps_structure(self):
        now = utc_timestamp()
        node = Node(
            id="n1",
            horizon_id="h1",
            user_id="u1",
            type=NodeType.block,
            children=["a", "b"],
            child_node_ids=["c"],
            created_at=now,
            updated_at=now,
        )
        restored = Node.model_validate_json(node.model_dump_json())
        assert restored == node


class TestWorkspaceAccess:
    def test_owner_can_edit(self):
        assert _workspace().has_access("owner", "editor")

    def test_stranger_cannot_view_private(self):
        assert not _workspace().has_access("someone", "viewer")

    def test_public_is_view_only(self):
        workspace = _workspace(is_public=True)
        assert workspace.has_access("someone", "viewer")
        assert not workspace.has_access("someone", "editor")

    def test_shared_viewer(self):
        workspace = _workspace(shared_with=[SharedWith(user_id="bob")])
        assert workspace.has_access("bob", "viewer")
        assert not workspace.has_access("bob", "editor")

    def test_shared_editor(self):
        workspace = _workspace(shared_with=[SharedWith(user_id="bob", role=ShareRole.editor)])
        assert workspace.has_access("bob", "editor")


class TestPlanSync:
    def test_splits_update_create_stale(self):
        plan = plan_sync(
            ["a", "b", "c"],
            [SyncNode(id="b"), SyncNode(id="d"), SyncNode(id="a")],
        )
        assert [n.id for n in plan.to_update] == ["b", "a"]
        assert [n.id for n in plan.to_create] == ["d"]
        assert plan.stale_ids == ["c"]

    def test_empty_submission_marks_everything_stale(self):
        plan = plan_sync(["a", "b"], [])
        assert plan.to_update == []
        assert plan.to_create == []
        assert plan.stale_ids == ["a", "b"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(InvalidRequestError):
            plan_sync([], [SyncNode(id="x"), SyncNode(id="x")])
