"""Planning for bulk horizon saves.

The client sends its whole node list with ids it minted itself; the plan
splits it into updates, creates and ids the client no longer has.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from horizon.errors import InvalidRequestError
from horizon.models.node import SyncNode


@dataclass
class SyncPlan:
    to_update: list[SyncNode] = field(default_factory=list)
    to_create: list[SyncNode] = field(default_factory=list)
    stale_ids: list[str] = field(default_factory=list)


def plan_sync(existing_ids: Iterable[str], client_nodes: list[SyncNode]) -> SyncPlan:
    """Diff stored active node ids against a client submission.

    Raises:
        InvalidRequestError: the submission names the same id twice
    """
    existing_ids = list(existing_ids)
    existing = set(existing_ids)

    seen: set[str] = set()
    plan = SyncPlan()
    for node in client_nodes:
        if node.id in seen:
            raise InvalidRequestError(f"Duplicate node id in submission: {node.id}")
        seen.add(node.id)
        if node.id in existing:
            plan.to_update.append(node)
        else:
            plan.to_create.append(node)

    plan.stale_ids = [node_id for node_id in existing_ids if node_id not in seen]
    return plan
