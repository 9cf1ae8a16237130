"""ID generation and timestamp utilities."""

import uuid
from datetime import datetime, timezone


def generate_node_id() -> str:
    """Generate a unique node ID (UUID4)."""
    return str(uuid.uuid4())


def generate_horizon_id() -> str:
    """Generate a unique horizon (workspace) ID (UUID4)."""
    return str(uuid.uuid4())


def generate_entity_id() -> str:
    """Generate a unique ID for agents, portfolios and teams (UUID4)."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
