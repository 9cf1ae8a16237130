"""Utility functions for the horizon core."""

from horizon.utils.identifiers import (
    generate_entity_id,
    generate_horizon_id,
    generate_node_id,
    utc_timestamp,
)

__all__ = [
    "generate_entity_id",
    "generate_horizon_id",
    "generate_node_id",
    "utc_timestamp",
]
