"""Drone reference query helpers."""

from .query import (
    AttributeQuery,
    filter_by_cooling,
    get_by_id,
    query,
    query_available_drones,
    query_by_attribute,
)

__all__ = [
    "AttributeQuery",
    "filter_by_cooling",
    "get_by_id",
    "query",
    "query_by_attribute",
    "query_available_drones",
]
