"""
Utils Package

Serialization and file helpers for the core models.
"""

from .serialization import (
    serialize_question,
    deserialize_question,
    serialize_pool,
    deserialize_pool,
    serialize_selection,
    serialize_preview_request,
    deserialize_preview,
    load_pool_json,
    save_pool_json,
)

__all__ = [
    "serialize_question",
    "deserialize_question",
    "serialize_pool",
    "deserialize_pool",
    "serialize_selection",
    "serialize_preview_request",
    "deserialize_preview",
    "load_pool_json",
    "save_pool_json",
]
