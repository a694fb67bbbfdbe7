"""OpenAPI document tree: node kinds, nesting descriptors and tree helpers."""

from __future__ import annotations

from .nesting import NESTING, OPERATION_KINDS, SCHEMA_KINDS, NestingDescriptor, NodeKind, get_nesting
from .nodes import UNDEFINED, Node, wire_name
from . import util

__all__ = [
    "NESTING",
    "OPERATION_KINDS",
    "SCHEMA_KINDS",
    "NestingDescriptor",
    "NodeKind",
    "get_nesting",
    "UNDEFINED",
    "Node",
    "wire_name",
    "util",
    "new_document",
]


def new_document(openapi: str | None = None) -> Node:
    """Create an empty document root carrying the configured OpenAPI version."""
    if openapi is None:
        from apidescriber.config import get_config

        openapi = get_config().openapi_version
    return Node(NodeKind.OPENAPI, {"openapi": openapi})
