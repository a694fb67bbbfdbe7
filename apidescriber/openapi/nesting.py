# apidescriber/openapi/nesting.py
"""Node kinds and the nesting descriptor table.

Every node kind declares which child kinds it may hold and where:

- **singular** slots hold at most one child (``Schema.items``);
- **collection** slots hold an ordered list of children of one kind,
  optionally with the fields that identify an item when merging
  (``Operation.parameters`` is matched on ``name`` and ``in``);
- **indexed** slots hold children keyed by a single scalar field
  (``Schema.properties`` keyed by ``property``).

The table is closed: a node kind has no children outside its descriptor,
and the tree utility refuses anything the table does not declare.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Closed set of OpenAPI node kinds."""

    OPENAPI = "OpenApi"
    INFO = "Info"
    CONTACT = "Contact"
    LICENSE = "License"
    SERVER = "Server"
    PATH_ITEM = "PathItem"
    GET = "Get"
    PUT = "Put"
    POST = "Post"
    PATCH = "Patch"
    DELETE = "Delete"
    OPTIONS = "Options"
    HEAD = "Head"
    PARAMETER = "Parameter"
    REQUEST_BODY = "RequestBody"
    MEDIA_TYPE = "MediaType"
    RESPONSE = "Response"
    HEADER = "Header"
    COMPONENTS = "Components"
    SCHEMA = "Schema"
    PROPERTY = "Property"
    ITEMS = "Items"
    ADDITIONAL_PROPERTIES = "AdditionalProperties"
    TAG = "Tag"
    EXTERNAL_DOCUMENTATION = "ExternalDocumentation"


OPERATION_KINDS: dict[str, NodeKind] = {
    "get": NodeKind.GET,
    "put": NodeKind.PUT,
    "post": NodeKind.POST,
    "patch": NodeKind.PATCH,
    "delete": NodeKind.DELETE,
    "options": NodeKind.OPTIONS,
    "head": NodeKind.HEAD,
}
"""HTTP method -> operation node kind."""

SCHEMA_KINDS: tuple[NodeKind, ...] = (
    NodeKind.SCHEMA,
    NodeKind.PROPERTY,
    NodeKind.ITEMS,
    NodeKind.ADDITIONAL_PROPERTIES,
)
"""Kinds that share the schema object layout."""


# ---------------------------------------------------------------------------
# Descriptor types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollectionSlot:
    """Ordered list slot; ``match`` names the identifying fields used by merges."""

    name: str
    match: tuple[str, ...] = ()


@dataclass(frozen=True)
class IndexedSlot:
    """Keyed list slot; each member is unique on its ``key`` field."""

    name: str
    key: str


@dataclass(frozen=True)
class NestingDescriptor:
    """Child slots of one node kind."""

    singular: dict[NodeKind, str] = field(default_factory=dict)
    collections: dict[NodeKind, CollectionSlot] = field(default_factory=dict)
    indexed: dict[NodeKind, IndexedSlot] = field(default_factory=dict)
    boolean_slots: frozenset[str] = frozenset()

    def slot_names(self) -> tuple[str, ...]:
        """Attribute names of every child slot, in declaration order."""
        names = list(self.singular.values())
        names.extend(slot.name for slot in self.collections.values())
        names.extend(slot.name for slot in self.indexed.values())
        return tuple(names)


# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

_PARAMETERS = CollectionSlot("parameters", match=("name", "in_"))

_OPERATION = NestingDescriptor(
    singular={
        NodeKind.REQUEST_BODY: "request_body",
        NodeKind.EXTERNAL_DOCUMENTATION: "external_docs",
    },
    collections={NodeKind.PARAMETER: _PARAMETERS},
    indexed={NodeKind.RESPONSE: IndexedSlot("responses", "response")},
)

_SCHEMA = NestingDescriptor(
    singular={
        NodeKind.ITEMS: "items",
        NodeKind.ADDITIONAL_PROPERTIES: "additional_properties",
        NodeKind.EXTERNAL_DOCUMENTATION: "external_docs",
    },
    indexed={NodeKind.PROPERTY: IndexedSlot("properties", "property")},
    boolean_slots=frozenset({"additional_properties"}),
)

_LEAF = NestingDescriptor()

NESTING: dict[NodeKind, NestingDescriptor] = {
    NodeKind.OPENAPI: NestingDescriptor(
        singular={
            NodeKind.INFO: "info",
            NodeKind.COMPONENTS: "components",
            NodeKind.EXTERNAL_DOCUMENTATION: "external_docs",
        },
        collections={
            NodeKind.SERVER: CollectionSlot("servers", match=("url",)),
            NodeKind.TAG: CollectionSlot("tags", match=("name",)),
        },
        indexed={NodeKind.PATH_ITEM: IndexedSlot("paths", "path")},
    ),
    NodeKind.INFO: NestingDescriptor(
        singular={NodeKind.CONTACT: "contact", NodeKind.LICENSE: "license"},
    ),
    NodeKind.CONTACT: _LEAF,
    NodeKind.LICENSE: _LEAF,
    NodeKind.SERVER: _LEAF,
    NodeKind.PATH_ITEM: NestingDescriptor(
        singular={kind: method for method, kind in OPERATION_KINDS.items()},
        collections={NodeKind.PARAMETER: _PARAMETERS},
    ),
    **{kind: _OPERATION for kind in OPERATION_KINDS.values()},
    NodeKind.PARAMETER: NestingDescriptor(singular={NodeKind.SCHEMA: "schema"}),
    NodeKind.REQUEST_BODY: NestingDescriptor(
        indexed={NodeKind.MEDIA_TYPE: IndexedSlot("content", "media_type")},
    ),
    NodeKind.MEDIA_TYPE: NestingDescriptor(singular={NodeKind.SCHEMA: "schema"}),
    NodeKind.RESPONSE: NestingDescriptor(
        indexed={
            NodeKind.HEADER: IndexedSlot("headers", "header"),
            NodeKind.MEDIA_TYPE: IndexedSlot("content", "media_type"),
        },
    ),
    NodeKind.HEADER: NestingDescriptor(singular={NodeKind.SCHEMA: "schema"}),
    NodeKind.COMPONENTS: NestingDescriptor(
        indexed={
            NodeKind.SCHEMA: IndexedSlot("schemas", "schema"),
            NodeKind.RESPONSE: IndexedSlot("responses", "response"),
            NodeKind.PARAMETER: IndexedSlot("parameters", "parameter"),
            NodeKind.HEADER: IndexedSlot("headers", "header"),
        },
    ),
    **{kind: _SCHEMA for kind in SCHEMA_KINDS},
    NodeKind.TAG: NestingDescriptor(
        singular={NodeKind.EXTERNAL_DOCUMENTATION: "external_docs"},
    ),
    NodeKind.EXTERNAL_DOCUMENTATION: _LEAF,
}


def get_nesting(kind: NodeKind) -> NestingDescriptor:
    """Return the nesting descriptor of ``kind``."""
    return NESTING[kind]


def nested_slot_names(kind: NodeKind) -> frozenset[str]:
    """Attribute names that ``kind`` reserves for child nodes."""
    return frozenset(NESTING[kind].slot_names())


def index_keys() -> dict[NodeKind, frozenset[str]]:
    """Key fields each kind carries because some parent indexes it."""
    keys: dict[NodeKind, set[str]] = {}
    for descriptor in NESTING.values():
        for kind, slot in descriptor.indexed.items():
            keys.setdefault(kind, set()).add(slot.key)
    return {kind: frozenset(names) for kind, names in keys.items()}
