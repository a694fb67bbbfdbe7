# apidescriber/openapi/util.py
"""Find-or-create and deep-merge helpers over the schema tree.

Everything here is driven by the nesting descriptor table; no function
knows about a particular node kind beyond the convenience accessors at the
top.  The general helpers are:

- :func:`get_child`: singular slot, created on first access;
- :func:`get_collection_item`: ordered slot, matched on a set of fields;
- :func:`get_indexed_collection_item`: keyed slot, matched on its key field.

Each of them searches first (:func:`search_collection_item`,
:func:`search_indexed_collection_item`) and otherwise creates the child
through :func:`create_collection_item` / :func:`create_child`.

:func:`merge` folds a node, or a nested mapping in the shape of a
serialized OpenAPI document, into an existing node.  Scalars only replace
values that are still ``UNDEFINED`` unless ``overwrite`` is set, so manual
values survive automatic ones while a forced re-import replaces everything.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Literal

from apidescriber.config import get_config
from apidescriber.errors import NestingError, SchemaMergeError

from .nesting import (
    OPERATION_KINDS,
    CollectionSlot,
    IndexedSlot,
    NodeKind,
    get_nesting,
    nested_slot_names,
)
from .nodes import ARRAY_FIELDS, UNDEFINED, Node, field_for_wire, wire_name

logger = logging.getLogger(__name__)

MergePolicy = Literal["error", "warn"]

__all__ = [
    "get_path",
    "get_operation",
    "get_operation_parameter",
    "get_schema",
    "get_property",
    "get_component_schema",
    "get_child",
    "get_collection_item",
    "get_indexed_collection_item",
    "search_collection_item",
    "search_indexed_collection_item",
    "create_collection_item",
    "create_child",
    "remove_indexed_collection_item",
    "merge",
]


# ---------------------------------------------------------------------------
# Convenience accessors
# ---------------------------------------------------------------------------


def get_path(api: Node, path: str) -> Node:
    """Return the path item for ``path``, creating it under ``api.paths``."""
    return get_indexed_collection_item(api, NodeKind.PATH_ITEM, path)


def get_component_schema(api: Node, name: str) -> Node:
    """Return ``components.schemas[name]``, creating both levels as needed."""
    components = get_child(api, NodeKind.COMPONENTS)
    return get_indexed_collection_item(components, NodeKind.SCHEMA, name)


def get_schema(node: Node) -> Node:
    """Return the ``schema`` child of a parameter, header or media type."""
    return get_child(node, NodeKind.SCHEMA)


def get_property(schema: Node, name: str) -> Node:
    """Return ``schema.properties[name]``, creating it if needed."""
    return get_indexed_collection_item(schema, NodeKind.PROPERTY, name)


def get_operation(path_item: Node, method: str) -> Node:
    """Return the operation for an HTTP ``method`` of ``path_item``."""
    try:
        kind = OPERATION_KINDS[method.lower()]
    except KeyError:
        raise NestingError(f"Unknown HTTP method {method!r}.") from None
    return get_child(path_item, kind, {"path": path_item.path})


def get_operation_parameter(operation: Node, name: str, in_: str) -> Node:
    """Return the parameter of ``operation`` with this ``name`` and location."""
    return get_collection_item(operation, NodeKind.PARAMETER, {"name": name, "in_": in_})


# ---------------------------------------------------------------------------
# Find-or-create
# ---------------------------------------------------------------------------


def _singular_slot(parent: Node, kind: NodeKind) -> str:
    slot = get_nesting(parent.kind).singular.get(kind)
    if slot is None:
        raise NestingError(
            f"{kind.value} is not a singular child of {parent.kind.value} ({parent.location})."
        )
    return slot


def _collection_slot(parent: Node, kind: NodeKind) -> CollectionSlot:
    slot = get_nesting(parent.kind).collections.get(kind)
    if slot is None:
        raise NestingError(
            f"{kind.value} is not a collection child of {parent.kind.value} ({parent.location})."
        )
    return slot


def _indexed_slot(parent: Node, kind: NodeKind) -> IndexedSlot:
    slot = get_nesting(parent.kind).indexed.get(kind)
    if slot is None:
        raise NestingError(
            f"{kind.value} is not an indexed child of {parent.kind.value} ({parent.location})."
        )
    return slot


def get_child(parent: Node, kind: NodeKind, properties: dict[str, Any] | None = None) -> Node:
    """Return the ``kind`` child of ``parent``, creating it with ``properties``.

    ``kind`` must be a singular slot of the parent's descriptor.
    """
    slot = _singular_slot(parent, kind)
    child = getattr(parent, slot)
    if not isinstance(child, Node):
        child = create_child(parent, kind, properties)
        setattr(parent, slot, child)
    return child


def get_collection_item(
    parent: Node,
    kind: NodeKind,
    properties: dict[str, Any] | None = None,
) -> Node:
    """Return the first ``kind`` member of ``parent`` matching ``properties``.

    A new member carrying ``properties`` is appended when none matches.
    Without ``properties`` a new member is always appended.
    """
    collection = _collection_slot(parent, kind).name
    index = None
    if properties:
        index = search_collection_item(getattr(parent, collection) or [], properties)
    if index is None:
        index = create_collection_item(parent, collection, kind, properties)
    return getattr(parent, collection)[index]


def get_indexed_collection_item(parent: Node, kind: NodeKind, value: Any) -> Node:
    """Return the ``kind`` member of ``parent`` whose key field is ``value``."""
    slot = _indexed_slot(parent, kind)
    index = search_indexed_collection_item(getattr(parent, slot.name) or [], slot.key, value)
    if index is None:
        index = create_collection_item(parent, slot.name, kind, {slot.key: value})
    return getattr(parent, slot.name)[index]


def search_collection_item(collection: list[Node], properties: dict[str, Any]) -> int | None:
    """Index of the first node whose fields all equal ``properties``, or ``None``."""
    for i, child in enumerate(collection):
        if all(getattr(child, name) == value for name, value in properties.items()):
            return i
    return None


def search_indexed_collection_item(collection: list[Node], member: str, value: Any) -> int | None:
    """Index of the first node whose ``member`` is ``value`` (same type, equal), or ``None``."""
    for i, child in enumerate(collection):
        current = getattr(child, member)
        if type(current) is type(value) and current == value:
            return i
    return None


def create_collection_item(
    parent: Node,
    collection: str,
    kind: NodeKind,
    properties: dict[str, Any] | None = None,
) -> int:
    """Append a new ``kind`` node to ``parent.<collection>`` and return its index."""
    members = getattr(parent, collection)
    if not isinstance(members, list):
        members = []
        setattr(parent, collection, members)
    members.append(create_child(parent, kind, properties))
    return len(members) - 1


def create_child(parent: Node, kind: NodeKind, properties: dict[str, Any] | None = None) -> Node:
    """Create a detached ``kind`` node whose provenance is ``parent``.

    Raises
    ------
    NestingError
        If ``properties`` names one of ``kind``'s child slots; nested nodes
        are only ever created through the find-or-create helpers.
    """
    properties = properties or {}
    nested = nested_slot_names(kind) & set(properties)
    if nested:
        raise NestingError(
            f"Nesting nodes through properties is not supported: {sorted(nested)} "
            f"are child slots of {kind.value}."
        )
    return Node(kind, properties, parent=parent)


def remove_indexed_collection_item(parent: Node, kind: NodeKind, value: Any) -> Node | None:
    """Detach and return the ``kind`` member keyed by ``value``, if present."""
    slot = _indexed_slot(parent, kind)
    members = getattr(parent, slot.name)
    if not isinstance(members, list):
        return None
    index = search_indexed_collection_item(members, slot.key, value)
    if index is None:
        return None
    return members.pop(index)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge(
    node: Node,
    source: Node | Mapping[str, Any],
    overwrite: bool = False,
    *,
    unknown_field_policy: MergePolicy | None = None,
) -> None:
    """Merge ``source`` into ``node``.

    Parameters
    ----------
    node:
        The target node, modified in place.
    source:
        A node, or a mapping shaped like the serialized node
        (``$ref``, ``additionalProperties``, ``x-...`` keys).
    overwrite:
        Replace scalar values that are already set.  Unset values are
        always filled.  Append-only list fields are unioned either way.
        Keys of indexed collections are looked up as given, so ``200`` and
        ``"200"`` name different members.
    unknown_field_policy:
        ``"error"`` raises :class:`SchemaMergeError` on keys the target kind
        does not declare, ``"warn"`` logs and drops them.  Defaults to the
        configured policy.
    """
    if isinstance(source, Node):
        data: Mapping[str, Any] = source.to_dict()
    elif isinstance(source, Mapping):
        data = source
    else:
        raise TypeError(f"Cannot merge {type(source).__name__} into {node.kind.value}.")
    policy = unknown_field_policy or get_config().unknown_field_policy
    _merge_mapping(node, data, overwrite, policy)


def _merge_mapping(node: Node, data: Mapping[str, Any], overwrite: bool, policy: MergePolicy) -> None:
    descriptor = get_nesting(node.kind)
    done: set[str] = set()

    for kind, slot in descriptor.singular.items():
        key = wire_name(slot)
        if key not in data:
            continue
        done.add(key)
        value = data[key]
        if isinstance(value, bool) and slot in descriptor.boolean_slots:
            _merge_scalar(node, slot, value, overwrite)
        elif isinstance(value, (Mapping, Node)):
            child = get_child(node, kind)
            _merge_mapping(child, _as_mapping(value), overwrite, policy)
        else:
            _reject(node, key, policy, f"expected an object, got {type(value).__name__}")

    for kind, slot in descriptor.indexed.items():
        key = wire_name(slot.name)
        if key not in data:
            continue
        done.add(key)
        items = data[key]
        if not isinstance(items, Mapping):
            _reject(node, key, policy, f"expected a mapping, got {type(items).__name__}")
            continue
        for item_key, value in items.items():
            child = get_indexed_collection_item(node, kind, item_key)
            _merge_mapping(child, _as_mapping(value), overwrite, policy)

    for kind, slot in descriptor.collections.items():
        key = wire_name(slot.name)
        if key not in data:
            continue
        done.add(key)
        items = data[key]
        if not isinstance(items, (list, tuple)):
            _reject(node, key, policy, f"expected a list, got {type(items).__name__}")
            continue
        for value in items:
            _merge_collection_item(node, kind, slot, _as_mapping(value), overwrite, policy)

    array_fields = ARRAY_FIELDS.get(node.kind, frozenset())
    for key, value in data.items():
        if key in done:
            continue
        if key.startswith("x-"):
            if overwrite or key not in node.extensions:
                node.extensions[key] = value
            continue
        name = field_for_wire(node.kind, key)
        if name is None:
            _reject(node, key, policy, "not declared for this node kind")
        elif name in array_fields:
            _merge_array(node, name, value)
        else:
            _merge_scalar(node, name, value, overwrite)


def _merge_collection_item(
    node: Node,
    kind: NodeKind,
    slot: CollectionSlot,
    data: Mapping[str, Any],
    overwrite: bool,
    policy: MergePolicy,
) -> None:
    """Locate the member identified by ``data``'s key-like fields, then merge the rest."""
    nested = {wire_name(name) for name in nested_slot_names(kind)}
    match: dict[str, Any] = {}
    rest: dict[str, Any] = {}
    for key, value in data.items():
        name = field_for_wire(kind, key)
        if key in nested or name is None:
            rest[key] = value
        elif not slot.match or name in slot.match:
            match[name] = value
        else:
            rest[key] = value
    child = get_collection_item(node, kind, match)
    _merge_mapping(child, rest, overwrite, policy)


def _merge_scalar(node: Node, name: str, value: Any, overwrite: bool) -> None:
    if overwrite or getattr(node, name) is UNDEFINED:
        setattr(node, name, value)


def _merge_array(node: Node, name: str, value: Any) -> None:
    current = getattr(node, name)
    merged = list(current) if isinstance(current, (list, tuple)) else []
    for item in value if isinstance(value, (list, tuple)) else [value]:
        if item not in merged:
            merged.append(item)
    setattr(node, name, merged)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, Mapping):
        return value
    raise SchemaMergeError(f"Cannot merge {type(value).__name__} as a node.")


def _reject(node: Node, key: str, policy: MergePolicy, reason: str) -> None:
    message = f"Cannot merge {key!r} into {node.kind.value} at {node.location}: {reason}."
    if policy == "error":
        raise SchemaMergeError(message)
    logger.warning("%s Skipped.", message)
