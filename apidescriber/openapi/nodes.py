# apidescriber/openapi/nodes.py
"""Schema tree nodes.

A :class:`Node` is one entry of the OpenAPI document tree.  Its scalar
fields and child slots are fixed by its :class:`NodeKind`: scalar fields
come from :data:`FIELDS`, child slots from the nesting descriptor table.
Every field starts as :data:`UNDEFINED`, which is distinct from any value
a caller can set (``None``, ``0``, ``False`` and ``""`` included), so the
serialized document only carries what was actually decided.

Attribute names are snake_case; :func:`wire_name` maps them to the
OpenAPI spelling (``additional_properties`` -> ``additionalProperties``,
``ref`` -> ``$ref``, ``in_`` -> ``in``).
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Optional

import yaml

from .nesting import (
    OPERATION_KINDS,
    SCHEMA_KINDS,
    NodeKind,
    get_nesting,
    index_keys,
)

__all__ = [
    "UNDEFINED",
    "FIELDS",
    "ARRAY_FIELDS",
    "Node",
    "wire_name",
    "field_for_wire",
    "slot_for_wire",
]


class _Undefined:
    """Sentinel type for a field that was never set."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "_Undefined":
        return self


UNDEFINED: Any = _Undefined()


# ---------------------------------------------------------------------------
# Scalar fields per kind
# ---------------------------------------------------------------------------

_SCHEMA_FIELDS: tuple[str, ...] = (
    "ref",
    "title",
    "description",
    "type",
    "format",
    "required",
    "default",
    "example",
    "nullable",
    "deprecated",
    "read_only",
    "write_only",
    "enum",
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "min_length",
    "max_length",
    "pattern",
    "min_items",
    "max_items",
    "unique_items",
    "multiple_of",
)

_OPERATION_FIELDS: tuple[str, ...] = (
    "path",
    "operation_id",
    "summary",
    "description",
    "tags",
    "deprecated",
    "security",
)

FIELDS: dict[NodeKind, tuple[str, ...]] = {
    NodeKind.OPENAPI: ("openapi", "security"),
    NodeKind.INFO: ("title", "description", "terms_of_service", "version"),
    NodeKind.CONTACT: ("name", "url", "email"),
    NodeKind.LICENSE: ("name", "url"),
    NodeKind.SERVER: ("url", "description"),
    NodeKind.PATH_ITEM: ("path", "ref", "summary", "description"),
    **{kind: _OPERATION_FIELDS for kind in OPERATION_KINDS.values()},
    NodeKind.PARAMETER: (
        "parameter",
        "ref",
        "name",
        "in_",
        "description",
        "required",
        "deprecated",
        "allow_empty_value",
        "style",
        "explode",
        "example",
    ),
    NodeKind.REQUEST_BODY: ("ref", "description", "required"),
    NodeKind.MEDIA_TYPE: ("media_type", "example"),
    NodeKind.RESPONSE: ("response", "ref", "description"),
    NodeKind.HEADER: ("header", "ref", "description", "required", "deprecated"),
    NodeKind.COMPONENTS: (),
    NodeKind.SCHEMA: ("schema",) + _SCHEMA_FIELDS,
    NodeKind.PROPERTY: ("property",) + _SCHEMA_FIELDS,
    NodeKind.ITEMS: _SCHEMA_FIELDS,
    NodeKind.ADDITIONAL_PROPERTIES: _SCHEMA_FIELDS,
    NodeKind.TAG: ("name", "description"),
    NodeKind.EXTERNAL_DOCUMENTATION: ("description", "url"),
}

ARRAY_FIELDS: dict[NodeKind, frozenset[str]] = {
    **{kind: frozenset({"required"}) for kind in SCHEMA_KINDS},
    **{kind: frozenset({"tags"}) for kind in OPERATION_KINDS.values()},
}
"""Append-only list fields: merges union them instead of overwriting."""

# Key fields are carried by the parent's mapping key, never inside the child.
_INTERNAL_FIELDS: dict[NodeKind, frozenset[str]] = dict(index_keys())
for _kind in OPERATION_KINDS.values():
    _INTERNAL_FIELDS[_kind] = frozenset({"path"})

_WIRE_OVERRIDES: dict[str, str] = {"ref": "$ref", "in_": "in"}


def wire_name(attr: str) -> str:
    """Return the OpenAPI spelling of a node attribute name."""
    if attr in _WIRE_OVERRIDES:
        return _WIRE_OVERRIDES[attr]
    head, *rest = attr.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _wire_lookup(names: tuple[str, ...]) -> dict[str, str]:
    return {wire_name(name): name for name in names}


_FIELD_BY_WIRE: dict[NodeKind, dict[str, str]] = {
    kind: _wire_lookup(names) for kind, names in FIELDS.items()
}
_SLOT_BY_WIRE: dict[NodeKind, dict[str, str]] = {
    kind: _wire_lookup(get_nesting(kind).slot_names()) for kind in NodeKind
}


def field_for_wire(kind: NodeKind, key: str) -> str | None:
    """Map a wire key to the scalar field attribute of ``kind``, if declared."""
    return _FIELD_BY_WIRE[kind].get(key)


def slot_for_wire(kind: NodeKind, key: str) -> str | None:
    """Map a wire key to the child slot attribute of ``kind``, if declared."""
    return _SLOT_BY_WIRE[kind].get(key)


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


class Node:
    """One typed node of the schema tree.

    Parameters
    ----------
    kind:
        The node kind; fixes the scalar fields and child slots.
    properties:
        Initial scalar field values, by attribute name.
    parent:
        The node this one hangs under, used for provenance.
    """

    __slots__ = ("kind", "parent", "extensions", "_values")

    def __init__(
        self,
        kind: NodeKind,
        properties: dict[str, Any] | None = None,
        parent: Node | None = None,
    ) -> None:
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "parent", parent)
        object.__setattr__(self, "extensions", {})
        names = FIELDS[kind] + get_nesting(kind).slot_names()
        object.__setattr__(self, "_values", dict.fromkeys(names, UNDEFINED))
        for name, value in (properties or {}).items():
            setattr(self, name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        values = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        raise AttributeError(f"{self.kind.value} has no field {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Node.__slots__:
            object.__setattr__(self, name, value)
        elif name in self._values:
            self._values[name] = value
        else:
            raise AttributeError(f"{self.kind.value} has no field {name!r}")

    def __repr__(self) -> str:
        return f"<Node {self.kind.value} at {self.location}>"

    # -- introspection -----------------------------------------------------

    @property
    def fields(self) -> tuple[str, ...]:
        """Scalar field attribute names."""
        return FIELDS[self.kind]

    @property
    def slots(self) -> tuple[str, ...]:
        """Child slot attribute names."""
        return get_nesting(self.kind).slot_names()

    def is_set(self, name: str) -> bool:
        """Whether ``name`` holds a value other than ``UNDEFINED``."""
        return getattr(self, name) is not UNDEFINED

    def children(self) -> Iterator[Node]:
        """Yield direct child nodes in slot order."""
        for slot in self.slots:
            value = self._values[slot]
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                yield from value

    @property
    def location(self) -> str:
        """Provenance trail from the root, e.g. ``OpenApi.paths[/users].get``."""
        if self.parent is None:
            return self.kind.value
        return self.parent.location + self._segment()

    def _segment(self) -> str:
        assert self.parent is not None
        descriptor = get_nesting(self.parent.kind)
        if self.kind in descriptor.singular:
            return "." + descriptor.singular[self.kind]
        if self.kind in descriptor.indexed:
            slot = descriptor.indexed[self.kind]
            return f".{slot.name}[{getattr(self, slot.key)}]"
        if self.kind in descriptor.collections:
            name = descriptor.collections[self.kind].name
            members = self.parent._values[name]
            position = next(
                (i for i, member in enumerate(members or []) if member is self), "?"
            )
            return f".{name}[{position}]"
        return f".<{self.kind.value}>"

    # -- serialization -----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the OpenAPI wire shape, omitting unset fields."""
        internal = _INTERNAL_FIELDS.get(self.kind, frozenset())
        data: dict[str, Any] = {}
        for name in self.fields:
            value = self._values[name]
            if value is UNDEFINED or name in internal:
                continue
            data[wire_name(name)] = list(value) if isinstance(value, (list, tuple)) else value

        descriptor = get_nesting(self.kind)
        for name in descriptor.singular.values():
            value = self._values[name]
            if isinstance(value, Node):
                data[wire_name(name)] = value.to_dict()
            elif value is not UNDEFINED:
                data[wire_name(name)] = value
        for slot in descriptor.collections.values():
            members = self._values[slot.name]
            if members is not UNDEFINED:
                data[wire_name(slot.name)] = [member.to_dict() for member in members]
        for slot in descriptor.indexed.values():
            members = self._values[slot.name]
            if members is not UNDEFINED:
                data[wire_name(slot.name)] = {
                    getattr(member, slot.key): member.to_dict() for member in members
                }

        data.update(self.extensions)
        return data

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to a JSON string; keyword arguments go to :func:`json.dumps`."""
        return json.dumps(self.to_dict(), **kwargs)

    def to_yaml(self) -> str:
        """Serialize to a YAML string, keeping document order."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
