# apidescriber/describers/property_info.py
"""Property listing and type inference from Python type hints.

Works on pydantic models, dataclasses and plain classes with annotated
public attributes.  Serializer groups are read from pydantic
``Field(json_schema_extra={"groups": [...]})`` or dataclass
``field(metadata={"groups": [...]})``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import types
import typing
from typing import Any, Annotated, ClassVar, Optional, Union

from apidescriber.groups import GroupSpec, GroupsExclusionStrategy
from apidescriber.model.model import (
    BUILTIN_ARRAY,
    BUILTIN_BOOL,
    BUILTIN_FLOAT,
    BUILTIN_INT,
    BUILTIN_NULL,
    BUILTIN_STRING,
    TypeInfo,
)
from apidescriber.reflection import class_name_of, type_hints

__all__ = ["PropertyInfoExtractor"]

_SCALARS: dict[Any, str] = {
    str: BUILTIN_STRING,
    bool: BUILTIN_BOOL,
    int: BUILTIN_INT,
    float: BUILTIN_FLOAT,
    type(None): BUILTIN_NULL,
    bytes: "bytes",
    bytearray: "bytes",
    complex: "complex",
    decimal.Decimal: "decimal",
}

_SEQUENCES = (
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_MAPPINGS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


class _Declared:
    __slots__ = ("groups",)

    def __init__(self, groups: Any) -> None:
        self.groups = groups


class PropertyInfoExtractor:
    """List the properties of a class and infer their types."""

    def get_properties(self, cls: type, groups: GroupSpec = None) -> Optional[list[str]]:
        """Names of the exposed properties, in declaration order.

        With ``groups``, only properties belonging to one of them are kept
        (properties without declared groups belong to ``Default``).
        ``None`` when ``cls`` has no inspectable properties.
        """
        declared = self._declared_groups(cls)
        if declared is None:
            return None
        if groups is None:
            return list(declared)
        exclusion = GroupsExclusionStrategy(groups)
        return [
            name for name, item_groups in declared.items()
            if not exclusion.should_skip_property(_Declared(item_groups))
        ]

    def get_types(self, cls: type, name: str) -> list[TypeInfo]:
        """Types inferred for ``cls.name``; empty when nothing can be inferred.

        More than one entry means the annotation is a union of several
        non-``None`` types.
        """
        hints = type_hints(cls)
        if name not in hints or isinstance(hints[name], str):
            return []
        annotation = hints[name]
        return self._infer(annotation)

    # ------------------------------------------------------------------

    def _declared_groups(self, cls: type) -> Optional[dict[str, Any]]:
        model_fields = getattr(cls, "model_fields", None)
        if isinstance(model_fields, dict):
            result: dict[str, Any] = {}
            for name, info in model_fields.items():
                extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
                result[name] = extra.get("groups")
            return result

        if dataclasses.is_dataclass(cls):
            return {f.name: f.metadata.get("groups") for f in dataclasses.fields(cls)}

        hints = type_hints(cls)
        if not hints:
            return None
        return {
            name: None
            for name, hint in hints.items()
            if not name.startswith("_") and typing.get_origin(hint) is not ClassVar
            and hint is not ClassVar
        }

    def _infer(self, annotation: Any, nullable: bool = False) -> list[TypeInfo]:
        if annotation is None:
            annotation = type(None)
        origin = typing.get_origin(annotation)
        if origin is Annotated:
            return self._infer(typing.get_args(annotation)[0], nullable)
        if annotation is Any:
            return []
        if origin in _UNION_ORIGINS:
            args = typing.get_args(annotation)
            members = [arg for arg in args if arg is not type(None)]
            nullable = nullable or len(members) < len(args)
            result: list[TypeInfo] = []
            for member in members:
                result.extend(self._infer(member, nullable))
            return result
        info = self._type_info(annotation, nullable)
        return [info] if info is not None else []

    def _type_info(self, annotation: Any, nullable: bool) -> Optional[TypeInfo]:
        origin = typing.get_origin(annotation) or annotation
        args = typing.get_args(annotation)

        if isinstance(annotation, type) and annotation in _SCALARS:
            return TypeInfo(_SCALARS[annotation], nullable=nullable)
        if origin in _MAPPINGS:
            key = self._single(args[0]) if args else None
            value = self._single(args[1]) if len(args) > 1 else None
            return TypeInfo(BUILTIN_ARRAY, nullable, collection=True, key_type=key, value_type=value)
        if origin in _SEQUENCES:
            if origin is tuple and not (len(args) == 1 or (len(args) == 2 and args[1] is Ellipsis)):
                element = None
            else:
                element = self._single(args[0]) if args else None
            return TypeInfo(
                BUILTIN_ARRAY,
                nullable,
                collection=True,
                key_type=TypeInfo(BUILTIN_INT),
                value_type=element,
            )
        if isinstance(origin, type):
            return TypeInfo.object(class_name_of(origin), nullable=nullable)
        return None

    def _single(self, annotation: Any) -> Optional[TypeInfo]:
        inferred = self._infer(annotation)
        return inferred[0] if len(inferred) == 1 else None


def is_date_time(cls: Optional[type]) -> bool:
    return isinstance(cls, type) and issubclass(cls, datetime.date)


def is_enum(cls: Optional[type]) -> bool:
    return isinstance(cls, type) and issubclass(cls, enum.Enum)
