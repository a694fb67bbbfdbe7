# apidescriber/model/model.py
"""Model requests: a class plus the serialization groups it is viewed through."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Optional, Union

from apidescriber.groups import GroupSpec, canonical_groups
from apidescriber.reflection import class_name_of

__all__ = [
    "BUILTIN_BOOL",
    "BUILTIN_FLOAT",
    "BUILTIN_INT",
    "BUILTIN_STRING",
    "BUILTIN_OBJECT",
    "BUILTIN_ARRAY",
    "BUILTIN_NULL",
    "TypeInfo",
    "Model",
]

BUILTIN_BOOL = "bool"
BUILTIN_FLOAT = "float"
BUILTIN_INT = "int"
BUILTIN_STRING = "string"
BUILTIN_OBJECT = "object"
BUILTIN_ARRAY = "array"
BUILTIN_NULL = "null"


@dataclass(frozen=True)
class TypeInfo:
    """A type inferred for a property, or the type a model describes.

    ``builtin_type`` is one of the ``BUILTIN_*`` names, or the name of a
    builtin with no OpenAPI counterpart (``"bytes"``, ``"complex"``, ...).
    Collections carry their element type in ``value_type`` and, for
    mappings, their key type in ``key_type``.
    """

    builtin_type: str
    nullable: bool = False
    class_name: Optional[str] = None
    collection: bool = False
    key_type: Optional["TypeInfo"] = None
    value_type: Optional["TypeInfo"] = None

    @classmethod
    def object(cls, class_name: str, nullable: bool = False) -> "TypeInfo":
        return cls(BUILTIN_OBJECT, nullable=nullable, class_name=class_name)


class Model:
    """A request to describe ``type`` as seen through ``groups``.

    Two models are the same model when their class names and normalized
    group specifications are equal; see :attr:`hash`.
    """

    def __init__(self, type: TypeInfo, groups: GroupSpec = None) -> None:
        self.type = type
        self.groups = groups

    @classmethod
    def for_class(cls, target: Union[type, str], groups: GroupSpec = None) -> "Model":
        """Model of a class object or of a class name."""
        name = target if isinstance(target, str) else class_name_of(target)
        return cls(TypeInfo.object(name), groups)

    @property
    def class_name(self) -> Optional[str]:
        return self.type.class_name

    @property
    def hash(self) -> str:
        """Stable identity of (class name, normalized groups)."""
        payload = json.dumps([self.type.class_name, canonical_groups(self.groups)])
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __repr__(self) -> str:
        return f"Model({self.type.class_name!r}, groups={self.groups!r})"
