# apidescriber/metadata.py
"""Serializer metadata consumed by :class:`~apidescriber.describers.metadata.MetadataModelDescriber`.

The describer only needs :class:`MetadataFactory`.  :class:`InMemoryMetadataFactory`
is a plain registry of :class:`ClassMetadata` for callers that already hold
their metadata (or load it from serializer configuration files themselves).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

from .reflection import PropertyReflection
from .types import TypeDescriptor, parse_type

__all__ = [
    "PropertyMetadata",
    "ClassMetadata",
    "MetadataFactory",
    "InMemoryMetadataFactory",
]


@dataclass
class PropertyMetadata:
    """Serializer metadata for one property of a class."""

    class_name: str
    name: str
    type: Optional[TypeDescriptor] = None
    serialized_name: Optional[str] = None
    groups: Union[list[str], bool, None] = None
    reflection: Optional[PropertyReflection] = None


@dataclass
class ClassMetadata:
    """Ordered property metadata of one class."""

    name: str
    property_metadata: list[PropertyMetadata] = field(default_factory=list)


class MetadataFactory(Protocol):
    def get_metadata_for_class(self, class_name: str) -> Optional[ClassMetadata]: ...


class InMemoryMetadataFactory:
    """Metadata source backed by a dict of class name -> :class:`ClassMetadata`."""

    def __init__(self, metadata: list[ClassMetadata] | None = None) -> None:
        self._metadata: dict[str, ClassMetadata] = {}
        for item in metadata or []:
            self.add(item)

    def add(self, metadata: ClassMetadata) -> None:
        self._metadata[metadata.name] = metadata

    def get_metadata_for_class(self, class_name: str) -> Optional[ClassMetadata]:
        return self._metadata.get(class_name)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "InMemoryMetadataFactory":
        """Build a factory from serializer-style configuration.

        ``data`` maps class names to ``{"properties": {name: options}}`` where
        options may carry ``type`` (a type string), ``serialized_name`` and
        ``groups``.  A property without ``type`` has no resolvable type.

        Example
        -------
            InMemoryMetadataFactory.from_mapping({
                "Box": {"properties": {"items": {"type": "array<Point>"}}},
            })
        """
        factory = cls()
        for class_name, options in data.items():
            properties = (options or {}).get("properties") or {}
            items = []
            for name, prop in properties.items():
                prop = prop or {}
                raw_type = prop.get("type")
                items.append(
                    PropertyMetadata(
                        class_name=class_name,
                        name=name,
                        type=parse_type(raw_type) if raw_type else None,
                        serialized_name=prop.get("serialized_name"),
                        groups=prop.get("groups"),
                    )
                )
            factory.add(ClassMetadata(class_name, items))
        return factory
