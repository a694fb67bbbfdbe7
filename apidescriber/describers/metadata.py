# apidescriber/describers/metadata.py
"""
Metadata Model Describer
========================

Describes models from serializer metadata: an ordered list of
:class:`~apidescriber.metadata.PropertyMetadata` per class, each carrying a
type descriptor, declared groups and an optional serialized name.

For every exposed property the describer

1. filters on the requested serialization groups;
2. scopes the groups down when the request maps this property name to a
   nested specification, or recovers groups a parent property handed to
   this model earlier in the build;
3. resolves the exposed name, applies override annotations and leaves the
   property alone when an override already decided its ``type`` or ``$ref``;
4. withdraws properties without a type, and classifies the rest.

Nested classes are only registered with the :class:`ModelRegistry`; the
registry describes them later, once per (class, groups) identity.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Optional

from apidescriber.annotations import AnnotationsReader
from apidescriber.errors import NoMetadataFoundError, ReflectionError
from apidescriber.groups import (
    DEFAULT_GROUP,
    GroupSpec,
    GroupsExclusionStrategy,
    nested_groups,
    normalize_groups,
)
from apidescriber.metadata import MetadataFactory, PropertyMetadata
from apidescriber.model import Model
from apidescriber.model.model import BUILTIN_OBJECT
from apidescriber.naming import NamingStrategy
from apidescriber.openapi import util
from apidescriber.openapi.nesting import NodeKind
from apidescriber.openapi.nodes import UNDEFINED, Node
from apidescriber.reflection import ClassResolver, PropertyReflection, import_class
from apidescriber.types import TypeDescriptor

from .base import ModelRegistryAwareMixin

logger = logging.getLogger(__name__)

ARRAY_TYPES = frozenset({"array", "ArrayCollection", "list", "dict"})
PASSTHROUGH_TYPES = {"boolean": "boolean", "bool": "boolean", "string": "string", "str": "string"}
INTEGER_TYPES = frozenset({"int", "integer"})
FLOAT_TYPES = frozenset({"double", "float"})
DATE_TIME_TYPES = frozenset({"DateTime", "DateTimeImmutable", "datetime", "date"})


class MetadataModelDescriber(ModelRegistryAwareMixin):
    """Describe models from a :class:`MetadataFactory`.

    Parameters
    ----------
    factory:
        Source of class metadata.
    naming_strategy:
        Maps a property to its exposed name.  Without one, the declared
        serialized name is used, falling back to the field name.
    class_resolver:
        Turns class names into classes for override lookup and type
        classification; dotted import paths by default.
    """

    def __init__(
        self,
        factory: MetadataFactory,
        naming_strategy: Optional[NamingStrategy] = None,
        class_resolver: ClassResolver = import_class,
    ) -> None:
        self.factory = factory
        self.naming_strategy = naming_strategy
        self.class_resolver = class_resolver

    def describe(self, model: Model, schema: Node) -> None:
        class_name = model.class_name or ""
        metadata = self.factory.get_metadata_for_class(class_name)
        if metadata is None:
            raise NoMetadataFoundError(class_name)

        session = self.model_registry.session
        exclusion = GroupsExclusionStrategy(model.groups) if model.groups is not None else None

        schema.type = "object"
        annotations = AnnotationsReader(self.model_registry)
        cls = self.class_resolver(class_name)
        if cls is not None:
            annotations.update_schema(cls, schema)

        for item in metadata.property_metadata:
            if exclusion is not None and exclusion.should_skip_property(item):
                continue

            groups: GroupSpec = model.groups
            previous_groups: GroupSpec = None
            scoped = nested_groups(groups, item.name)
            if scoped is not None:
                previous_groups = groups
                groups = scoped
            elif session.previous_groups.get(model.hash):
                if item.type is not None and self._property_type_uses_groups(item.type) is False:
                    groups = None
                else:
                    groups = session.previous_groups[model.hash]
            groups = normalize_groups(groups)

            name = self._translate_name(item)
            try:
                reflection = item.reflection or PropertyReflection.for_class_name(
                    item.class_name, item.name, self.class_resolver
                )
                prop = util.get_property(schema, annotations.get_property_name(reflection, name))
                annotations.update_property(reflection, prop, groups)
            except ReflectionError as exc:
                logger.debug("No reflection for %s.%s (%s)", item.class_name, item.name, exc)
                prop = util.get_property(schema, name)

            if prop.is_set("type") or prop.is_set("ref"):
                continue
            if item.type is None:
                logger.debug("Withdrawing %s.%s: no type", class_name, item.name)
                util.remove_indexed_collection_item(schema, NodeKind.PROPERTY, prop.property)
                continue

            self.describe_item(item.type, prop, groups, previous_groups)

        if schema.properties is UNDEFINED:
            schema.properties = []

    def supports(self, model: Model) -> bool:
        if model.type.builtin_type != BUILTIN_OBJECT or not model.class_name:
            return False
        return self.factory.get_metadata_for_class(model.class_name) is not None

    def describe_item(
        self,
        type: TypeDescriptor,
        node: Node,
        groups: GroupSpec = None,
        previous_groups: GroupSpec = None,
    ) -> None:
        """Classify ``type`` into ``node``, recursing into collection elements."""
        nested = self._nested_type(type)
        if nested is not None:
            nested_type, is_hash = nested
            if is_hash:
                node.type = "object"
                if nested_type.name == "array" and nested_type.param(0) is None:
                    node.additional_properties = True
                    return
                node.additional_properties = util.create_child(node, NodeKind.ADDITIONAL_PROPERTIES)
                self.describe_item(nested_type, node.additional_properties, groups, previous_groups)
                return
            node.type = "array"
            node.items = util.create_child(node, NodeKind.ITEMS)
            self.describe_item(nested_type, node.items, groups, previous_groups)
        elif type.name in ARRAY_TYPES:
            node.type = "object"
            node.additional_properties = True
        elif type.name in PASSTHROUGH_TYPES:
            node.type = PASSTHROUGH_TYPES[type.name]
        elif type.name in INTEGER_TYPES:
            node.type = "integer"
        elif type.name in FLOAT_TYPES:
            node.type = "number"
            node.format = type.name
        elif self._is_date_time(type.name):
            node.type = "string"
            node.format = "date-time"
        elif self._class_exists(type.name):
            model = Model.for_class(type.name, groups)
            node.ref = self.model_registry.register(model)
            if previous_groups:
                self.model_registry.session.previous_groups[model.hash] = previous_groups
        else:
            # Custom handler types name no class; an override may still describe them.
            logger.debug("Leaving %s untyped: %s is not a class", node.location, type)

    # ------------------------------------------------------------------

    def _translate_name(self, item: PropertyMetadata) -> str:
        if self.naming_strategy is not None:
            return self.naming_strategy.translate_name(item)
        return item.serialized_name if item.serialized_name is not None else item.name

    @staticmethod
    def _nested_type(type: TypeDescriptor) -> Optional[tuple[TypeDescriptor, bool]]:
        if type.name not in ARRAY_TYPES:
            return None
        value = type.param(1)
        if value is not None:
            return value, True
        element = type.param(0)
        if element is not None:
            return element, False
        return None

    def _is_date_time(self, name: str) -> bool:
        if name in DATE_TIME_TYPES:
            return True
        cls = self._resolve(name)
        return cls is not None and issubclass(cls, datetime.date)

    def _class_exists(self, name: str) -> bool:
        return self._resolve(name) is not None or self.factory.get_metadata_for_class(name) is not None

    def _resolve(self, name: str) -> Optional[type]:
        try:
            return self.class_resolver(name)
        except (ImportError, ValueError):
            return None

    def _property_type_uses_groups(self, type: TypeDescriptor) -> Optional[bool]:
        """Whether the class named by ``type`` declares groups other than the default one.

        ``None`` when the class has no metadata; every answer is cached for the build.
        """
        cache = self.model_registry.session.group_usage
        if type.name in cache:
            return cache[type.name]

        metadata = self.factory.get_metadata_for_class(type.name)
        result: Optional[bool]
        if metadata is None:
            result = None
        else:
            result = any(
                _declares_groups(item.groups) for item in metadata.property_metadata
            )
        cache[type.name] = result
        return result


def _declares_groups(groups: Any) -> bool:
    return groups is not None and groups != [DEFAULT_GROUP]
