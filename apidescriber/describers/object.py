# apidescriber/describers/object.py
"""Describe models from Python type hints (pydantic models, dataclasses, plain classes)."""

from __future__ import annotations

import logging
from typing import Optional

from apidescriber.annotations import AnnotationsReader
from apidescriber.errors import (
    ReflectionError,
    TypeInferenceAmbiguousError,
    TypeInferenceMissingError,
    UnsupportedTypeError,
)
from apidescriber.groups import nested_groups, scalar_groups
from apidescriber.model import Model, TypeInfo
from apidescriber.model.model import (
    BUILTIN_BOOL,
    BUILTIN_FLOAT,
    BUILTIN_INT,
    BUILTIN_OBJECT,
    BUILTIN_STRING,
)
from apidescriber.openapi import util
from apidescriber.openapi.nesting import NodeKind
from apidescriber.openapi.nodes import UNDEFINED, Node
from apidescriber.reflection import ClassResolver, PropertyReflection, import_class

from .base import ModelRegistryAwareMixin
from .property_info import PropertyInfoExtractor, is_date_time, is_enum

logger = logging.getLogger(__name__)

_SCALAR_TYPES = {
    BUILTIN_STRING: ("string", None),
    BUILTIN_BOOL: ("boolean", None),
    BUILTIN_INT: ("integer", None),
    BUILTIN_FLOAT: ("number", "float"),
}


class ObjectModelDescriber(ModelRegistryAwareMixin):
    """Describe any object model through its type hints.

    Properties whose type cannot be inferred unambiguously raise a
    :class:`~apidescriber.errors.TypeInferenceError`; annotate them with
    ``OpenApiProperty(type=...)`` to describe them manually.
    """

    def __init__(
        self,
        property_info: Optional[PropertyInfoExtractor] = None,
        class_resolver: ClassResolver = import_class,
    ) -> None:
        self.property_info = property_info or PropertyInfoExtractor()
        self.class_resolver = class_resolver

    def describe(self, model: Model, schema: Node) -> None:
        schema.type = "object"

        class_name = model.class_name or ""
        cls = self.class_resolver(class_name)
        if cls is None:
            raise ReflectionError(f"Class {class_name} does not exist.")

        annotations = AnnotationsReader(self.model_registry)
        annotations.update_schema(cls, schema)

        context_groups = None
        if model.groups is not None:
            context_groups = [g for g in scalar_groups(model.groups) if isinstance(g, str)]

        names = self.property_info.get_properties(cls, context_groups)
        if names is None:
            logger.debug("%s exposes no inspectable properties", class_name)
            names = []

        for name in names:
            try:
                reflection = PropertyReflection(cls, name)
            except ReflectionError:
                prop = util.get_property(schema, name)
            else:
                prop = util.get_property(schema, annotations.get_property_name(reflection, name))
                groups = nested_groups(model.groups, name)
                annotations.update_property(
                    reflection, prop, groups if groups is not None else model.groups
                )

            if prop.is_set("type") or prop.is_set("ref"):
                continue

            types = self.property_info.get_types(cls, name)
            if not types:
                raise TypeInferenceMissingError(
                    class_name,
                    name,
                    f"Could not infer the type of {class_name}.{name}. Annotate it with a "
                    "supported type or use OpenApiProperty(type=...) to make its type explicit.",
                )
            if len(types) > 1:
                raise TypeInferenceAmbiguousError(
                    class_name,
                    name,
                    f"Property {class_name}.{name} defines more than one type. Use "
                    "OpenApiProperty(type=...) to choose the one that should be documented.",
                )

            self._describe_type(types[0], prop, model, name)

        if schema.properties is UNDEFINED:
            schema.properties = []

    def supports(self, model: Model) -> bool:
        return model.type.builtin_type == BUILTIN_OBJECT

    def _describe_type(self, type: TypeInfo, node: Node, model: Model, name: str) -> None:
        class_name = model.class_name or ""
        if type.collection:
            value = type.value_type
            if value is None:
                raise TypeInferenceMissingError(
                    class_name,
                    name,
                    f"Property {class_name}.{name} is a collection, but its item type isn't "
                    "specified. Use list[str] for instance, or "
                    'OpenApiProperty(type="array", items={"type": "string"}).',
                )
            if type.key_type is not None and type.key_type.builtin_type == BUILTIN_STRING:
                node.type = "object"
                child = util.get_child(node, NodeKind.ADDITIONAL_PROPERTIES)
            else:
                node.type = "array"
                child = util.get_child(node, NodeKind.ITEMS)
            self._describe_type(value, child, model, name)
            return

        if type.builtin_type in _SCALAR_TYPES:
            node.type, fmt = _SCALAR_TYPES[type.builtin_type]
            if fmt is not None:
                node.format = fmt
            if type.nullable:
                node.nullable = True
        elif type.builtin_type == BUILTIN_OBJECT:
            cls = self.class_resolver(type.class_name or "")
            if is_date_time(cls):
                node.type = "string"
                node.format = "date-time"
                if type.nullable:
                    node.nullable = True
            elif is_enum(cls):
                values = [member.value for member in cls]
                if all(isinstance(v, str) for v in values):
                    node.type = "string"
                elif all(isinstance(v, int) for v in values):
                    node.type = "integer"
                node.enum = values
                if type.nullable:
                    node.nullable = True
            else:
                # Nullability is dropped: a $ref admits no sibling keywords.
                ref_type = TypeInfo.object(type.class_name or "")
                node.ref = self.model_registry.register(Model(ref_type, model.groups))
        else:
            raise UnsupportedTypeError(
                class_name,
                name,
                f'Type "{type.builtin_type}" is not supported in {class_name}.{name}. '
                "Use OpenApiProperty(type=...) to specify it manually.",
            )
