# apidescriber/annotations.py
"""Manually authored schema overrides.

Overrides live next to the code they document:

- properties use ``typing.Annotated`` metadata (or the ``"openapi"`` key of
  a dataclass field's ``metadata``)::

      class User(BaseModel):
          id: Annotated[str, OpenApiProperty(format="uuid")]
          friends: Annotated[list, OpenApiProperty(type="array", items=ModelRef(Friend))]

- classes use the :func:`openapi_schema` decorator.

Only explicitly passed fields are applied, and they replace inferred
values.  Extra keyword arguments are accepted in snake_case or in their
OpenAPI spelling; ``x_foo_bar`` becomes the extension ``x-foo-bar``.  A :class:`ModelRef` anywhere in an override is turned
into a registry reference when the override is applied.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from .groups import GroupSpec
from .model import Model, ModelRegistry
from .openapi import util
from .openapi.util import MergePolicy
from .openapi.nodes import Node, wire_name
from .reflection import PropertyReflection

__all__ = [
    "ModelRef",
    "OpenApiProperty",
    "OpenApiSchema",
    "openapi_schema",
    "AnnotationsReader",
]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class ModelRef:
    """Reference to another model, resolved through the model registry.

    ``groups`` defaults to the groups of the property carrying the reference.
    """

    type: Union[type, str]
    groups: GroupSpec = None


class _Override(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    ref: Any = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    example: Any = None
    nullable: Optional[bool] = None
    deprecated: Optional[bool] = None

    def to_openapi(self) -> dict[str, Any]:
        """The explicitly set fields, keyed by their OpenAPI names."""
        data: dict[str, Any] = {}
        for name in type(self).model_fields:
            if name in self.model_fields_set and name not in _NON_SCHEMA_FIELDS:
                data[wire_name(name)] = getattr(self, name)
        for name, value in (self.model_extra or {}).items():
            data[_extra_key(name)] = value
        return data


_NON_SCHEMA_FIELDS = frozenset({"property"})


def _extra_key(name: str) -> str:
    if name.startswith("x-"):
        return name
    if name.startswith("x_"):
        return "x-" + name[2:].replace("_", "-")
    return wire_name(name)


class OpenApiProperty(_Override):
    """Override for one property; ``property`` renames its schema slot."""

    property: Optional[str] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    enum: Optional[list[Any]] = None
    items: Any = None


class OpenApiSchema(_Override):
    """Override for a whole model schema."""

    required: Optional[list[str]] = None


def openapi_schema(**fields: Any) -> Callable[[T], T]:
    """Class decorator attaching an :class:`OpenApiSchema` override."""
    override = OpenApiSchema(**fields)

    def decorator(cls: T) -> T:
        cls.__openapi_schema__ = override  # type: ignore[attr-defined]
        return cls

    return decorator


class AnnotationsReader:
    """Apply overrides found on classes and properties to schema nodes."""

    def __init__(
        self,
        model_registry: Optional[ModelRegistry] = None,
        unknown_field_policy: Optional[MergePolicy] = None,
    ) -> None:
        self.model_registry = model_registry
        if unknown_field_policy is None and model_registry is not None:
            unknown_field_policy = model_registry.unknown_field_policy
        self.unknown_field_policy = unknown_field_policy

    def update_schema(self, cls: type, schema: Node) -> None:
        override = getattr(cls, "__openapi_schema__", None)
        if isinstance(override, OpenApiSchema):
            self._apply(override, schema, None)

    def get_property_name(self, reflection: PropertyReflection, default: str) -> str:
        for item in reflection.metadata:
            if isinstance(item, OpenApiProperty) and item.property:
                return item.property
        return default

    def update_property(
        self,
        reflection: PropertyReflection,
        node: Node,
        groups: GroupSpec = None,
    ) -> None:
        for item in reflection.metadata:
            if isinstance(item, OpenApiProperty):
                self._apply(item, node, groups)

    def _apply(self, override: _Override, node: Node, groups: GroupSpec) -> None:
        data = self._resolve_refs(override.to_openapi(), groups)
        util.merge(node, data, overwrite=True, unknown_field_policy=self.unknown_field_policy)

    def _resolve_refs(self, value: Any, groups: GroupSpec, key: Optional[str] = None) -> Any:
        if isinstance(value, ModelRef):
            ref = self._register(value, groups)
            return ref if key == "$ref" else {"$ref": ref}
        if isinstance(value, Mapping):
            return {k: self._resolve_refs(v, groups, k) for k, v in value.items()}
        if isinstance(value, list) and key != "enum":
            return [self._resolve_refs(v, groups) for v in value]
        return value

    def _register(self, ref: ModelRef, groups: GroupSpec) -> str:
        if self.model_registry is None:
            raise ValueError("Resolving a ModelRef requires a model registry.")
        model = Model.for_class(ref.type, ref.groups if ref.groups is not None else groups)
        logger.debug("Override references %r", model)
        return self.model_registry.register(model)
