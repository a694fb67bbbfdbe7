# apidescriber/reflection.py
"""Class and property lookup for plain classes, dataclasses and pydantic models."""

from __future__ import annotations

import dataclasses
import importlib
import inspect
import typing
import weakref
from typing import Any, Annotated, Callable, Optional

from .errors import ReflectionError

__all__ = [
    "ClassResolver",
    "import_class",
    "class_name_of",
    "type_hints",
    "PropertyReflection",
]

ClassResolver = Callable[[str], Optional[type]]


_seen_classes: "weakref.WeakValueDictionary[str, type]" = weakref.WeakValueDictionary()


def import_class(name: str) -> Optional[type]:
    """Resolve a dotted path such as ``"app.models.Point"`` to a class.

    Nested classes (``"app.models.Outer.Inner"``) are followed through
    attributes.  Classes named through :func:`class_name_of` resolve even
    when they are not importable (classes defined in a function body).
    Returns ``None`` when nothing matches.
    """
    seen = _seen_classes.get(name)
    if seen is not None:
        return seen
    parts = name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        try:
            obj: Any = importlib.import_module(".".join(parts[:split]))
        except ImportError:
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj if isinstance(obj, type) else None
    return None


def class_name_of(cls: type) -> str:
    """Dotted name that :func:`import_class` resolves back to ``cls``."""
    name = f"{cls.__module__}.{cls.__qualname__}"
    _seen_classes[name] = cls
    return name


def type_hints(owner: type) -> dict[str, Any]:
    """Resolved annotations of ``owner`` and its bases, keeping ``Annotated`` metadata.

    Bases are resolved one at a time; a class whose annotations cannot be
    evaluated (forward references to names defined later, or only under
    ``TYPE_CHECKING``) contributes its annotations unevaluated.
    """
    hints: dict[str, Any] = {}
    for base in reversed(owner.__mro__):
        if base is object:
            continue
        try:
            hints.update(inspect.get_annotations(base, eval_str=True))
        except (NameError, TypeError, AttributeError, SyntaxError):
            hints.update(inspect.get_annotations(base))
    return hints


class PropertyReflection:
    """A property physically declared on ``owner``.

    Raises
    ------
    ReflectionError
        If ``owner`` neither annotates, declares as a field nor defines
        an attribute named ``name``.
    """

    def __init__(self, owner: type, name: str) -> None:
        hints = type_hints(owner)
        declared = (
            name in hints
            or name in _dataclass_fields(owner)
            or name in (getattr(owner, "model_fields", None) or {})
            or hasattr(owner, name)
        )
        if not declared:
            raise ReflectionError(f"Property {owner.__qualname__}.{name} does not exist.")
        self.owner = owner
        self.name = name
        self.annotation = hints.get(name)

    @classmethod
    def for_class_name(
        cls,
        class_name: str,
        name: str,
        class_resolver: ClassResolver = import_class,
    ) -> "PropertyReflection":
        owner = class_resolver(class_name)
        if owner is None:
            raise ReflectionError(f"Class {class_name} does not exist.")
        return cls(owner, name)

    @property
    def metadata(self) -> list[Any]:
        """Annotation metadata attached to the property.

        Collects ``Annotated[...]`` extras and, for dataclasses, the
        ``"openapi"`` entry of the field metadata.
        """
        items: list[Any] = []
        if typing.get_origin(self.annotation) is Annotated:
            items.extend(self.annotation.__metadata__)
        dc_field = _dataclass_fields(self.owner).get(self.name)
        if dc_field is not None and "openapi" in dc_field.metadata:
            items.append(dc_field.metadata["openapi"])
        return items

    def __repr__(self) -> str:
        return f"PropertyReflection({self.owner.__qualname__}.{self.name})"


def _dataclass_fields(owner: type) -> dict[str, dataclasses.Field]:
    if not dataclasses.is_dataclass(owner):
        return {}
    return {f.name: f for f in dataclasses.fields(owner)}
