# apidescriber/describers/base.py
"""Describer protocols shared by the document build."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from apidescriber.openapi.nodes import Node

if TYPE_CHECKING:
    from apidescriber.model import Model, ModelRegistry


@runtime_checkable
class ModelDescriber(Protocol):
    """Protocol for model describers."""

    def describe(self, model: "Model", schema: Node) -> None:
        """Fill ``schema`` with the description of ``model``."""
        ...

    def supports(self, model: "Model") -> bool:
        """Whether this describer can describe ``model``; free of side effects."""
        ...


@runtime_checkable
class Describer(Protocol):
    """Protocol for document describers, run in order over the document root."""

    def describe(self, api: Node) -> None:
        ...


class ModelRegistryAwareMixin:
    """Gives a describer access to the registry of the build it takes part in."""

    _model_registry: Optional["ModelRegistry"] = None

    def set_model_registry(self, model_registry: "ModelRegistry") -> None:
        self._model_registry = model_registry

    @property
    def model_registry(self) -> "ModelRegistry":
        if self._model_registry is None:
            raise RuntimeError(f"{type(self).__name__} is not attached to a model registry.")
        return self._model_registry
