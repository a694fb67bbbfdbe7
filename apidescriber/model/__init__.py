"""Model requests, build sessions and the model registry."""

from .model import Model, TypeInfo
from .registry import ModelRegistry
from .session import BuildSession

__all__ = ["Model", "TypeInfo", "ModelRegistry", "BuildSession"]
