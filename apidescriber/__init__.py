"""
apidescriber - OpenAPI schema documents from class metadata

Main Components:
    - apidescriber.openapi: schema tree nodes, nesting descriptors and tree helpers
    - apidescriber.describers: model describers (serializer metadata, type hints)
    - apidescriber.model: model identity and the model registry
    - apidescriber.generator: document generation
"""

from .annotations import ModelRef, OpenApiProperty, OpenApiSchema, openapi_schema
from .config import ApiDescriberConfig, get_config
from .describers import (
    DefaultDescriber,
    ExternalDocDescriber,
    MetadataModelDescriber,
    ObjectModelDescriber,
)
from .generator import ApiDocGenerator
from .metadata import ClassMetadata, InMemoryMetadataFactory, PropertyMetadata
from .model import Model, ModelRegistry
from .openapi import Node, NodeKind, new_document

__version__ = "0.1.0"

__all__ = [
    "ApiDocGenerator",
    "ApiDescriberConfig",
    "get_config",
    "ClassMetadata",
    "PropertyMetadata",
    "InMemoryMetadataFactory",
    "DefaultDescriber",
    "ExternalDocDescriber",
    "MetadataModelDescriber",
    "ObjectModelDescriber",
    "Model",
    "ModelRegistry",
    "ModelRef",
    "OpenApiProperty",
    "OpenApiSchema",
    "openapi_schema",
    "Node",
    "NodeKind",
    "new_document",
]
