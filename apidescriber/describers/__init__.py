"""Model and document describers."""

from .base import Describer, ModelDescriber, ModelRegistryAwareMixin
from .default import DefaultDescriber
from .external_doc import ExternalDocDescriber
from .metadata import MetadataModelDescriber
from .object import ObjectModelDescriber
from .property_info import PropertyInfoExtractor

__all__ = [
    "Describer",
    "ModelDescriber",
    "ModelRegistryAwareMixin",
    "DefaultDescriber",
    "ExternalDocDescriber",
    "MetadataModelDescriber",
    "ObjectModelDescriber",
    "PropertyInfoExtractor",
]
