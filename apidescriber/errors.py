# apidescriber/errors.py
"""Exception hierarchy shared by the tree utility, describers and registry."""

from __future__ import annotations


class ApiDescriberError(Exception):
    """Base class for every error raised by apidescriber."""


class NestingError(ApiDescriberError, ValueError):
    """Raised when a child kind is not declared in its parent's nesting descriptor."""


class SchemaMergeError(ApiDescriberError):
    """Raised when a merge source names a key the target node kind does not declare."""


class NoMetadataFoundError(ApiDescriberError, ValueError):
    """Raised when the metadata source has nothing for a requested class."""

    def __init__(self, class_name: str) -> None:
        super().__init__(f"No metadata found for class {class_name}.")
        self.class_name = class_name


class ReflectionError(ApiDescriberError, LookupError):
    """Raised when a class or property cannot be located by reflection."""


class TypeInferenceError(ApiDescriberError):
    """Base class for property type inference failures."""

    def __init__(self, class_name: str, property_name: str, message: str) -> None:
        super().__init__(message)
        self.class_name = class_name
        self.property_name = property_name


class TypeInferenceMissingError(TypeInferenceError):
    """No type (or no collection element type) could be inferred for a property."""


class TypeInferenceAmbiguousError(TypeInferenceError):
    """More than one type was inferred for a property."""


class UnsupportedTypeError(TypeInferenceError):
    """The inferred builtin type has no OpenAPI counterpart."""


class NoDescriberError(ApiDescriberError):
    """Raised when no model describer supports a registered model."""
