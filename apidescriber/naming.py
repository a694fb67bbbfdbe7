# apidescriber/naming.py
"""Property naming strategies: internal field name -> serialized name."""

from __future__ import annotations

import re
from typing import Protocol

from .metadata import PropertyMetadata

__all__ = [
    "NamingStrategy",
    "IdenticalPropertyNamingStrategy",
    "CamelCaseNamingStrategy",
    "SerializedNameAnnotationStrategy",
]

_UPPER_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


class NamingStrategy(Protocol):
    def translate_name(self, item: PropertyMetadata) -> str: ...


class IdenticalPropertyNamingStrategy:
    """Expose field names unchanged."""

    def translate_name(self, item: PropertyMetadata) -> str:
        return item.name


class CamelCaseNamingStrategy:
    """Split camelCase field names with ``separator`` (``userName`` -> ``user_name``)."""

    def __init__(self, separator: str = "_", lower_case: bool = True) -> None:
        self.separator = separator
        self.lower_case = lower_case

    def translate_name(self, item: PropertyMetadata) -> str:
        name = _UPPER_RE.sub(lambda m: self.separator + m.group(1), item.name)
        return name.lower() if self.lower_case else name


class SerializedNameAnnotationStrategy:
    """Prefer the declared serialized name, otherwise defer to ``delegate``."""

    def __init__(self, delegate: NamingStrategy) -> None:
        self.delegate = delegate

    def translate_name(self, item: PropertyMetadata) -> str:
        if item.serialized_name is not None:
            return item.serialized_name
        return self.delegate.translate_name(item)
