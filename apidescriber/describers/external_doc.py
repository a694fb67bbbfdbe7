# apidescriber/describers/external_doc.py
"""Merge an externally authored document fragment into the generated document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

import yaml

from apidescriber.openapi import util
from apidescriber.openapi.nodes import Node
from apidescriber.openapi.util import MergePolicy

from .base import ModelRegistryAwareMixin

logger = logging.getLogger(__name__)

ExternalDoc = Union[Mapping[str, Any], Callable[[], Mapping[str, Any]], str]


class ExternalDocDescriber(ModelRegistryAwareMixin):
    """Merge a fragment shaped like a serialized OpenAPI document.

    Parameters
    ----------
    external_doc:
        A mapping, a callable returning one, or YAML (or JSON) text.
    overwrite:
        Let the fragment replace values already present in the document.
    unknown_field_policy:
        Merge policy for keys the document does not declare.  Without one,
        the policy of the build's registry applies, then the configured one.
    """

    def __init__(
        self,
        external_doc: ExternalDoc,
        overwrite: bool = False,
        unknown_field_policy: Optional[MergePolicy] = None,
    ) -> None:
        self.external_doc = external_doc
        self.overwrite = overwrite
        self.unknown_field_policy = unknown_field_policy

    def describe(self, api: Node) -> None:
        data = self._load()
        if not data:
            return
        logger.debug("Merging external documentation (%d top-level keys)", len(data))
        util.merge(api, data, self.overwrite, unknown_field_policy=self._policy())

    def _policy(self) -> Optional[MergePolicy]:
        if self.unknown_field_policy is not None:
            return self.unknown_field_policy
        if self._model_registry is not None:
            return self._model_registry.unknown_field_policy
        return None

    def _load(self) -> Mapping[str, Any]:
        doc = self.external_doc
        if callable(doc):
            doc = doc()
        if isinstance(doc, str):
            doc = yaml.safe_load(doc) or {}
        if not isinstance(doc, Mapping):
            raise TypeError(f"External documentation must be a mapping, got {type(doc).__name__}.")
        return doc
