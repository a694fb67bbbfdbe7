# apidescriber/model/registry.py
"""Model registry: one schema per (class, groups), referenced by name.

:meth:`ModelRegistry.register` only records a model and hands back its
reference; descriptions run later in :meth:`ModelRegistry.register_schemas`,
which drains the pending queue until describing models stops registering
new ones.  Identity is checked before anything is queued, so a class graph
with cycles is described once per identity and the drain terminates.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Optional

from apidescriber.config import get_config
from apidescriber.errors import NoDescriberError
from apidescriber.openapi import util
from apidescriber.openapi.util import MergePolicy
from apidescriber.openapi.nodes import Node

from .model import Model
from .session import BuildSession

if TYPE_CHECKING:
    from apidescriber.describers.base import ModelDescriber

logger = logging.getLogger(__name__)

_NAME_SPLIT_RE = re.compile(r"[.\\]")


class ModelRegistry:
    """Registry of the models referenced by one document.

    Parameters
    ----------
    model_describers:
        Describers tried in order; the first whose ``supports()`` accepts a
        model describes it.
    api:
        Document root receiving ``components.schemas``.
    alternative_names:
        Fixed schema names for specific models; these models are always
        emitted, even when nothing references them.
    session:
        Build-scoped caches; a fresh one is created when omitted.
    ref_prefix:
        Prefix of returned references, defaults to the configured one.
    unknown_field_policy:
        Merge policy for overrides applied during this build; ``None`` defers
        to the configured one.
    """

    def __init__(
        self,
        model_describers: Iterable["ModelDescriber"],
        api: Node,
        alternative_names: Optional[Mapping[str, Model]] = None,
        *,
        session: Optional[BuildSession] = None,
        ref_prefix: Optional[str] = None,
        unknown_field_policy: Optional[MergePolicy] = None,
    ) -> None:
        self._describers = list(model_describers)
        self._api = api
        self.session = session if session is not None else BuildSession()
        self._ref_prefix = ref_prefix if ref_prefix is not None else get_config().ref_prefix
        self.unknown_field_policy = unknown_field_policy
        self._models: dict[str, Model] = {}
        self._names: dict[str, str] = {}
        self._unregistered: list[str] = []
        self._alternative_models: list[Model] = []

        for name, model in (alternative_names or {}).items():
            self._names[model.hash] = name
            self._alternative_models.append(model)

        for describer in self._describers:
            if hasattr(describer, "set_model_registry"):
                describer.set_model_registry(self)

    @property
    def api(self) -> Node:
        return self._api

    def register(self, model: Model) -> str:
        """Record ``model`` and return its reference, e.g. ``#/components/schemas/Point``."""
        key = model.hash
        if key not in self._models:
            self._models[key] = model
            self._unregistered.append(key)
            if key not in self._names:
                self._names[key] = self._generate_model_name(model)
            logger.debug("Registered %r as %s", model, self._names[key])
        return self._ref_prefix + self._names[key]

    def register_schemas(self) -> None:
        """Describe every pending model into ``components.schemas``.

        Raises
        ------
        NoDescriberError
            If no describer supports a pending model.
        """
        while self._unregistered or self._alternative_models:
            if not self._unregistered:
                alternatives, self._alternative_models = self._alternative_models, []
                for model in alternatives:
                    self.register(model)
                continue

            pending, self._unregistered = self._unregistered, []
            for key in pending:
                model = self._models[key]
                name = self._names[key]
                schema = util.get_component_schema(self._api, name)
                describer = self._find_describer(model)
                logger.debug("Describing %r with %s", model, type(describer).__name__)
                describer.describe(model, schema)

    def _find_describer(self, model: Model) -> "ModelDescriber":
        for describer in self._describers:
            if describer.supports(model):
                return describer
        raise NoDescriberError(
            f"Schema of type {model.class_name!r} can't be generated, no describer supports it."
        )

    def _generate_model_name(self, model: Model) -> str:
        base = _NAME_SPLIT_RE.split(model.class_name or "")[-1] or "Model"
        taken = set(self._names.values())
        name = base
        i = 1
        while name in taken:
            i += 1
            name = f"{base}{i}"
        return name
