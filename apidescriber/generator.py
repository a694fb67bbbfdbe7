# apidescriber/generator.py
"""
Document generation
===================

:class:`ApiDocGenerator` wires a build together: a fresh document root,
a fresh :class:`~apidescriber.model.ModelRegistry` (with its own build
session), the document describers in order, then the model registry
drain that writes ``components.schemas``.

Example
-------
    generator = ApiDocGenerator(
        [ExternalDocDescriber({"info": {"title": "Shop"}}), DefaultDescriber()],
        [MetadataModelDescriber(factory), ObjectModelDescriber()],
        models=[Order],
    )
    print(generator.generate().to_yaml())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from .config import ApiDescriberConfig, get_config
from .describers.base import Describer, ModelDescriber
from .model import BuildSession, Model, ModelRegistry
from .openapi import new_document
from .openapi.nodes import Node

logger = logging.getLogger(__name__)


class ApiDocGenerator:
    """Build one OpenAPI document per :meth:`generate` call.

    Parameters
    ----------
    describers:
        Document describers, run in order on the document root.
    model_describers:
        Model describers handed to the registry, tried in order.
    models:
        Models (or classes) to describe even when nothing references them.
    alternative_names:
        Fixed schema names, mapping a name to the model it designates.
    config:
        Overrides the global configuration for every step of the build,
        including the merge policy of external documentation and overrides.
    """

    def __init__(
        self,
        describers: Iterable[Describer],
        model_describers: Iterable[ModelDescriber],
        *,
        models: Iterable[Union[Model, type]] = (),
        alternative_names: Optional[Mapping[str, Model]] = None,
        config: Optional[ApiDescriberConfig] = None,
    ) -> None:
        self.describers = list(describers)
        self.model_describers = list(model_describers)
        self.models = [m if isinstance(m, Model) else Model.for_class(m) for m in models]
        self.alternative_names = dict(alternative_names or {})
        self.config = config

    def generate(self) -> Node:
        config = self.config or get_config()
        api = new_document(config.openapi_version)
        registry = ModelRegistry(
            self.model_describers,
            api,
            self.alternative_names,
            session=BuildSession(),
            ref_prefix=config.ref_prefix,
            unknown_field_policy=config.unknown_field_policy,
        )

        for describer in self.describers:
            if hasattr(describer, "set_model_registry"):
                describer.set_model_registry(registry)
            logger.debug("Running %s", type(describer).__name__)
            describer.describe(api)

        for model in self.models:
            registry.register(model)
        registry.register_schemas()

        components = api.components
        count = len(components.schemas or []) if isinstance(components, Node) else 0
        logger.info("Generated OpenAPI %s document with %d schemas", api.openapi, count)
        return api
