# apidescriber/describers/default.py
"""Fill the fields a valid document needs when nothing else provided them."""

from __future__ import annotations

from typing import Optional

from apidescriber.config import ApiDescriberConfig, get_config
from apidescriber.openapi import util
from apidescriber.openapi.nesting import OPERATION_KINDS, NodeKind
from apidescriber.openapi.nodes import Node


class DefaultDescriber:
    """Run last: default ``info`` and a ``default`` response per bare operation."""

    def __init__(self, config: Optional[ApiDescriberConfig] = None) -> None:
        self.config = config or get_config()

    def describe(self, api: Node) -> None:
        info = util.get_child(api, NodeKind.INFO)
        if not info.is_set("title"):
            info.title = self.config.info_title
        if not info.is_set("version"):
            info.version = self.config.info_version

        for path_item in api.paths or []:
            for method in OPERATION_KINDS:
                operation = getattr(path_item, method)
                if not isinstance(operation, Node) or operation.responses:
                    continue
                response = util.get_indexed_collection_item(operation, NodeKind.RESPONSE, "default")
                if not response.is_set("description"):
                    response.description = "Default response"
