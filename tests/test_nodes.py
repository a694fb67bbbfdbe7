# tests/test_nodes.py
"""Tests for schema tree nodes and their serialization."""

from __future__ import annotations

import json

import pytest


class TestNodeFields:
    """Declared fields, the UNDEFINED sentinel and closed slots."""

    def test_fields_start_undefined(self):
        from apidescriber.openapi import UNDEFINED, Node, NodeKind

        node = Node(NodeKind.SCHEMA)
        assert node.type is UNDEFINED
        assert node.items is UNDEFINED
        assert not node.is_set("type")

    def test_undefined_is_falsy_singleton(self):
        import copy

        from apidescriber.openapi import UNDEFINED

        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"
        assert copy.deepcopy(UNDEFINED) is UNDEFINED

    def test_initial_properties(self):
        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.PARAMETER, {"name": "id", "in_": "path"})
        assert node.name == "id"
        assert node.in_ == "path"

    def test_unknown_field_rejected(self):
        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.SCHEMA)
        with pytest.raises(AttributeError):
            node.colour = "red"
        with pytest.raises(AttributeError):
            node.colour

    def test_explicit_falsy_values_are_set(self):
        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.SCHEMA, {"nullable": False, "default": None, "minimum": 0})
        assert node.is_set("nullable")
        assert node.is_set("default")
        assert node.to_dict() == {"default": None, "nullable": False, "minimum": 0}


class TestNodeSerialization:
    """to_dict / to_json / to_yaml wire shapes."""

    def test_wire_names(self):
        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.PROPERTY, {"property": "id", "ref": "#/components/schemas/A", "read_only": True})
        assert node.to_dict() == {"$ref": "#/components/schemas/A", "readOnly": True}

    def test_indexed_slot_serialized_as_mapping(self):
        from apidescriber.openapi import Node, NodeKind, util

        schema = Node(NodeKind.SCHEMA)
        schema.type = "object"
        util.get_property(schema, "x").type = "integer"
        util.get_property(schema, "y").type = "integer"
        assert schema.to_dict() == {
            "type": "object",
            "properties": {"x": {"type": "integer"}, "y": {"type": "integer"}},
        }

    def test_empty_indexed_slot_kept(self):
        from apidescriber.openapi import Node, NodeKind

        schema = Node(NodeKind.SCHEMA, {"type": "object"})
        schema.properties = []
        assert schema.to_dict() == {"type": "object", "properties": {}}

    def test_boolean_additional_properties(self):
        from apidescriber.openapi import Node, NodeKind

        schema = Node(NodeKind.SCHEMA, {"type": "object"})
        schema.additional_properties = True
        assert schema.to_dict() == {"type": "object", "additionalProperties": True}

    def test_extensions_emitted(self):
        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.SCHEMA)
        node.extensions["x-internal"] = True
        assert node.to_dict() == {"x-internal": True}

    def test_operation_path_is_internal(self):
        from apidescriber.openapi import new_document, util

        api = new_document("3.0.0")
        op = util.get_operation(util.get_path(api, "/users"), "GET")
        op.summary = "List users"
        assert op.path == "/users"
        assert api.to_dict() == {
            "openapi": "3.0.0",
            "paths": {"/users": {"get": {"summary": "List users"}}},
        }

    def test_json_and_yaml(self):
        import yaml

        from apidescriber.openapi import Node, NodeKind

        node = Node(NodeKind.SCHEMA, {"type": "string", "format": "date-time"})
        assert json.loads(node.to_json()) == {"type": "string", "format": "date-time"}
        assert yaml.safe_load(node.to_yaml()) == {"type": "string", "format": "date-time"}
        assert node.to_yaml().startswith("type: string")


class TestNodeProvenance:
    """Parent links and the location trail."""

    def test_location_of_nested_nodes(self):
        from apidescriber.openapi import new_document, util

        api = new_document()
        schema = util.get_component_schema(api, "Point")
        prop = util.get_property(schema, "x")
        assert prop.parent is schema
        assert prop.location == "OpenApi.components.schemas[Point].properties[x]"

    def test_children_in_slot_order(self):
        from apidescriber.openapi import Node, NodeKind, util

        schema = Node(NodeKind.SCHEMA)
        items = util.get_child(schema, NodeKind.ITEMS)
        a = util.get_property(schema, "a")
        assert list(schema.children()) == [items, a]
