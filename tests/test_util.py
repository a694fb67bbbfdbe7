# tests/test_util.py
"""Tests for the find-or-create and merge helpers of the schema tree."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def api():
    from apidescriber.openapi import new_document

    return new_document("3.0.0")


@pytest.fixture
def schema():
    from apidescriber.openapi import Node, NodeKind

    return Node(NodeKind.SCHEMA)


class TestGetChild:
    """Singular slots."""

    def test_creates_once(self, schema):
        from apidescriber.openapi import NodeKind, util

        items = util.get_child(schema, NodeKind.ITEMS)
        assert util.get_child(schema, NodeKind.ITEMS) is items
        assert items.parent is schema
        assert items.kind is NodeKind.ITEMS

    def test_initial_properties(self, schema):
        from apidescriber.openapi import NodeKind, util

        items = util.get_child(schema, NodeKind.ITEMS, {"type": "string"})
        assert items.type == "string"

    def test_replaces_boolean_slot_value(self, schema):
        from apidescriber.openapi import Node, NodeKind, util

        schema.additional_properties = True
        child = util.get_child(schema, NodeKind.ADDITIONAL_PROPERTIES)
        assert isinstance(child, Node)
        assert schema.additional_properties is child

    def test_undeclared_kind_is_fatal(self, schema):
        from apidescriber.errors import NestingError
        from apidescriber.openapi import NodeKind, util

        with pytest.raises(NestingError):
            util.get_child(schema, NodeKind.TAG)

    def test_nesting_error_is_value_error(self, schema):
        from apidescriber.openapi import NodeKind, util

        with pytest.raises(ValueError):
            util.get_child(schema, NodeKind.PROPERTY)


class TestCollections:
    """Collection and indexed collection slots."""

    def test_collection_item_found_by_fields(self, api):
        from apidescriber.openapi import NodeKind, util

        first = util.get_collection_item(api, NodeKind.TAG, {"name": "users"})
        second = util.get_collection_item(api, NodeKind.TAG, {"name": "orders"})
        again = util.get_collection_item(api, NodeKind.TAG, {"name": "users"})
        assert again is first
        assert [tag.name for tag in api.tags] == ["users", "orders"]
        assert second.parent is api

    def test_collection_match_requires_all_fields(self, api):
        from apidescriber.openapi import NodeKind, util

        op = util.get_operation(util.get_path(api, "/users/{id}"), "get")
        path_param = util.get_operation_parameter(op, "id", "path")
        query_param = util.get_operation_parameter(op, "id", "query")
        assert path_param is not query_param
        assert util.get_operation_parameter(op, "id", "path") is path_param
        assert len(op.parameters) == 2

    def test_collection_item_without_fields_always_appends(self, api):
        from apidescriber.openapi import NodeKind, util

        util.get_collection_item(api, NodeKind.SERVER)
        util.get_collection_item(api, NodeKind.SERVER)
        assert len(api.servers) == 2

    def test_indexed_item_created_once(self, schema):
        from apidescriber.openapi import util

        x = util.get_property(schema, "x")
        assert util.get_property(schema, "x") is x
        assert x.property == "x"
        assert len(schema.properties) == 1

    def test_indexed_search_is_strict(self, schema):
        from apidescriber.openapi import NodeKind, util

        text = util.get_indexed_collection_item(schema, NodeKind.PROPERTY, "1")
        number = util.get_indexed_collection_item(schema, NodeKind.PROPERTY, 1)
        assert text is not number
        assert util.search_indexed_collection_item(schema.properties, "property", 1) == 1
        assert util.search_indexed_collection_item(schema.properties, "property", 2) is None

    def test_search_collection_item(self, api):
        from apidescriber.openapi import NodeKind, util

        util.get_collection_item(api, NodeKind.TAG, {"name": "a"})
        util.get_collection_item(api, NodeKind.TAG, {"name": "b"})
        assert util.search_collection_item(api.tags, {"name": "b"}) == 1
        assert util.search_collection_item(api.tags, {"name": "c"}) is None

    def test_remove_indexed_item(self, schema):
        from apidescriber.openapi import NodeKind, util

        util.get_property(schema, "a")
        b = util.get_property(schema, "b")
        assert util.remove_indexed_collection_item(schema, NodeKind.PROPERTY, "b") is b
        assert util.remove_indexed_collection_item(schema, NodeKind.PROPERTY, "b") is None
        assert [p.property for p in schema.properties] == ["a"]

    def test_accessors(self, api):
        from apidescriber.openapi import NodeKind, util

        schema = util.get_component_schema(api, "Point")
        assert api.components.schemas == [schema]
        param = util.get_operation_parameter(
            util.get_operation(util.get_path(api, "/p"), "post"), "q", "query"
        )
        assert util.get_schema(param).kind is NodeKind.SCHEMA

    def test_unknown_method(self, api):
        from apidescriber.errors import NestingError
        from apidescriber.openapi import util

        with pytest.raises(NestingError):
            util.get_operation(util.get_path(api, "/p"), "fetch")


class TestCreateChild:
    """Node creation guards."""

    def test_sets_provenance(self, schema):
        from apidescriber.openapi import NodeKind, util

        child = util.create_child(schema, NodeKind.PROPERTY, {"property": "x"})
        assert child.parent is schema
        assert child.property == "x"
        assert not schema.is_set("properties")

    def test_rejects_nested_slots_as_fields(self, schema):
        from apidescriber.errors import NestingError
        from apidescriber.openapi import NodeKind, util

        with pytest.raises(NestingError, match="items"):
            util.create_child(schema, NodeKind.PROPERTY, {"items": {"type": "string"}})


class TestMerge:
    """Deep merge semantics."""

    def test_defaults_only_without_overwrite(self, schema):
        from apidescriber.openapi import util

        schema.type = "string"
        util.merge(schema, {"type": "integer", "format": "int32"})
        assert schema.type == "string"
        assert schema.format == "int32"

    def test_overwrite_adopts_source(self, schema):
        from apidescriber.openapi import util

        schema.type = "string"
        schema.nullable = True
        util.merge(schema, {"type": "integer", "nullable": False}, overwrite=True)
        assert schema.type == "integer"
        assert schema.nullable is False

    def test_explicit_none_is_not_overwritten(self, schema):
        from apidescriber.openapi import util

        schema.default = None
        util.merge(schema, {"default": "x"})
        assert schema.default is None

    def test_append_only_arrays_union(self, schema):
        from apidescriber.openapi import util

        schema.required = ["a"]
        util.merge(schema, {"required": ["b", "a"]})
        assert schema.required == ["a", "b"]
        util.merge(schema, {"required": ["c"]}, overwrite=True)
        assert schema.required == ["a", "b", "c"]

    def test_singular_children(self, schema):
        from apidescriber.openapi import util

        util.merge(schema, {"type": "array", "items": {"type": "string"}})
        assert schema.items.type == "string"
        assert schema.items.parent is schema

    def test_boolean_singular_slot(self, schema):
        from apidescriber.openapi import util

        util.merge(schema, {"additionalProperties": True})
        assert schema.additional_properties is True
        util.merge(schema, {"additionalProperties": {"type": "integer"}})
        assert schema.additional_properties.type == "integer"

    def test_indexed_children(self, schema):
        from apidescriber.openapi import util

        util.get_property(schema, "x").type = "string"
        util.merge(schema, {"properties": {"x": {"type": "integer"}, "y": {"type": "integer"}}})
        assert util.get_property(schema, "x").type == "string"
        assert util.get_property(schema, "y").type == "integer"
        assert [p.property for p in schema.properties] == ["x", "y"]

    def test_indexed_overwrite_propagates(self, schema):
        from apidescriber.openapi import util

        util.get_property(schema, "x").type = "string"
        util.merge(schema, {"properties": {"x": {"type": "integer"}}}, overwrite=True)
        assert util.get_property(schema, "x").type == "integer"

    def test_indexed_keys_are_used_as_given(self, api):
        from apidescriber.openapi import NodeKind, util

        op = util.get_operation(util.get_path(api, "/a"), "get")
        util.get_indexed_collection_item(op, NodeKind.RESPONSE, 200).description = "OK"
        util.merge(op, {"responses": {200: {"description": "Other"}}})
        assert [r.response for r in op.responses] == [200]
        assert op.responses[0].description == "OK"

        util.merge(op, {"responses": {"404": {"description": "Missing"}}})
        util.merge(op, {"responses": {"404": {"description": "Gone"}}}, overwrite=True)
        assert [r.response for r in op.responses] == [200, "404"]
        assert op.to_dict()["responses"] == {
            200: {"description": "OK"},
            "404": {"description": "Gone"},
        }

    def test_collections_match_on_key_fields(self, api):
        from apidescriber.openapi import util

        util.merge(api, {"tags": [{"name": "users", "description": "Users"}]})
        util.merge(api, {"tags": [{"name": "users", "description": "Other"}, {"name": "orders"}]})
        assert [tag.name for tag in api.tags] == ["users", "orders"]
        assert api.tags[0].description == "Users"

    def test_parameters_match_on_name_and_in(self, api):
        from apidescriber.openapi import util

        op = util.get_operation(util.get_path(api, "/u/{id}"), "get")
        util.get_operation_parameter(op, "id", "path").description = "Identifier"
        util.merge(op, {"parameters": [{"name": "id", "in": "path", "required": True}]})
        assert len(op.parameters) == 1
        assert op.parameters[0].required is True
        assert op.parameters[0].description == "Identifier"

    def test_extensions(self, schema):
        from apidescriber.openapi import util

        util.merge(schema, {"x-order": 1})
        util.merge(schema, {"x-order": 2})
        assert schema.extensions == {"x-order": 1}
        util.merge(schema, {"x-order": 3}, overwrite=True)
        assert schema.extensions == {"x-order": 3}

    def test_merge_node_source(self, schema):
        from apidescriber.openapi import Node, NodeKind, util

        source = Node(NodeKind.SCHEMA, {"type": "object"})
        util.get_property(source, "x").type = "integer"
        util.merge(schema, source)
        assert schema.to_dict() == source.to_dict()

    def test_merge_document(self, api):
        from apidescriber.openapi import util

        util.merge(
            api,
            {
                "info": {"title": "Shop", "version": "1.0"},
                "components": {"schemas": {"Point": {"type": "object", "required": ["x"]}}},
            },
        )
        assert api.info.title == "Shop"
        assert util.get_component_schema(api, "Point").required == ["x"]

    def test_unknown_key_raises_by_default(self, schema):
        from apidescriber.errors import SchemaMergeError
        from apidescriber.openapi import util

        with pytest.raises(SchemaMergeError, match="colour"):
            util.merge(schema, {"colour": "red"}, unknown_field_policy="error")

    def test_unknown_nested_key_raises(self, api):
        from apidescriber.errors import SchemaMergeError
        from apidescriber.openapi import util

        with pytest.raises(SchemaMergeError):
            util.merge(api, {"webhooks": {"new": {}}}, unknown_field_policy="error")

    def test_unknown_key_warns_and_skips(self, schema, caplog):
        from apidescriber.openapi import util

        with caplog.at_level(logging.WARNING, logger="apidescriber.openapi.util"):
            util.merge(schema, {"colour": "red", "type": "object"}, unknown_field_policy="warn")
        assert schema.type == "object"
        assert "colour" in caplog.text

    def test_wrong_shape_rejected(self, schema):
        from apidescriber.errors import SchemaMergeError
        from apidescriber.openapi import util

        with pytest.raises(SchemaMergeError):
            util.merge(schema, {"properties": ["x"]}, unknown_field_policy="error")

    def test_non_mapping_source(self, schema):
        from apidescriber.openapi import util

        with pytest.raises(TypeError):
            util.merge(schema, ["type"])
