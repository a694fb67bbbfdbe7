# tests/test_naming.py
"""Tests for naming strategies and the in-memory metadata factory."""

from __future__ import annotations


def _item(name, serialized_name=None):
    from apidescriber.metadata import PropertyMetadata

    return PropertyMetadata(class_name="User", name=name, serialized_name=serialized_name)


class TestNamingStrategies:
    """Exposed property names."""

    def test_identical(self):
        from apidescriber.naming import IdenticalPropertyNamingStrategy

        assert IdenticalPropertyNamingStrategy().translate_name(_item("userName")) == "userName"

    def test_camel_case(self):
        from apidescriber.naming import CamelCaseNamingStrategy

        assert CamelCaseNamingStrategy().translate_name(_item("userName")) == "user_name"
        assert CamelCaseNamingStrategy("-").translate_name(_item("createdAtUtc")) == "created-at-utc"
        assert CamelCaseNamingStrategy(lower_case=False).translate_name(_item("userName")) == "user_Name"

    def test_serialized_name_wins(self):
        from apidescriber.naming import CamelCaseNamingStrategy, SerializedNameAnnotationStrategy

        strategy = SerializedNameAnnotationStrategy(CamelCaseNamingStrategy())
        assert strategy.translate_name(_item("userName", "login")) == "login"
        assert strategy.translate_name(_item("userName")) == "user_name"


class TestInMemoryMetadataFactory:
    """Metadata built from serializer-style configuration."""

    def test_from_mapping(self):
        from apidescriber.metadata import InMemoryMetadataFactory

        factory = InMemoryMetadataFactory.from_mapping(
            {
                "Box": {
                    "properties": {
                        "items": {"type": "array<Point>", "groups": ["details"]},
                        "label": {"serialized_name": "name"},
                    }
                },
                "Empty": None,
            }
        )
        box = factory.get_metadata_for_class("Box")
        assert [item.name for item in box.property_metadata] == ["items", "label"]
        items, label = box.property_metadata
        assert items.type.name == "array"
        assert items.type.param(0).name == "Point"
        assert items.groups == ["details"]
        assert label.type is None
        assert label.serialized_name == "name"
        assert factory.get_metadata_for_class("Empty").property_metadata == []
        assert factory.get_metadata_for_class("Missing") is None
