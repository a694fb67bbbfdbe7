# tests/test_types.py
"""Tests for serializer type descriptor parsing."""

from __future__ import annotations

import pytest


class TestParseType:
    """parse_type() on well-formed and malformed input."""

    def test_plain_name(self):
        from apidescriber.types import TypeDescriptor, parse_type

        assert parse_type("string") == TypeDescriptor("string")

    def test_nested_params(self):
        from apidescriber.types import TypeDescriptor, parse_type

        parsed = parse_type("array<string, array<Point>>")
        assert parsed.name == "array"
        assert parsed.param(0) == TypeDescriptor("string")
        assert parsed.param(1) == TypeDescriptor("array", (TypeDescriptor("Point"),))
        assert parsed.param(2) is None

    def test_quoted_params_stay_strings(self):
        from apidescriber.types import parse_type

        parsed = parse_type("DateTime<'Y-m-d', \"UTC\">")
        assert parsed.params == ("Y-m-d", "UTC")
        assert parsed.param(0) is None

    def test_namespaced_names(self):
        from apidescriber.types import parse_type

        assert parse_type("array<App\\Entity\\User>").param(0).name == "App\\Entity\\User"
        assert parse_type("app.models.Point").name == "app.models.Point"

    def test_str_round_trip(self):
        from apidescriber.types import parse_type

        text = "array<string, DateTime<'Y-m-d'>>"
        assert str(parse_type(text)) == text

    @pytest.mark.parametrize("text", ["", "array<", "array<string", "array<string>>", "a b", "<int>", "array<,>"])
    def test_malformed(self, text):
        from apidescriber.types import parse_type

        with pytest.raises(ValueError):
            parse_type(text)
