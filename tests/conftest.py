# tests/conftest.py
"""Shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate tests from APIDESCRIBER_* variables and the cached config."""
    import os

    from apidescriber.config import get_config

    for key in list(os.environ):
        if key.startswith("APIDESCRIBER_"):
            monkeypatch.delenv(key)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def build_schemas():
    """Describe models with the given describers and return ``components.schemas``."""
    from apidescriber.model import ModelRegistry
    from apidescriber.openapi import new_document

    def build(describers, *models):
        api = new_document("3.0.0")
        registry = ModelRegistry(describers, api, ref_prefix="#/components/schemas/")
        for model in models:
            registry.register(model)
        registry.register_schemas()
        return api.to_dict()["components"]["schemas"]

    return build
