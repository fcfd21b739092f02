"""Tests for the loader registry."""

import pytest

from restree import LoaderNotFoundError, LoaderRegistry
from restree.loaders import HttpLoader, JsonLoader


def test_builtins_present():
    registry = LoaderRegistry()

    assert "text" in registry
    assert "json" in registry
    assert isinstance(registry.resolve("text"), HttpLoader)
    assert isinstance(registry.resolve("json"), JsonLoader)


def test_register_is_chainable():
    async def one(node):
        return 1

    async def two(node):
        return 2

    registry = LoaderRegistry()

    assert registry.register("one", one).register("two", two) is registry
    assert registry.resolve("one") is one
    assert registry.names() == ["text", "json", "one", "two"]


def test_unknown_type():
    with pytest.raises(LoaderNotFoundError, match="^Invalid type: nope$"):
        LoaderRegistry().resolve("nope")


def test_rejects_non_callable():
    with pytest.raises(TypeError):
        LoaderRegistry().register("bad", "not a loader")
