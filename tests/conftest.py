"""Pytest fixtures for apirings tests."""

import pytest
from apirings.config import Settings
from apirings.dataset import build_registry
from apirings.models.base import Layer, Ring
from apirings.registry import ClassificationRegistry


@pytest.fixture
def settings() -> Settings:
    """Test settings using the built-in dataset."""
    return Settings(dataset_path="", log_level="DEBUG")


@pytest.fixture
def registry() -> ClassificationRegistry:
    """An empty registry still in the loading phase."""
    return ClassificationRegistry()


@pytest.fixture
def layered_registry() -> ClassificationRegistry:
    """A small sealed registry with one member per interesting layer."""
    reg = ClassificationRegistry()
    reg.register("PyObject_GetItem", Ring.PYTHON, Layer.CORE)
    reg.register("PyDict_GetItem", Ring.CPYTHON, Layer.CORE)
    reg.register("_PyRuntime", Ring.INTERNAL, Layer.REQUIRED_STDLIB)
    reg.register("sys", Ring.PYTHON, Layer.REQUIRED_STDLIB)
    reg.register("os", Ring.PYTHON, Layer.REQUIRED_STDLIB)
    reg.register("posix", Ring.PYTHON, Layer.PLATFORM_INTERACTION)
    reg.register("PyMem_RawMalloc", Ring.PYTHON, Layer.PLATFORM_ADAPTATION)
    reg.register("json", Ring.PYTHON, Layer.OPTIONAL_STDLIB)
    reg.register("_json", Ring.CPYTHON, Layer.OPTIONAL_STDLIB)
    reg.register("http", Ring.PYTHON, Layer.OPTIONAL_STDLIB)
    reg.register("email", Ring.PYTHON, Layer.OPTIONAL_STDLIB)
    reg.declare_dependency("json", "_json")
    reg.declare_dependency("http", "email")
    reg.seal()
    return reg


@pytest.fixture
def default_registry(settings) -> ClassificationRegistry:
    """Sealed registry built from the built-in dataset."""
    return build_registry(settings)
