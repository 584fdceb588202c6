"""Tests for the built-in dataset and dataset loading."""

import json

import pytest
from pydantic import ValidationError

from apirings.config import Settings
from apirings.dataset import (
    DEFAULT_DEPENDENCIES,
    DEFAULT_MEMBERS,
    build_registry,
    default_dataset,
    load_dataset,
    populate,
)
from apirings.models.base import Layer, PlatformPolicy, Ring
from apirings.models.errors import InvalidRingOrLayerError, LayerViolationError
from apirings.registry import ClassificationRegistry
from apirings.schemas import DatasetFile


@pytest.fixture
def dataset_file(tmp_path):
    """Write a small JSON dataset and return its path."""
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps({
        "members": [
            {"name": "PyObject_GetItem", "ring": "python", "layer": "core"},
            {"name": "sys", "ring": "python", "layer": "required_stdlib"},
            {"name": "nt", "ring": "python", "layer": "platform_interaction"},
            {"name": "xml", "ring": "python", "layer": "optional_stdlib"},
            {"name": "pyexpat", "ring": "cpython", "layer": "optional_stdlib"},
        ],
        "dependencies": {"xml": ["pyexpat"]},
        "mediated": ["sys"],
    }))
    return str(path)


class TestDefaultDataset:
    """Tests for the built-in classification."""

    def test_builds_sealed_registry(self, default_registry):
        """Test the built-in dataset loads and seals."""
        assert default_registry.is_sealed
        assert len(default_registry) == len(DEFAULT_MEMBERS)

    def test_every_member_classified(self, default_registry):
        """Test every built-in member keeps its classification."""
        for name, pair in DEFAULT_MEMBERS.items():
            assert default_registry.lookup(name) == pair

    def test_known_classifications(self, default_registry):
        """Test well-known members."""
        assert default_registry.lookup("PyObject_GetItem") == (Ring.PYTHON, Layer.CORE)
        assert default_registry.lookup("PyDict_GetItem") == (Ring.CPYTHON, Layer.CORE)
        assert default_registry.lookup("_PyRuntime") == (Ring.INTERNAL, Layer.REQUIRED_STDLIB)

    def test_every_ring_and_layer_used(self):
        """Test the built-in dataset covers every ring and layer."""
        assert {ring for ring, _ in DEFAULT_MEMBERS.values()} == set(Ring)
        assert {layer for _, layer in DEFAULT_MEMBERS.values()} == set(Layer)

    def test_dependencies_declared(self, default_registry):
        """Test built-in sibling dependencies are declared."""
        for name, deps in DEFAULT_DEPENDENCIES.items():
            assert default_registry.dependencies_of(name) == sorted(deps)

    def test_urllib_closure(self, default_registry):
        """Test urllib pulls in http and email."""
        closure = default_registry.availability_closure("urllib")
        assert closure.components == {"urllib", "http", "email"}

    def test_mediated_platform_access(self, default_registry):
        """Test os and importlib are the mediated members."""
        default_registry.validate_layer_dependency("os", "posix")
        default_registry.validate_layer_dependency("importlib", "posix")
        with pytest.raises(LayerViolationError):
            default_registry.validate_layer_dependency("codecs", "posix")
        closure = default_registry.availability_closure(Layer.REQUIRED_STDLIB)
        assert closure.mediated == {"os", "importlib"}

    def test_default_dataset_round_trips_through_schema(self):
        """Test the built-in dataset is a valid DatasetFile."""
        dataset = default_dataset()
        assert isinstance(dataset, DatasetFile)
        assert len(dataset.members) == len(DEFAULT_MEMBERS)


class TestLoadDataset:
    """Tests for JSON dataset files."""

    def test_load(self, dataset_file):
        """Test loading a JSON dataset."""
        dataset = load_dataset(dataset_file)
        assert [m.name for m in dataset.members] == [
            "PyObject_GetItem", "sys", "nt", "xml", "pyexpat",
        ]
        assert dataset.dependencies == {"xml": ["pyexpat"]}
        assert dataset.mediated == ["sys"]

    def test_build_from_settings_path(self, dataset_file):
        """Test building from Settings.dataset_path."""
        registry = build_registry(Settings(dataset_path=dataset_file))

        assert len(registry) == 5
        assert registry.availability_closure("xml").components == {"xml", "pyexpat"}
        # sys is mediated by the dataset, os/importlib by settings
        registry.validate_layer_dependency("sys", "nt")

    def test_build_with_policy(self, dataset_file):
        """Test the configured platform policy is applied."""
        settings = Settings(dataset_path=dataset_file, platform_policy=PlatformPolicy.STRICT)
        registry = build_registry(settings)

        assert registry.policy is PlatformPolicy.STRICT
        with pytest.raises(LayerViolationError):
            registry.validate_layer_dependency("sys", "nt")

    def test_invalid_ring(self, tmp_path):
        """Test an unknown ring in a dataset file."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "members": [{"name": "sys", "ring": "stable", "layer": "required_stdlib"}],
        }))
        with pytest.raises(InvalidRingOrLayerError):
            build_registry(Settings(dataset_path=str(path)))

    def test_missing_field(self, tmp_path):
        """Test a dataset member without a layer."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"members": [{"name": "sys", "ring": "python"}]}))
        with pytest.raises(ValidationError):
            load_dataset(str(path))

    def test_blank_name(self):
        """Test a blank member name fails validation."""
        with pytest.raises(ValidationError):
            DatasetFile(members=[{"name": "   ", "ring": "python", "layer": "core"}])

    def test_dependency_outside_optional_stdlib(self):
        """Test dataset dependencies must stay in the optional stdlib."""
        dataset = DatasetFile(
            members=[
                {"name": "json", "ring": "python", "layer": "optional_stdlib"},
                {"name": "sys", "ring": "python", "layer": "required_stdlib"},
            ],
            dependencies={"json": ["sys"]},
        )
        with pytest.raises(LayerViolationError):
            populate(ClassificationRegistry(), dataset)

    def test_explicit_dataset_argument(self, settings):
        """Test an explicit dataset wins over settings."""
        dataset = DatasetFile(members=[{"name": "sys", "ring": "python", "layer": "required_stdlib"}])
        registry = build_registry(settings, dataset=dataset)
        assert len(registry) == 1
        assert registry.is_sealed
