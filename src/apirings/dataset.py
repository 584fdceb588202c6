"""Built-in classification dataset and dataset loading.

Handles:
- The fixed classification of a representative slice of CPython's API
- Loading alternative datasets from JSON (APIRINGS_DATASET_PATH)
- Populating and sealing a registry from either source
"""

import json
import logging
import os
from typing import Dict, List, Optional, Tuple

from apirings.config import Settings, get_settings
from apirings.models.base import Layer, Ring
from apirings.registry import ClassificationRegistry
from apirings.schemas import DatasetFile, DatasetMember

logger = logging.getLogger(__name__)

# name -> (ring, layer)
DEFAULT_MEMBERS: Dict[str, Tuple[Ring, Layer]] = {
    # Core
    "PyObject_GetItem": (Ring.PYTHON, Layer.CORE),
    "PyObject_SetItem": (Ring.PYTHON, Layer.CORE),
    "PyLong_FromLong": (Ring.PYTHON, Layer.CORE),
    "PyUnicode_FromString": (Ring.PYTHON, Layer.CORE),
    "PyErr_SetString": (Ring.PYTHON, Layer.CORE),
    "Py_IncRef": (Ring.PYTHON, Layer.CORE),
    "PyDict_GetItem": (Ring.CPYTHON, Layer.CORE),
    "PyTuple_GET_ITEM": (Ring.CPYTHON, Layer.CORE),
    "PyList_GET_SIZE": (Ring.CPYTHON, Layer.CORE),
    "PyUnstable_Code_New": (Ring.CPYTHON, Layer.CORE),
    "_PyObject_GC_TRACK": (Ring.INTERNAL, Layer.CORE),
    "_PyInterpreterState_GET": (Ring.INTERNAL, Layer.CORE),
    "_PyEval_EvalFrameDefault": (Ring.INTERNAL, Layer.CORE),
    # Required stdlib
    "builtins": (Ring.PYTHON, Layer.REQUIRED_STDLIB),
    "sys": (Ring.PYTHON, Layer.REQUIRED_STDLIB),
    "os": (Ring.PYTHON, Layer.REQUIRED_STDLIB),
    "importlib": (Ring.PYTHON, Layer.REQUIRED_STDLIB),
    "codecs": (Ring.PYTHON, Layer.REQUIRED_STDLIB),
    "_io": (Ring.CPYTHON, Layer.REQUIRED_STDLIB),
    "_imp": (Ring.INTERNAL, Layer.REQUIRED_STDLIB),
    "_PyRuntime": (Ring.INTERNAL, Layer.REQUIRED_STDLIB),
    # Platform interaction
    "posix": (Ring.PYTHON, Layer.PLATFORM_INTERACTION),
    "signal": (Ring.PYTHON, Layer.PLATFORM_INTERACTION),
    "PyOS_FSPath": (Ring.PYTHON, Layer.PLATFORM_INTERACTION),
    "_Py_fopen_obj": (Ring.INTERNAL, Layer.PLATFORM_INTERACTION),
    # Platform adaptation
    "PyMem_RawMalloc": (Ring.PYTHON, Layer.PLATFORM_ADAPTATION),
    "PyThread_acquire_lock": (Ring.CPYTHON, Layer.PLATFORM_ADAPTATION),
    "_PyTime_GetMonotonicClock": (Ring.INTERNAL, Layer.PLATFORM_ADAPTATION),
    # Optional stdlib
    "json": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "_json": (Ring.CPYTHON, Layer.OPTIONAL_STDLIB),
    "email": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "http": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "urllib": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "ssl": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "asyncio": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "sqlite3": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "ctypes": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
    "tkinter": (Ring.PYTHON, Layer.OPTIONAL_STDLIB),
}

# Sibling edges between optional stdlib components
DEFAULT_DEPENDENCIES: Dict[str, List[str]] = {
    "json": ["_json"],
    "http": ["email"],
    "urllib": ["email", "http"],
    "asyncio": ["ssl"],
}

# Required stdlib members that reach the platform through a mediated path
DEFAULT_MEDIATED: List[str] = ["os", "importlib"]


def default_dataset() -> DatasetFile:
    """Build the built-in dataset as a DatasetFile."""
    return DatasetFile(
        members=[
            DatasetMember(name=name, ring=ring.value, layer=layer.value)
            for name, (ring, layer) in DEFAULT_MEMBERS.items()
        ],
        dependencies={name: list(deps) for name, deps in DEFAULT_DEPENDENCIES.items()},
        mediated=list(DEFAULT_MEDIATED),
    )


def load_dataset(path: str) -> DatasetFile:
    """Read and validate a JSON dataset file."""
    path = os.path.expanduser(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    dataset = DatasetFile(**data)
    logger.info("Loaded %d members from %s", len(dataset.members), path)
    return dataset


def populate(registry: ClassificationRegistry, dataset: DatasetFile) -> ClassificationRegistry:
    """Register every member and declared dependency of ``dataset``."""
    for member in dataset.members:
        registry.register(member.name, member.ring, member.layer)
    for name, deps in dataset.dependencies.items():
        for dep in deps:
            registry.declare_dependency(name, dep)
    return registry


def build_registry(
    settings: Optional[Settings] = None,
    dataset: Optional[DatasetFile] = None,
) -> ClassificationRegistry:
    """
    Create, populate and seal a registry.

    Priority for the dataset:
    1. The ``dataset`` argument
    2. Settings.dataset_path if set
    3. The built-in dataset
    """
    settings = settings or get_settings()
    if dataset is None:
        if settings.dataset_path:
            dataset = load_dataset(settings.dataset_path)
        else:
            dataset = default_dataset()

    mediated = list(settings.mediated_members)
    mediated.extend(m for m in dataset.mediated if m not in mediated)

    registry = ClassificationRegistry(
        policy=settings.platform_policy,
        mediated_members=mediated,
    )
    populate(registry, dataset)
    registry.seal()
    return registry
