"""apirings - Ring and layer classification registry for CPython's API."""

__version__ = "0.1.0"

from apirings.models import (
    AccessGrant,
    APIMember,
    Availability,
    DuplicateMemberError,
    InvalidMemberNameError,
    InvalidRingOrLayerError,
    Layer,
    LayerViolationError,
    PlatformPolicy,
    RegistryError,
    RegistrySealedError,
    Ring,
    UnknownMemberError,
    availability_closure,
    resolve_access,
)
from apirings.registry import ClassificationRegistry, DependencyViolation
from apirings.dataset import build_registry, load_dataset

__all__ = [
    "__version__",
    "AccessGrant",
    "APIMember",
    "Availability",
    "ClassificationRegistry",
    "DependencyViolation",
    "DuplicateMemberError",
    "InvalidMemberNameError",
    "InvalidRingOrLayerError",
    "Layer",
    "LayerViolationError",
    "PlatformPolicy",
    "RegistryError",
    "RegistrySealedError",
    "Ring",
    "UnknownMemberError",
    "availability_closure",
    "build_registry",
    "load_dataset",
    "resolve_access",
]
