"""Taxonomy types and registry errors."""

from apirings.models.base import (
    LAYER_IMPLICATIONS,
    AccessGrant,
    APIMember,
    Availability,
    Layer,
    PlatformPolicy,
    Ring,
    availability_closure,
    resolve_access,
)
from apirings.models.errors import (
    DuplicateMemberError,
    InvalidMemberNameError,
    InvalidRingOrLayerError,
    LayerViolationError,
    RegistryError,
    RegistrySealedError,
    UnknownMemberError,
)

__all__ = [
    "LAYER_IMPLICATIONS",
    "AccessGrant",
    "APIMember",
    "Availability",
    "Layer",
    "PlatformPolicy",
    "Ring",
    "availability_closure",
    "resolve_access",
    "DuplicateMemberError",
    "InvalidMemberNameError",
    "InvalidRingOrLayerError",
    "LayerViolationError",
    "RegistryError",
    "RegistrySealedError",
    "UnknownMemberError",
]
