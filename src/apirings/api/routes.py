"""API route definitions."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from apirings import __version__
from apirings.api.app import get_registry
from apirings.models.base import Layer, Ring, resolve_access
from apirings.models.errors import InvalidRingOrLayerError, LayerViolationError, UnknownMemberError
from apirings.registry import ClassificationRegistry
from apirings.schemas import (
    AccessGrantResponse,
    AccessResponse,
    AvailabilityResponse,
    DependencyCheckResponse,
    HealthResponse,
    MemberResponse,
    TaxonomyResponse,
)

router = APIRouter()


def get_registry_dep() -> ClassificationRegistry:
    return get_registry()


def _member_response(registry: ClassificationRegistry, name: str) -> MemberResponse:
    member = registry.get_member(name)
    return MemberResponse(
        name=member.name,
        ring=member.ring.value,
        layer=member.layer.value,
        dependencies=registry.dependencies_of(name),
    )


@router.get("/", tags=["System"])
async def root():
    """API root endpoint."""
    return {
        "name": "apirings",
        "version": __version__,
        "description": "Ring/layer classification registry for CPython's API",
        "docs": "/docs",
    }


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(registry: ClassificationRegistry = Depends(get_registry_dep)):
    """Check API health and registry status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        members=len(registry),
        sealed=registry.is_sealed,
        policy=registry.policy.value,
    )


@router.get("/taxonomy", response_model=TaxonomyResponse, tags=["System"])
async def taxonomy():
    """List rings outermost first and layers top first."""
    return TaxonomyResponse(
        rings=[r.value for r in Ring],
        layers=[l.value for l in Layer],
    )


@router.get("/members", response_model=List[MemberResponse], tags=["Registry"])
async def list_members(
    ring: Optional[str] = None,
    layer: Optional[str] = None,
    registry: ClassificationRegistry = Depends(get_registry_dep),
):
    """List registered members, optionally filtered by ring and layer."""
    try:
        members = registry.members(ring=ring, layer=layer)
    except InvalidRingOrLayerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [_member_response(registry, m.name) for m in members]


@router.get("/members/{name}", response_model=MemberResponse, tags=["Registry"])
async def get_member(
    name: str,
    registry: ClassificationRegistry = Depends(get_registry_dep),
):
    """Look up the classification of one member."""
    try:
        return _member_response(registry, name)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/members/{name}/access", response_model=AccessResponse, tags=["Registry"])
async def member_access(
    name: str,
    ring: Optional[str] = None,
    layer: Optional[str] = None,
    registry: ClassificationRegistry = Depends(get_registry_dep),
):
    """
    Check whether a member is visible for a ring/layer selection.

    Selecting a ring grants it and every ring outside it; selecting a
    layer grants it and every layer below it.
    """
    try:
        accessible = registry.is_accessible(name, ring, layer)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRingOrLayerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccessResponse(name=name, ring=ring, layer=layer, accessible=accessible)


@router.get("/access", response_model=AccessGrantResponse, tags=["Registry"])
async def access(ring: Optional[str] = None, layer: Optional[str] = None):
    """Resolve the rings and layers granted by a selection."""
    try:
        grant = resolve_access(ring, layer)
    except InvalidRingOrLayerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccessGrantResponse(**grant.to_dict())


@router.get("/closure/{target}", response_model=AvailabilityResponse, tags=["Registry"])
async def closure(
    target: str,
    registry: ClassificationRegistry = Depends(get_registry_dep),
):
    """Availability closure of a layer or an optional stdlib component."""
    try:
        availability = registry.availability_closure(target)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AvailabilityResponse(target=target, **availability.to_dict())


@router.get("/dependencies/check", response_model=DependencyCheckResponse, tags=["Registry"])
async def check_dependency(
    source: str,
    target: str,
    registry: ClassificationRegistry = Depends(get_registry_dep),
):
    """Validate a single dependency edge against the layering rules."""
    try:
        registry.validate_layer_dependency(source, target)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LayerViolationError as e:
        return DependencyCheckResponse(
            source=source, target=target, allowed=False, reason=e.reason
        )
    return DependencyCheckResponse(source=source, target=target, allowed=True)
