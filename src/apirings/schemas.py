"""Pydantic models for dataset files and API responses."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class DatasetMember(BaseModel):
    """One classified member in a dataset file."""
    name: str = Field(..., min_length=1, description="API member name")
    ring: str = Field(..., description="Ring wire name, e.g. 'cpython'")
    layer: str = Field(..., description="Layer wire name, e.g. 'core'")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Member name cannot be empty or whitespace only")
        return v


class DatasetFile(BaseModel):
    """JSON dataset used to populate a registry."""
    members: List[DatasetMember] = Field(default_factory=list)
    dependencies: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Optional stdlib component -> sibling components it needs",
    )
    mediated: List[str] = Field(
        default_factory=list,
        description="Required stdlib members with mediated platform access",
    )


class MemberResponse(BaseModel):
    """A classified API member."""
    name: str
    ring: str
    layer: str
    dependencies: List[str] = []


class AccessResponse(BaseModel):
    """Accessibility of one member under a ring/layer selection."""
    name: str
    ring: Optional[str] = None
    layer: Optional[str] = None
    accessible: bool


class AccessGrantResponse(BaseModel):
    """Rings and layers visible for a selection."""
    rings: List[str]
    layers: List[str]


class AvailabilityResponse(BaseModel):
    """Availability closure of a layer or optional component."""
    target: str
    layers: List[str]
    components: List[str] = []
    mediated: List[str] = []


class DependencyCheckResponse(BaseModel):
    """Result of validating one dependency edge."""
    source: str
    target: str
    allowed: bool
    reason: str = ""


class TaxonomyResponse(BaseModel):
    """Rings outermost first, layers top first."""
    rings: List[str]
    layers: List[str]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    members: int
    sealed: bool
    policy: str
