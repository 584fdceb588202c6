"""Rings, layers and the pure access/availability rules over them."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union

from apirings.models.errors import InvalidRingOrLayerError


def _parse_enum(enum_cls, value, kind: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_cls:
            if key == member.value or key == member.name.lower():
                return member
    raise InvalidRingOrLayerError(
        f"Invalid {kind} {value!r}; expected one of "
        f"{', '.join(m.value for m in enum_cls)}"
    )


class Ring(str, Enum):
    """Stability rings, declared outermost first."""
    PYTHON = "python"
    CPYTHON = "cpython"
    INTERNAL = "internal"

    @classmethod
    def parse(cls, value: Union["Ring", str]) -> "Ring":
        return _parse_enum(cls, value, "ring")

    @property
    def rank(self) -> int:
        """0 for the outermost ring, growing inward."""
        return list(Ring).index(self)

    def grants(self, other: "Ring") -> bool:
        """Selecting this ring grants ``other`` when ``other`` is this ring or outside it."""
        return other.rank <= self.rank


class Layer(str, Enum):
    """Layers, declared top first."""
    OPTIONAL_STDLIB = "optional_stdlib"
    REQUIRED_STDLIB = "required_stdlib"
    PLATFORM_INTERACTION = "platform_interaction"
    CORE = "core"
    PLATFORM_ADAPTATION = "platform_adaptation"

    @classmethod
    def parse(cls, value: Union["Layer", str]) -> "Layer":
        return _parse_enum(cls, value, "layer")

    @property
    def rank(self) -> int:
        """0 for the top layer, growing toward the bottom."""
        return list(Layer).index(self)

    def grants(self, other: "Layer") -> bool:
        """Selecting this layer grants ``other`` when ``other`` is this layer or below it."""
        return other.rank >= self.rank

    def is_below(self, other: "Layer") -> bool:
        return self.rank > other.rank


class PlatformPolicy(str, Enum):
    """How RequiredStdlib -> PlatformInteraction edges are judged."""
    EXCEPTION = "exception"    # allowed only from mediated members
    STRICT = "strict"
    PERMISSIVE = "permissive"


@dataclass(frozen=True)
class APIMember:
    """A single classified API member."""
    name: str
    ring: Ring
    layer: Layer

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ring": self.ring.value,
            "layer": self.layer.value,
        }


@dataclass(frozen=True)
class AccessGrant:
    """Rings and layers visible for an access request."""
    rings: List[Ring]
    layers: List[Layer]

    def allows(self, member: APIMember) -> bool:
        return member.ring in self.rings and member.layer in self.layers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rings": [r.value for r in self.rings],
            "layers": [l.value for l in self.layers],
        }


@dataclass(frozen=True)
class Availability:
    """What is guaranteed present once a layer or optional component is present."""
    layers: FrozenSet[Layer]
    components: FrozenSet[str] = field(default_factory=frozenset)
    mediated: FrozenSet[str] = field(default_factory=frozenset)

    def __contains__(self, item) -> bool:
        if isinstance(item, Layer):
            return item in self.layers
        return item in self.components

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layers": [l.value for l in Layer if l in self.layers],
            "components": sorted(self.components),
            "mediated": sorted(self.mediated),
        }


# Direct availability implications; closure is taken transitively.
LAYER_IMPLICATIONS: Dict[Layer, FrozenSet[Layer]] = {
    Layer.PLATFORM_ADAPTATION: frozenset(),
    Layer.CORE: frozenset({Layer.PLATFORM_ADAPTATION}),
    Layer.PLATFORM_INTERACTION: frozenset({Layer.CORE}),
    # Platform access from the required stdlib is mediated, not implied.
    Layer.REQUIRED_STDLIB: frozenset({Layer.CORE}),
    Layer.OPTIONAL_STDLIB: frozenset({Layer.REQUIRED_STDLIB}),
}


def availability_closure(layer: Union[Layer, str]) -> FrozenSet[Layer]:
    """Return every layer guaranteed present when ``layer`` is present."""
    layer = Layer.parse(layer)
    seen = {layer}
    pending = [layer]
    while pending:
        for implied in LAYER_IMPLICATIONS[pending.pop()]:
            if implied not in seen:
                seen.add(implied)
                pending.append(implied)
    return frozenset(seen)


def resolve_access(
    ring: Optional[Union[Ring, str]] = None,
    layer: Optional[Union[Layer, str]] = None,
) -> AccessGrant:
    """
    Resolve an access request into the visible rings and layers.

    Ring access widens outward and layer access extends downward. An
    omitted axis grants every value on that axis.
    """
    rings = list(Ring)
    layers = list(Layer)
    if ring is not None:
        selected_ring = Ring.parse(ring)
        rings = [r for r in rings if selected_ring.grants(r)]
    if layer is not None:
        selected_layer = Layer.parse(layer)
        layers = [l for l in layers if selected_layer.grants(l)]
    return AccessGrant(rings=rings, layers=layers)
