"""Ring/layer classification registry."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, Union

from apirings.models.base import (
    APIMember,
    Availability,
    Layer,
    PlatformPolicy,
    Ring,
    availability_closure,
)
from apirings.models.errors import (
    DuplicateMemberError,
    InvalidMemberNameError,
    InvalidRingOrLayerError,
    LayerViolationError,
    RegistrySealedError,
    UnknownMemberError,
)

logger = logging.getLogger(__name__)

DEFAULT_MEDIATED_MEMBERS: Tuple[str, ...] = ("os", "importlib")


@dataclass(frozen=True)
class DependencyViolation:
    """A rejected dependency edge, as reported by ``check_dependencies``."""
    source: str
    target: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "reason": self.reason}


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidMemberNameError(f"Member name must be a non-empty string, got {name!r}")
    if not all(part.isidentifier() for part in name.split(".")):
        raise InvalidMemberNameError(f"Member name {name!r} is not an identifier")
    # Layer names are reserved so closure targets stay unambiguous
    if name.lower() in {layer.value for layer in Layer}:
        raise InvalidMemberNameError(f"Member name {name!r} is reserved for a layer")
    return name


class ClassificationRegistry:
    """
    Append-only mapping from API member names to their ring and layer.

    The registry starts in the loading phase, where ``register`` and
    ``declare_dependency`` are accepted. ``seal`` switches it to read-only
    for the rest of its life; queries never take the lock.

    Example:
        >>> registry = ClassificationRegistry()
        >>> member = registry.register("PyDict_GetItem", Ring.CPYTHON, Layer.CORE)
        >>> registry.seal()
        >>> registry.is_accessible("PyDict_GetItem", Ring.PYTHON, Layer.CORE)
        False
    """

    def __init__(
        self,
        policy: Union[PlatformPolicy, str] = PlatformPolicy.EXCEPTION,
        mediated_members: Optional[Iterable[str]] = None,
    ):
        self.policy = PlatformPolicy(policy)
        if mediated_members is None:
            mediated_members = DEFAULT_MEDIATED_MEMBERS
        self._mediated: FrozenSet[str] = frozenset(mediated_members)
        self._members: Dict[str, APIMember] = {}
        self._dependencies: Dict[str, Set[str]] = {}
        self._sealed = False
        self._lock = threading.Lock()

    # Loading phase

    def register(
        self,
        name: str,
        ring: Union[Ring, str],
        layer: Union[Layer, str],
    ) -> APIMember:
        """
        Record the classification of ``name``.

        Re-registering an identical classification is a no-op; a different
        one raises DuplicateMemberError.
        """
        name = _check_name(name)
        ring = Ring.parse(ring)
        layer = Layer.parse(layer)

        with self._lock:
            self._ensure_loading()
            existing = self._members.get(name)
            if existing is not None:
                if (existing.ring, existing.layer) != (ring, layer):
                    raise DuplicateMemberError(
                        name, (existing.ring, existing.layer), (ring, layer)
                    )
                return existing
            member = APIMember(name=name, ring=ring, layer=layer)
            self._members[name] = member

        logger.debug("Registered %s as %s/%s", name, ring.value, layer.value)
        return member

    def declare_dependency(self, name: str, depends_on: str) -> None:
        """Record that optional stdlib component ``name`` needs ``depends_on``."""
        with self._lock:
            self._ensure_loading()
            source = self._get(name)
            target = self._get(depends_on)
            for member in (source, target):
                if member.layer is not Layer.OPTIONAL_STDLIB:
                    raise LayerViolationError(
                        name,
                        depends_on,
                        f"sibling dependencies are only declared between "
                        f"{Layer.OPTIONAL_STDLIB.value} members, "
                        f"{member.name} is {member.layer.value}",
                    )
            self._dependencies.setdefault(name, set()).add(depends_on)

    def seal(self) -> None:
        """Switch to the read-only phase. Sealing twice is harmless."""
        with self._lock:
            if self._sealed:
                return
            self._sealed = True
        logger.info(
            "Registry sealed with %d members (%s policy)",
            len(self._members),
            self.policy.value,
        )

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # Queries

    def lookup(self, name: str) -> Tuple[Ring, Layer]:
        """Return the (ring, layer) pair recorded for ``name``."""
        member = self._get(name)
        return member.ring, member.layer

    def get_member(self, name: str) -> APIMember:
        return self._get(name)

    def is_accessible(
        self,
        name: str,
        target_ring: Optional[Union[Ring, str]] = None,
        target_layer: Optional[Union[Layer, str]] = None,
    ) -> bool:
        """
        Check whether ``name`` is visible when selecting a ring and layer.

        Selecting a ring grants it and every ring outside it; selecting a
        layer grants it and every layer below it. A ``None`` target does not
        restrict that axis.
        """
        member = self._get(name)
        if target_ring is not None and not Ring.parse(target_ring).grants(member.ring):
            return False
        if target_layer is not None and not Layer.parse(target_layer).grants(member.layer):
            return False
        return True

    def validate_layer_dependency(self, from_member: str, to_member: str) -> None:
        """
        Raise LayerViolationError if ``from_member`` may not depend on ``to_member``.

        Lower layers never reference higher ones, except between optional
        stdlib siblings. Platform interaction calls into core only.
        Required stdlib reaching into platform interaction is judged by
        ``self.policy``.
        """
        source = self._get(from_member)
        target = self._get(to_member)

        if source.layer is Layer.OPTIONAL_STDLIB and target.layer is Layer.OPTIONAL_STDLIB:
            return

        if source.layer is Layer.PLATFORM_INTERACTION and target.layer is not Layer.CORE:
            raise LayerViolationError(
                source.name,
                target.name,
                f"{Layer.PLATFORM_INTERACTION.value} may only call into "
                f"{Layer.CORE.value}, not {target.layer.value}",
            )

        if source.layer.is_below(target.layer):
            raise LayerViolationError(
                source.name,
                target.name,
                f"{source.layer.value} is below {target.layer.value}",
            )

        if (
            source.layer is Layer.REQUIRED_STDLIB
            and target.layer is Layer.PLATFORM_INTERACTION
        ):
            self._check_platform_edge(source, target)

    def _check_platform_edge(self, source: APIMember, target: APIMember) -> None:
        if self.policy is PlatformPolicy.PERMISSIVE:
            return
        if self.policy is PlatformPolicy.EXCEPTION and source.name in self._mediated:
            logger.debug("Mediated platform access %s -> %s", source.name, target.name)
            return
        raise LayerViolationError(
            source.name,
            target.name,
            f"{Layer.REQUIRED_STDLIB.value} may not depend on "
            f"{Layer.PLATFORM_INTERACTION.value} ({self.policy.value} policy)",
        )

    def check_dependencies(
        self, edges: Iterable[Tuple[str, str]]
    ) -> List[DependencyViolation]:
        """Validate many edges, collecting violations instead of raising."""
        violations: List[DependencyViolation] = []
        for source, target in edges:
            try:
                self.validate_layer_dependency(source, target)
            except (LayerViolationError, UnknownMemberError) as e:
                reason = e.reason if isinstance(e, LayerViolationError) else str(e)
                logger.warning("Dependency violation %s -> %s: %s", source, target, reason)
                violations.append(DependencyViolation(source, target, reason))
        return violations

    def availability_closure(self, target: Union[Layer, str]) -> Availability:
        """
        Return what is guaranteed present given ``target``.

        ``target`` is a layer or a registered member name. For an optional
        stdlib member the result also lists every sibling component it
        declares, transitively. Required stdlib members flagged as platform
        mediated are reported in ``mediated`` rather than implying platform
        interaction.
        """
        components: FrozenSet[str] = frozenset()
        try:
            layer = Layer.parse(target)
        except InvalidRingOrLayerError:
            member = self._get(target)
            layer = member.layer
            if layer is Layer.OPTIONAL_STDLIB:
                components = self._component_closure(member.name)

        layers = availability_closure(layer)
        mediated: FrozenSet[str] = frozenset()
        if Layer.REQUIRED_STDLIB in layers:
            mediated = frozenset(
                name for name in self._mediated
                if name in self._members
                and self._members[name].layer is Layer.REQUIRED_STDLIB
            )
        return Availability(layers=layers, components=components, mediated=mediated)

    def _component_closure(self, name: str) -> FrozenSet[str]:
        seen = {name}
        pending = [name]
        while pending:
            for dep in self._dependencies.get(pending.pop(), ()):
                if dep not in seen:
                    seen.add(dep)
                    pending.append(dep)
        return frozenset(seen)

    def dependencies_of(self, name: str) -> List[str]:
        """Directly declared sibling dependencies of ``name``."""
        self._get(name)
        return sorted(self._dependencies.get(name, ()))

    @property
    def mediated_members(self) -> FrozenSet[str]:
        return self._mediated

    def members(
        self,
        ring: Optional[Union[Ring, str]] = None,
        layer: Optional[Union[Layer, str]] = None,
    ) -> List[APIMember]:
        """Registered members, optionally filtered by exact ring and layer."""
        ring = Ring.parse(ring) if ring is not None else None
        layer = Layer.parse(layer) if layer is not None else None
        return [
            m for m in self._members.values()
            if (ring is None or m.ring is ring) and (layer is None or m.layer is layer)
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __len__(self) -> int:
        return len(self._members)

    # Helpers

    def _get(self, name: str) -> APIMember:
        try:
            return self._members[name]
        except KeyError:
            raise UnknownMemberError(name) from None

    def _ensure_loading(self) -> None:
        if self._sealed:
            raise RegistrySealedError("Registry is sealed; no further registrations")
