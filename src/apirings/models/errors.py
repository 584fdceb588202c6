"""Exceptions raised by the classification registry."""


class RegistryError(Exception):
    """Base class for all registry errors."""


class UnknownMemberError(RegistryError, KeyError):
    """Raised when looking up a name that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown API member: {self.name!r}"


class DuplicateMemberError(RegistryError):
    """Raised when a name is re-registered with a different ring or layer."""

    def __init__(self, name: str, existing, requested):
        self.name = name
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"{name!r} is already classified as "
            f"{existing[0].value}/{existing[1].value}, "
            f"cannot reclassify as {requested[0].value}/{requested[1].value}"
        )


class LayerViolationError(RegistryError):
    """Raised when a dependency edge breaks the layering rules."""

    def __init__(self, source: str, target: str, reason: str):
        self.source = source
        self.target = target
        self.reason = reason
        super().__init__(f"{source} -> {target}: {reason}")


class InvalidRingOrLayerError(RegistryError, ValueError):
    """Raised for a value outside the fixed ring or layer enumerations."""


class InvalidMemberNameError(RegistryError, ValueError):
    """Raised when a member name is empty or not an identifier."""


class RegistrySealedError(RegistryError):
    """Raised on writes after the registry has been sealed."""
