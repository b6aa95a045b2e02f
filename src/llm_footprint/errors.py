"""Exception hierarchy for :mod:`llm_footprint`."""

from __future__ import annotations

__all__ = [
    "ElectricityMixNotFoundError",
    "ImpactKindMismatchError",
    "InvalidInputError",
    "LLMFootprintError",
    "LookupNotFoundError",
    "ModelNotFoundError",
]


class LLMFootprintError(Exception):
    """Base class for all errors raised by the package."""


class InvalidInputError(LLMFootprintError, ValueError):
    """Raised when a parameter count, coefficient or request field is unusable."""


class LookupNotFoundError(LLMFootprintError, LookupError):
    """Raised by the reference-data repositories when a key is unknown."""


class ModelNotFoundError(LookupNotFoundError):
    """No model matches the requested provider and name."""

    def __init__(self, provider: str, name: str) -> None:
        super().__init__(f"Could not find model `{name}` for {provider} provider.")
        self.provider = provider
        self.name = name


class ElectricityMixNotFoundError(LookupNotFoundError):
    """No electricity mix is registered for the requested zone."""

    def __init__(self, zone: str) -> None:
        super().__init__(f"Could not find electricity mix for zone `{zone}`.")
        self.zone = zone


class ImpactKindMismatchError(LLMFootprintError, TypeError):
    """Raised when two impact values of different kinds are combined."""
