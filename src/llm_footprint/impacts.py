"""Impact value types and the aggregate returned by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from llm_footprint.errors import ImpactKindMismatchError
from llm_footprint.range_value import RangeValue, ValueOrRange, coerce

__all__ = [
    "ADPe",
    "BaseImpact",
    "Embodied",
    "Energy",
    "GWP",
    "ImpactKind",
    "Impacts",
    "PE",
    "Usage",
]


class ImpactKind(str, Enum):
    ENERGY = "energy"
    GWP = "GWP"
    ADPE = "ADPe"
    PE = "PE"


@dataclass(frozen=True, slots=True)
class BaseImpact:
    """A named, unit-carrying impact whose magnitude is a :class:`RangeValue`.

    Subclasses fix ``kind``, ``name`` and ``unit``. Two impacts can only be
    added when they share a kind.
    """

    kind: ClassVar[ImpactKind]
    name: ClassVar[str]
    unit: ClassVar[str]

    value: RangeValue

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", coerce(self.value))

    def add(self, other: "BaseImpact") -> "BaseImpact":
        """Return the component-wise sum of two impacts of the same kind.

        Raises:
            ImpactKindMismatchError: If ``other`` is a different kind of impact.
        """

        if not isinstance(other, BaseImpact):
            raise ImpactKindMismatchError(
                f"Cannot add {self.kind.value} with {type(other).__name__}"
            )
        if other.kind is not self.kind:
            raise ImpactKindMismatchError(
                f"Cannot add {self.kind.value} with {other.kind.value}"
            )
        return type(self)(self.value.add(other.value))

    def __add__(self, other: "BaseImpact") -> "BaseImpact":
        return self.add(other)

    @classmethod
    def of(cls, value: ValueOrRange) -> "BaseImpact":
        return cls(coerce(value))

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.kind.value,
            "name": self.name,
            "unit": self.unit,
            "value": self.value.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Energy(BaseImpact):
    kind: ClassVar[ImpactKind] = ImpactKind.ENERGY
    name: ClassVar[str] = "Energy"
    unit: ClassVar[str] = "kWh"


@dataclass(frozen=True, slots=True)
class GWP(BaseImpact):
    kind: ClassVar[ImpactKind] = ImpactKind.GWP
    name: ClassVar[str] = "Global Warming Potential"
    unit: ClassVar[str] = "kgCO2eq"


@dataclass(frozen=True, slots=True)
class ADPe(BaseImpact):
    kind: ClassVar[ImpactKind] = ImpactKind.ADPE
    name: ClassVar[str] = "Abiotic Depletion Potential (elements)"
    unit: ClassVar[str] = "kgSbeq"


@dataclass(frozen=True, slots=True)
class PE(BaseImpact):
    kind: ClassVar[ImpactKind] = ImpactKind.PE
    name: ClassVar[str] = "Primary Energy"
    unit: ClassVar[str] = "MJ"


@dataclass(frozen=True, slots=True)
class Usage:
    """Operational impacts from the electricity consumed by the request."""

    energy: Energy
    gwp: GWP
    adpe: ADPe
    pe: PE

    type: ClassVar[str] = "usage"
    name: ClassVar[str] = "Usage"

    def to_dict(self) -> dict[str, object]:
        return {
            "energy": self.energy.to_dict(),
            "gwp": self.gwp.to_dict(),
            "adpe": self.adpe.to_dict(),
            "pe": self.pe.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Embodied:
    """Manufacturing impacts amortised over the request's occupancy time."""

    gwp: GWP
    adpe: ADPe
    pe: PE

    type: ClassVar[str] = "embodied"
    name: ClassVar[str] = "Embodied"

    def to_dict(self) -> dict[str, object]:
        return {
            "gwp": self.gwp.to_dict(),
            "adpe": self.adpe.to_dict(),
            "pe": self.pe.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Impacts:
    """Environmental impacts of one inference request.

    ``gwp``, ``adpe`` and ``pe`` are the usage and embodied contributions
    summed per dimension. ``energy`` is the request's facility energy and is
    shared with ``usage.energy``.
    """

    energy: Energy
    gwp: GWP
    adpe: ADPe
    pe: PE
    usage: Usage
    embodied: Embodied

    @classmethod
    def from_breakdowns(cls, usage: Usage, embodied: Embodied) -> "Impacts":
        return cls(
            energy=usage.energy,
            gwp=usage.gwp.add(embodied.gwp),  # type: ignore[arg-type]
            adpe=usage.adpe.add(embodied.adpe),  # type: ignore[arg-type]
            pe=usage.pe.add(embodied.pe),  # type: ignore[arg-type]
            usage=usage,
            embodied=embodied,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "energy": self.energy.to_dict(),
            "gwp": self.gwp.to_dict(),
            "adpe": self.adpe.to_dict(),
            "pe": self.pe.to_dict(),
            "usage": self.usage.to_dict(),
            "embodied": self.embodied.to_dict(),
        }
