"""Empirical hardware and regression coefficients for the impact pipeline.

The defaults describe an 80 GB data-centre GPU in an eight-GPU server. The
energy and latency regressions are fitted per output token against the
active parameter count expressed in billions.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Final

from llm_footprint.errors import InvalidInputError

__all__ = [
    "DEFAULT_COEFFICIENTS",
    "HARDWARE_LIFESPAN_SECONDS",
    "ImpactCoefficients",
]

HARDWARE_LIFESPAN_SECONDS: Final[int] = 5 * 365 * 24 * 60 * 60

# Divisors in the pipeline; zero would make the formulas meaningless.
_STRICTLY_POSITIVE: Final[frozenset[str]] = frozenset(
    {"gpu_memory", "server_gpu_count", "server_lifetime"}
)


@dataclass(frozen=True, slots=True)
class ImpactCoefficients:
    """Named constants consumed by :func:`~llm_footprint.estimation.dag.compute_dag`.

    Attributes:
        model_quantization_bits: Bits per stored weight.
        gpu_energy_alpha: Energy-per-token slope (kWh per billion parameters).
        gpu_energy_beta: Energy-per-token intercept (kWh).
        gpu_energy_stdev: Standard deviation of the energy regression.
        gpu_latency_alpha: Latency-per-token slope (s per billion parameters).
        gpu_latency_beta: Latency-per-token intercept (s).
        gpu_latency_stdev: Standard deviation of the latency regression.
        gpu_memory: Memory capacity of a single GPU in GB.
        gpu_embodied_gwp: Manufacturing GWP of one GPU (kgCO2eq).
        gpu_embodied_adpe: Manufacturing ADPe of one GPU (kgSbeq).
        gpu_embodied_pe: Manufacturing PE of one GPU (MJ).
        server_gpu_count: GPUs installed per server.
        server_power: Server power draw excluding GPUs (kW).
        server_embodied_gwp: Manufacturing GWP of one server (kgCO2eq).
        server_embodied_adpe: Manufacturing ADPe of one server (kgSbeq).
        server_embodied_pe: Manufacturing PE of one server (MJ).
        server_lifetime: Hardware service life in seconds.
        datacenter_pue: Power usage effectiveness of the facility.
    """

    model_quantization_bits: float = 4
    gpu_energy_alpha: float = 8.91e-8
    gpu_energy_beta: float = 1.43e-6
    gpu_energy_stdev: float = 5.19e-7
    gpu_latency_alpha: float = 8.02e-4
    gpu_latency_beta: float = 2.23e-2
    gpu_latency_stdev: float = 7e-6
    gpu_memory: float = 80
    gpu_embodied_gwp: float = 143
    gpu_embodied_adpe: float = 5.1e-3
    gpu_embodied_pe: float = 1828
    server_gpu_count: float = 8
    server_power: float = 1
    server_embodied_gwp: float = 3000
    server_embodied_adpe: float = 0.24
    server_embodied_pe: float = 38000
    server_lifetime: float = HARDWARE_LIFESPAN_SECONDS
    datacenter_pue: float = 1.2

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(
                    f"Coefficient {item.name} must be a number, got {value!r}"
                )
            try:
                finite = math.isfinite(value)
            except OverflowError:
                finite = False
            if not finite:
                raise InvalidInputError(f"Coefficient {item.name} must be finite")
            if value < 0:
                raise InvalidInputError(
                    f"Coefficient {item.name} must be non-negative, got {value}"
                )
            if value == 0 and item.name in _STRICTLY_POSITIVE:
                raise InvalidInputError(f"Coefficient {item.name} must be > 0")

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    def with_overrides(
        self, overrides: Mapping[str, float] | None = None, **kwargs: float
    ) -> "ImpactCoefficients":
        """Return a copy with the given fields replaced.

        Raises:
            InvalidInputError: If a key is not a coefficient name or a value
                fails validation.
        """

        merged: dict[str, float] = dict(overrides or {})
        merged.update(kwargs)
        if not merged:
            return self
        unknown = sorted(set(merged) - set(self.field_names()))
        if unknown:
            raise InvalidInputError(f"Unknown coefficient(s): {', '.join(unknown)}")
        return replace(self, **merged)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


DEFAULT_COEFFICIENTS: Final[ImpactCoefficients] = ImpactCoefficients()
