"""Single evaluation of the request impact graph.

The functions in this module are pure and operate on one concrete pair of
parameter counts. Range-valued parameter counts are handled one level up in
:mod:`llm_footprint.estimation.engine`.

Parameter counts are expressed in billions, matching the units the energy
and latency regressions were fitted in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Final

from llm_footprint.estimation.coefficients import DEFAULT_COEFFICIENTS, ImpactCoefficients
from llm_footprint.range_value import RangeValue, ValueOrRange, coerce

LOGGER = logging.getLogger(__name__)

__all__ = [
    "CONFIDENCE_Z",
    "DagResult",
    "IMPACT_FIELDS",
    "MEMORY_OVERHEAD_FACTOR",
    "compute_dag",
    "generation_latency",
    "gpu_energy",
    "gpu_required_count",
    "model_required_memory",
    "request_embodied",
    "request_energy",
    "request_usage",
    "server_energy",
    "server_gpu_embodied",
]

# Two-sided 95% quantile of the standard normal.
CONFIDENCE_Z: Final[float] = 1.96

# KV cache and runtime buffers on top of the raw weights.
MEMORY_OVERHEAD_FACTOR: Final[float] = 1.2

IMPACT_FIELDS: Final[tuple[str, ...]] = (
    "request_energy",
    "request_usage_gwp",
    "request_usage_adpe",
    "request_usage_pe",
    "request_embodied_gwp",
    "request_embodied_adpe",
    "request_embodied_pe",
)


def _regression_interval(
    parameter_count: float,
    output_token_count: int,
    alpha: float,
    beta: float,
    stdev: float,
) -> RangeValue:
    mean = alpha * parameter_count + beta
    lower = output_token_count * (mean - CONFIDENCE_Z * stdev)
    upper = output_token_count * (mean + CONFIDENCE_Z * stdev)
    return RangeValue(max(0.0, lower), upper)


def gpu_energy(
    model_active_parameter_count: float,
    output_token_count: int,
    gpu_energy_alpha: float,
    gpu_energy_beta: float,
    gpu_energy_stdev: float,
) -> RangeValue:
    """GPU energy (kWh) spent generating the output tokens, as a 95% interval."""

    return _regression_interval(
        model_active_parameter_count,
        output_token_count,
        gpu_energy_alpha,
        gpu_energy_beta,
        gpu_energy_stdev,
    )


def generation_latency(
    model_active_parameter_count: float,
    output_token_count: int,
    gpu_latency_alpha: float,
    gpu_latency_beta: float,
    gpu_latency_stdev: float,
    request_latency: float,
) -> RangeValue:
    """Generation time in seconds, capped by the observed request latency.

    The modelled interval is kept only when its upper bound is below
    ``request_latency``; otherwise the observed latency is returned as a
    degenerate range.
    """

    interval = _regression_interval(
        model_active_parameter_count,
        output_token_count,
        gpu_latency_alpha,
        gpu_latency_beta,
        gpu_latency_stdev,
    )
    if interval.less_than(request_latency):
        return interval
    LOGGER.debug(
        "Generation latency capped by request latency",
        extra={
            "modelled_latency_max_s": interval.max,
            "request_latency_s": request_latency,
        },
    )
    return RangeValue.point(request_latency)


def model_required_memory(
    model_total_parameter_count: float, model_quantization_bits: float
) -> float:
    """Memory in GB needed to serve the model."""

    return (
        MEMORY_OVERHEAD_FACTOR
        * model_total_parameter_count
        * model_quantization_bits
        / 8
    )


def gpu_required_count(model_required_memory: float, gpu_memory: float) -> int:
    return max(1, math.ceil(model_required_memory / gpu_memory))


def server_energy(
    generation_latency: ValueOrRange,
    server_power: float,
    server_gpu_count: float,
    gpu_required_count: int,
) -> RangeValue:
    """Server energy (kWh) attributed to the GPUs the request occupies."""

    return (
        coerce(generation_latency)
        .multiply(server_power)
        .divide(3600)
        .multiply(gpu_required_count / server_gpu_count)
    )


def request_energy(
    datacenter_pue: float,
    server_energy: RangeValue,
    gpu_required_count: int,
    gpu_energy: RangeValue,
) -> RangeValue:
    return server_energy.add(gpu_energy.multiply(gpu_required_count)).multiply(
        datacenter_pue
    )


def request_usage(request_energy: RangeValue, if_electricity_mix: float) -> RangeValue:
    """Usage impact for one dimension given the mix impact factor per kWh."""

    return request_energy.multiply(if_electricity_mix)


def server_gpu_embodied(
    gpu_required_count: int,
    server_gpu_count: float,
    server_embodied: float,
    gpu_embodied: float,
) -> float:
    return (
        gpu_required_count / server_gpu_count
    ) * server_embodied + gpu_required_count * gpu_embodied


def request_embodied(
    server_gpu_embodied: float,
    server_lifetime: float,
    generation_latency: ValueOrRange,
) -> RangeValue:
    """Straight-line amortisation of manufacturing impact over the occupancy time."""

    return (
        coerce(generation_latency).divide(server_lifetime).multiply(server_gpu_embodied)
    )


@dataclass(frozen=True, slots=True)
class DagResult:
    """Outputs and intermediates of one graph evaluation."""

    gpu_energy: RangeValue
    generation_latency: RangeValue
    model_required_memory: float
    gpu_required_count: int
    server_energy: RangeValue
    request_energy: RangeValue
    request_usage_gwp: RangeValue
    request_usage_adpe: RangeValue
    request_usage_pe: RangeValue
    request_embodied_gwp: RangeValue
    request_embodied_adpe: RangeValue
    request_embodied_pe: RangeValue

    def impact_fields(self) -> dict[str, RangeValue]:
        """Return the seven impact outputs in :data:`IMPACT_FIELDS` order."""

        return {
            "request_energy": self.request_energy,
            "request_usage_gwp": self.request_usage_gwp,
            "request_usage_adpe": self.request_usage_adpe,
            "request_usage_pe": self.request_usage_pe,
            "request_embodied_gwp": self.request_embodied_gwp,
            "request_embodied_adpe": self.request_embodied_adpe,
            "request_embodied_pe": self.request_embodied_pe,
        }


def compute_dag(
    *,
    model_active_parameter_count: float,
    model_total_parameter_count: float,
    output_token_count: int,
    request_latency: float,
    if_electricity_mix_adpe: float,
    if_electricity_mix_pe: float,
    if_electricity_mix_gwp: float,
    coefficients: ImpactCoefficients = DEFAULT_COEFFICIENTS,
) -> DagResult:
    """Evaluate the impact graph for one concrete pair of parameter counts.

    Args:
        model_active_parameter_count: Parameters exercised per token (billions).
        model_total_parameter_count: Parameters held in memory (billions).
        output_token_count: Number of generated tokens.
        request_latency: Observed request latency in seconds, ``math.inf``
            when unknown.
        if_electricity_mix_adpe: ADPe per kWh of the electricity mix.
        if_electricity_mix_pe: PE per kWh of the electricity mix.
        if_electricity_mix_gwp: GWP per kWh of the electricity mix.
        coefficients: Hardware and regression coefficients.

    Returns:
        A :class:`DagResult` holding every stage's value.
    """

    c = coefficients
    gpu_energy_value = gpu_energy(
        model_active_parameter_count,
        output_token_count,
        c.gpu_energy_alpha,
        c.gpu_energy_beta,
        c.gpu_energy_stdev,
    )
    latency = generation_latency(
        model_active_parameter_count,
        output_token_count,
        c.gpu_latency_alpha,
        c.gpu_latency_beta,
        c.gpu_latency_stdev,
        request_latency,
    )
    memory = model_required_memory(
        model_total_parameter_count, c.model_quantization_bits
    )
    gpu_count = gpu_required_count(memory, c.gpu_memory)
    server_energy_value = server_energy(
        latency, c.server_power, c.server_gpu_count, gpu_count
    )
    energy = request_energy(
        c.datacenter_pue, server_energy_value, gpu_count, gpu_energy_value
    )

    embodied: dict[str, RangeValue] = {}
    for dimension, server_figure, gpu_figure in (
        ("gwp", c.server_embodied_gwp, c.gpu_embodied_gwp),
        ("adpe", c.server_embodied_adpe, c.gpu_embodied_adpe),
        ("pe", c.server_embodied_pe, c.gpu_embodied_pe),
    ):
        amortised = server_gpu_embodied(
            gpu_count, c.server_gpu_count, server_figure, gpu_figure
        )
        embodied[dimension] = request_embodied(amortised, c.server_lifetime, latency)

    return DagResult(
        gpu_energy=gpu_energy_value,
        generation_latency=latency,
        model_required_memory=memory,
        gpu_required_count=gpu_count,
        server_energy=server_energy_value,
        request_energy=energy,
        request_usage_gwp=request_usage(energy, if_electricity_mix_gwp),
        request_usage_adpe=request_usage(energy, if_electricity_mix_adpe),
        request_usage_pe=request_usage(energy, if_electricity_mix_pe),
        request_embodied_gwp=embodied["gwp"],
        request_embodied_adpe=embodied["adpe"],
        request_embodied_pe=embodied["pe"],
    )
