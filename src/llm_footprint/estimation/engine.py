"""Impact computation entry points and parameter-range expansion."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from llm_footprint.errors import InvalidInputError
from llm_footprint.estimation.coefficients import DEFAULT_COEFFICIENTS, ImpactCoefficients
from llm_footprint.estimation.dag import IMPACT_FIELDS, DagResult, compute_dag
from llm_footprint.impacts import ADPe, Embodied, Energy, GWP, Impacts, PE, Usage
from llm_footprint.range_value import RangeValue, ValueOrRange, coerce, is_range

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ElectricityMixFactors",
    "RequestParameters",
    "compute_impacts",
    "compute_llm_impacts",
    "evaluate_boundaries",
    "merge_ranges",
]


def _require_finite_non_negative(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite or value < 0:
        raise InvalidInputError(f"{name} must be finite and non-negative, got {value}")


@dataclass(frozen=True, slots=True)
class ElectricityMixFactors:
    """Impact per kWh of the electricity mix feeding the data centre.

    Attributes:
        adpe: kgSbeq per kWh.
        pe: MJ per kWh.
        gwp: kgCO2eq per kWh.
    """

    adpe: float
    pe: float
    gwp: float

    def __post_init__(self) -> None:
        for name in ("adpe", "pe", "gwp"):
            _require_finite_non_negative(f"electricity mix {name}", getattr(self, name))


@dataclass(frozen=True, slots=True)
class RequestParameters:
    """Inputs describing one inference request.

    Parameter counts are in billions and may be ranges when the exact size of
    the model is not public.

    Attributes:
        model_active_parameter_count: Parameters exercised per token.
        model_total_parameter_count: Parameters loaded in GPU memory.
        output_token_count: Number of generated tokens, strictly positive.
        electricity_mix: Impact factors of the electricity consumed.
        request_latency: Observed wall-clock latency in seconds; ``math.inf``
            leaves the modelled latency unconstrained.
    """

    model_active_parameter_count: ValueOrRange
    model_total_parameter_count: ValueOrRange
    output_token_count: int
    electricity_mix: ElectricityMixFactors
    request_latency: float = math.inf

    def __post_init__(self) -> None:
        for name in ("model_active_parameter_count", "model_total_parameter_count"):
            value = getattr(self, name)
            if isinstance(value, RangeValue):
                _require_finite_non_negative(f"{name}.min", value.min)
                _require_finite_non_negative(f"{name}.max", value.max)
            else:
                _require_finite_non_negative(name, value)
        if isinstance(self.output_token_count, bool) or not isinstance(
            self.output_token_count, int
        ):
            raise InvalidInputError(
                f"output_token_count must be an integer, got {self.output_token_count!r}"
            )
        if self.output_token_count <= 0:
            raise InvalidInputError(
                f"output_token_count must be positive, got {self.output_token_count}"
            )
        try:
            float(self.output_token_count)
        except OverflowError as exc:
            raise InvalidInputError(
                "output_token_count is too large to represent as a float"
            ) from exc
        latency = self.request_latency
        if isinstance(latency, bool) or not isinstance(latency, (int, float)):
            raise InvalidInputError(f"request_latency must be a number, got {latency!r}")
        if math.isnan(latency) or latency <= 0:
            raise InvalidInputError(f"request_latency must be positive, got {latency}")

    @property
    def has_parameter_range(self) -> bool:
        return is_range(self.model_active_parameter_count) or is_range(
            self.model_total_parameter_count
        )

    def boundary_parameter_pairs(self) -> list[tuple[float, float]]:
        """Return the ``(active, total)`` pairs the graph must be evaluated at.

        Scalar counts yield a single pair. When either count is a range the
        lower bounds are paired, then the upper bounds; a scalar count is
        repeated in both pairs.
        """

        if not self.has_parameter_range:
            return [
                (
                    float(self.model_active_parameter_count),  # type: ignore[arg-type]
                    float(self.model_total_parameter_count),  # type: ignore[arg-type]
                )
            ]
        active = coerce(self.model_active_parameter_count)
        total = coerce(self.model_total_parameter_count)
        return [(active.min, total.min), (active.max, total.max)]


def merge_ranges(first: RangeValue, second: RangeValue) -> RangeValue:
    """Smallest range enclosing both inputs."""

    return RangeValue(min(first.min, second.min), max(first.max, second.max))


def evaluate_boundaries(
    params: RequestParameters,
    coefficients: ImpactCoefficients = DEFAULT_COEFFICIENTS,
) -> list[DagResult]:
    """Evaluate the graph once per boundary pair of parameter counts."""

    mix = params.electricity_mix
    return [
        compute_dag(
            model_active_parameter_count=active,
            model_total_parameter_count=total,
            output_token_count=params.output_token_count,
            request_latency=params.request_latency,
            if_electricity_mix_adpe=mix.adpe,
            if_electricity_mix_pe=mix.pe,
            if_electricity_mix_gwp=mix.gwp,
            coefficients=coefficients,
        )
        for active, total in params.boundary_parameter_pairs()
    ]


def _merge_impact_fields(results: list[DagResult]) -> dict[str, RangeValue]:
    merged: dict[str, RangeValue] = {}
    for result in results:
        outputs = result.impact_fields()
        for name in IMPACT_FIELDS:
            current = merged.get(name)
            merged[name] = (
                outputs[name] if current is None else merge_ranges(current, outputs[name])
            )
    return merged


def compute_impacts(
    params: RequestParameters,
    coefficients: ImpactCoefficients | None = None,
) -> Impacts:
    """Compute the environmental impacts of one inference request.

    Args:
        params: Validated request description.
        coefficients: Hardware and regression coefficients; defaults apply
            when omitted.

    Returns:
        The assembled :class:`~llm_footprint.impacts.Impacts`.
    """

    used = coefficients if coefficients is not None else DEFAULT_COEFFICIENTS
    results = evaluate_boundaries(params, used)
    if len(results) > 1:
        LOGGER.debug(
            "Expanding parameter range over boundary evaluations",
            extra={
                "evaluations": len(results),
                "parameter_pairs": params.boundary_parameter_pairs(),
            },
        )
    fields = _merge_impact_fields(results)

    energy = Energy(fields["request_energy"])
    usage = Usage(
        energy=energy,
        gwp=GWP(fields["request_usage_gwp"]),
        adpe=ADPe(fields["request_usage_adpe"]),
        pe=PE(fields["request_usage_pe"]),
    )
    embodied = Embodied(
        gwp=GWP(fields["request_embodied_gwp"]),
        adpe=ADPe(fields["request_embodied_adpe"]),
        pe=PE(fields["request_embodied_pe"]),
    )
    return Impacts.from_breakdowns(usage, embodied)


def compute_llm_impacts(
    *,
    model_active_parameter_count: ValueOrRange,
    model_total_parameter_count: ValueOrRange,
    output_token_count: int,
    if_electricity_mix_adpe: float,
    if_electricity_mix_pe: float,
    if_electricity_mix_gwp: float,
    request_latency: float = math.inf,
    **coefficient_overrides: float,
) -> Impacts:
    """Keyword-argument wrapper around :func:`compute_impacts`.

    Any :class:`ImpactCoefficients` field may be passed as a keyword to
    override its default for this call only.

    Raises:
        InvalidInputError: On malformed inputs or unknown coefficient names.
    """

    params = RequestParameters(
        model_active_parameter_count=model_active_parameter_count,
        model_total_parameter_count=model_total_parameter_count,
        output_token_count=output_token_count,
        electricity_mix=ElectricityMixFactors(
            adpe=if_electricity_mix_adpe,
            pe=if_electricity_mix_pe,
            gwp=if_electricity_mix_gwp,
        ),
        request_latency=request_latency,
    )
    coefficients = DEFAULT_COEFFICIENTS.with_overrides(coefficient_overrides)
    return compute_impacts(params, coefficients)
