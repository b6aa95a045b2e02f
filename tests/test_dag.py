"""Tests for the single-evaluation impact graph."""

from __future__ import annotations

import math

import pytest

from llm_footprint.estimation.coefficients import DEFAULT_COEFFICIENTS
from llm_footprint.estimation.dag import (
    IMPACT_FIELDS,
    compute_dag,
    generation_latency,
    gpu_energy,
    gpu_required_count,
    model_required_memory,
    request_embodied,
    server_energy,
    server_gpu_embodied,
)
from llm_footprint.range_value import RangeValue

LIFETIME = 5 * 365 * 24 * 3600


def _dense_70b(**overrides):
    kwargs = dict(
        model_active_parameter_count=70,
        model_total_parameter_count=70,
        output_token_count=1000,
        request_latency=math.inf,
        if_electricity_mix_adpe=7.378e-08,
        if_electricity_mix_pe=9.988,
        if_electricity_mix_gwp=0.169,
    )
    kwargs.update(overrides)
    return compute_dag(**kwargs)


def test_dense_70b_reference_values():
    """A 70B dense model generating 1000 tokens matches a hand calculation."""
    result = _dense_70b()

    energy_per_token = 8.91e-8 * 70 + 1.43e-6
    spread = 1.96 * 5.19e-7
    gpu_lo = 1000 * (energy_per_token - spread)
    gpu_hi = 1000 * (energy_per_token + spread)
    assert result.gpu_energy.min == pytest.approx(gpu_lo)
    assert result.gpu_energy.max == pytest.approx(gpu_hi)

    latency_per_token = 8.02e-4 * 70 + 2.23e-2
    lat_lo = 1000 * (latency_per_token - 1.96 * 7e-6)
    lat_hi = 1000 * (latency_per_token + 1.96 * 7e-6)
    assert result.generation_latency.min == pytest.approx(lat_lo)
    assert result.generation_latency.max == pytest.approx(lat_hi)

    assert result.model_required_memory == pytest.approx(42.0)
    assert result.gpu_required_count == 1

    energy_lo = (lat_lo / 3600 / 8 + gpu_lo) * 1.2
    energy_hi = (lat_hi / 3600 / 8 + gpu_hi) * 1.2
    assert result.request_energy.min == pytest.approx(energy_lo)
    assert result.request_energy.max == pytest.approx(energy_hi)
    assert result.request_energy.min == pytest.approx(0.011247, rel=1e-4)
    assert result.request_energy.max == pytest.approx(0.013690, rel=1e-4)

    assert result.request_usage_gwp.min == pytest.approx(energy_lo * 0.169)
    assert result.request_usage_pe.max == pytest.approx(energy_hi * 9.988)

    amortised_gwp = 3000 / 8 + 143
    assert result.request_embodied_gwp.min == pytest.approx(
        lat_lo / LIFETIME * amortised_gwp
    )
    assert result.request_embodied_gwp.max == pytest.approx(
        lat_hi / LIFETIME * amortised_gwp
    )


def test_latency_cap_below_modelled_latency():
    """An observed latency below the modelled interval replaces it exactly."""
    result = _dense_70b(request_latency=10.0)
    assert result.generation_latency == RangeValue(10.0, 10.0)


def test_latency_cap_above_modelled_latency_keeps_interval():
    """An observed latency above the modelled interval leaves it unchanged."""
    uncapped = _dense_70b()
    capped = _dense_70b(request_latency=1000.0)
    assert capped.generation_latency == uncapped.generation_latency


def test_latency_equal_to_modelled_max_is_capped():
    """The modelled interval survives only when strictly below the cap."""
    modelled = generation_latency(70, 1000, 8.02e-4, 2.23e-2, 7e-6, math.inf)
    capped = generation_latency(70, 1000, 8.02e-4, 2.23e-2, 7e-6, modelled.max)
    assert capped == RangeValue.point(modelled.max)


def test_lower_bound_is_clamped_at_zero():
    """A wide regression spread never yields a negative energy."""
    result = gpu_energy(0, 10, 0.0, 1e-9, 1e-6)
    assert result.min == 0.0
    assert result.max > 0


@pytest.mark.parametrize(
    "total,expected",
    [(0, 1), (1, 1), (70, 1), (133, 1), (134, 2), (440, 4), (880, 7)],
)
def test_gpu_required_count(total, expected):
    """GPU count covers the memory with at least one GPU."""
    memory = model_required_memory(total, 4)
    assert gpu_required_count(memory, 80) == expected


def test_model_required_memory_formula():
    """Memory is 1.2 x parameters x bits / 8, in GB."""
    assert model_required_memory(141, 4) == pytest.approx(84.6)
    assert model_required_memory(7, 16) == pytest.approx(16.8)


def test_server_energy_scales_with_gpu_share():
    """Server energy is the latency-weighted share of the occupied GPUs."""
    result = server_energy(RangeValue(3600.0, 7200.0), 1.0, 8, 2)
    assert result.min == pytest.approx(0.25)
    assert result.max == pytest.approx(0.5)


def test_embodied_amortisation():
    """Embodied impact is the amortised figure times latency over lifetime."""
    amortised = server_gpu_embodied(2, 8, 3000, 143)
    assert amortised == pytest.approx(1036.0)
    result = request_embodied(amortised, LIFETIME, RangeValue(LIFETIME, LIFETIME))
    assert result.min == pytest.approx(1036.0)
    assert result.max == pytest.approx(1036.0)


def test_custom_coefficients_are_used():
    """Coefficient overrides flow into every stage."""
    doubled = DEFAULT_COEFFICIENTS.with_overrides(datacenter_pue=2.4)
    base = _dense_70b()
    changed = _dense_70b(coefficients=doubled)
    assert changed.request_energy.min == pytest.approx(base.request_energy.min * 2)
    assert changed.request_embodied_gwp == base.request_embodied_gwp


def test_impact_fields_order():
    """impact_fields returns the seven outputs in a fixed order."""
    result = _dense_70b()
    fields = result.impact_fields()
    assert tuple(fields) == IMPACT_FIELDS
    assert all(value.min <= value.max for value in fields.values())
    assert fields["request_energy"] is result.request_energy
    assert fields["request_usage_adpe"] is result.request_usage_adpe
    assert fields["request_embodied_pe"] is result.request_embodied_pe
