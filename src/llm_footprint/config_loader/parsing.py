"""Parsing and transformation helpers for :mod:`llm_footprint.config_loader`."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from llm_footprint.config_loader.models import FootprintConfig
from llm_footprint.errors import InvalidInputError
from llm_footprint.estimation.coefficients import ImpactCoefficients
from llm_footprint.settings import LLMFootprintSettings

LOGGER = logging.getLogger(__name__)


def apply_environment_overrides(
    config: FootprintConfig, settings: LLMFootprintSettings
) -> FootprintConfig:
    """Apply environment-derived overrides to the configuration.

    Args:
        config: Base configuration instance.
        settings: Environment-derived settings.

    Returns:
        Configuration with environment overrides applied.
    """

    updated = config

    if settings.electricity_mix_zone:
        updated = replace(updated, electricity_mix_zone=settings.electricity_mix_zone)

    if settings.models_file:
        updated = replace(
            updated, data=replace(updated.data, models_file=settings.models_file)
        )

    if settings.electricity_mixes_file:
        updated = replace(
            updated,
            data=replace(
                updated.data, electricity_mixes_file=settings.electricity_mixes_file
            ),
        )

    return updated


def apply_structured_overrides(
    config: FootprintConfig, data: Mapping[str, object]
) -> FootprintConfig:
    """Apply overrides sourced from structured configuration data.

    Args:
        config: Base configuration instance.
        data: Mapping parsed from configuration file.

    Returns:
        Configuration updated according to the provided mapping.

    Raises:
        InvalidInputError: If a coefficient value is not a valid number.
    """

    updated = config

    coefficients_section = _expect_mapping(data.get("coefficients"))
    if coefficients_section is not None:
        updated = replace(
            updated,
            coefficients=parse_coefficient_overrides(
                updated.coefficients, coefficients_section
            ),
        )

    mix_section = _expect_mapping(data.get("electricity_mix"))
    if mix_section is not None:
        zone = _coerce_str(mix_section.get("zone"))
        if zone is not None:
            updated = replace(updated, electricity_mix_zone=zone)

    data_section = _expect_mapping(data.get("data"))
    if data_section is not None:
        settings = updated.data
        models_file = _coerce_str(data_section.get("models_file"))
        if models_file is not None:
            settings = replace(settings, models_file=models_file)
        mixes_file = _coerce_str(data_section.get("electricity_mixes_file"))
        if mixes_file is not None:
            settings = replace(settings, electricity_mixes_file=mixes_file)
        updated = replace(updated, data=settings)

    return updated


def parse_coefficient_overrides(
    base: ImpactCoefficients, section: Mapping[str, object]
) -> ImpactCoefficients:
    """Merge a ``coefficients`` section into ``base``.

    Unknown keys are skipped with a warning so that files written for newer
    coefficient sets still load.

    Args:
        base: Coefficients the overrides apply to.
        section: Mapping of coefficient name to numeric value.

    Returns:
        New coefficients with the overrides applied.

    Raises:
        InvalidInputError: If a known coefficient has a non-numeric value or
            the merged set fails validation.
    """

    known = set(ImpactCoefficients.field_names())
    overrides: dict[str, float] = {}
    for key, value in section.items():
        if key not in known:
            LOGGER.warning("Ignoring unknown coefficient '%s'", key)
            continue
        numeric = _coerce_float(value)
        if numeric is None:
            raise InvalidInputError(
                f"Coefficient {key} must be a number, got {value!r}"
            )
        overrides[key] = numeric
    return base.with_overrides(overrides)


def _coerce_float(value: object) -> float | None:
    """Parse a float from arbitrary input.

    Args:
        value: Raw value.

    Returns:
        Parsed float when conversion succeeds, otherwise ``None``.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _coerce_str(value: object) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _expect_mapping(value: object) -> Mapping[str, object] | None:
    """Return the value when it is a mapping with string keys."""

    if not isinstance(value, Mapping):
        return None
    if not all(isinstance(key, str) for key in value.keys()):
        return None
    return value
