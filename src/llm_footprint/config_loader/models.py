"""Typed configuration dataclasses for :mod:`llm_footprint.config_loader`."""

from __future__ import annotations

from dataclasses import dataclass, field

from llm_footprint.estimation.coefficients import DEFAULT_COEFFICIENTS, ImpactCoefficients
from llm_footprint.repository.electricity_mixes import DEFAULT_ZONE


@dataclass(slots=True)
class DataSettings:
    """Optional replacements for the packaged reference data.

    Attributes:
        models_file: Path to a model catalog JSON document.
        electricity_mixes_file: Path to a ``name,adpe,pe,gwp`` CSV table.
    """

    models_file: str | None = None
    electricity_mixes_file: str | None = None


@dataclass(slots=True)
class FootprintConfig:
    """Strongly typed configuration container for impact estimation."""

    coefficients: ImpactCoefficients = DEFAULT_COEFFICIENTS
    electricity_mix_zone: str = DEFAULT_ZONE
    data: DataSettings = field(default_factory=DataSettings)
