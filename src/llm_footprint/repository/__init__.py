"""Reference data consumed by the estimator: model catalog and electricity mixes."""

from __future__ import annotations

from llm_footprint.repository.electricity_mixes import (
    DEFAULT_ZONE,
    ElectricityMix,
    ElectricityMixRepository,
    load_packaged_electricity_mixes,
)
from llm_footprint.repository.models import (
    Architecture,
    Model,
    ModelRepository,
    load_packaged_models,
)

__all__ = [
    "Architecture",
    "DEFAULT_ZONE",
    "ElectricityMix",
    "ElectricityMixRepository",
    "Model",
    "ModelRepository",
    "load_packaged_electricity_mixes",
    "load_packaged_models",
]
