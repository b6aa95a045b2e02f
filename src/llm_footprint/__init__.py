"""LLM Footprint - environmental impacts of large-language-model inference."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "Impacts",
    "ImpactCoefficients",
    "LLMImpactEstimator",
    "RangeValue",
    "RequestParameters",
    "compute_impacts",
    "compute_llm_impacts",
    "llm_impacts",
]

if TYPE_CHECKING:
    from .estimation import (
        ImpactCoefficients,
        RequestParameters,
        compute_impacts,
        compute_llm_impacts,
    )
    from .estimator import LLMImpactEstimator, llm_impacts
    from .impacts import Impacts
    from .range_value import RangeValue


def __getattr__(name: str) -> Any:
    """Lazily import modules so that ``import llm_footprint`` stays cheap."""

    module_map = {
        "Impacts": "impacts",
        "ImpactCoefficients": "estimation",
        "LLMImpactEstimator": "estimator",
        "RangeValue": "range_value",
        "RequestParameters": "estimation",
        "compute_impacts": "estimation",
        "compute_llm_impacts": "estimation",
        "llm_impacts": "estimator",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
