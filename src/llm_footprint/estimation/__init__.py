"""Impact computation package.

Provides the pure pipeline: coefficients, the per-request impact graph and
the parameter-range expansion that wraps it.
"""

from __future__ import annotations

from .coefficients import DEFAULT_COEFFICIENTS, ImpactCoefficients
from .dag import IMPACT_FIELDS, DagResult, compute_dag
from .engine import (
    ElectricityMixFactors,
    RequestParameters,
    compute_impacts,
    compute_llm_impacts,
)

__all__ = [
    "DEFAULT_COEFFICIENTS",
    "DagResult",
    "ElectricityMixFactors",
    "IMPACT_FIELDS",
    "ImpactCoefficients",
    "RequestParameters",
    "compute_dag",
    "compute_impacts",
    "compute_llm_impacts",
]
