"""High-level impact estimation by provider and model name."""

from __future__ import annotations

import logging
import math

from llm_footprint.config_loader import FootprintConfig
from llm_footprint.estimation.coefficients import DEFAULT_COEFFICIENTS, ImpactCoefficients
from llm_footprint.estimation.engine import RequestParameters, compute_impacts
from llm_footprint.impacts import Impacts
from llm_footprint.repository.electricity_mixes import (
    DEFAULT_ZONE,
    ElectricityMixRepository,
    load_packaged_electricity_mixes,
)
from llm_footprint.repository.models import ModelRepository, load_packaged_models

__all__ = ["LLMImpactEstimator", "llm_impacts"]


class LLMImpactEstimator:
    """Estimate request impacts from a model catalog and an electricity-mix table.

    Reference-data lookups happen before the pure computation runs, so a
    missing model or zone fails without producing a partial result.
    """

    def __init__(
        self,
        *,
        models: ModelRepository | None = None,
        electricity_mixes: ElectricityMixRepository | None = None,
        coefficients: ImpactCoefficients | None = None,
        electricity_mix_zone: str = DEFAULT_ZONE,
    ) -> None:
        """Initialise the estimator with optional overrides.

        Args:
            models: Model catalog; the packaged one when omitted.
            electricity_mixes: Mix table; the packaged one when omitted.
            coefficients: Hardware coefficients; defaults when omitted.
            electricity_mix_zone: Zone used when a call does not name one.
        """

        self.logger = logging.getLogger("llm_footprint.estimator")
        self.models = models if models is not None else load_packaged_models()
        self.electricity_mixes = (
            electricity_mixes
            if electricity_mixes is not None
            else load_packaged_electricity_mixes()
        )
        self.coefficients = (
            coefficients if coefficients is not None else DEFAULT_COEFFICIENTS
        )
        self.electricity_mix_zone = electricity_mix_zone

        self.logger.info(
            "LLMImpactEstimator initialised",
            extra={
                "model_count": len(self.models),
                "zone_count": len(self.electricity_mixes),
                "default_zone": self.electricity_mix_zone,
            },
        )

    @classmethod
    def from_config(cls, config: FootprintConfig) -> "LLMImpactEstimator":
        """Build an estimator from a loaded :class:`FootprintConfig`."""

        models = (
            ModelRepository.from_file(config.data.models_file)
            if config.data.models_file
            else None
        )
        mixes = (
            ElectricityMixRepository.from_file(config.data.electricity_mixes_file)
            if config.data.electricity_mixes_file
            else None
        )
        return cls(
            models=models,
            electricity_mixes=mixes,
            coefficients=config.coefficients,
            electricity_mix_zone=config.electricity_mix_zone,
        )

    def build_request(
        self,
        provider: str,
        model_name: str,
        output_token_count: int,
        request_latency: float = math.inf,
        electricity_mix_zone: str | None = None,
    ) -> RequestParameters:
        """Resolve the model and mix into :class:`RequestParameters`.

        Raises:
            ModelNotFoundError: If the model is not in the catalog.
            ElectricityMixNotFoundError: If the zone is not in the table.
            InvalidInputError: If the request fields are malformed.
        """

        model = self.models.find_model(provider, model_name)
        zone = electricity_mix_zone or self.electricity_mix_zone
        mix = self.electricity_mixes.find_electricity_mix(zone)
        return RequestParameters(
            model_active_parameter_count=model.architecture.active_parameter_count,
            model_total_parameter_count=model.architecture.total_parameter_count,
            output_token_count=output_token_count,
            electricity_mix=mix.to_factors(),
            request_latency=request_latency,
        )

    def estimate(
        self,
        provider: str,
        model_name: str,
        output_token_count: int,
        request_latency: float = math.inf,
        electricity_mix_zone: str | None = None,
    ) -> Impacts:
        """Compute the impacts of one request to ``provider``/``model_name``.

        Args:
            provider: Provider identifier, for example ``"openai"``.
            model_name: Model name or alias as sent to the provider.
            output_token_count: Number of generated tokens.
            request_latency: Observed latency in seconds; ``math.inf`` when
                unknown.
            electricity_mix_zone: Zone code overriding the estimator default.

        Returns:
            The request's :class:`~llm_footprint.impacts.Impacts`.
        """

        params = self.build_request(
            provider,
            model_name,
            output_token_count,
            request_latency=request_latency,
            electricity_mix_zone=electricity_mix_zone,
        )
        impacts = compute_impacts(params, self.coefficients)
        self.logger.debug(
            "Computed request impacts",
            extra={
                "provider": provider,
                "model": model_name,
                "output_token_count": output_token_count,
                "energy_kwh_min": impacts.energy.value.min,
                "energy_kwh_max": impacts.energy.value.max,
            },
        )
        return impacts


def llm_impacts(
    provider: str,
    model_name: str,
    output_token_count: int,
    request_latency: float = math.inf,
    electricity_mix_zone: str = DEFAULT_ZONE,
) -> Impacts:
    """Compute request impacts with the packaged catalog and default coefficients."""

    estimator = LLMImpactEstimator(electricity_mix_zone=electricity_mix_zone)
    return estimator.estimate(provider, model_name, output_token_count, request_latency)
