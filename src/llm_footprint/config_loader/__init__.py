"""Public entry points for the :mod:`llm_footprint` configuration loader."""

from __future__ import annotations

from llm_footprint.config_loader.models import DataSettings, FootprintConfig
from llm_footprint.config_loader.parsing import (
    apply_environment_overrides,
    apply_structured_overrides,
    parse_coefficient_overrides,
)
from llm_footprint.config_loader.sources import load_structured_config
from llm_footprint.estimation.coefficients import ImpactCoefficients
from llm_footprint.settings import LLMFootprintSettings, get_settings

__all__ = [
    "DataSettings",
    "FootprintConfig",
    "load_coefficients",
    "load_config",
    "parse_coefficient_overrides",
]


def load_config(
    path: str | None = None, *, settings: LLMFootprintSettings | None = None
) -> FootprintConfig:
    """Load configuration from environment and optional file sources.

    File values take precedence over environment values, which take
    precedence over the built-in defaults.

    Args:
        path: Optional explicit path to a configuration file. When omitted the
            loader inspects the environment and default search locations.
        settings: Optional pre-instantiated environment settings. When omitted
            :func:`llm_footprint.settings.get_settings` is used.

    Returns:
        Fully populated :class:`FootprintConfig` instance.
    """

    env_settings = settings or get_settings()
    base = apply_environment_overrides(FootprintConfig(), env_settings)
    structured = load_structured_config(path, env_settings)
    if structured is None:
        return base
    return apply_structured_overrides(base, structured)


def load_coefficients(
    path: str | None = None, *, settings: LLMFootprintSettings | None = None
) -> ImpactCoefficients:
    """Return only the coefficients resolved by :func:`load_config`."""

    return load_config(path, settings=settings).coefficients
