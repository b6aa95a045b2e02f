"""Environment-backed settings primitives for :mod:`llm_footprint`."""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["LLMFootprintSettings", "get_settings"]

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class LLMFootprintSettings(BaseSettings):
    """Expose environment-derived configuration knobs.

    All environment access goes through this class. Attributes default to
    ``None`` (or an inline default) when the variable is absent; malformed
    values are ignored rather than raising.

    Attributes:
        electricity_mix_zone: Default zone used when a request names none.
        config_path: Explicit path to a coefficient override file.
        models_file: Replacement for the packaged model catalog.
        electricity_mixes_file: Replacement for the packaged mix table.
        log_level: Level applied by :func:`llm_footprint.logging_setup.configure_logging`.
    """

    electricity_mix_zone: str | None = Field(
        default=None, alias="LLM_FOOTPRINT_ELECTRICITY_MIX_ZONE"
    )
    config_path: str | None = Field(default=None, alias="LLM_FOOTPRINT_CONFIG_PATH")
    models_file: str | None = Field(default=None, alias="LLM_FOOTPRINT_MODELS_FILE")
    electricity_mixes_file: str | None = Field(
        default=None, alias="LLM_FOOTPRINT_ELECTRICITY_MIXES_FILE"
    )
    log_level: str = Field(default="WARNING", alias="LLM_FOOTPRINT_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator(
        "electricity_mix_zone",
        "config_path",
        "models_file",
        "electricity_mixes_file",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        """Treat empty strings as unset.

        Args:
            value: Raw environment value.

        Returns:
            Stripped string, or ``None`` when empty.
        """

        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: object) -> str:
        """Normalise the log level, falling back to ``WARNING`` when unknown."""

        if isinstance(value, str) and value.strip().upper() in _LOG_LEVELS:
            return value.strip().upper()
        if isinstance(value, int):
            name = logging.getLevelName(value)
            if name in _LOG_LEVELS:
                return name
        return "WARNING"


def get_settings() -> LLMFootprintSettings:
    """Return a :class:`LLMFootprintSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return LLMFootprintSettings()
