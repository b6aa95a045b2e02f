"""Model catalog and provider alias resolution.

The packaged catalog lives in ``llm_footprint/data/models.json``:

.. code-block:: json

    {
      "aliases": [{"provider": "openai", "name": "gpt-4o-mini-2024-07-18", "target": "gpt-4o-mini"}],
      "models": [
        {"provider": "openai", "name": "gpt-4o-mini",
         "architecture": {"type": "dense", "parameters": {"min": 8, "max": 40}}}
      ]
    }

Parameter counts are in billions. A mixture-of-experts architecture carries
``{"total": ..., "active": ...}``; each count may itself be a ``{min, max}``
range.
"""

from __future__ import annotations

import importlib.resources as resources
import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from llm_footprint.errors import InvalidInputError, ModelNotFoundError
from llm_footprint.range_value import RangeValue, ValueOrRange

LOGGER = logging.getLogger(__name__)

__all__ = [
    "Architecture",
    "Model",
    "ModelAlias",
    "ModelCatalog",
    "ModelRepository",
    "ParameterRange",
    "MoeParameters",
    "load_packaged_models",
]


class ParameterRange(BaseModel):
    """Bounds for a parameter count whose exact value is undisclosed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)

    @model_validator(mode="after")
    def _check_order(self) -> "ParameterRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self

    def to_range(self) -> RangeValue:
        return RangeValue(self.min, self.max)


ParameterCount = float | ParameterRange


def _as_value(count: ParameterCount) -> ValueOrRange:
    if isinstance(count, ParameterRange):
        return count.to_range()
    return float(count)


class MoeParameters(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    total: ParameterCount
    active: ParameterCount


class Architecture(BaseModel):
    """Model architecture as published by the catalog."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["dense", "moe"]
    parameters: MoeParameters | ParameterRange | float

    @model_validator(mode="after")
    def _check_parameters_shape(self) -> "Architecture":
        if self.type == "moe" and not isinstance(self.parameters, MoeParameters):
            raise ValueError("moe architecture requires {total, active} parameters")
        if self.type == "dense" and isinstance(self.parameters, MoeParameters):
            raise ValueError("dense architecture takes a single parameter count")
        counts = (
            (self.parameters.total, self.parameters.active)
            if isinstance(self.parameters, MoeParameters)
            else (self.parameters,)
        )
        for count in counts:
            if isinstance(count, float) and count < 0:
                raise ValueError("parameter count must be non-negative")
        return self

    @property
    def total_parameter_count(self) -> ValueOrRange:
        if isinstance(self.parameters, MoeParameters):
            return _as_value(self.parameters.total)
        return _as_value(self.parameters)

    @property
    def active_parameter_count(self) -> ValueOrRange:
        if isinstance(self.parameters, MoeParameters):
            return _as_value(self.parameters.active)
        return _as_value(self.parameters)


class Model(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    provider: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    architecture: Architecture
    warnings: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()


class ModelAlias(BaseModel):
    """Maps an alternative ``name`` to the catalog entry ``target``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str
    name: str
    target: str


class ModelCatalog(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    aliases: tuple[ModelAlias, ...] = ()
    models: tuple[Model, ...] = ()


class ModelRepository:
    """Look up models by provider and name, following aliases."""

    def __init__(
        self, models: Iterable[Model], aliases: Iterable[ModelAlias] = ()
    ) -> None:
        self._models: dict[tuple[str, str], Model] = {}
        for model in models:
            key = (model.provider, model.name)
            if key in self._models:
                LOGGER.warning(
                    "Duplicate model entry; keeping the last one",
                    extra={"provider": model.provider, "model": model.name},
                )
            self._models[key] = model
        self._aliases: dict[tuple[str, str], str] = {
            (alias.provider, alias.name): alias.target for alias in aliases
        }

    @classmethod
    def from_catalog(cls, catalog: ModelCatalog) -> "ModelRepository":
        return cls(catalog.models, catalog.aliases)

    @classmethod
    def from_json(cls, text: str) -> "ModelRepository":
        """Build a repository from a JSON catalog document.

        Raises:
            InvalidInputError: If the document is not valid JSON or does not
                match the catalog schema.
        """

        try:
            catalog = ModelCatalog.model_validate_json(text)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid model catalog\n{exc}") from exc
        return cls.from_catalog(catalog)

    @classmethod
    def from_file(cls, path: str | Path) -> "ModelRepository":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(str(path))
        return cls.from_json(p.read_text(encoding="utf-8"))

    def resolve_name(self, provider: str, name: str) -> str:
        return self._aliases.get((provider, name), name)

    def find_model(self, provider: str, name: str) -> Model:
        """Return the catalog entry for ``provider``/``name``.

        Raises:
            ModelNotFoundError: If neither the name nor an alias is known.
        """

        resolved = self.resolve_name(provider, name)
        model = self._models.get((provider, resolved))
        if model is None:
            raise ModelNotFoundError(provider, name)
        if resolved != name:
            LOGGER.debug(
                "Resolved model alias",
                extra={"provider": provider, "alias": name, "model": resolved},
            )
        return model

    def list_models(self, provider: str | None = None) -> list[Model]:
        return [
            model
            for (model_provider, _), model in sorted(self._models.items())
            if provider is None or model_provider == provider
        ]

    def providers(self) -> list[str]:
        return sorted({provider for provider, _ in self._models})

    def __len__(self) -> int:
        return len(self._models)


@lru_cache(maxsize=1)
def load_packaged_models() -> ModelRepository:
    """Load the catalog shipped in ``llm_footprint.data``."""

    text = (
        resources.files("llm_footprint.data")
        .joinpath("models.json")
        .read_text(encoding="utf-8")
    )
    return ModelRepository.from_json(text)
