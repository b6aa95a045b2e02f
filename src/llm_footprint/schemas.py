"""Pydantic models describing the public JSON report schema."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from llm_footprint.impacts import BaseImpact, Impacts

SchemaVersionLiteral = Literal["0.1.0"]
CURRENT_REPORT_SCHEMA_VERSION: SchemaVersionLiteral = "0.1.0"


class RangeModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)
    mean: float = Field(..., ge=0.0)

    @model_validator(mode="after")
    def _check_order(self) -> "RangeModel":
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class ImpactModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str
    name: str
    unit: str
    value: RangeModel

    @classmethod
    def from_impact(cls, impact: BaseImpact) -> "ImpactModel":
        return cls(
            type=impact.kind.value,
            name=impact.name,
            unit=impact.unit,
            value=RangeModel(
                min=impact.value.min, max=impact.value.max, mean=impact.value.mean
            ),
        )


class UsageModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    energy: ImpactModel
    gwp: ImpactModel
    adpe: ImpactModel
    pe: ImpactModel


class EmbodiedModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    gwp: ImpactModel
    adpe: ImpactModel
    pe: ImpactModel


class RequestModel(BaseModel):
    """Identifies the request a report was computed for."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    output_token_count: int = Field(..., gt=0)
    request_latency: float | None = Field(
        default=None,
        gt=0.0,
        description="Observed latency in seconds; absent when unconstrained.",
    )
    electricity_mix_zone: str = Field(..., min_length=1)


class ImpactReport(BaseModel):
    """Immutable, versioned report of one request's environmental impacts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["llm_footprint"] = "llm_footprint"
    schema_version: SchemaVersionLiteral = CURRENT_REPORT_SCHEMA_VERSION
    request: RequestModel | None = None

    energy: ImpactModel
    gwp: ImpactModel
    adpe: ImpactModel
    pe: ImpactModel
    usage: UsageModel
    embodied: EmbodiedModel

    @classmethod
    def from_impacts(
        cls, impacts: Impacts, *, request: RequestModel | None = None
    ) -> "ImpactReport":
        return cls(
            request=request,
            energy=ImpactModel.from_impact(impacts.energy),
            gwp=ImpactModel.from_impact(impacts.gwp),
            adpe=ImpactModel.from_impact(impacts.adpe),
            pe=ImpactModel.from_impact(impacts.pe),
            usage=UsageModel(
                energy=ImpactModel.from_impact(impacts.usage.energy),
                gwp=ImpactModel.from_impact(impacts.usage.gwp),
                adpe=ImpactModel.from_impact(impacts.usage.adpe),
                pe=ImpactModel.from_impact(impacts.usage.pe),
            ),
            embodied=EmbodiedModel(
                gwp=ImpactModel.from_impact(impacts.embodied.gwp),
                adpe=ImpactModel.from_impact(impacts.embodied.adpe),
                pe=ImpactModel.from_impact(impacts.embodied.pe),
            ),
        )

    def model_dump_json_ready(self) -> dict[str, object]:
        """Return a JSON-serialisable payload with ``None`` values removed."""

        return self.model_dump(mode="json", exclude_none=True)
