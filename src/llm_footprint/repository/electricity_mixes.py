"""Electricity-mix impact factors keyed by zone code."""

from __future__ import annotations

import csv
import importlib.resources as resources
import io
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Final

from llm_footprint.errors import ElectricityMixNotFoundError, InvalidInputError
from llm_footprint.estimation.engine import ElectricityMixFactors

LOGGER = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_ZONE",
    "ElectricityMix",
    "ElectricityMixRepository",
    "load_packaged_electricity_mixes",
]

DEFAULT_ZONE: Final[str] = "WOR"

_COLUMNS: Final[tuple[str, ...]] = ("name", "adpe", "pe", "gwp")


@dataclass(frozen=True, slots=True)
class ElectricityMix:
    """Impact factors per kWh for one zone.

    Attributes:
        zone: ISO 3166-1 alpha-3 code, or ``WOR`` for the world average.
        adpe: kgSbeq per kWh.
        pe: MJ per kWh.
        gwp: kgCO2eq per kWh.
    """

    zone: str
    adpe: float
    pe: float
    gwp: float

    def to_factors(self) -> ElectricityMixFactors:
        return ElectricityMixFactors(adpe=self.adpe, pe=self.pe, gwp=self.gwp)


def _parse_factor(raw: str, *, zone: str, column: str, line: int) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Invalid {column} value {raw!r} for zone {zone} on line {line}"
        ) from exc
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(
            f"{column} for zone {zone} on line {line} must be finite and non-negative"
        )
    return value


class ElectricityMixRepository:
    """In-memory table of electricity mixes."""

    def __init__(self, mixes: Iterable[ElectricityMix]) -> None:
        self._mixes: dict[str, ElectricityMix] = {mix.zone: mix for mix in mixes}

    @classmethod
    def from_csv(cls, text: str) -> "ElectricityMixRepository":
        """Parse a ``name,adpe,pe,gwp`` CSV document.

        Raises:
            InvalidInputError: If the header is missing columns or a factor is
                not a finite non-negative number.
        """

        reader = csv.DictReader(io.StringIO(text))
        header = reader.fieldnames or []
        missing = [column for column in _COLUMNS if column not in header]
        if missing:
            raise InvalidInputError(
                f"Electricity mix table is missing column(s): {', '.join(missing)}"
            )
        mixes: list[ElectricityMix] = []
        for row in reader:
            zone = (row.get("name") or "").strip()
            if not zone:
                LOGGER.warning(
                    "Skipping electricity mix row without a zone",
                    extra={"line": reader.line_num},
                )
                continue
            mixes.append(
                ElectricityMix(
                    zone=zone,
                    adpe=_parse_factor(
                        row["adpe"], zone=zone, column="adpe", line=reader.line_num
                    ),
                    pe=_parse_factor(
                        row["pe"], zone=zone, column="pe", line=reader.line_num
                    ),
                    gwp=_parse_factor(
                        row["gwp"], zone=zone, column="gwp", line=reader.line_num
                    ),
                )
            )
        return cls(mixes)

    @classmethod
    def from_file(cls, path: str | Path) -> "ElectricityMixRepository":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(str(path))
        return cls.from_csv(p.read_text(encoding="utf-8"))

    def find_electricity_mix(self, zone: str) -> ElectricityMix:
        """Return the mix registered for ``zone``.

        Raises:
            ElectricityMixNotFoundError: If the zone is absent.
        """

        mix = self._mixes.get(zone)
        if mix is None:
            raise ElectricityMixNotFoundError(zone)
        return mix

    def zones(self) -> list[str]:
        return sorted(self._mixes)

    def __contains__(self, zone: object) -> bool:
        return zone in self._mixes

    def __len__(self) -> int:
        return len(self._mixes)


@lru_cache(maxsize=1)
def load_packaged_electricity_mixes() -> ElectricityMixRepository:
    """Load the table shipped in ``llm_footprint.data``."""

    text = (
        resources.files("llm_footprint.data")
        .joinpath("electricity_mixes.csv")
        .read_text(encoding="utf-8")
    )
    return ElectricityMixRepository.from_csv(text)
