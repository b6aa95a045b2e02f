"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
import os
import sys

import pytest
from hypothesis import HealthCheck, settings

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

# Autouse fixtures below are function scoped; they only reset process state.
settings.register_profile(
    "llm_footprint", suppress_health_check=[HealthCheck.function_scoped_fixture]
)
settings.load_profile("llm_footprint")

_ENV_PREFIX = "LLM_FOOTPRINT_"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any ``LLM_FOOTPRINT_*`` variables inherited from the shell."""

    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def world_mix():
    """Electricity mix factors of the packaged ``WOR`` zone."""

    from llm_footprint.estimation.engine import ElectricityMixFactors

    return ElectricityMixFactors(adpe=7.378e-08, pe=9.988, gwp=0.59)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Remove handlers installed by ``configure_logging`` after each test."""

    yield
    logger = logging.getLogger("llm_footprint")
    for handler in list(logger.handlers):
        if getattr(handler, "_llm_footprint_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
