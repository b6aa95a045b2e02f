"""Configuration source utilities for :mod:`llm_footprint.config_loader`."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import cast

import yaml

from llm_footprint.errors import InvalidInputError
from llm_footprint.settings import LLMFootprintSettings

LOGGER = logging.getLogger(__name__)

_DEFAULT_CANDIDATES: tuple[Path, ...] = (
    Path("config/llm_footprint.yml"),
    Path("config/llm_footprint.yaml"),
    Path("config/llm_footprint.json"),
)


def load_structured_config(
    path: str | None, settings: LLMFootprintSettings
) -> dict[str, object] | None:
    """Load configuration data from disk.

    Args:
        path: Explicit configuration path provided by the caller.
        settings: Environment-derived settings used for fallback discovery.

    Returns:
        A dictionary representation of the configuration file when discovered,
        otherwise ``None``.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist.
        InvalidInputError: If the file exists but cannot be parsed.
    """

    explicit = path or settings.config_path
    if explicit is not None:
        candidate = Path(explicit)
        if not candidate.exists():
            raise FileNotFoundError(str(candidate))
        return _load_config_file(candidate)

    candidates: Iterable[Path] = _DEFAULT_CANDIDATES
    for candidate in candidates:
        if candidate.exists():
            LOGGER.debug(
                "Using discovered configuration file",
                extra={"path": str(candidate)},
            )
            return _load_config_file(candidate)
    return None


def _load_config_file(path: Path) -> dict[str, object]:
    """Load a configuration file based on its suffix.

    Args:
        path: Existing configuration path.

    Returns:
        Parsed mapping with string keys.
    """

    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidInputError(f"Failed to read configuration file: {path}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Failed to parse JSON: {path}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise InvalidInputError(f"Failed to parse YAML: {path}") from exc
    else:
        raise InvalidInputError(
            f"Unsupported configuration format: {path.suffix} (expected .json/.yaml/.yml)"
        )

    normalized = _normalize_mapping(data)
    if normalized is None:
        raise InvalidInputError(f"Configuration root must be a mapping: {path}")
    return normalized


def _normalize_mapping(value: object) -> dict[str, object] | None:
    """Normalize potential mapping values to ``dict[str, object]``.

    Args:
        value: Arbitrary Python object produced by JSON/YAML parsing.

    Returns:
        Mapping restricted to string keys when possible, otherwise ``None``.
    """

    if not isinstance(value, dict):
        return None
    value_dict = cast(dict[object, object], value)
    return {key: item for key, item in value_dict.items() if isinstance(key, str)}
