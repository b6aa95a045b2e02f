"""Command-line utilities for llm_footprint."""

from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path

from .config_loader import load_config
from .errors import LLMFootprintError
from .estimator import LLMImpactEstimator
from .logging_setup import configure_logging
from .schemas import ImpactReport, RequestModel
from .settings import get_settings


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from exc
    if math.isnan(parsed) or parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llm-footprint",
        description="Estimate the environmental impacts of an LLM inference request.",
    )
    parser.add_argument(
        "--provider", "-p", required=True, help="Model provider, e.g. openai"
    )
    parser.add_argument("--model", "-m", required=True, help="Model name or alias")
    parser.add_argument(
        "--output-tokens",
        "-n",
        required=True,
        type=_positive_int,
        help="Number of generated tokens",
    )
    parser.add_argument(
        "--latency",
        "-l",
        type=_positive_float,
        default=None,
        help="Observed request latency in seconds (default: unconstrained)",
    )
    parser.add_argument(
        "--zone",
        "-z",
        default=None,
        help="Electricity mix zone code (default: configured zone, WOR)",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to a JSON/YAML file with coefficient overrides",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write report JSON to this path (default: stdout)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LLM_FOOTPRINT_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Compute and print an impact report."""

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    settings = get_settings()
    try:
        configure_logging((args.log_level or settings.log_level).upper())
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config, settings=settings)
        estimator = LLMImpactEstimator.from_config(config)
        zone = args.zone or config.electricity_mix_zone
        impacts = estimator.estimate(
            args.provider,
            args.model,
            args.output_tokens,
            request_latency=args.latency if args.latency is not None else math.inf,
            electricity_mix_zone=zone,
        )
        report = ImpactReport.from_impacts(
            impacts,
            request=RequestModel(
                provider=args.provider,
                model=args.model,
                output_token_count=args.output_tokens,
                request_latency=args.latency,
                electricity_mix_zone=zone,
            ),
        )
    except (LLMFootprintError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    text = json.dumps(report.model_dump_json_ready(), indent=2, sort_keys=True)
    if args.output is None:
        print(text)
        return 0

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(text + "\n", encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
