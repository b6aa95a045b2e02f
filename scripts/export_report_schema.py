"""Export the llm-footprint impact report JSON Schema."""

from __future__ import annotations

import json
from pathlib import Path

from llm_footprint.schemas import CURRENT_REPORT_SCHEMA_VERSION, ImpactReport


def main() -> None:
    """Write the JSON Schema for :class:`ImpactReport` to the repository root."""

    schema = ImpactReport.model_json_schema()
    output_path = Path(__file__).resolve().parent.parent / (
        f"report_schema_v{CURRENT_REPORT_SCHEMA_VERSION}.json"
    )
    output_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
