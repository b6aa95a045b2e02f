"""Show how an undisclosed model size widens the impact range.

Runs the same request against a dense open-weights model, a
mixture-of-experts model and a proprietary model whose size is only known as
a range, then prints the energy and GWP bounds for each:

    python examples/moe_range_demo.py --tokens 500 --zone FRA
"""

from __future__ import annotations

import argparse

from llm_footprint.estimator import LLMImpactEstimator

MODELS: tuple[tuple[str, str], ...] = (
    ("mistralai", "open-mistral-7b"),
    ("mistralai", "open-mixtral-8x22b"),
    ("openai", "gpt-4o"),
)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--tokens", type=int, default=500)
    parser.add_argument("--zone", default="WOR")
    args = parser.parse_args()

    estimator = LLMImpactEstimator(electricity_mix_zone=args.zone)
    for provider, name in MODELS:
        impacts = estimator.estimate(provider, name, args.tokens)
        energy = impacts.energy.value
        gwp = impacts.gwp.value
        print(
            f"{provider}/{name}: "
            f"energy {energy.min * 1000:.3f}-{energy.max * 1000:.3f} Wh, "
            f"GWP {gwp.min * 1000:.3f}-{gwp.max * 1000:.3f} gCO2eq"
        )


if __name__ == "__main__":
    main()
