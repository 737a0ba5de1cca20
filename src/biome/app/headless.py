from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.organism import OrganismKind
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 50

_HEADER = [
    "tick",
    "population",
    "stored",
    "births",
    "deaths",
    "removed",
    "biomass",
    "avg_energy",
    "avg_age",
    "plants",
    "animals",
    "microorganisms",
    "tick_ms",
]


def _kind_count(metrics: TickMetrics, kind: OrganismKind) -> int:
    stats = metrics.kinds.get(kind.value)
    return 0 if stats is None else stats.count


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.stored,
        metrics.births,
        metrics.deaths,
        metrics.removed,
        metrics.biomass,
        f"{metrics.average_energy:.4f}",
        f"{metrics.average_age:.4f}",
        _kind_count(metrics, OrganismKind.PLANT),
        _kind_count(metrics, OrganismKind.ANIMAL),
        _kind_count(metrics, OrganismKind.MICROORGANISM),
        f"{tick_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> TickMetrics | None:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    world = World(config)

    population_series: list[float] = []
    biomass_series: list[float] = []
    tick_ms_series: list[float] = []
    extinct_at: dict[str, int] = {}

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    try:
        for tick in range(steps):
            metrics = world.step(tick)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            population_series.append(float(metrics.population))
            biomass_series.append(float(metrics.biomass))
            tick_ms_series.append(tick_ms)
            for kind in OrganismKind:
                if kind.value not in metrics.kinds and kind.value not in extinct_at:
                    extinct_at[kind.value] = tick
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        final = world.metrics
        summary = {
            "steps": steps,
            "seed": config.seed,
            "deterministic_log": deterministic_log,
            "population": _summary_stats(population_series),
            "biomass": _summary_stats(biomass_series),
            "tick_ms": _summary_stats(tick_ms_series),
            "extinct_at": extinct_at,
            "final": {
                "population": 0 if final is None else final.population,
                "kinds": {} if final is None else {k: v.count for k, v in final.kinds.items()},
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
        logger.info("Wrote summary for %d ticks to %s", steps, summary_path)
    return world.metrics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Headless ecosystem simulation")
    parser.add_argument(
        "--steps",
        type=int,
        default=DEFAULT_STEPS,
        help="Ticks to run. Microorganisms breed every tick, so the default seed table grows "
        "to tens of thousands of organisms by tick 75.",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with seed and initial population")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        config_path=args.config,
    )


if __name__ == "__main__":
    main()
