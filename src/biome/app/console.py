from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World


def format_status(world: World) -> str:
    lines = ["", "=== Ecosystem Status ==="]
    for kind, stats in world.population_by_kind().items():
        lines.append(f"* {kind}s: {stats.count} (Avg Energy: {stats.average_energy:.1f})")
    lines.append(f"* Dead Biomass (waiting for decomposition): {world.biomass_count()}")
    lines.append("=========================")
    return "\n".join(lines)


def _wait_for_enter(stream: TextIO, stop: threading.Event) -> None:
    stream.readline()
    stop.set()


def run_console(
    world: World,
    ticks: Optional[int] = None,
    interval: Optional[float] = None,
    out: Optional[TextIO] = None,
    stop: Optional[threading.Event] = None,
    stdin: Optional[TextIO] = None,
) -> int:
    """Tick the world on a fixed cadence until stopped; returns ticks run.

    When ``stdin`` is given, a line on it (the Enter key) stops the loop between
    ticks. A tick in progress always runs to completion.
    """
    out = out if out is not None else sys.stdout
    stop = stop if stop is not None else threading.Event()
    interval = world.config.tick_interval if interval is None else interval

    print(format_status(world), file=out)
    if stdin is not None:
        print("\nStarting simulation... Press Enter to stop.", file=out)
        threading.Thread(target=_wait_for_enter, args=(stdin, stop), daemon=True).start()
    else:
        print("\nStarting simulation...", file=out)

    tick = 0
    while ticks is None or tick < ticks:
        if stop.is_set():
            break
        tick += 1
        print(f"\n--- Simulating Tick {tick} ---", file=out)
        metrics = world.step()
        print(f"--- Tick End: {metrics.population} organisms alive. ---", file=out)
        print(format_status(world), file=out)
        if ticks is not None and tick >= ticks:
            break
        if stop.wait(interval):
            break
    if stop.is_set():
        print("Simulation stopped by user.", file=out)
    out.flush()
    return tick


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive ecosystem simulation")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with seed and initial population")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between ticks")
    parser.add_argument("--log-level", default="INFO", help="Logging level for death and tick notices")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed
    run_console(World(config), ticks=args.ticks, interval=args.interval, stdin=sys.stdin)


if __name__ == "__main__":
    main()
