#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
run_coverage.py
---------------
Single greedy coverage run under a wall-clock deadline:
- Loads a grid (default 5x5 table, or a whitespace-delimited text file)
- Runs the coverage planner on a worker thread with cooperative cancellation
- Prints cost and final position (or a time-limit message)

Example:
    python -m cli.run_coverage \
        --grid-file grids/field.txt \
        --steps 27 --deadline-ms 5000 \
        --start 1,2 --trail 3 \
        --tick-pause-ms 100 --explore-prob 0.1 --seed 0
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from envs.grid import GridConfigError
from envs.loader import default_grid, load_grid
from planners.coverage import CoverageConfig, CoveragePlanner, PlanResult
from planners.bounded import run_with_deadline


def _parse_pos(s: str) -> Tuple[int, int]:
    token = s.strip().strip("()")
    if "," not in token:
        raise argparse.ArgumentTypeError(f"Bad position '{s}', expected like 1,2")
    r, c = token.split(",")
    return int(r), int(c)


def format_report(result: Optional[PlanResult], step_budget: int, deadline_ms: float) -> List[str]:
    if result is None:
        return [f"Planner did not complete within the time limit of {deadline_ms:g} ms"]
    steps, cost, (r, c) = result
    lines = [
        f"Cost after {steps} iterations: {cost}",
        f"Position after {steps} iterations: ({r}, {c})",
    ]
    if steps < step_budget:
        lines.append(f"(stopped early: deadline, {steps}/{step_budget} steps)")
    return lines


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Greedy coverage path on a weighted grid, bounded by a deadline.")
    ap.add_argument("--grid-file", type=str, default=None, help="Whitespace-delimited weight table (default: built-in 5x5)")
    ap.add_argument("--steps", type=int, default=7, help="Step budget (number of ticks)")
    ap.add_argument("--deadline-ms", type=float, default=5000, help="Wall-clock limit in milliseconds")
    ap.add_argument("--start", type=_parse_pos, default=(1, 2), help="Start cell r,c")
    ap.add_argument("--trail", type=int, default=3, help="Trail capacity (recent cells not revisited)")
    ap.add_argument("--tick-pause-ms", type=float, default=0.0, help="Simulated per-tick cost (0 disables)")
    ap.add_argument("--explore-prob", type=float, default=0.1, help="Probability of forcing the random fallback")
    ap.add_argument("--seed", type=int, default=None, help="RNG seed")
    ap.add_argument("--verbose", action="store_true", help="Log every tick")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        grid = load_grid(args.grid_file) if args.grid_file else default_grid()
        cfg = CoverageConfig(trail_capacity=args.trail,
                             tick_pause_ms=args.tick_pause_ms,
                             explore_override_prob=args.explore_prob,
                             seed=args.seed)
        planner = CoveragePlanner(cfg)
        result = run_with_deadline(grid, args.steps, args.start, args.deadline_ms, planner=planner)
    except GridConfigError as e:
        print(f"[ERR] {e}")
        return 2

    for line in format_report(result, args.steps, args.deadline_ms):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
