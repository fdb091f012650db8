#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
run_batch.py
------------
Coverage sweep over (seeds x step budgets):
- Generates a random HxW grid per seed (or reuses --grid-file for every seed)
- Runs the coverage planner through run_with_deadline
- Writes one CSV row per case to --outdir

Example:
    python -m cli.run_batch \
        --size 20x20 --max-weight 9 \
        --seeds 0,1,2,3 --steps 50,100,200 \
        --deadline-ms 2000 --explore-prob 0.1 \
        --outdir results/csv
"""

from __future__ import annotations
import argparse
import csv
import os
import time
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from envs.grid import CoverageGrid, GridConfigError
from envs.loader import generate_grid, load_grid
from planners.coverage import CoverageConfig, CoveragePlanner, PlanState
from planners.bounded import run_with_deadline

FIELDS = [
    "seed", "H", "W", "step_budget",
    "steps_completed", "total_cost", "final_r", "final_c",
    "coverage", "cancelled", "time_s",
]


def _parse_size(s: str) -> Tuple[int, int]:
    token = s.strip().lower()
    if "x" not in token:
        raise ValueError(f"Bad size '{token}', expected like 20x20")
    h, w = token.split("x")
    return int(h), int(w)


def _parse_ints(s: str) -> List[int]:
    return [int(tok) for tok in s.split(",") if tok.strip()]


def _parse_start(s: str) -> Tuple[int, int]:
    vals = _parse_ints(s)
    if len(vals) != 2:
        raise ValueError(f"Bad start '{s}', expected like 0,0")
    return vals[0], vals[1]


def run_case(grid: CoverageGrid, seed: int, step_budget: int, start: Tuple[int, int],
             deadline_ms: Optional[float], cfg: CoverageConfig) -> Dict:
    planner = CoveragePlanner(cfg, rng=np.random.default_rng(seed))
    t0 = time.perf_counter()
    res = run_with_deadline(grid, step_budget, start, deadline_ms, planner=planner)
    t1 = time.perf_counter()

    row = {
        "seed": seed, "H": grid.H, "W": grid.W, "step_budget": step_budget,
        "steps_completed": "", "total_cost": "", "final_r": "", "final_c": "",
        "coverage": "", "cancelled": int(planner.state is PlanState.CANCELLED),
        "time_s": t1 - t0,
    }
    if res is not None:
        row.update({
            "steps_completed": res.steps_completed,
            "total_cost": res.total_cost,
            "final_r": res.final_position[0],
            "final_c": res.final_position[1],
            "coverage": grid.coverage_fraction(planner.path),
        })
    return row


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Sweep greedy coverage runs over seeds and step budgets.")
    ap.add_argument("--size", type=str, default="20x20", help="Grid size HxW for generated grids")
    ap.add_argument("--max-weight", type=int, default=9, help="Upper bound of generated weights")
    ap.add_argument("--grid-file", type=str, default=None, help="Use this grid for every seed instead")
    ap.add_argument("--seeds", type=str, default="0,1,2,3", help="Comma-separated RNG seeds")
    ap.add_argument("--steps", type=str, default="50,100,200", help="Comma-separated step budgets")
    ap.add_argument("--start", type=str, default="0,0", help="Start cell r,c")
    ap.add_argument("--deadline-ms", type=float, default=2000, help="Per-run wall-clock limit")
    ap.add_argument("--trail", type=int, default=3, help="Trail capacity")
    ap.add_argument("--tick-pause-ms", type=float, default=0.0, help="Simulated per-tick cost")
    ap.add_argument("--explore-prob", type=float, default=0.1, help="Random fallback override probability")
    ap.add_argument("--outdir", type=str, default="results/csv", help="Output directory")
    args = ap.parse_args(argv)

    try:
        H, W = _parse_size(args.size)
        seeds = _parse_ints(args.seeds)
        budgets = _parse_ints(args.steps)
        start = _parse_start(args.start)
        cfg = CoverageConfig(trail_capacity=args.trail,
                             tick_pause_ms=args.tick_pause_ms,
                             explore_override_prob=args.explore_prob)
        cfg.validate()
        fixed = load_grid(args.grid_file) if args.grid_file else None
        if fixed is None:
            if H <= 0 or W <= 0:
                raise GridConfigError(f"grid size must be positive, got {H}x{W}")
            if args.max_weight < 0:
                raise GridConfigError("max_weight must be >= 0")
        rows, cols = fixed.shape if fixed is not None else (H, W)
        if not (0 <= start[0] < rows and 0 <= start[1] < cols):
            raise GridConfigError(f"start {start} outside {rows}x{cols} grid")
        if any(b < 0 for b in budgets):
            raise GridConfigError(f"step budgets must be >= 0, got {budgets}")
        if any(s < 0 for s in seeds):
            raise GridConfigError(f"seeds must be >= 0, got {seeds}")
    except ValueError as e:  # GridConfigError included
        print(f"[ERR] {e}")
        return 2

    os.makedirs(args.outdir, exist_ok=True)
    stamp = time.strftime("%Y%m%d_%H%M%S")
    tag = "file" if fixed is not None else f"{H}x{W}"
    out_csv = os.path.join(args.outdir, f"coverage_{tag}_{stamp}.csv")
    tmp_csv = out_csv + f".tmp_{os.getpid()}"

    cases = [(seed, b) for seed in seeds for b in budgets]
    try:
        with open(tmp_csv, "w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=FIELDS)
            w.writeheader()
            for seed, budget in tqdm(cases, desc="coverage", unit="run"):
                grid = fixed if fixed is not None else generate_grid(H, W, args.max_weight,
                                                                     rng=np.random.default_rng(seed))
                w.writerow(run_case(grid, seed, budget, start, args.deadline_ms, cfg))
        # Atomic rename to final path
        os.replace(tmp_csv, out_csv)
    except GridConfigError as e:
        print(f"[ERR] {e}")
        return 2
    finally:
        if os.path.exists(tmp_csv):
            os.remove(tmp_csv)

    print(f"[OK] Wrote: {out_csv}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
