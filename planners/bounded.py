#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Deadline-bounded execution of the coverage planner.

run_with_deadline(...) starts one worker thread running CoveragePlanner.plan
on a private grid clone, waits up to `deadline_ms`, and if the worker is
still running sets a one-shot threading.Event and joins it again. The
planner checks the event at the top of every tick, so the extra wait is at
most one tick. The worker is always joined before returning.

Returns the worker's PlanResult (possibly partial), or None if the worker
died without reporting one.
"""

from __future__ import annotations
from typing import Dict, Optional
import logging
import threading
import time

import numpy as np

from envs.grid import CoverageGrid, GridConfigError, Position
from .coverage import CoverageConfig, CoveragePlanner, PlanResult, validate_request

logger = logging.getLogger(__name__)


def run_with_deadline(grid: CoverageGrid,
                      step_budget: int,
                      start: Position,
                      deadline_ms: Optional[float],
                      config: Optional[CoverageConfig] = None,
                      rng: Optional[np.random.Generator] = None,
                      planner: Optional[CoveragePlanner] = None) -> Optional[PlanResult]:
    """
    Parameters
    ----------
    grid : CoverageGrid
        Caller's grid; never mutated (the planner works on a clone).
    step_budget : int
        Maximum number of ticks.
    start : (r, c)
        Start cell; must lie inside the grid.
    deadline_ms : float or None
        Wall-clock limit measured from the call; None waits indefinitely.
    config, rng :
        Used to build a CoveragePlanner when `planner` is not given.
    planner : CoveragePlanner, optional
        Pre-built planner, so the caller can inspect path/grid/state afterwards.
        Mutually exclusive with `config` / `rng` (ValueError if combined).

    Returns
    -------
    PlanResult or None
    """
    # Configuration errors surface here, on the calling thread.
    if planner is None:
        planner = CoveragePlanner(config, rng=rng)
    elif config is not None or rng is not None:
        raise ValueError("pass either a planner or config/rng, not both")
    validate_request(grid, step_budget, start)
    if deadline_ms is not None and deadline_ms < 0:
        raise GridConfigError(f"deadline_ms must be >= 0, got {deadline_ms}")

    cancel = threading.Event()
    slot: Dict[str, PlanResult] = {}
    private = grid.copy()

    def _work():
        try:
            slot["result"] = planner.plan(private, step_budget, start, cancel)
        except Exception:
            logger.exception("Coverage worker failed")

    t0 = time.perf_counter()
    worker = threading.Thread(target=_work, name="coverage-worker", daemon=True)
    worker.start()

    worker.join(None if deadline_ms is None else deadline_ms / 1000.0)
    if worker.is_alive():
        logger.info("Deadline of %.0f ms elapsed; requesting cancellation", deadline_ms)
        cancel.set()
        worker.join()

    elapsed = time.perf_counter() - t0
    result = slot.get("result")
    if result is None:
        logger.warning("Coverage worker returned no result after %.3f s", elapsed)
    else:
        logger.info("Coverage worker finished in %.3f s: %s", elapsed, tuple(result))
    return result
