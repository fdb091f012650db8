# -*- coding: utf-8 -*-
"""
Coverage planners on weighted grids with a unified API:
planner.plan(grid: CoverageGrid, step_budget: int, start: (r,c), cancel=None)
  -> PlanResult(steps_completed, total_cost, final_position)

run_with_deadline(...) wraps a planner in a worker thread with a wall-clock
deadline and cooperative cancellation.
"""

from __future__ import annotations
from typing import Any, Dict, Type

from .coverage import CoverageConfig, CoveragePlanner, PlanResult, PlanState
from .bounded import run_with_deadline

# Mapping used by factories/CLIs
PLANNERS: Dict[str, Type] = {
    "greedy_coverage": CoveragePlanner,
}


def get_planner(name: str, **kwargs) -> Any:
    """
    Factory: instantiate a planner by name.

    Parameters
    ----------
    name : str
        One of: 'greedy_coverage'
    kwargs : dict
        Passed to the planner constructor (e.g., config=CoverageConfig(...))
    """
    name = name.strip().lower()
    if name not in PLANNERS:
        raise ValueError(f"Unknown planner '{name}'. Available: {sorted(PLANNERS)}")
    return PLANNERS[name](**kwargs)


__all__ = [
    "CoverageConfig",
    "CoveragePlanner",
    "PlanResult",
    "PlanState",
    "run_with_deadline",
    "PLANNERS",
    "get_planner",
]
