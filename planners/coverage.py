#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Greedy coverage planner on weighted grids (8-connected).
- Each tick increments the current cell, then moves to the lowest-weight
  neighbour that is neither the current cell nor in the short trail.
- Ties go to the first minimum in NW, N, NE, W, E, SW, S, SE order.
- With probability `explore_override_prob`, or when every neighbour is
  filtered out, the move is drawn uniformly from the 8 clamped neighbours.
- Cost of a step = weight of the destination on arrival (before it is
  incremented at the top of the next tick).

Returns PlanResult(steps_completed, total_cost, final_position).
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
import logging
import threading

import numpy as np

from envs.grid import CoverageGrid, GridConfigError, Position

logger = logging.getLogger(__name__)


class PlanResult(NamedTuple):
    steps_completed: int
    total_cost: int
    final_position: Position


class PlanState(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class CoverageConfig:
    trail_capacity: int = 3
    tick_pause_ms: float = 0.0          # simulated per-tick cost; 0 disables
    explore_override_prob: float = 0.1
    seed: Optional[int] = None          # used only when no rng is injected

    def validate(self) -> None:
        if self.trail_capacity < 1:
            raise GridConfigError(f"trail_capacity must be >= 1, got {self.trail_capacity}")
        if self.tick_pause_ms < 0:
            raise GridConfigError(f"tick_pause_ms must be >= 0, got {self.tick_pause_ms}")
        if not (0.0 <= self.explore_override_prob <= 1.0):
            raise GridConfigError(
                f"explore_override_prob must be in [0, 1], got {self.explore_override_prob}")


def validate_request(grid: CoverageGrid, step_budget: int, start: Position) -> None:
    if step_budget < 0:
        raise GridConfigError(f"step_budget must be >= 0, got {step_budget}")
    if not grid.in_bounds(start):
        raise GridConfigError(f"start {tuple(start)} outside {grid.H}x{grid.W} grid")


class CoveragePlanner:
    def __init__(self, config: Optional[CoverageConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config if config is not None else CoverageConfig()
        self.config.validate()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        # Populated by plan(); inspected by callers after the run.
        self.grid: Optional[CoverageGrid] = None
        self.trail: deque = deque(maxlen=self.config.trail_capacity)
        self.path: List[Position] = []
        self.step_costs: List[int] = []
        self.state = PlanState.RUNNING

    def _select(self, grid: CoverageGrid, pos: Position) -> Position:
        neighbors = grid.neighbors(pos)

        if self.config.explore_override_prob > 0 and \
                self.rng.random() < self.config.explore_override_prob:
            candidates = []
        else:
            candidates = [n for n in neighbors if n != pos and n not in self.trail]

        if candidates:
            best = candidates[0]
            best_w = grid.get(best)
            for n in candidates[1:]:
                w = grid.get(n)
                if w < best_w:
                    best, best_w = n, w
            return best

        # Fallback: uniform over the unfiltered neighbourhood (may pick pos itself)
        if not neighbors:
            return pos
        return neighbors[int(self.rng.integers(len(neighbors)))]

    def plan(self, grid: CoverageGrid, step_budget: int, start: Position,
             cancel: Optional[threading.Event] = None) -> PlanResult:
        start = (int(start[0]), int(start[1]))
        validate_request(grid, step_budget, start)
        cancel = cancel if cancel is not None else threading.Event()
        pause_s = self.config.tick_pause_ms / 1000.0

        self.grid = grid.copy()
        self.trail = deque([start], maxlen=self.config.trail_capacity)
        self.path = [start]
        self.step_costs = []
        self.state = PlanState.RUNNING

        pos = start
        step = 0
        cost = 0

        while step < step_budget:
            if cancel.is_set():
                self.state = PlanState.CANCELLED
                break

            self.grid.increment(pos)
            logger.debug("Tick %d: at %s", step, pos)

            nxt = self._select(self.grid, pos)

            self.trail.append(pos)
            w = self.grid.get(nxt)
            cost += w
            step += 1
            pos = nxt
            self.path.append(pos)
            self.step_costs.append(w)

            if pause_s > 0:
                cancel.wait(pause_s)
        else:
            self.state = PlanState.COMPLETED

        logger.info("Coverage run %s after %d/%d steps, cost=%d, position=%s",
                    self.state.value, step, step_budget, cost, pos)
        return PlanResult(step, cost, pos)
