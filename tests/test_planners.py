import os, sys, threading, time
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np
import pytest

from envs.grid import CoverageGrid, GridConfigError
from envs.loader import DEFAULT_GRID, default_grid, generate_grid
from planners import PLANNERS, get_planner
from planners.coverage import CoverageConfig, CoveragePlanner, PlanResult, PlanState

GREEDY = CoverageConfig(trail_capacity=3, tick_pause_ms=0, explore_override_prob=0.0)

def test_default_grid_scenario_is_reproducible():
    planner = CoveragePlanner(GREEDY, rng=np.random.default_rng(0))
    res = planner.plan(default_grid(), 7, (1, 2))
    assert res == PlanResult(7, 7, (3, 2))
    assert planner.path == [(1, 2), (2, 2), (2, 1), (1, 0), (0, 0), (1, 1), (2, 2), (3, 2)]
    assert planner.step_costs == [0, 1, 1, 1, 2, 1, 1]
    assert planner.state is PlanState.COMPLETED

def test_distinct_weights_move_to_lowest_unfiltered_neighbor():
    rng = np.random.default_rng(11)
    weights = rng.permutation(25).reshape(5, 5)
    grid = CoverageGrid(weights)

    runs = []
    for _ in range(2):
        planner = CoveragePlanner(GREEDY, rng=np.random.default_rng(123))
        res = planner.plan(grid, 7, (1, 2))
        runs.append((res, list(planner.path)))
    assert runs[0] == runs[1]

    # Replay: every move is the first minimum among the filtered neighbours
    replay = grid.copy()
    path = runs[0][1]
    trail = [path[0]]
    for prev, nxt in zip(path[:-1], path[1:]):
        replay.increment(prev)
        cands = [n for n in replay.neighbors(prev) if n != prev and n not in trail[-3:]]
        if cands:
            assert replay.get(nxt) == min(replay.get(n) for n in cands)
            assert nxt == min(cands, key=replay.get)
        trail.append(prev)

def test_zero_budget_returns_start():
    planner = CoveragePlanner(GREEDY)
    res = planner.plan(default_grid(), 0, (4, 0))
    assert res == (0, 0, (4, 0))
    assert planner.state is PlanState.COMPLETED

def test_callers_grid_is_not_mutated():
    grid = default_grid()
    CoveragePlanner(CoverageConfig(explore_override_prob=0.5), rng=np.random.default_rng(1)).plan(grid, 50, (2, 2))
    assert (grid.weights == DEFAULT_GRID).all()

@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_bounds_steps_cost_and_trail_with_random_fallback(seed):
    rng = np.random.default_rng(seed)
    grid = generate_grid(6, 9, max_weight=5, rng=rng)
    cfg = CoverageConfig(trail_capacity=3, explore_override_prob=0.3)
    planner = CoveragePlanner(cfg, rng=rng)
    res = planner.plan(grid, 200, (0, 8))

    assert res.steps_completed == 200
    assert len(planner.path) == 201
    assert all(0 <= r < 6 and 0 <= c < 9 for r, c in planner.path)
    assert len(planner.trail) <= 3
    assert res.final_position == planner.path[-1]

    # cost = destination weight on arrival, i.e. before its own increment
    replay = grid.copy()
    expected = 0
    for prev, nxt in zip(planner.path[:-1], planner.path[1:]):
        replay.increment(prev)
        expected += replay.get(nxt)
    assert res.total_cost == expected == sum(planner.step_costs)
    assert (replay.weights == planner.grid.weights).all()

def test_always_override_moves_within_clamped_neighborhood():
    cfg = CoverageConfig(explore_override_prob=1.0)
    planner = CoveragePlanner(cfg, rng=np.random.default_rng(5))
    grid = default_grid()
    planner.plan(grid, 40, (0, 0))
    for prev, nxt in zip(planner.path[:-1], planner.path[1:]):
        assert nxt in grid.neighbors(prev)

def test_fully_filtered_neighborhood_falls_back():
    # 1x2 grid: the only other cell lands in the trail after one move
    grid = CoverageGrid(np.array([[0, 0]]))
    planner = CoveragePlanner(GREEDY, rng=np.random.default_rng(0))
    res = planner.plan(grid, 10, (0, 0))
    assert res.steps_completed == 10
    assert all(p in [(0, 0), (0, 1)] for p in planner.path)

def test_preset_cancel_stops_before_first_tick():
    cancel = threading.Event()
    cancel.set()
    planner = CoveragePlanner(GREEDY)
    res = planner.plan(default_grid(), 5, (1, 2), cancel)
    assert res == (0, 0, (1, 2))
    assert planner.state is PlanState.CANCELLED

def test_cancel_is_observed_at_next_tick():
    cancel = threading.Event()
    planner = CoveragePlanner(CoverageConfig(tick_pause_ms=20, explore_override_prob=0.0))
    timer = threading.Timer(0.1, cancel.set)
    timer.start()
    t0 = time.perf_counter()
    res = planner.plan(default_grid(), 10_000, (1, 2), cancel)
    elapsed = time.perf_counter() - t0
    timer.join()
    assert planner.state is PlanState.CANCELLED
    assert 0 < res.steps_completed < 10_000
    assert elapsed < 0.1 + 0.02 + 0.5

def test_invalid_requests_raise_config_errors():
    planner = CoveragePlanner(GREEDY)
    with pytest.raises(GridConfigError):
        planner.plan(default_grid(), 3, (5, 0))
    with pytest.raises(GridConfigError):
        planner.plan(default_grid(), -1, (0, 0))
    with pytest.raises(GridConfigError):
        CoveragePlanner(CoverageConfig(trail_capacity=0))
    with pytest.raises(GridConfigError):
        CoveragePlanner(CoverageConfig(explore_override_prob=1.5))

def test_planner_registry():
    assert "greedy_coverage" in PLANNERS
    planner = get_planner("Greedy_Coverage", config=GREEDY)
    assert isinstance(planner, CoveragePlanner)
    with pytest.raises(ValueError):
        get_planner("a_star")

class _TickRecorder(CoveragePlanner):
    """Records trail length and step count each time a move is chosen."""
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ticks = []

    def _select(self, grid, pos):
        self.ticks.append((len(self.trail), len(self.step_costs)))
        return super()._select(grid, pos)

@pytest.mark.parametrize("capacity", [1, 3, 5])
def test_trail_and_step_count_bounded_at_every_tick(capacity):
    cfg = CoverageConfig(trail_capacity=capacity, explore_override_prob=0.3)
    planner = _TickRecorder(cfg, rng=np.random.default_rng(capacity))
    res = planner.plan(generate_grid(5, 7, rng=np.random.default_rng(9)), 60, (2, 3))

    assert len(planner.ticks) == 60
    steps = [s for _, s in planner.ticks]
    assert steps == list(range(60))         # non-decreasing, one per tick
    assert all(s < 60 for s in steps)
    assert all(n <= capacity for n, _ in planner.ticks)
    assert len(planner.trail) <= capacity
    assert res.steps_completed == 60
