#!/usr/bin/env python3
import importlib, sys, traceback, numpy as np
from pathlib import Path

# --- Ensure the repo root is on sys.path ---
ROOT = Path(__file__).resolve().parent.parent  # repo root = parent of scripts/
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

OK = "\x1b[92mOK\x1b[0m"
BAD = "\x1b[91mERR\x1b[0m"

def check(name, fn):
    try:
        fn()
        print(f"[{OK}] {name}")
    except Exception as e:
        print(f"[{BAD}] {name}: {e}")
        traceback.print_exc()
        sys.exit(1)

def test_envs():
    loader = importlib.import_module("envs.loader")
    grid = loader.generate_grid(20, 20, rng=np.random.default_rng(0))
    assert grid.shape == (20, 20)
    assert loader.default_grid().shape == (5, 5)

def test_planner():
    cov = importlib.import_module("planners.coverage")
    from envs.loader import default_grid
    res = cov.CoveragePlanner(cov.CoverageConfig(explore_override_prob=0.0)).plan(default_grid(), 7, (1, 2))
    assert tuple(res) == (7, 7, (3, 2))

def test_bounded():
    bounded = importlib.import_module("planners.bounded")
    from envs.loader import default_grid
    from planners.coverage import CoverageConfig
    res = bounded.run_with_deadline(default_grid(), 100, (0, 0), deadline_ms=100,
                                    config=CoverageConfig(tick_pause_ms=20))
    assert res is not None and res.steps_completed < 100

def test_cli_help():
    import subprocess
    for mod in ["cli.run_coverage", "cli.run_batch"]:
        r = subprocess.run([sys.executable, "-m", mod, "--help"], cwd=str(ROOT),
                           stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
        assert r.returncode == 0, f"{mod} --help failed"

if __name__ == "__main__":
    check("envs", test_envs)
    check("planners.coverage", test_planner)
    check("planners.bounded", test_bounded)
    check("CLIs --help", test_cli_help)
    print(f"[{OK}] All self-checks passed.")
