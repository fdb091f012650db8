#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Grid sources for the coverage planner.
- DEFAULT_GRID / default_grid(): the stock 5x5 weight table
- load_grid(path) / parse_grid_text(text): whitespace-delimited rows of ints
- generate_grid(H, W, ...): random weights for sweeps

Parsing rules: blank lines are skipped, tokens that are not integers count
as weight 0, ragged rows / negative weights / no rows at all are rejected
with GridConfigError.
"""

from __future__ import annotations
import logging
import os
from typing import List, Optional

import numpy as np

from .grid import CoverageGrid, GridConfigError

logger = logging.getLogger(__name__)

DEFAULT_GRID = np.array([
    [1, 5, 5, 2, 5],
    [1, 2, 3, 4, 2],
    [3, 1, 0, 4, 0],
    [9, 5, 1, 6, 1],
    [0, 2, 6, 1, 3],
], dtype=np.int64)

INT64_MAX = int(np.iinfo(np.int64).max)


def default_grid() -> CoverageGrid:
    return CoverageGrid(DEFAULT_GRID.copy())


def _parse_token(tok: str) -> int:
    try:
        return int(tok)
    except ValueError:
        return 0


def parse_grid_text(text: str, source: str = "<string>") -> CoverageGrid:
    rows: List[List[int]] = []
    for line in text.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        rows.append([_parse_token(t) for t in tokens])

    if not rows:
        raise GridConfigError(f"{source}: grid is empty")
    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise GridConfigError(f"{source}: rows have unequal lengths {sorted(widths)}")
    if any(v < 0 for r in rows for v in r):
        raise GridConfigError(f"{source}: negative weights are not allowed")
    if any(v > INT64_MAX for r in rows for v in r):
        raise GridConfigError(f"{source}: weights must be <= {INT64_MAX}")

    grid = CoverageGrid.from_rows(rows)
    logger.debug("Parsed %dx%d grid from %s", grid.H, grid.W, source)
    return grid


def load_grid(path: str) -> CoverageGrid:
    if not os.path.isfile(path):
        raise GridConfigError(f"grid file not found: {path}")
    with open(path, "r") as f:
        return parse_grid_text(f.read(), source=path)


def generate_grid(H: int, W: int, max_weight: int = 9,
                  rng: Optional[np.random.Generator] = None) -> CoverageGrid:
    """Uniform random weights in [0, max_weight]."""
    if H <= 0 or W <= 0:
        raise GridConfigError(f"grid size must be positive, got {H}x{W}")
    if max_weight < 0:
        raise GridConfigError("max_weight must be >= 0")
    rng = rng if rng is not None else np.random.default_rng()
    return CoverageGrid(rng.integers(0, max_weight + 1, size=(H, W), dtype=np.int64))
