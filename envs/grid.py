#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
grid.py
-------
Weighted coverage grid: an (H, W) integer array of visitation weights that
the coverage planner mutates in place as the agent moves.

Conventions:
- Positions are (row, col) tuples.
- Weight 0 = never visited / cheapest; every visit adds 1 (no upper bound).
- Neighbourhood is the 8-connected Moore ring with each coordinate clamped
  independently to the grid. At edges and corners this yields duplicate
  entries (and the cell itself); they are kept on purpose, so the random
  fallback in the planner samples over all 8 slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

Position = Tuple[int, int]


class GridConfigError(ValueError):
    """Invalid grid source, start position or run parameter."""


# Canonical enumeration order (row-major): NW, N, NE, W, E, SW, S, SE.
# The planner's tie-break depends on this order.
DELTAS_8 = np.array([
    (-1, -1), (-1, 0), (-1, +1),
    ( 0, -1),          ( 0, +1),
    (+1, -1), (+1, 0), (+1, +1),
], dtype=np.int8)


@dataclass
class CoverageGrid:
    """Integer visitation weights over an H x W grid."""
    weights: np.ndarray         # (H, W) int64, non-negative at creation

    def __post_init__(self):
        w = np.asarray(self.weights)
        if w.ndim != 2 or w.size == 0:
            raise GridConfigError(f"grid must be a non-empty 2-D array, got shape {w.shape}")
        if (w < 0).any():
            raise GridConfigError("grid weights must be non-negative")
        self.weights = w.astype(np.int64, copy=True)

    @classmethod
    def from_rows(cls, rows) -> "CoverageGrid":
        try:
            weights = np.array(rows, dtype=np.int64)
        except OverflowError as e:
            raise GridConfigError(f"grid weight does not fit in int64: {e}") from e
        return cls(weights)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.weights.shape

    @property
    def H(self) -> int:
        return self.weights.shape[0]

    @property
    def W(self) -> int:
        return self.weights.shape[1]

    def copy(self) -> "CoverageGrid":
        return CoverageGrid(self.weights.copy())

    # ------------------------------ access ------------------------------ #

    def get(self, pos: Position) -> int:
        """Weight at a valid position. Callers clamp first."""
        return int(self.weights[pos])

    def increment(self, pos: Position) -> None:
        self.weights[pos] += 1

    def in_bounds(self, pos: Position) -> bool:
        r, c = pos
        return (0 <= r < self.H) and (0 <= c < self.W)

    def clamp(self, pos: Position) -> Position:
        r, c = pos
        return (min(max(int(r), 0), self.H - 1), min(max(int(c), 0), self.W - 1))

    def neighbors(self, pos: Position) -> List[Position]:
        """The 8 clamped Moore neighbours of `pos`, duplicates included."""
        r, c = pos
        return [self.clamp((r + int(dr), c + int(dc))) for dr, dc in DELTAS_8]

    # ----------------------------- coverage ----------------------------- #

    def visited_mask(self, path: List[Position]) -> np.ndarray:
        """Boolean (H, W) mask of the cells touched by `path`."""
        mask = np.zeros(self.shape, dtype=bool)
        if path:
            rr, cc = zip(*path)
            mask[list(rr), list(cc)] = True
        return mask

    def coverage_fraction(self, path: List[Position]) -> float:
        return float(self.visited_mask(path).mean())
