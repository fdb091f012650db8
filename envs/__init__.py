# -*- coding: utf-8 -*-
"""
Coverage grids and grid sources.
Exposes:
- CoverageGrid (dataclass from grid.py), GridConfigError, Position
- default_grid(), load_grid(...), parse_grid_text(...), generate_grid(...)
"""

from __future__ import annotations

from .grid import CoverageGrid, GridConfigError, Position, DELTAS_8
from .loader import DEFAULT_GRID, default_grid, load_grid, parse_grid_text, generate_grid

__all__ = [
    "CoverageGrid",
    "GridConfigError",
    "Position",
    "DELTAS_8",
    "DEFAULT_GRID",
    "default_grid",
    "load_grid",
    "parse_grid_text",
    "generate_grid",
]
