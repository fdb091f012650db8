# -*- coding: utf-8 -*-
"""
Command-line entry points (run with `python -m cli.<name>`):

- run_coverage      : single deadline-bounded coverage run, console report
- run_batch         : sweep seeds x step budgets, write CSV
"""
__all__ = [
    "run_coverage",
    "run_batch",
]
