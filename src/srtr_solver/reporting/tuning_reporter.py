"""
Text reporting for threshold tuning runs.

Formats the progress output of ``ThresholdOptimizer``: framed sections for
the SMT2 problem and the parameter-adjustment table. The output is meant for
people reading a console or log file, not for parsing.
"""

from typing import Dict, Tuple

import numpy as np
from tabulate import tabulate

from srtr_solver.core.constants import REPORT_TABLE_FORMAT

RULE = "-" * 33


def section(title: str, body: str) -> str:
    """
    Frame ``body`` under a title between dashed rules::

        ---------------------------------
        Title
        ---------------------------------
        body
        ---------------------------------
    """
    return "\n".join([RULE, title, RULE, body, RULE])


def adjustment_table(
    baselines: Dict[str, float],
    lowers: Dict[str, float],
    perturbations: Dict[str, float],
    objective_bounds: Dict[str, Tuple[float, float]],
    tablefmt: str = REPORT_TABLE_FORMAT,
) -> str:
    """
    Table of tuned parameters: baseline, solved eps, tuned value, relative
    change and the |eps| objective bounds. Rows follow ``lowers`` order.
    """
    names = list(lowers)
    if not names:
        return "(no tuned parameters)"

    baseline = np.array([baselines[n] for n in names], dtype=float)
    tuned = np.array([lowers[n] for n in names], dtype=float)
    delta = tuned - baseline
    with np.errstate(divide='ignore', invalid='ignore'):
        relative = np.where(baseline != 0.0, 100.0 * delta / np.abs(baseline), np.nan)

    rows = []
    for i, name in enumerate(names):
        lo, hi = objective_bounds.get(name, (np.nan, np.nan))
        rows.append([
            name,
            baseline[i],
            perturbations.get(name, delta[i]),
            tuned[i],
            "n/a" if np.isnan(relative[i]) else f"{relative[i]:+.2f}%",
            f"[{lo:.5g}, {hi:.5g}]",
        ])

    headers = ["Parameter", "Baseline", "Epsilon", "Tuned", "Change", "|eps| bounds"]
    table = tabulate(rows, headers=headers, tablefmt=tablefmt, floatfmt=".5g")
    total = float(np.sum(np.abs(delta)))
    return f"{table}\nTotal |eps|: {total:.5g}"
