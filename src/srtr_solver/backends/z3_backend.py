"""
z3 implementation of the constraint-backend interface.

Each ``Z3Backend`` owns a private ``z3.Context`` and a ``z3.Optimize``
instance, so independent tuning runs never share symbolic state.

Objective bounds
----------------
With strict inequalities the optimum of ``|eps|`` may be approached but not
attained (e.g. ``3 > 5 + eps`` gives ``inf |eps| = 2``). z3 then reports the
bound as ``value + k * epsilon``; we keep the standard part ``value``.
Unbounded objectives are reported as +/- infinity.
"""

import math
from typing import Any, Tuple

import z3

from srtr_solver.backends.base import ConstraintBackend, SolveStatus
from srtr_solver.core.constants import BOUND_PRECISION


def numeral_to_float(value: Any, precision: int = BOUND_PRECISION) -> float:
    """
    Convert a z3 numeral (int, rational or algebraic) to a Python float.

    Raises:
        RuntimeError: if ``value`` does not simplify to a numeral.
    """
    if not z3.is_int_value(value) and not z3.is_rational_value(value) \
            and not z3.is_algebraic_value(value):
        value = z3.simplify(value)
    if z3.is_int_value(value):
        return float(value.as_long())
    if z3.is_rational_value(value):
        return float(value.as_fraction())
    if z3.is_algebraic_value(value):
        return float(value.approx(precision).as_fraction())
    raise RuntimeError(f"Cannot convert solver value {value} to a number")


def _bound_from_vector(vector: Any) -> float:
    """``(infinity, value, epsilon)`` coefficient vector -> float."""
    infinity = numeral_to_float(vector[0])
    if infinity > 0:
        return math.inf
    if infinity < 0:
        return -math.inf
    return numeral_to_float(vector[1])


class Z3Backend(ConstraintBackend):
    """Constraint backend backed by ``z3.Optimize``."""

    def __init__(self):
        self.ctx = z3.Context()
        self.optimizer = z3.Optimize(ctx=self.ctx)
        # Objectives are optimized one after another in registration order.
        self.optimizer.set(priority="lex")
        self._model = None

    # --- expression building -------------------------------------------------

    def make_real_variable(self, name: str) -> z3.ArithRef:
        return z3.Real(name, self.ctx)

    def make_real_value(self, value: float) -> z3.ArithRef:
        return z3.RealVal(value, self.ctx)

    def add(self, lhs, rhs):
        return lhs + rhs

    def make_comparison(self, op: str, lhs, rhs) -> z3.BoolRef:
        if op == ">":
            return lhs > rhs
        if op == "<":
            return lhs < rhs
        raise ValueError(f"Unsupported comparison operator: {op!r}")

    def and_(self, a, b) -> z3.BoolRef:
        return z3.And(a, b)

    def or_(self, a, b) -> z3.BoolRef:
        return z3.Or(a, b)

    def not_(self, a) -> z3.BoolRef:
        return z3.Not(a)

    def abs_(self, expr) -> z3.ArithRef:
        return z3.If(expr >= 0, expr, -expr)

    # --- optimization --------------------------------------------------------

    def assert_soft(self, formula, weight: int = 1) -> None:
        self.optimizer.add_soft(formula, weight)

    def minimize(self, expr):
        return self.optimizer.minimize(expr)

    def check(self) -> SolveStatus:
        result = self.optimizer.check()
        if result == z3.sat:
            status = SolveStatus.SATISFIABLE
        elif result == z3.unsat:
            status = SolveStatus.UNSATISFIABLE
        else:
            status = SolveStatus.UNKNOWN
        self._model = self.optimizer.model() if status.is_sat else None
        return status

    def reason_unknown(self) -> str:
        return self.optimizer.reason_unknown()

    def _require_model(self):
        if self._model is None:
            raise RuntimeError("No model available: check() did not return SAT")
        return self._model

    def bounds_of(self, handle) -> Tuple[float, float]:
        self._require_model()
        return (_bound_from_vector(handle.lower_values()),
                _bound_from_vector(handle.upper_values()))

    def value_of(self, expr) -> float:
        return numeral_to_float(self._require_model().eval(expr, model_completion=True))

    def is_true(self, formula) -> bool:
        return z3.is_true(self._require_model().eval(formula, model_completion=True))

    def to_smt2(self) -> str:
        return self.optimizer.sexpr()
