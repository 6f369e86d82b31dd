"""
Abstract constraint-system interface used by the tuner.

The registry, compiler and assembler only talk to a ``ConstraintBackend``.
Formulas, variables and objective handles are opaque objects owned by the
backend instance that created them; they must never be mixed across
instances. A backend instance is created per tuning run and discarded after
it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Tuple


class SolveStatus(Enum):
    """Terminal outcome of a single optimizer check."""
    SATISFIABLE = "sat"
    UNSATISFIABLE = "unsat"
    UNKNOWN = "unknown"

    @property
    def is_sat(self) -> bool:
        return self is SolveStatus.SATISFIABLE


class ConstraintBackend(ABC):
    """
    Boolean/linear-real constraint builder with weighted soft assertions and
    minimization objectives.
    """

    # --- expression building -------------------------------------------------

    @abstractmethod
    def make_real_variable(self, name: str) -> Any:
        """Unconstrained real-valued symbol."""

    @abstractmethod
    def make_real_value(self, value: float) -> Any:
        """Real-valued constant."""

    @abstractmethod
    def add(self, lhs: Any, rhs: Any) -> Any:
        """Arithmetic sum ``lhs + rhs``."""

    @abstractmethod
    def make_comparison(self, op: str, lhs: Any, rhs: Any) -> Any:
        """Strict comparison formula; ``op`` is '>' or '<'."""

    @abstractmethod
    def and_(self, a: Any, b: Any) -> Any:
        """Logical conjunction."""

    @abstractmethod
    def or_(self, a: Any, b: Any) -> Any:
        """Logical disjunction."""

    @abstractmethod
    def not_(self, a: Any) -> Any:
        """Logical negation."""

    @abstractmethod
    def abs_(self, expr: Any) -> Any:
        """Absolute value ``expr if expr >= 0 else -expr``."""

    # --- optimization --------------------------------------------------------

    @abstractmethod
    def assert_soft(self, formula: Any, weight: int = 1) -> None:
        """Weighted soft assertion."""

    @abstractmethod
    def minimize(self, expr: Any) -> Any:
        """Register a minimization objective and return its handle."""

    @abstractmethod
    def check(self) -> SolveStatus:
        """Run the (blocking) optimizer once."""

    @abstractmethod
    def bounds_of(self, handle: Any) -> Tuple[float, float]:
        """Optimized (lower, upper) bound of an objective after a SAT check."""

    @abstractmethod
    def value_of(self, expr: Any) -> float:
        """Value of a real expression in the model of the last SAT check."""

    @abstractmethod
    def is_true(self, formula: Any) -> bool:
        """Whether a formula holds in the model of the last SAT check."""

    def bound_of(self, handle: Any) -> float:
        """Upper optimized bound of an objective after a SAT check."""
        return self.bounds_of(handle)[1]

    def reason_unknown(self) -> str:
        """Solver explanation for an UNKNOWN check, empty when unavailable."""
        return ""

    def to_smt2(self) -> str:
        """Textual dump of the problem for diagnostics."""
        return ""
