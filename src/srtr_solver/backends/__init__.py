"""
Constraint backends for SRTR Solver.

ConstraintBackend is the solver-neutral interface the compiler and
assembler build against; Z3Backend implements it with z3.Optimize.
"""

from srtr_solver.backends.base import ConstraintBackend, SolveStatus
from srtr_solver.backends.z3_backend import Z3Backend

__all__ = ['ConstraintBackend', 'SolveStatus', 'Z3Backend']
