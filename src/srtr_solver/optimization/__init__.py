"""
SRTR Optimization Module.

Assembles human-labelled transition events into a weighted MaxSMT problem
and drives the solver to find minimally perturbed thresholds.
"""

from srtr_solver.optimization.constraint_assembler import (
    ConstraintAssembler,
    AssembledProblem,
    SoftConstraint,
    assemble_constraints,
)
from srtr_solver.optimization.threshold_optimizer import (
    ThresholdOptimizer,
    TuningResult,
    solve_with_blocks,
)

__all__ = [
    'ConstraintAssembler',
    'AssembledProblem',
    'SoftConstraint',
    'assemble_constraints',
    'ThresholdOptimizer',
    'TuningResult',
    'solve_with_blocks',
]
