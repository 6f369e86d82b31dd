"""
SRTR Solver - Threshold Repair for State-Machine Transitions

Tunes the numeric thresholds in the branch conditions of finite-state
machines so that their transitions agree with human-labelled examples,
while changing each threshold as little as possible.

ARCHITECTURE:
=============
Parameter Registry   -> one perturbation eps and |eps| per unique threshold
Clause Compiler      -> event (blocks of clauses) -> boolean formula
Constraint Assembler -> soft constraints (weight 1) + min |eps| objectives
Solver Driver        -> single optimizer check, tuned values read back

Main Interface:
    from srtr_solver import solve_with_blocks

    lowers = solve_with_blocks(machines, events)
    threshold = lowers.get("kick_distance", baseline)

Components:
- ThresholdOptimizer: Full run with diagnostics, returns TuningResult
- ParameterRegistry / get_parameters: Registration only, no solving
- ClauseCompiler: Event -> formula (strict left fold, no precedence)
- Z3Backend: Constraint backend built on z3.Optimize
"""

from srtr_solver.core import (
    Combinator,
    TunableParameterSet,
    TransitionClause,
    TransitionBlock,
    PossibleTransition,
    make_block,
    Parameter,
    ParameterRegistry,
    get_parameters,
    ClauseCompiler,
    TransitionModelError,
    UnsupportedComparatorError,
    UnknownParameterError,
    MalformedTransitionError,
    InvalidLiteralError,
)
from srtr_solver.backends import ConstraintBackend, SolveStatus, Z3Backend
from srtr_solver.optimization import (
    ConstraintAssembler,
    AssembledProblem,
    assemble_constraints,
    ThresholdOptimizer,
    TuningResult,
    solve_with_blocks,
)

__version__ = "0.1.0"

__all__ = [
    # Data model
    "Combinator",
    "TunableParameterSet",
    "TransitionClause",
    "TransitionBlock",
    "PossibleTransition",
    "make_block",
    # Registry and compiler
    "Parameter",
    "ParameterRegistry",
    "get_parameters",
    "ClauseCompiler",
    # Errors
    "TransitionModelError",
    "UnsupportedComparatorError",
    "UnknownParameterError",
    "MalformedTransitionError",
    "InvalidLiteralError",
    # Backends
    "ConstraintBackend",
    "SolveStatus",
    "Z3Backend",
    # Optimization (MAIN INTERFACE)
    "ConstraintAssembler",
    "AssembledProblem",
    "assemble_constraints",
    "ThresholdOptimizer",
    "TuningResult",
    "solve_with_blocks",
]
