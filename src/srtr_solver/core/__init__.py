"""
Core module for SRTR Solver.

Contains the transition-event data model, configuration constants, the
parameter registry and the clause compiler.
"""

from srtr_solver.core.transitions import (
    Combinator,
    TunableParameterSet,
    TransitionClause,
    TransitionBlock,
    PossibleTransition,
    make_block,
)
from srtr_solver.core.exceptions import (
    TransitionModelError,
    UnsupportedComparatorError,
    UnknownParameterError,
    MalformedTransitionError,
    InvalidLiteralError,
)
from srtr_solver.core.parameters import Parameter, ParameterRegistry, get_parameters
from srtr_solver.core.clause_compiler import ClauseCompiler

__all__ = [
    "Combinator",
    "TunableParameterSet",
    "TransitionClause",
    "TransitionBlock",
    "PossibleTransition",
    "make_block",
    "TransitionModelError",
    "UnsupportedComparatorError",
    "UnknownParameterError",
    "MalformedTransitionError",
    "InvalidLiteralError",
    "Parameter",
    "ParameterRegistry",
    "get_parameters",
    "ClauseCompiler",
]
