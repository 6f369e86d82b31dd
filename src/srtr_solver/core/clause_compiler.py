"""
Clause compiler: transition event -> boolean formula over perturbed thresholds.

A clause ``lhs > p`` compiles to ``lhs > baseline[p] + eps[p]`` (likewise for
``<``). Clauses inside a block, and blocks inside an event, are combined by a
strict LEFT FOLD:

    [A, (AND) B, (OR) C]   ->   (A AND B) OR C

There is no operator precedence. A block mixing AND and OR is evaluated in
encounter order, exactly as the event logs are written; callers who expect
conventional precedence must split such conditions into separate blocks.

Events are validated in full before any formula is built, so a malformed
record never yields a partial formula.
"""

from typing import Any, Iterable, Optional, Tuple

import numpy as np

from srtr_solver.backends.base import ConstraintBackend
from srtr_solver.core.constants import SUPPORTED_COMPARATORS
from srtr_solver.core.exceptions import (
    InvalidLiteralError,
    MalformedTransitionError,
    UnknownParameterError,
    UnsupportedComparatorError,
)
from srtr_solver.core.parameters import ParameterRegistry
from srtr_solver.core.transitions import (
    Combinator,
    PossibleTransition,
    TransitionBlock,
    TransitionClause,
)


class ClauseCompiler:
    """Compiles transition events against one parameter registry."""

    def __init__(self, registry: ParameterRegistry):
        self.registry = registry

    @property
    def backend(self) -> ConstraintBackend:
        return self.registry.backend

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_clause(
        self,
        clause: TransitionClause,
        event_index: Optional[int] = None,
        block_index: Optional[int] = None,
        clause_index: Optional[int] = None,
    ) -> None:
        where = dict(event_index=event_index, block_index=block_index,
                     clause_index=clause_index)
        if clause.comparator not in SUPPORTED_COMPARATORS:
            raise UnsupportedComparatorError(
                f"Unsupported comparator {clause.comparator!r}; "
                f"expected one of {', '.join(SUPPORTED_COMPARATORS)}",
                **where,
            )
        if clause.rhs not in self.registry:
            raise UnknownParameterError(
                f"Unknown parameter '{clause.rhs}' (not declared by any state machine)",
                **where,
            )
        try:
            literal = float(clause.lhs)
        except (TypeError, ValueError):
            raise InvalidLiteralError(
                f"Clause literal {clause.lhs!r} is not numeric", **where
            )
        if not np.isfinite(literal):
            raise InvalidLiteralError(
                f"Clause literal must be finite, got {literal}", **where
            )

    def validate_block(
        self,
        block: TransitionBlock,
        event_index: Optional[int] = None,
        block_index: Optional[int] = None,
    ) -> None:
        if not block.clauses:
            raise MalformedTransitionError(
                "Transition block has no clauses",
                event_index=event_index, block_index=block_index,
            )
        for j, clause in enumerate(block.clauses):
            self.validate_clause(clause, event_index, block_index, j)

    def validate_event(self, event: PossibleTransition, event_index: Optional[int] = None) -> None:
        if not event.blocks:
            raise MalformedTransitionError(
                "Transition event has no blocks", event_index=event_index
            )
        for k, block in enumerate(event.blocks):
            self.validate_block(block, event_index, k)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _fold(self, parts: Iterable[Tuple[Combinator, Any]]) -> Any:
        """Left fold; the first combinator is ignored."""
        accumulator = None
        for combinator, formula in parts:
            if accumulator is None:
                accumulator = formula
            elif combinator is Combinator.AND:
                accumulator = self.backend.and_(accumulator, formula)
            else:
                accumulator = self.backend.or_(accumulator, formula)
        return accumulator

    def threshold(self, name: str) -> Any:
        """Perturbed threshold ``baseline[name] + eps[name]``."""
        parameter = self.registry[name]
        return self.backend.add(
            self.backend.make_real_value(parameter.baseline), parameter.epsilon
        )

    # Builders below assume the input has already been validated.

    def _compile_clause(self, clause: TransitionClause) -> Any:
        return self.backend.make_comparison(
            clause.comparator,
            self.backend.make_real_value(float(clause.lhs)),
            self.threshold(clause.rhs),
        )

    def _compile_block(self, block: TransitionBlock) -> Any:
        return self._fold(
            (clause.combinator, self._compile_clause(clause)) for clause in block.clauses
        )

    def compile_clause(self, clause: TransitionClause) -> Any:
        self.validate_clause(clause)
        return self._compile_clause(clause)

    def compile_block(self, block: TransitionBlock) -> Any:
        self.validate_block(block)
        return self._compile_block(block)

    def compile_event(self, event: PossibleTransition, event_index: Optional[int] = None) -> Any:
        """
        Build the formula "this event triggers a transition".

        Raises:
            MalformedTransitionError: no blocks, or a block without clauses.
            UnsupportedComparatorError: comparator other than '>' / '<'.
            UnknownParameterError: clause references an undeclared parameter.
            InvalidLiteralError: clause literal is non-numeric, NaN or infinite.
        """
        self.validate_event(event, event_index)
        return self._fold(
            (block.combinator, self._compile_block(block)) for block in event.blocks
        )
