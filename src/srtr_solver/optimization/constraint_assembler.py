"""
Constraint assembler: labelled events -> weighted MaxSMT problem.

For every human-constrained event the compiled formula (or its negation, when
the event should NOT transition) is asserted as a soft constraint of weight
``SOFT_CONSTRAINT_WEIGHT``. Every parameter referenced by at least one such
event then gets a minimization objective on ``|eps|``.

Objectives are registered in sorted parameter-name order and kept in an
explicit name -> handle map. Parameters never referenced by a human
constraint get no objective and are left at their baseline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from srtr_solver.core.clause_compiler import ClauseCompiler
from srtr_solver.core.constants import SOFT_CONSTRAINT_WEIGHT
from srtr_solver.core.parameters import ParameterRegistry
from srtr_solver.core.transitions import PossibleTransition


@dataclass
class SoftConstraint:
    """A human label asserted into the optimizer."""
    event_index: int
    formula: Any  # already negated for should_transition=False
    should_transition: bool
    weight: int = SOFT_CONSTRAINT_WEIGHT


@dataclass
class AssembledProblem:
    """Everything the solver driver needs after assembly."""
    tuned_parameters: Tuple[str, ...] = ()
    objectives: Dict[str, Any] = field(default_factory=dict)
    constraints: List[SoftConstraint] = field(default_factory=list)
    n_events: int = 0

    @property
    def n_constraints(self) -> int:
        return len(self.constraints)


class ConstraintAssembler:
    """Asserts human-labelled events and perturbation objectives into a backend."""

    def __init__(self, registry: ParameterRegistry):
        self.registry = registry
        self.compiler = ClauseCompiler(registry)

    def assemble(self, events: Sequence[PossibleTransition]) -> AssembledProblem:
        backend = self.registry.backend

        # Compile (and validate) everything before touching the optimizer
        formulas = [self.compiler.compile_event(event, i) for i, event in enumerate(events)]

        problem = AssembledProblem(n_events=len(events))
        tuned = set()
        for i, (event, formula) in enumerate(zip(events, formulas)):
            if not event.human_constraint:
                continue
            tuned.update(event.parameter_names)
            if not event.should_transition:
                formula = backend.not_(formula)
            backend.assert_soft(formula, SOFT_CONSTRAINT_WEIGHT)
            problem.constraints.append(SoftConstraint(
                event_index=i,
                formula=formula,
                should_transition=event.should_transition,
            ))

        problem.tuned_parameters = tuple(sorted(tuned))
        for name in problem.tuned_parameters:
            problem.objectives[name] = backend.minimize(self.registry[name].absolute)
        return problem


def assemble_constraints(
    registry: ParameterRegistry,
    events: Sequence[PossibleTransition],
) -> AssembledProblem:
    """Functional wrapper around ``ConstraintAssembler.assemble``."""
    return ConstraintAssembler(registry).assemble(events)
