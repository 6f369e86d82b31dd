"""
Threshold Optimizer - repair state-machine thresholds from labelled transitions.

APPROACH:
=========
1. Register every tunable threshold p with a perturbation eps_p
   (tuned value = baseline_p + eps_p).
2. Compile each labelled transition event into a boolean formula over the
   perturbed thresholds.
3. Assert each human-labelled event as a soft constraint (weight 1) that the
   formula equals the expected outcome.
4. Minimize |eps_p| for every threshold that appears in a human-labelled
   event (lexicographically, in sorted name order).
5. Run the optimizer ONCE. No retries, no incremental re-solving.
6. Read back each optimized |eps_p| bound, signed like the model's eps_p.
   A strict comparison makes the bound an infimum, so the tuned value sits
   on the boundary the labelled observation approaches.

OUTCOMES:
=========
    SATISFIABLE    every human label holds in the solver's model;
                   tuned values are reported for the referenced parameters.
    UNSATISFIABLE  the labels contradict each other (the optimizer had to
                   drop at least one of them) or the problem is infeasible;
                   no tuned values are reported.
    UNKNOWN        the solver gave up; no tuned values are reported.

Parameters without a tuned value keep their baseline. Use
``TuningResult.resolved_parameters()`` to get the merged view.

The check is a single blocking call. Callers that need bounded latency must
impose their own deadline around ``solve``.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from srtr_solver.backends.base import ConstraintBackend, SolveStatus
from srtr_solver.backends.z3_backend import Z3Backend
from srtr_solver.core.constants import REPORT_TABLE_FORMAT, SHOW_SMT2
from srtr_solver.core.parameters import ParameterRegistry
from srtr_solver.core.transitions import PossibleTransition, TunableParameterSet
from srtr_solver.optimization.constraint_assembler import (
    AssembledProblem,
    ConstraintAssembler,
)
from srtr_solver.reporting.tuning_reporter import adjustment_table, section


# =============================================================================
# Tuning Result
# =============================================================================

@dataclass
class TuningResult:
    """Result of one threshold-tuning run."""

    status: SolveStatus

    # Tuned thresholds (baseline +/- optimized |eps|), only for parameters
    # referenced by a human-constrained event and only when status is
    # SATISFIABLE
    lowers: Dict[str, float] = field(default_factory=dict)

    # Signed optimized eps per tuned parameter
    perturbations: Dict[str, float] = field(default_factory=dict)

    # Optimized (lower, upper) bound of each |eps| objective
    objective_bounds: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    # Every registered parameter with its declared value
    baselines: Dict[str, float] = field(default_factory=dict)

    # Parameters that received an objective, in registration order
    tuned_parameters: Tuple[str, ...] = ()

    # Problem size
    n_events: int = 0
    n_constraints: int = 0

    # Event indices whose human label does not hold in the solver's model
    violated_events: List[int] = field(default_factory=list)

    # Diagnostics
    smt2: str = ""
    message: str = ""
    time_seconds: float = 0.0

    @property
    def is_sat(self) -> bool:
        return self.status.is_sat

    def resolved_parameters(self) -> Dict[str, float]:
        """Baselines overlaid with tuned values."""
        resolved = dict(self.baselines)
        resolved.update(self.lowers)
        return resolved

    def summary(self, tablefmt: str = REPORT_TABLE_FORMAT) -> str:
        """Generate a summary of the tuning run."""
        lines = [
            "=" * 70,
            "THRESHOLD TUNING RESULTS",
            "=" * 70,
            "",
            f"STATUS: {self.status.name}",
            f"Events: {self.n_events} ({self.n_constraints} human constraints)",
            f"Parameters: {len(self.baselines)} registered, "
            f"{len(self.tuned_parameters)} tuned",
            f"Time: {self.time_seconds:.3f} s",
        ]
        if self.message:
            lines.append(f"Note: {self.message}")
        if self.is_sat and self.tuned_parameters:
            lines.extend([
                "",
                "PARAMETER ADJUSTMENTS:",
                adjustment_table(
                    self.baselines, self.lowers, self.perturbations,
                    self.objective_bounds, tablefmt=tablefmt,
                ),
            ])
        lines.extend(["", "=" * 70])
        return "\n".join(lines)


# =============================================================================
# Optimizer
# =============================================================================

class ThresholdOptimizer:
    """
    Tune state-machine thresholds so that human-labelled transition events
    are reproduced with the smallest total change.

    A fresh backend (and therefore a fresh solver context) is created for
    every call to ``solve``; no symbolic state survives between runs.
    """

    def __init__(
        self,
        verbose: bool = True,
        log_file: Optional[str] = None,
        backend_factory: Callable[[], ConstraintBackend] = Z3Backend,
        show_smt2: bool = SHOW_SMT2,
    ):
        """
        Initialize the optimizer.

        Args:
            verbose: Print progress information.
            log_file: Path to log file for the same progress lines (optional).
            backend_factory: Zero-argument callable creating a constraint
                             backend for one run.
            show_smt2: Include the SMT2 problem text in the progress output.
        """
        self.verbose = verbose
        self.log_file = log_file
        self.backend_factory = backend_factory
        self.show_smt2 = show_smt2

    def _log(self, message: str):
        """Write message to log file if configured."""
        if self.log_file:
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(message + '\n')
                f.flush()

    def _report(self, message: str):
        if self.verbose:
            print(message)
        self._log(message)

    def _check(
        self,
        backend: ConstraintBackend,
        registry: ParameterRegistry,
        problem: AssembledProblem,
        result: TuningResult,
    ) -> TuningResult:
        """Run the single solver check and read back tuned values."""
        status = backend.check()

        if status is SolveStatus.UNKNOWN:
            reason = backend.reason_unknown()
            result.message = f"Solver returned unknown{': ' + reason if reason else ''}"
            result.status = status
            return result

        if status is SolveStatus.SATISFIABLE:
            result.violated_events = [
                c.event_index for c in problem.constraints if not backend.is_true(c.formula)
            ]
            if result.violated_events:
                result.message = (
                    f"Human constraints cannot all hold; violated events: "
                    f"{result.violated_events}"
                )
                status = SolveStatus.UNSATISFIABLE

        result.status = status
        if not status.is_sat:
            return result

        for name in problem.tuned_parameters:
            parameter = registry[name]
            handle = problem.objectives[name]
            # Optimized |eps| with the direction the model moved in
            eps = float(np.copysign(backend.bound_of(handle),
                                    backend.value_of(parameter.epsilon)))
            result.perturbations[name] = eps
            result.objective_bounds[name] = backend.bounds_of(handle)
            result.lowers[name] = parameter.baseline + eps
        return result

    def solve(
        self,
        machines: Sequence[TunableParameterSet],
        events: Sequence[PossibleTransition],
    ) -> TuningResult:
        """
        Compile, assemble and solve one tuning problem.

        Args:
            machines: Tunable parameter sets of every state machine.
            events: Labelled transition events. Only events with
                    ``human_constraint`` set constrain the result.

        Returns:
            TuningResult

        Raises:
            TransitionModelError: (or subclass) for malformed input, before
                                  the solver is invoked.
        """
        start_time = time.time()
        backend = self.backend_factory()
        registry = ParameterRegistry(backend).register(machines)
        problem = ConstraintAssembler(registry).assemble(events)

        result = TuningResult(
            status=SolveStatus.UNKNOWN,
            baselines=registry.baselines,
            tuned_parameters=problem.tuned_parameters,
            n_events=problem.n_events,
            n_constraints=problem.n_constraints,
            smt2=backend.to_smt2(),
        )

        self._report("Starting solver")
        self._report("")
        if self.show_smt2:
            self._report(section("SMT2 Representation", result.smt2.rstrip()))
            self._report("")

        result = self._check(backend, registry, problem, result)
        result.time_seconds = time.time() - start_time

        if result.is_sat:
            body = adjustment_table(
                result.baselines, result.lowers, result.perturbations,
                result.objective_bounds,
            ) if result.tuned_parameters else "(no human-constrained parameters)"
        else:
            body = f"{result.status.name}: no parameters adjusted"
            if result.message:
                body += f"\n{result.message}"
        self._report(section("Parameter Adjustments", body))
        self._report("")
        return result


def solve_with_blocks(
    machines: Sequence[TunableParameterSet],
    events: Sequence[PossibleTransition],
    verbose: bool = False,
    log_file: Optional[str] = None,
) -> Dict[str, float]:
    """
    Tune thresholds end to end and return ``{name: tuned value}``.

    Only parameters referenced by at least one human-constrained event appear,
    and only when every human constraint can be met; fall back to the
    baseline for anything missing.
    """
    optimizer = ThresholdOptimizer(verbose=verbose, log_file=log_file)
    return optimizer.solve(machines, events).lowers
