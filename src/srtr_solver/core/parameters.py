"""
Parameter registry for threshold tuning.

Collects the tunable thresholds declared by every state machine and creates,
for each unique name, a symbolic perturbation ``eps`` and its absolute value
``|eps|`` in the run's constraint backend.

The tuned threshold is ``baseline + eps``. Minimizing ``|eps|`` keeps the
tuned values as close to the hand-written ones as the labelled data allows.

First declaration wins: when several machines (or one machine twice) declare
the same name, later values are ignored without error.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from srtr_solver.backends.base import ConstraintBackend
from srtr_solver.backends.z3_backend import Z3Backend
from srtr_solver.core.constants import VARIABLE_PREFIX
from srtr_solver.core.transitions import TunableParameterSet


@dataclass(frozen=True)
class Parameter:
    """One registered threshold and its symbolic perturbation."""
    name: str
    baseline: float
    epsilon: Any  # backend real variable
    absolute: Any  # backend expression |epsilon|


def _as_baseline(name: str, value: Any) -> float:
    """Validate a declared baseline value."""
    try:
        baseline = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Parameter '{name}' has non-numeric baseline {value!r}")
    if not np.isfinite(baseline):
        raise ValueError(f"Parameter '{name}' baseline must be finite, got {baseline}")
    return baseline


class ParameterRegistry:
    """
    Registry of tunable parameters for a single tuning run.

    The registry owns the symbolic expressions it creates; they belong to the
    backend passed in and must not outlive it.
    """

    def __init__(self, backend: ConstraintBackend, variable_prefix: str = VARIABLE_PREFIX):
        self.backend = backend
        self.variable_prefix = variable_prefix
        self._parameters: Dict[str, Parameter] = {}

    def register(self, machines: Sequence[TunableParameterSet]) -> "ParameterRegistry":
        """Register every (name, baseline) pair in iteration order."""
        for machine in machines:
            for name, value in machine:
                if name in self._parameters:
                    continue
                baseline = _as_baseline(name, value)
                epsilon = self.backend.make_real_variable(self.variable_prefix + name)
                self._parameters[name] = Parameter(
                    name=name,
                    baseline=baseline,
                    epsilon=epsilon,
                    absolute=self.backend.abs_(epsilon),
                )
        return self

    def __contains__(self, name: str) -> bool:
        return name in self._parameters

    def __getitem__(self, name: str) -> Parameter:
        return self._parameters[name]

    def __len__(self) -> int:
        return len(self._parameters)

    @property
    def names(self) -> List[str]:
        """Unique names in first-seen order."""
        return list(self._parameters)

    @property
    def baselines(self) -> Dict[str, float]:
        return {name: p.baseline for name, p in self._parameters.items()}

    @property
    def epsilons(self) -> Dict[str, Any]:
        return {name: p.epsilon for name, p in self._parameters.items()}

    @property
    def absolutes(self) -> Dict[str, Any]:
        return {name: p.absolute for name, p in self._parameters.items()}


def get_parameters(
    machines: Sequence[TunableParameterSet],
    backend: Optional[ConstraintBackend] = None,
) -> Tuple[Dict[str, float], List[str], Dict[str, Any], Dict[str, Any]]:
    """
    Register parameters without solving anything.

    Args:
        machines: Parameter sets of every state machine in the run.
        backend: Backend that will own the symbols. A fresh z3 backend is
                 created when omitted.

    Returns:
        (baselines, names, epsilons, absolutes)
    """
    if backend is None:
        backend = Z3Backend()
    registry = ParameterRegistry(backend).register(machines)
    return registry.baselines, registry.names, registry.epsilons, registry.absolutes
