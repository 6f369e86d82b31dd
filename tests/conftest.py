"""
Pytest configuration for SRTR Solver test suite.

Shared state-machine and transition-event builders.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from srtr_solver.backends.z3_backend import Z3Backend
from srtr_solver.core.parameters import ParameterRegistry
from srtr_solver.core.transitions import (
    PossibleTransition,
    TunableParameterSet,
    make_block,
)


def pytest_configure(config):
    """Called after command line options have been parsed."""
    # Add markers for test organization
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


@pytest.fixture
def soccer_machines():
    """Two machines sharing 'kick_dist' with different declared values."""
    return [
        TunableParameterSet({"kick_dist": 5.0, "ball_speed": 2.0}, machine="attacker"),
        TunableParameterSet({"kick_dist": 9.0, "goal_angle": 0.5}, machine="goalie"),
    ]


@pytest.fixture
def registry(soccer_machines):
    """Registry over the soccer machines in a fresh backend."""
    return ParameterRegistry(Z3Backend()).register(soccer_machines)


@pytest.fixture
def event():
    """Factory: event(clauses, human=True, transition=True) with one block."""
    def _event(clauses, human=True, transition=True, combinators=()):
        return PossibleTransition(
            blocks=(make_block(clauses, combinators),),
            human_constraint=human,
            should_transition=transition,
        )
    return _event
