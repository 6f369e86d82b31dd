"""
Exceptions raised while compiling transition events.

All of them derive from ValueError so callers that validate inputs with a
plain ``except ValueError`` keep working. Each error carries enough context
(event index, block index, clause index) to locate the offending record in
the caller's event log.
"""

from typing import Optional


class TransitionModelError(ValueError):
    """Base class for invalid state-machine or transition-event input."""

    def __init__(
        self,
        message: str,
        event_index: Optional[int] = None,
        block_index: Optional[int] = None,
        clause_index: Optional[int] = None,
    ):
        self.event_index = event_index
        self.block_index = block_index
        self.clause_index = clause_index
        super().__init__(message)

    @property
    def location(self) -> str:
        """Human readable position, e.g. ``events[3].blocks[0].clauses[1]``."""
        parts = []
        if self.event_index is not None:
            parts.append(f"events[{self.event_index}]")
        if self.block_index is not None:
            parts.append(f"blocks[{self.block_index}]")
        if self.clause_index is not None:
            parts.append(f"clauses[{self.clause_index}]")
        return ".".join(parts)

    def __str__(self) -> str:
        message = super().__str__()
        location = self.location
        return f"{location}: {message}" if location else message


class UnsupportedComparatorError(TransitionModelError):
    """A clause uses a comparator other than '>' or '<'."""


class UnknownParameterError(TransitionModelError, KeyError):
    """A clause references a parameter that no state machine declares."""

    # KeyError.__str__ would repr() the message
    __str__ = TransitionModelError.__str__


class MalformedTransitionError(TransitionModelError):
    """An event has no blocks, or a block has no clauses."""


class InvalidLiteralError(TransitionModelError):
    """A clause compares against a non-numeric or non-finite observed value."""
