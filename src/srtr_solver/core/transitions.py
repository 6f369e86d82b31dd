"""
State-machine and transition-event records consumed by the tuner.

Each record is a frozen dataclass so a transition event forms an immutable
tree:

    PossibleTransition
        blocks: TransitionBlock, TransitionBlock, ...
            clauses: TransitionClause, TransitionClause, ...

A clause compares a numeric literal (observed value) against a named
threshold parameter. The combinator on a clause says how it joins the clauses
before it in the same block; the combinator on a block says how it joins the
blocks before it in the same event. The first clause of a block and the first
block of an event ignore their combinator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping, Sequence, Tuple, Union


# ============================================================================
# COMBINATOR
# ============================================================================

class Combinator(Enum):
    """How an element joins the accumulated formula before it."""
    AND = "and"
    OR = "or"

    @classmethod
    def coerce(cls, value: Union["Combinator", bool, str]) -> "Combinator":
        """
        Accept the enum, the boolean ``and`` flag used by event logs
        (True -> AND, False -> OR), or the strings 'and'/'or'.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.AND if value else cls.OR
        if isinstance(value, str):
            return cls(value.lower())
        raise TypeError(f"Cannot interpret {value!r} as a combinator")


# ============================================================================
# TUNABLE PARAMETERS
# ============================================================================

@dataclass(frozen=True)
class TunableParameterSet:
    """
    Tunable thresholds declared by one state machine.

    ``entries`` keeps declaration order. A mapping or a sequence of
    (name, value) pairs may be passed; both are stored as a tuple of pairs.
    """
    entries: Tuple[Tuple[str, float], ...] = ()
    machine: str = ""

    def __post_init__(self):
        raw = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        object.__setattr__(
            self, "entries", tuple((str(name), value) for name, value in raw)
        )

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ============================================================================
# TRANSITION EVENTS
# ============================================================================

@dataclass(frozen=True)
class TransitionClause:
    """``lhs <comparator> threshold[rhs]``, joined to earlier clauses by ``combinator``."""
    lhs: float
    rhs: str
    comparator: str
    combinator: Combinator = Combinator.AND

    def __post_init__(self):
        object.__setattr__(self, "combinator", Combinator.coerce(self.combinator))


@dataclass(frozen=True)
class TransitionBlock:
    """Ordered clauses folded left to right."""
    clauses: Tuple[TransitionClause, ...] = ()
    combinator: Combinator = Combinator.AND

    def __post_init__(self):
        object.__setattr__(self, "clauses", tuple(self.clauses))
        object.__setattr__(self, "combinator", Combinator.coerce(self.combinator))

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return tuple(clause.rhs for clause in self.clauses)


@dataclass(frozen=True)
class PossibleTransition:
    """
    One labelled transition event.

    Attributes:
        blocks: Ordered blocks folded left to right into the event formula.
        human_constraint: True when the label is authoritative and should
            constrain tuning. Other events are carried but inert.
        should_transition: Expected outcome, meaningful only when
            ``human_constraint`` is set.
    """
    blocks: Tuple[TransitionBlock, ...] = ()
    human_constraint: bool = False
    should_transition: bool = False

    def __post_init__(self):
        object.__setattr__(self, "blocks", tuple(self.blocks))

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        """Every parameter referenced by any clause, in encounter order."""
        return tuple(name for block in self.blocks for name in block.parameter_names)


def make_block(
    clauses: Sequence[Tuple[float, str, str]],
    combinators: Sequence[Union[Combinator, bool, str]] = (),
    combinator: Union[Combinator, bool, str] = Combinator.AND,
) -> TransitionBlock:
    """
    Build a block from ``(lhs, comparator, rhs)`` triples.

    ``combinators[i]`` joins clause ``i + 1`` to the clauses before it; missing
    entries default to AND.
    """
    built = []
    for i, (lhs, comparator, rhs) in enumerate(clauses):
        joiner = combinators[i - 1] if 0 < i <= len(combinators) else Combinator.AND
        built.append(TransitionClause(lhs=lhs, rhs=rhs, comparator=comparator,
                                      combinator=joiner))
    return TransitionBlock(clauses=tuple(built), combinator=combinator)
