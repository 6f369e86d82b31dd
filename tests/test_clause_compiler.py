"""
Unit tests for the clause compiler.

Formulas are evaluated by substituting concrete perturbations for the
symbolic eps variables and simplifying.
"""

import itertools

import pytest
import z3
from srtr_solver.core.clause_compiler import ClauseCompiler
from srtr_solver.core.exceptions import (
    InvalidLiteralError,
    MalformedTransitionError,
    TransitionModelError,
    UnknownParameterError,
    UnsupportedComparatorError,
)
from srtr_solver.core.transitions import (
    Combinator,
    PossibleTransition,
    TransitionBlock,
    TransitionClause,
    make_block,
)


def evaluate(registry, formula, **eps):
    """Truth value of ``formula`` with eps[name] fixed (missing names -> 0)."""
    ctx = registry.backend.ctx
    subs = [
        (registry[name].epsilon, z3.RealVal(eps.get(name, 0), ctx))
        for name in registry.names
    ]
    value = z3.simplify(z3.substitute(formula, *subs))
    assert z3.is_true(value) or z3.is_false(value)
    return z3.is_true(value)


@pytest.fixture
def compiler(registry):
    return ClauseCompiler(registry)


@pytest.mark.unit
class TestCompileClause:
    """Single-clause formulas (kick_dist baseline = 5)."""

    @pytest.mark.parametrize("lhs,expected", [
        (5.0, False),
        (5.0001, True),
        (4.0, False),
        (100.0, True),
    ])
    def test_greater_than_boundary(self, registry, compiler, lhs, expected):
        formula = compiler.compile_clause(TransitionClause(lhs, "kick_dist", ">"))
        assert evaluate(registry, formula) is expected

    @pytest.mark.parametrize("lhs,expected", [
        (5.0, False),
        (4.9999, True),
        (6.0, False),
    ])
    def test_less_than_boundary(self, registry, compiler, lhs, expected):
        formula = compiler.compile_clause(TransitionClause(lhs, "kick_dist", "<"))
        assert evaluate(registry, formula) is expected

    def test_perturbation_shifts_threshold(self, registry, compiler):
        formula = compiler.compile_clause(TransitionClause(5.0, "kick_dist", ">"))
        assert evaluate(registry, formula, kick_dist=-0.5)
        assert not evaluate(registry, formula, kick_dist=0.5)

    def test_literal_is_not_truncated(self, registry, compiler):
        # 5.5 > 5 + 0.2 only holds with real arithmetic
        formula = compiler.compile_clause(TransitionClause(5.5, "kick_dist", ">"))
        assert evaluate(registry, formula, kick_dist=0.2)


@pytest.mark.unit
class TestCompileBlock:
    """Left fold of clauses inside one block."""

    def test_and_requires_both(self, registry, compiler):
        block = make_block([(6.0, ">", "kick_dist"), (1.0, "<", "ball_speed")],
                           combinators=[Combinator.AND])
        formula = compiler.compile_block(block)
        assert evaluate(registry, formula)
        assert not evaluate(registry, formula, kick_dist=2.0)
        assert not evaluate(registry, formula, ball_speed=-2.0)

    def test_or_is_monotone_over_and(self, registry, compiler):
        clauses = [(6.0, ">", "kick_dist"), (1.0, "<", "ball_speed")]
        f_and = compiler.compile_block(make_block(clauses, [Combinator.AND]))
        f_or = compiler.compile_block(make_block(clauses, [Combinator.OR]))

        grid = [-3.0, -1.5, -0.5, 0.0, 0.5, 1.0, 1.5, 3.0]
        n_and = n_or = 0
        for k, b in itertools.product(grid, grid):
            sat_and = evaluate(registry, f_and, kick_dist=k, ball_speed=b)
            sat_or = evaluate(registry, f_or, kick_dist=k, ball_speed=b)
            if sat_and:
                assert sat_or
            n_and += sat_and
            n_or += sat_or
        assert n_or >= n_and
        assert n_or > n_and

    def test_left_fold_grouping(self, registry, compiler):
        a = TransitionClause(6.0, "kick_dist", ">")
        b = TransitionClause(1.0, "ball_speed", "<", combinator=Combinator.AND)
        c = TransitionClause(0.2, "goal_angle", ">", combinator=Combinator.OR)
        formula = compiler.compile_block(TransitionBlock(clauses=(a, b, c)))

        fa, fb, fc = (compiler.compile_clause(x) for x in (a, b, c))
        assert z3.eq(formula, z3.Or(z3.And(fa, fb), fc))
        assert not z3.eq(formula, z3.And(fa, z3.Or(fb, fc)))

        # A false, C true: (A and B) or C holds, A and (B or C) does not
        point = dict(kick_dist=2.0, goal_angle=-1.0)
        assert evaluate(registry, formula, **point)
        assert not evaluate(registry, z3.And(fa, z3.Or(fb, fc)), **point)

    def test_first_clause_combinator_ignored(self, registry, compiler):
        clause = TransitionClause(6.0, "kick_dist", ">", combinator=Combinator.OR)
        block = TransitionBlock(clauses=(clause,))
        assert z3.eq(compiler.compile_block(block), compiler.compile_clause(clause))


@pytest.mark.unit
class TestCompileEvent:
    """Left fold of blocks, using the block's own combinator."""

    def test_blocks_combined_by_block_flag(self, registry, compiler):
        first = make_block([(6.0, ">", "kick_dist")])
        second = make_block([(1.0, ">", "ball_speed")], combinator=Combinator.OR)
        event = PossibleTransition(blocks=(first, second))
        formula = compiler.compile_event(event)
        assert z3.eq(formula, z3.Or(compiler.compile_block(first),
                                    compiler.compile_block(second)))

    def test_three_blocks_fold_left(self, registry, compiler):
        b1 = make_block([(6.0, ">", "kick_dist")])
        b2 = make_block([(3.0, ">", "ball_speed")], combinator=Combinator.OR)
        b3 = make_block([(0.2, ">", "goal_angle")], combinator=Combinator.AND)
        formula = compiler.compile_event(PossibleTransition(blocks=(b1, b2, b3)))
        f1, f2, f3 = (compiler.compile_block(b) for b in (b1, b2, b3))
        assert z3.eq(formula, z3.And(z3.Or(f1, f2), f3))

    def test_clause_flags_do_not_leak_across_blocks(self, registry, compiler):
        # second block's only clause says OR, but the block itself says AND
        b1 = make_block([(6.0, ">", "kick_dist")])
        b2 = TransitionBlock(
            clauses=(TransitionClause(3.0, "ball_speed", ">", combinator=Combinator.OR),),
            combinator=Combinator.AND,
        )
        formula = compiler.compile_event(PossibleTransition(blocks=(b1, b2)))
        assert z3.eq(formula, z3.And(compiler.compile_block(b1), compiler.compile_block(b2)))


@pytest.mark.unit
class TestCompilerErrors:
    """Malformed input fails loudly instead of producing a formula."""

    @pytest.mark.parametrize("comparator", [">=", "<=", "==", "!=", "", "gt"])
    def test_unsupported_comparator(self, compiler, comparator):
        with pytest.raises(UnsupportedComparatorError):
            compiler.compile_clause(TransitionClause(1.0, "kick_dist", comparator))

    def test_unknown_parameter(self, compiler):
        with pytest.raises(UnknownParameterError) as info:
            compiler.compile_clause(TransitionClause(1.0, "dribble_time", ">"))
        assert "dribble_time" in str(info.value)

    def test_unknown_parameter_is_key_and_value_error(self, compiler):
        with pytest.raises(KeyError):
            compiler.compile_clause(TransitionClause(1.0, "dribble_time", ">"))
        with pytest.raises(ValueError):
            compiler.compile_clause(TransitionClause(1.0, "dribble_time", ">"))

    def test_event_without_blocks(self, compiler):
        with pytest.raises(MalformedTransitionError):
            compiler.compile_event(PossibleTransition(blocks=()))

    def test_block_without_clauses(self, compiler):
        event = PossibleTransition(blocks=(make_block([(6.0, ">", "kick_dist")]),
                                           TransitionBlock(clauses=())))
        with pytest.raises(MalformedTransitionError):
            compiler.compile_event(event)

    def test_error_location(self, compiler):
        event = PossibleTransition(blocks=(
            make_block([(6.0, ">", "kick_dist")]),
            make_block([(1.0, ">", "ball_speed"), (2.0, ">=", "goal_angle")]),
        ))
        with pytest.raises(TransitionModelError) as info:
            compiler.compile_event(event, event_index=4)
        err = info.value
        assert (err.event_index, err.block_index, err.clause_index) == (4, 1, 1)
        assert str(err).startswith("events[4].blocks[1].clauses[1]:")

    def test_late_error_detected_before_any_formula(self, registry, compiler):
        # the bad clause is last; validation still runs before folding
        event = PossibleTransition(blocks=(
            make_block([(6.0, ">", "kick_dist"), (1.0, ">", "nope")]),
        ))
        with pytest.raises(UnknownParameterError):
            compiler.compile_event(event)

    @pytest.mark.parametrize("literal", [float("inf"), float("-inf"), float("nan"), "near", None])
    def test_invalid_literal(self, compiler, literal):
        with pytest.raises(InvalidLiteralError):
            compiler.compile_clause(TransitionClause(literal, "kick_dist", ">"))

    def test_invalid_literal_location(self, compiler):
        event = PossibleTransition(blocks=(
            make_block([(6.0, ">", "kick_dist"), (float("nan"), "<", "ball_speed")]),
        ))
        with pytest.raises(InvalidLiteralError) as info:
            compiler.compile_event(event, event_index=2)
        assert str(info.value).startswith("events[2].blocks[0].clauses[1]:")


@pytest.mark.unit
class TestValidationPasses:
    """An event is validated once, as a whole, before formulas are built."""

    def test_each_clause_checked_once_per_event(self, registry):
        seen = []

        class CountingCompiler(ClauseCompiler):
            def validate_clause(self, clause, *args, **kwargs):
                seen.append(clause.rhs)
                super().validate_clause(clause, *args, **kwargs)

        event = PossibleTransition(blocks=(
            make_block([(6.0, ">", "kick_dist"), (1.0, "<", "ball_speed")]),
            make_block([(0.2, ">", "goal_angle")], combinator=Combinator.OR),
        ))
        CountingCompiler(registry).compile_event(event)
        assert seen == ["kick_dist", "ball_speed", "goal_angle"]

    def test_numeric_strings_accepted(self, registry, compiler):
        formula = compiler.compile_clause(TransitionClause("5.5", "kick_dist", ">"))
        assert evaluate(registry, formula)
