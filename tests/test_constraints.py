"""Region constraint checks, partial and final."""

from __future__ import annotations

import pytest

from Solver import Constraint, ConstraintChecker


@pytest.mark.parametrize(
    "constraint, values, remaining, ok",
    [
        (Constraint.any(), [0, 6, 3], 2, True),
        # equal
        (Constraint.equal(), [2, 2], 1, True),
        (Constraint.equal(), [2, 3], 1, False),
        (Constraint.equal(), [], 3, True),
        # different
        (Constraint.different(), [1, 4], 1, True),
        (Constraint.different(), [1, 1], 1, False),
        (Constraint.different(), [], 8, False),
        # sum: running total and reachability
        (Constraint.sum(6), [3], 1, True),
        (Constraint.sum(6), [5, 2], 1, False),
        (Constraint.sum(13), [0], 1, False),
        (Constraint.sum(12), [6], 1, True),
        # thresholds apply to every assigned value
        (Constraint.greater(2), [3, 5], 1, True),
        (Constraint.greater(2), [3, 2], 1, False),
        (Constraint.less(3), [0, 2], 2, True),
        (Constraint.less(3), [3], 2, False),
    ],
)
def test_check_partial(constraint, values, remaining, ok) -> None:
    assert ConstraintChecker.check_partial(constraint, values, remaining) is ok


@pytest.mark.parametrize(
    "constraint, values, ok",
    [
        (Constraint.sum(6), [3, 3], True),
        (Constraint.sum(6), [3, 2], False),
        (Constraint.equal(), [4, 4, 4], True),
        (Constraint.equal(), [4, 4, 1], False),
        (Constraint.different(), [0, 1, 2], True),
        (Constraint.different(), [0, 1, 0], False),
        (Constraint.greater(4), [5, 6], True),
        (Constraint.less(1), [0, 1], False),
        (Constraint.any(), [6, 6], True),
    ],
)
def test_check_final(constraint, values, ok) -> None:
    assert ConstraintChecker.check_final(constraint, values) is ok


def test_check_uses_final_pass_only_when_closed() -> None:
    # 2 of 6 on the way: fine while open, wrong once closed
    assert ConstraintChecker.check(Constraint.sum(6), [2], 1)
    assert not ConstraintChecker.check(Constraint.sum(6), [2], 0)


def test_explain() -> None:
    assert ConstraintChecker.explain(Constraint.sum(6), [3, 3], 0) is None
    assert "needs 6" in ConstraintChecker.explain(Constraint.sum(6), [3, 2], 0)
    assert "exceeds" in ConstraintChecker.explain(Constraint.sum(6), [5, 4], 1)
    assert "repeat" in ConstraintChecker.explain(Constraint.different(), [2, 2], 0)
    assert "not all equal" in ConstraintChecker.explain(Constraint.equal(), [1, 2], 1)
    assert "[1]" in ConstraintChecker.explain(Constraint.greater(1), [1, 2], 0)
