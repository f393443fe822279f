"""
Constraint checking for Pips regions

Every check works on the values assigned so far to a region's cells plus the
number of its cells still empty, so the same functions serve the search
(early pruning), the verifier and the output formatter.

Key points:
 - Closed region (no empty cells) -> strict final pass
 - Open region -> partial pass that only fails when no completion can work
 - SUM keeps the target reachable with 0..6 per remaining cell
"""

from typing import Optional, Sequence

from .puzzle import Constraint, ConstraintKind, PIP_MAX, PIP_MIN


# Number of distinct pip values available
_DISTINCT_PIPS = PIP_MAX - PIP_MIN + 1


class ConstraintChecker:
    """Validates region values against their constraint."""

    # ---------- small helpers ----------

    @staticmethod
    def _sum_feasible(current: int, remaining: int, target: int) -> bool:
        """
        Interval feasibility for a SUM constraint:
          with `remaining` cells left, the target must still be reachable
          with PIP_MIN..PIP_MAX per remaining cell.
        """
        return current + PIP_MIN * remaining <= target <= current + PIP_MAX * remaining

    # ---------- checks ----------

    @staticmethod
    def check_partial(constraint: Constraint, values: Sequence[int], remaining: int) -> bool:
        """Can this open region still be completed legally?"""
        kind = constraint.kind

        if kind == ConstraintKind.ANY:
            return True

        if kind == ConstraintKind.EQUAL:
            return len(set(values)) <= 1

        if kind == ConstraintKind.DIFFERENT:
            if len(set(values)) != len(values):
                return False
            return len(values) + remaining <= _DISTINCT_PIPS

        if kind == ConstraintKind.SUM:
            return ConstraintChecker._sum_feasible(sum(values), remaining, constraint.value)

        if kind == ConstraintKind.GREATER:
            return all(v > constraint.value for v in values)

        if kind == ConstraintKind.LESS:
            return all(v < constraint.value for v in values)

        return False

    @staticmethod
    def check_final(constraint: Constraint, values: Sequence[int]) -> bool:
        """Does a closed region satisfy its constraint?"""
        kind = constraint.kind

        if kind == ConstraintKind.SUM:
            return sum(values) == constraint.value
        if kind == ConstraintKind.DIFFERENT:
            return len(set(values)) == len(values)
        return ConstraintChecker.check_partial(constraint, values, 0)

    @staticmethod
    def check(constraint: Constraint, values: Sequence[int], remaining: int) -> bool:
        """Final pass for closed regions, partial pass for open ones"""
        if remaining == 0:
            return ConstraintChecker.check_final(constraint, values)
        return ConstraintChecker.check_partial(constraint, values, remaining)

    @staticmethod
    def explain(constraint: Constraint, values: Sequence[int], remaining: int) -> Optional[str]:
        """Human-readable reason a region fails, or None when it passes"""
        if ConstraintChecker.check(constraint, values, remaining):
            return None

        kind = constraint.kind
        shown = list(values)

        if kind == ConstraintKind.EQUAL:
            return f"values {shown} are not all equal"
        if kind == ConstraintKind.DIFFERENT:
            if len(set(values)) != len(values):
                return f"values {shown} repeat a pip"
            return f"{len(values) + remaining} cells cannot all hold different pips"
        if kind == ConstraintKind.SUM:
            total = sum(values)
            if remaining == 0:
                return f"sum is {total}, needs {constraint.value}"
            if total > constraint.value:
                return f"sum {total} already exceeds {constraint.value}"
            return f"sum {total} cannot reach {constraint.value} with {remaining} cell(s) left"
        if kind == ConstraintKind.GREATER:
            bad = [v for v in values if v <= constraint.value]
            return f"values {bad} are not greater than {constraint.value}"
        if kind == ConstraintKind.LESS:
            bad = [v for v in values if v >= constraint.value]
            return f"values {bad} are not less than {constraint.value}"
        return f"constraint {constraint.label()} violated"
