"""Structure summary and no-search feasibility warnings."""

from __future__ import annotations

from Solver import Constraint, PuzzleData, PuzzleDiagnostics, validate_puzzle

from conftest import two_by_four


def _warnings(layout, constraints, dominoes) -> list[str]:
    return PuzzleDiagnostics.analyze(validate_puzzle(PuzzleData.from_ascii(layout, constraints, dominoes)))


def test_pip_counts_and_total() -> None:
    model = validate_puzzle(two_by_four())
    assert PuzzleDiagnostics.pip_counts(model) == {0: 1, 1: 2, 2: 1, 3: 1, 4: 2, 6: 1}
    assert PuzzleDiagnostics.total_pips(model) == 21


def test_solvable_puzzle_has_no_warnings() -> None:
    assert PuzzleDiagnostics.analyze(validate_puzzle(two_by_four())) == []


def test_odd_island() -> None:
    warnings = _warnings(["A#A", "A#A"], {"A": Constraint.any()}, [(0, 0), (1, 1)])
    assert warnings == []

    warnings = _warnings(["AA#A", "A###"], {"A": Constraint.any()}, [(0, 0), (1, 1)])
    assert any("odd number of cells (3)" in w for w in warnings)
    assert any("odd number of cells (1)" in w for w in warnings)


def test_sum_out_of_range() -> None:
    warnings = _warnings(["AA"], {"A": Constraint.sum(13)}, [(6, 6)])
    assert warnings == ["Region A: sum 13 outside reachable range [0, 12]"]


def test_pair_sum_with_no_matching_ends() -> None:
    warnings = _warnings(["AA"], {"A": Constraint.sum(3)}, [(1, 2)])
    assert warnings == []

    warnings = _warnings(["AA"], {"A": Constraint.sum(5)}, [(1, 2)])
    assert warnings == ["Region A needs sum=5 over 2 cells, but no two domino ends add up to that"]

    # two ends of the same value need two dominoes carrying it
    warnings = _warnings(["AA"], {"A": Constraint.sum(4)}, [(2, 2)])
    assert warnings == []


def test_impossible_rules() -> None:
    warnings = _warnings(
        ["ABCD"],
        {
            "A": Constraint.greater(6),
            "B": Constraint.less(0),
            "C": Constraint.equal(),
            "D": Constraint.any(),
        },
        [(1, 2), (3, 4)],
    )
    assert "Region A: no pip is greater than 6" in warnings
    assert "Region B: no pip is less than 0" in warnings


def test_equal_region_needs_enough_matching_ends() -> None:
    warnings = _warnings(["AAAB"], {"A": Constraint.equal(), "B": Constraint.any()}, [(1, 2), (3, 4)])
    assert warnings == ["Region A: no pip value appears on 3 domino ends"]


def test_print_summary(capsys) -> None:
    PuzzleDiagnostics.print_summary(validate_puzzle(two_by_four()))
    out = capsys.readouterr().out

    assert "PUZZLE STRUCTURE" in out
    assert "Found 1 island(s):" in out
    assert "Total pip sum: 21" in out
    assert "Region E: >5" in out
