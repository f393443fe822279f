"""Hints and step mode driven by a known or computed solution."""

from __future__ import annotations

import pytest

from Solver import (
    Constraint,
    HintEngine,
    Placement,
    PuzzleData,
    PuzzleError,
    hint,
    hint_for_cell,
    reveal_steps,
    solve,
    step_all,
    step_plan,
)

from conftest import forced_duplicate, two_by_four, two_by_four_known_solution


@pytest.fixture
def known() -> list[Placement]:
    return two_by_four_known_solution()


# -- next hint ----------------------------------------------------------------


def test_first_hint_is_first_solution_placement(known) -> None:
    assert hint(two_by_four(), known, []) == known[0]


def test_hint_skips_placements_already_made(known) -> None:
    # same domino as known[0], cells given in the other order
    made = [Placement.of((1, 0), (0, 0), 3, 1)]
    assert hint(two_by_four(), known, made) == known[1]


def test_hint_is_none_when_complete(known) -> None:
    assert hint(two_by_four(), known, known) is None


def test_hint_avoids_cells_the_user_covered(known) -> None:
    wrong = Placement.of((0, 0), (0, 1), 1, 1)
    assert hint(two_by_four(), known, [wrong]) == known[2]


def test_solution_is_computed_lazily() -> None:
    data = two_by_four()
    engine = HintEngine(data)
    assert engine._solution is None

    first = engine.next_hint([])
    assert first == solve(data).placements[0]
    assert engine.solvable


def test_unsolvable_puzzle_gives_no_hints() -> None:
    data = forced_duplicate()
    engine = HintEngine(data, solve(data))

    assert not engine.solvable
    assert engine.next_hint([]) is None
    assert engine.contradictions([Placement.of((0, 0), (0, 1), 2, 2)]) == []
    assert not engine.step_plan([]).solvable


def test_malformed_puzzle_raises() -> None:
    data = PuzzleData.from_ascii(["AAA"], {"A": Constraint.any()}, [(1, 2)])
    with pytest.raises(PuzzleError):
        HintEngine(data)


# -- step mode ----------------------------------------------------------------


def test_step_all_from_empty_reaches_solution(known) -> None:
    assert step_all(two_by_four(), known, []) == known


def test_step_all_with_computed_solution() -> None:
    data = two_by_four()
    result = solve(data)
    assert step_all(data, result, []) == list(result.placements)


def test_step_plan_continues_from_partial_progress(known) -> None:
    plan = step_plan(two_by_four(), known, known[:1])

    assert plan.steps == known[1:]
    assert plan.contradictions == []
    assert plan.reaches_solution


def test_contradiction_is_reported_not_replaced(known) -> None:
    wrong = Placement.of((0, 1), (0, 0), 1, 1)
    plan = step_plan(two_by_four(), known, [wrong])

    assert plan.steps == known[2:]
    assert not plan.reaches_solution
    assert len(plan.contradictions) == 1

    contradiction = plan.contradictions[0]
    assert contradiction.placement == wrong.normalized()
    assert contradiction.expected == (known[0], known[1])
    assert "conflicts" in contradiction.message


# -- cell hints and reveal ----------------------------------------------------


def test_hint_for_cell(known) -> None:
    assert hint_for_cell(known, (1, 3)) == known[3]
    assert hint_for_cell(known, [0, 2]) == known[2]
    assert hint_for_cell(known, (5, 5)) is None
    assert hint_for_cell(None, (0, 0)) is None


def test_reveal_steps(known) -> None:
    assert reveal_steps(known, 0) == known[:1]
    assert reveal_steps(known, 1) == known[:2]
    assert reveal_steps(known, -1) == []
    assert reveal_steps(known, 10) == known
