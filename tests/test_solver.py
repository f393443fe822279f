"""Tiling search: placements, budgets, cancellation, determinism."""

from __future__ import annotations

import threading
import time

import pytest

from Solver import (
    Constraint,
    Domino,
    ErrorKind,
    Placement,
    PuzzleData,
    SearchConfig,
    SearchProgress,
    TilingSearch,
    validate_puzzle,
    verify,
)

from conftest import equal_pair, forced_duplicate, sum_square, two_by_four


def _search(data: PuzzleData, **config) -> TilingSearch:
    return TilingSearch(validate_puzzle(data), SearchConfig(**config))


# -- solutions ----------------------------------------------------------------


def test_single_domino() -> None:
    result = _search(equal_pair()).run()

    assert result.solved
    assert result.error is None
    assert result.placements == [Placement.of((0, 0), (0, 1), 3, 3)]


def test_sum_square_solution_verifies() -> None:
    data = sum_square()
    result = _search(data).run()

    assert result.solved
    assert len(result.placements) == 2
    assert verify(data, result.placements).complete


def test_two_by_four_solution_verifies() -> None:
    data = two_by_four()
    result = _search(data).run()

    assert result.solved
    used = sorted((p.domino for p in result.placements), key=Domino.as_tuple)
    assert used == sorted(data.inventory, key=Domino.as_tuple)
    assert verify(data, result.placements).complete


def test_placements_are_normalized() -> None:
    result = _search(two_by_four()).run()
    for p in result.placements:
        assert p.cell_a < p.cell_b
        assert p.is_adjacent()


def test_empty_puzzle_is_trivially_solved() -> None:
    data = PuzzleData.from_ascii(["##"], {}, [])
    result = _search(data).run()
    assert result.solved
    assert result.placements == []


def test_deterministic() -> None:
    first = _search(two_by_four()).run()
    second = _search(two_by_four()).run()
    assert first.placements == second.placements
    assert first.stats["iterations"] == second.stats["iterations"]


# -- failures -----------------------------------------------------------------


def test_forced_duplicate_is_unsatisfiable() -> None:
    result = _search(forced_duplicate()).run()
    assert not result.solved
    assert result.error == ErrorKind.UNSATISFIABLE


def test_separated_cells_are_a_dead_end_at_the_root() -> None:
    data = PuzzleData.from_ascii(["A#A"], {"A": Constraint.any()}, [(1, 1)])
    result = _search(data).run()

    assert result.error == ErrorKind.UNSATISFIABLE
    assert result.stats["iterations"] == 0
    assert result.stats["dead_ends"] == 1


def test_iteration_budget_gives_timeout() -> None:
    result = _search(two_by_four(), max_iterations=2).run()

    assert result.error == ErrorKind.TIMEOUT
    assert result.placements is None
    assert result.stats["iterations"] == 2


def test_wall_clock_budget_gives_timeout() -> None:
    result = _search(two_by_four(), timeout_seconds=-1.0, checkpoint_interval=1).run()
    assert result.error == ErrorKind.TIMEOUT


def test_wall_clock_budget_holds_between_checkpoints() -> None:
    # 12x12 of (1,1) under Sum(143): the region only fails once closed,
    # so the search backtracks far past the budget
    data = PuzzleData.from_ascii(["A" * 12] * 12, {"A": Constraint.sum(143)}, [(1, 1)] * 72)
    search = TilingSearch(validate_puzzle(data), SearchConfig(max_iterations=None, timeout_seconds=0.3))

    start = time.monotonic()
    result = search.run()
    elapsed = time.monotonic() - start

    assert result.error == ErrorKind.TIMEOUT
    assert elapsed < 1.2


def test_cancel_event_stops_search() -> None:
    cancel = threading.Event()
    cancel.set()
    search = TilingSearch(validate_puzzle(two_by_four()), SearchConfig(), cancel)

    result = search.run()
    assert result.error == ErrorKind.CANCELLED
    assert result.stats["iterations"] == 0


def test_cancel_from_checkpoint() -> None:
    cancel = threading.Event()
    search = TilingSearch(validate_puzzle(two_by_four()), SearchConfig(checkpoint_interval=1), cancel)

    steps = search.steps()
    first = next(steps)
    cancel.set()
    with pytest.raises(StopIteration) as stop:
        next(steps)

    assert isinstance(first, SearchProgress)
    assert stop.value.value.error == ErrorKind.CANCELLED


# -- progress -----------------------------------------------------------------


def test_steps_yield_progress_and_return_result() -> None:
    search = _search(two_by_four(), checkpoint_interval=1)
    progress = []
    steps = search.steps()
    while True:
        try:
            progress.append(next(steps))
        except StopIteration as stop:
            result = stop.value
            break

    assert result.solved
    assert progress
    assert progress[0].total == 8
    assert progress[0].iterations == 1
    assert len(progress) == result.stats["iterations"]


def test_search_state_is_restored_after_backtracking() -> None:
    search = _search(forced_duplicate())
    search.run()

    assert search.covered == 0
    assert all(v is None for v in search.values)
    assert search.counts == list(search.puzzle.kind_counts)


def test_verbose_prints_stats(capsys) -> None:
    _search(equal_pair(), verbose=True).run()
    out = capsys.readouterr().out
    assert "Tiling found" in out
    assert "Search Statistics" in out
