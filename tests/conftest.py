"""Shared puzzle builders for the solver tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from Solver import Constraint, Placement, PuzzleData

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


# -- builders -----------------------------------------------------------------


def equal_pair() -> PuzzleData:
    """1x2 grid, one Equal region, a single (3,3)."""
    return PuzzleData.from_ascii(["AA"], {"A": Constraint.equal()}, [(3, 3)])


def sum_square(target: int = 6) -> PuzzleData:
    """2x2 grid under one Sum region; the dominoes total 6."""
    return PuzzleData.from_ascii(["AA", "AA"], {"A": Constraint.sum(target)}, [(1, 2), (0, 3)])


def two_by_four() -> PuzzleData:
    """
    Five regions over a full 2x4 grid. One known tiling:

        1 1 4 2
        3 0 4 6
    """
    return PuzzleData.from_ascii(
        ["AACD", "BBCE"],
        {
            "A": Constraint.equal(),
            "B": Constraint.sum(3),
            "C": Constraint.equal(),
            "D": Constraint.less(3),
            "E": Constraint.greater(5),
        },
        [(1, 3), (0, 1), (2, 4), (4, 6)],
    )


def two_by_four_known_solution() -> list[Placement]:
    return [
        Placement.of((0, 0), (1, 0), 1, 3),
        Placement.of((0, 1), (1, 1), 1, 0),
        Placement.of((0, 2), (0, 3), 4, 2),
        Placement.of((1, 2), (1, 3), 4, 6),
    ]


def two_islands() -> PuzzleData:
    """Two disconnected islands of two cells each."""
    return PuzzleData.from_ascii(
        ["AA#B", "###B"],
        {"A": Constraint.sum(5), "B": Constraint.different()},
        [(2, 3), (1, 4)],
    )


def forced_duplicate() -> PuzzleData:
    """A 3-cell Different region that must receive a repeated pip."""
    return PuzzleData.from_ascii(
        ["AAAB"],
        {"A": Constraint.different(), "B": Constraint.any()},
        [(2, 2), (2, 5)],
    )


# -- fixtures -----------------------------------------------------------------


@pytest.fixture
def puzzle_2x4() -> PuzzleData:
    return two_by_four()


@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR / "two_by_four.json"
