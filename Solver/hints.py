"""
Hints and step mode on top of a computed solution

The solution's placement order is the order the search found them in, so
hints come out in the same deterministic cell order as the search.
Placements the user made that disagree with the solution are reported as
contradictions; they are never silently replaced.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .engine import solve, solution_placements
from .puzzle import CellId, Placement, PuzzleData, validate_puzzle
from .solver import SearchConfig


@dataclass(frozen=True)
class Contradiction:
    """A user placement that is not part of the solution"""
    placement: Placement
    expected: Tuple[Placement, ...]  # solution placements covering the same cells
    message: str


@dataclass
class StepPlan:
    steps: List[Placement] = field(default_factory=list)
    contradictions: List[Contradiction] = field(default_factory=list)
    solvable: bool = True

    @property
    def reaches_solution(self) -> bool:
        """Applying `steps` to the user's placements yields exactly the solution"""
        return self.solvable and not self.contradictions


class HintEngine:
    """
    Hint source for one puzzle.

    The solution may be handed in (a SolutionResult or a placement list); if it
    is not, it is computed on first use and kept on the instance.
    """

    def __init__(self, puzzle: PuzzleData, solution=None, config: Optional[SearchConfig] = None):
        validate_puzzle(puzzle)
        self.puzzle = puzzle
        self.config = config
        self._solution = solution_placements(solution)
        self._solvable = solution is None or bool(self._solution) or not puzzle.open_cells()

    def _ensure_solved(self) -> None:
        if self._solution is None:
            result = solve(self.puzzle, self.config)
            self._solution = list(result.placements)
            self._solvable = result.is_valid

    @property
    def solution(self) -> List[Placement]:
        self._ensure_solved()
        return self._solution

    @property
    def solvable(self) -> bool:
        self._ensure_solved()
        return self._solvable

    # -------------------------------------------------------------------------
    # Hints
    # -------------------------------------------------------------------------
    def next_hint(self, placements: Iterable[Placement]) -> Optional[Placement]:
        """
        First solution placement the user has not made yet and whose cells
        are still free. None when there is nothing left to suggest.
        """
        placements = list(placements)
        current = {p.normalized() for p in placements}
        covered = {cell for p in placements for cell in p.cells}

        for p in self.solution:
            if p in current:
                continue
            if p.cell_a in covered or p.cell_b in covered:
                continue
            return p
        return None

    def contradictions(self, placements: Iterable[Placement]) -> List[Contradiction]:
        if not self.solvable:
            return []

        solution_set = set(self.solution)
        by_cell = {cell: p for p in self.solution for cell in p.cells}

        out = []
        for placement in placements:
            p = placement.normalized()
            if p in solution_set:
                continue
            expected = tuple(dict.fromkeys(by_cell[c] for c in p.cells if c in by_cell))
            shown = ', '.join(repr(e) for e in expected) or 'nothing'
            out.append(Contradiction(p, expected, f"{p} conflicts with the solution ({shown})"))
        return out

    def step_plan(self, placements: Iterable[Placement]) -> StepPlan:
        """Apply hints one at a time until none is left"""
        placements = list(placements)
        if not self.solvable:
            return StepPlan(solvable=False)

        current = list(placements)
        steps = []
        while True:
            nxt = self.next_hint(current)
            if nxt is None:
                break
            steps.append(nxt)
            current.append(nxt)

        return StepPlan(steps, self.contradictions(placements))


# -----------------------------------------------------------------------------
# Module-level entry points
# -----------------------------------------------------------------------------
def hint(puzzle: PuzzleData, solution, placements: Iterable[Placement]) -> Optional[Placement]:
    return HintEngine(puzzle, solution).next_hint(placements)


def step_plan(puzzle: PuzzleData, solution, placements: Iterable[Placement]) -> StepPlan:
    return HintEngine(puzzle, solution).step_plan(placements)


def step_all(puzzle: PuzzleData, solution, placements: Iterable[Placement]) -> List[Placement]:
    """Ordered placements that take the user's set to the solution"""
    return step_plan(puzzle, solution, placements).steps


def hint_for_cell(solution, cell: CellId) -> Optional[Placement]:
    """The solution placement covering `cell`"""
    cell = tuple(cell)
    for p in solution_placements(solution) or []:
        if cell in p.cells:
            return p
    return None


def reveal_steps(solution, step_index: int) -> List[Placement]:
    """Step-mode reveal: the first `step_index + 1` solution placements"""
    placements: Sequence[Placement] = solution_placements(solution) or []
    return list(placements[:max(0, step_index + 1)])
