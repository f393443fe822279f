"""
Backtracking tiling search for Pips puzzles

Strategy:
1. MRV cell selection: cover the open cell with the fewest legal
   (neighbor, domino, orientation) candidates first; row-major tie-break
2. Every candidate is checked against the regions of both cells before it
   is tried (final pass for regions it closes, partial pass otherwise)
3. An explicit frame stack replaces recursion, so the search can stop,
   yield or be cancelled at any frame boundary
4. Iteration and wall-time budgets turn runaway searches into a Timeout

The candidate order is fixed, so the first solution found for a puzzle is
always the same one.
"""

import time
import threading
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Optional, Tuple

from .constraints import ConstraintChecker
from .puzzle import ErrorKind, Placement, PipsPuzzle


# (neighbor index, domino kind index, pip on the chosen cell, pip on the neighbor)
Candidate = Tuple[int, int, int, int]


@dataclass
class SearchConfig:
    # Candidate attempts before giving up (None = unlimited)
    max_iterations: Optional[int] = 2_000_000

    # Wall-clock budget in seconds (None = unlimited)
    timeout_seconds: Optional[float] = 30.0

    # How often (in iterations) to yield progress; the clock is read every iteration
    checkpoint_interval: int = 1000

    # Print progress for the first few search levels
    verbose: bool = False
    verbose_depth: int = 3


@dataclass
class SearchProgress:
    """Snapshot handed out at every checkpoint"""
    iterations: int
    depth: int
    covered: int
    total: int
    elapsed: float


@dataclass
class SearchResult:
    placements: Optional[List[Placement]]
    error: Optional[ErrorKind] = None
    stats: Dict = field(default_factory=dict)

    @property
    def solved(self) -> bool:
        return self.placements is not None


@dataclass
class _Frame:
    cell: int
    candidates: List[Candidate]
    next: int = 0
    placed: Optional[Candidate] = None


class TilingSearch:
    def __init__(self, puzzle: PipsPuzzle, config: Optional[SearchConfig] = None,
                 cancel_event: Optional[threading.Event] = None):
        self.puzzle = puzzle
        self.config = config or SearchConfig()
        self.cancel_event = cancel_event
        self.verbose = self.config.verbose
        self.stats = {
            'iterations': 0,
            'search_moves': 0,
            'backtracks': 0,
            'dead_ends': 0,
            'constraint_prunes': 0,
            'max_depth': 0,
            'elapsed': 0.0,
        }

        n = len(puzzle.cells)
        self.values: List[Optional[int]] = [None] * n
        self.covered = 0
        self.counts: List[int] = list(puzzle.kind_counts)

    # -------------------------------------------------------------------------
    # Public driver
    # -------------------------------------------------------------------------
    def run(self) -> SearchResult:
        """Drive the search to completion, ignoring checkpoints"""
        steps = self.steps()
        while True:
            try:
                next(steps)
            except StopIteration as stop:
                return stop.value

    def steps(self) -> Generator[SearchProgress, None, SearchResult]:
        """
        Run the search, yielding a SearchProgress at every checkpoint.

        The generator's return value is the SearchResult.
        """
        cfg = self.config
        start = time.monotonic()
        total = len(self.puzzle.cells)
        interval = max(1, cfg.checkpoint_interval)

        if self.verbose:
            print(f"[search] Starting tiling search: {self.puzzle}")

        stack: List[_Frame] = []
        error = None
        solution = None

        cell, candidates = self._select_cell()
        if cell is None:
            solution = []
        elif candidates:
            stack.append(_Frame(cell, candidates))
        else:
            self.stats['dead_ends'] += 1

        while stack:
            frame = stack[-1]

            if frame.placed is not None:
                self._remove(frame.cell, frame.placed)
                frame.placed = None
                self.stats['backtracks'] += 1
                if self.verbose and len(stack) <= cfg.verbose_depth:
                    print(f"{'  ' * (len(stack) - 1)}  Backtrack")

            if frame.next >= len(frame.candidates):
                stack.pop()
                continue

            # --- budget / cancellation ---
            if self.cancel_event is not None and self.cancel_event.is_set():
                error = ErrorKind.CANCELLED
                break
            if cfg.max_iterations is not None and self.stats['iterations'] >= cfg.max_iterations:
                error = ErrorKind.TIMEOUT
                break

            self.stats['iterations'] += 1
            elapsed = time.monotonic() - start
            if cfg.timeout_seconds is not None and elapsed > cfg.timeout_seconds:
                error = ErrorKind.TIMEOUT
                break
            if self.stats['iterations'] % interval == 0:
                yield SearchProgress(self.stats['iterations'], len(stack), self.covered, total, elapsed)

            candidate = frame.candidates[frame.next]
            frame.next += 1
            self._place(frame.cell, candidate)
            frame.placed = candidate
            self.stats['search_moves'] += 1
            self.stats['max_depth'] = max(self.stats['max_depth'], len(stack))

            if self.verbose and len(stack) <= cfg.verbose_depth:
                _, k, _, _ = candidate
                print(f"{'  ' * (len(stack) - 1)}  Placing {self.puzzle.kinds[k]} at {self.puzzle.cells[frame.cell]}")

            if self.covered == total:
                solution = [self._to_placement(f.cell, f.placed) for f in stack]
                break

            next_cell, next_candidates = self._select_cell()
            if not next_candidates:
                self.stats['dead_ends'] += 1
                continue
            stack.append(_Frame(next_cell, next_candidates))

        self.stats['elapsed'] = time.monotonic() - start
        if solution is None and error is None:
            error = ErrorKind.UNSATISFIABLE

        if self.verbose:
            print("\n✓ Tiling found!" if solution is not None else f"\n✗ No tiling ({error.value})")
            self._print_stats()

        return SearchResult(solution, error, dict(self.stats))

    # -------------------------------------------------------------------------
    # MRV selection
    # -------------------------------------------------------------------------
    def _select_cell(self) -> Tuple[Optional[int], List[Candidate]]:
        """
        Pick the uncovered cell with the fewest legal candidates.

        Returns (None, []) when every cell is covered and (cell, []) as soon as
        some cell has no candidate left.
        """
        best = None
        best_candidates: List[Candidate] = []
        for i, value in enumerate(self.values):
            if value is not None:
                continue
            candidates = self._candidates(i)
            if not candidates:
                return i, []
            # strict < keeps the earliest (row-major) cell on ties
            if best is None or len(candidates) < len(best_candidates):
                best, best_candidates = i, candidates
        return best, best_candidates

    def _candidates(self, cell: int) -> List[Candidate]:
        """All legal (neighbor, kind, pip, pip) assignments covering `cell`"""
        out: List[Candidate] = []
        for nb in self.puzzle.adjacency[cell]:
            if self.values[nb] is not None:
                continue
            for k, domino in enumerate(self.puzzle.kinds):
                if self.counts[k] == 0:
                    continue
                orientations = [(domino.low, domino.high)]
                if not domino.is_double:
                    orientations.append((domino.high, domino.low))
                for pip_cell, pip_nb in orientations:
                    if self._fits(cell, nb, pip_cell, pip_nb):
                        out.append((nb, k, pip_cell, pip_nb))
                    else:
                        self.stats['constraint_prunes'] += 1
        return out

    def _fits(self, cell: int, nb: int, pip_cell: int, pip_nb: int) -> bool:
        """Check the regions of both cells with the two values tentatively set"""
        values = self.values
        values[cell] = pip_cell
        values[nb] = pip_nb
        try:
            touched = {self.puzzle.region_of[cell], self.puzzle.region_of[nb]}
            for rid in touched:
                assigned = [values[i] for i in self.puzzle.region_members[rid] if values[i] is not None]
                remaining = len(self.puzzle.region_members[rid]) - len(assigned)
                if not ConstraintChecker.check(self.puzzle.regions[rid].constraint, assigned, remaining):
                    return False
            return True
        finally:
            values[cell] = None
            values[nb] = None

    # -------------------------------------------------------------------------
    # Domino placement/removal
    # -------------------------------------------------------------------------
    def _place(self, cell: int, candidate: Candidate) -> None:
        nb, k, pip_cell, pip_nb = candidate
        self.values[cell] = pip_cell
        self.values[nb] = pip_nb
        self.counts[k] -= 1
        self.covered += 2

    def _remove(self, cell: int, candidate: Candidate) -> None:
        nb, k, _, _ = candidate
        self.values[cell] = None
        self.values[nb] = None
        self.counts[k] += 1
        self.covered -= 2

    def _to_placement(self, cell: int, candidate: Candidate) -> Placement:
        nb, k, pip_cell, pip_nb = candidate
        placement = Placement(self.puzzle.kinds[k], self.puzzle.cells[cell], self.puzzle.cells[nb], pip_cell, pip_nb)
        return placement.normalized()

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSearch Statistics:")
        print(f"  Iterations: {self.stats['iterations']}")
        print(f"  Search moves: {self.stats['search_moves']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        print(f"  Dead ends: {self.stats['dead_ends']}")
        print(f"  Constraint prunes: {self.stats['constraint_prunes']}")
        print(f"  Max depth: {self.stats['max_depth']}")
        print(f"  Elapsed: {self.stats['elapsed']:.3f}s")
