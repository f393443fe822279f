"""
Puzzle diagnostics: structure summary and reasons a puzzle may be unsolvable

Used by the solver in verbose mode and by the CLI when a puzzle fails, to
point at the region or domino that was probably misread.
"""

from collections import Counter
from typing import Dict, List

from .puzzle import ConstraintKind, PIP_MAX, PIP_MIN, PipsPuzzle


class PuzzleDiagnostics:
    """Static helpers that describe a validated puzzle"""

    @staticmethod
    def pip_counts(puzzle: PipsPuzzle) -> Dict[int, int]:
        """How many domino ends carry each pip value"""
        counts: Counter = Counter()
        for domino, n in puzzle.inventory_counts().items():
            counts[domino.low] += n
            counts[domino.high] += n
        return dict(sorted(counts.items()))

    @staticmethod
    def total_pips(puzzle: PipsPuzzle) -> int:
        return sum(d.pips * n for d, n in puzzle.inventory_counts().items())

    @staticmethod
    def analyze(puzzle: PipsPuzzle) -> List[str]:
        """
        Cheap feasibility checks that need no search.

        An empty list does not mean the puzzle is solvable, only that none of
        the obvious problems were found.
        """
        warnings = []

        # Islands must each hold an even number of cells
        for i, island in enumerate(puzzle.islands(), 1):
            if len(island) % 2:
                warnings.append(f"Island {i} has an odd number of cells ({len(island)})")

        pip_counts = PuzzleDiagnostics.pip_counts(puzzle)
        # Sums two distinct domino ends can make
        pair_sums = {
            a + b for a in pip_counts for b in pip_counts
            if a != b or pip_counts[a] >= 2
        }

        for region in puzzle.regions:
            ct, cv = region.constraint.kind, region.constraint.value
            size = len(region.cells)

            if ct == ConstraintKind.SUM:
                lo, hi = PIP_MIN * size, PIP_MAX * size
                if not lo <= cv <= hi:
                    warnings.append(f"Region {region.id}: sum {cv} outside reachable range [{lo}, {hi}]")
                elif size == 2 and cv not in pair_sums:
                    warnings.append(f"Region {region.id} needs sum={cv} over 2 cells, but no two domino ends add up to that")

            elif ct == ConstraintKind.DIFFERENT and size > PIP_MAX - PIP_MIN + 1:
                warnings.append(f"Region {region.id}: {size} cells cannot all differ")

            elif ct == ConstraintKind.EQUAL:
                if not any(n >= size for n in pip_counts.values()):
                    warnings.append(f"Region {region.id}: no pip value appears on {size} domino ends")

            elif ct == ConstraintKind.GREATER and cv >= PIP_MAX:
                warnings.append(f"Region {region.id}: no pip is greater than {cv}")

            elif ct == ConstraintKind.LESS and cv <= PIP_MIN:
                warnings.append(f"Region {region.id}: no pip is less than {cv}")

        return warnings

    @staticmethod
    def print_summary(puzzle: PipsPuzzle) -> None:
        """Print the puzzle structure the way the solver sees it"""
        print("\n" + "=" * 60)
        print("PUZZLE STRUCTURE")
        print("=" * 60)
        print(f"Cells: {len(puzzle.cells)}  Regions: {len(puzzle.regions)}  Dominoes: {puzzle.num_dominoes}")

        islands = puzzle.islands()
        print(f"Found {len(islands)} island(s):")
        for i, island in enumerate(islands, 1):
            cells = ' '.join(f"({r},{c})" for r, c in island)
            print(f"  Island {i}: {len(island)} cells - {cells}")

        print("Dominoes: " + ' '.join(
            f"{d}x{n}" if n > 1 else f"{d}" for d, n in puzzle.inventory_counts().items()
        ))
        print("Pip counts: " + ' '.join(f"{p}:{n}" for p, n in PuzzleDiagnostics.pip_counts(puzzle).items()))
        print(f"Total pip sum: {PuzzleDiagnostics.total_pips(puzzle)}")

        print("\nRegion Constraints:")
        for region in puzzle.regions:
            cells = ','.join(f"({r},{c})" for r, c in sorted(region.cells))
            print(f"  Region {region.id}: {region.constraint.label():5s} cells:[{cells}]")
        print("=" * 60)
