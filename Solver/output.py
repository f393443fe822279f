import json
from datetime import datetime
from typing import Dict, Iterable

import numpy as np

from .constraints import ConstraintChecker
from .engine import SolutionResult
from .puzzle import CellId, Placement, PuzzleData


class SolutionFormatter:
    """Formats puzzle solutions for output"""

    @staticmethod
    def _cell_values(placements: Iterable[Placement]) -> Dict[CellId, int]:
        values: Dict[CellId, int] = {}
        for p in placements:
            values.update(p.values())
        return values

    @staticmethod
    def format_solution_json(puzzle: PuzzleData, result: SolutionResult) -> Dict:
        """
        Format solution as JSON
        """
        values = SolutionFormatter._cell_values(result.placements)
        region_of = {cell: region.id for region in puzzle.regions for cell in region.cells}

        solution = {
            'puzzle_info': {
                'width': puzzle.width,
                'height': puzzle.height,
                'total_cells': len(puzzle.open_cells()),
                'total_regions': len(puzzle.regions),
                'total_dominoes': len(puzzle.inventory),
                'solved': result.is_valid,
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': result.stats,
            'error': result.error.value if result.error else None,
            'message': result.message,
            'placements': [],
            'region_validation': {}
        }

        for p in result.placements:
            solution['placements'].append({
                'domino': p.domino.key,
                'pips': [p.pip_a, p.pip_b],
                'positions': [
                    {'row': p.cell_a[0], 'col': p.cell_a[1]},
                    {'row': p.cell_b[0], 'col': p.cell_b[1]}
                ],
                'regions': [region_of.get(p.cell_a), region_of.get(p.cell_b)]
            })

        for region in puzzle.regions:
            assigned = [values[c] for c in sorted(region.cells) if c in values]
            remaining = len(region.cells) - len(assigned)
            solution['region_validation'][str(region.id)] = {
                'constraint': region.constraint.to_dict(),
                'values': assigned,
                'actual_sum': sum(assigned),
                'satisfied': remaining == 0 and ConstraintChecker.check_final(region.constraint, assigned)
            }

        return solution

    @staticmethod
    def format_solution_human_readable(puzzle: PuzzleData, result: SolutionResult) -> str:
        """
        Format solution as human-readable text
        """
        lines = []
        lines.append("=" * 60)
        lines.append("PIPS PUZZLE SOLUTION")
        lines.append("=" * 60)
        lines.append(f"\nPuzzle has {len(puzzle.open_cells())} cells, {len(puzzle.regions)} regions")

        if not result.is_valid:
            lines.append(f"NOT SOLVED: {result.error.value if result.error else 'unknown'}")
            if result.message:
                lines.append(result.message)
            lines.append("=" * 60)
            return "\n".join(lines)

        lines.append(f"Placed {len(result.placements)} dominoes\n")
        lines.append("DOMINO PLACEMENTS:")
        lines.append("-" * 60)

        for i, p in enumerate(result.placements, 1):
            orientation = "horizontal" if p.cell_a[0] == p.cell_b[0] else "vertical"
            lines.append(
                f"{i:2d}. Domino ({p.pip_a},{p.pip_b}) "
                f"at ({p.cell_a[0]},{p.cell_a[1]})-({p.cell_b[0]},{p.cell_b[1]}) "
                f"[{orientation}]"
            )

        values = SolutionFormatter._cell_values(result.placements)

        lines.append("\n" + "=" * 60)
        lines.append("REGION VALIDATION:")
        lines.append("-" * 60)

        for region in puzzle.regions:
            assigned = [values[c] for c in sorted(region.cells) if c in values]
            satisfied = "✓" if ConstraintChecker.check_final(region.constraint, assigned) else "✗"
            lines.append(
                f"Region {str(region.id):>3s}: {region.constraint.label():6s} "
                f"→ Values: {assigned} {satisfied}"
            )

        lines.append("=" * 60)

        return "\n".join(lines)

    @staticmethod
    def format_grid_visualization(puzzle: PuzzleData, placements: Iterable[Placement]) -> str:
        """
        Create a text-based grid visualization.
        Blocked cells are blank, empty open cells are '·'.
        """
        grid = np.full((puzzle.height, puzzle.width), ' ', dtype='<U1')
        for r, c in puzzle.open_cells():
            grid[r, c] = '·'
        for (r, c), value in SolutionFormatter._cell_values(placements).items():
            grid[r, c] = str(value)

        lines = ["\nGRID VISUALIZATION:"]
        lines.append("-" * (puzzle.width * 2 + 3))
        for row in grid:
            lines.append("  " + " ".join(row))
        lines.append("-" * (puzzle.width * 2 + 3))
        return "\n".join(lines)

    @staticmethod
    def save_solution(puzzle: PuzzleData, result: SolutionResult, output_path: str):
        """
        Save solution to JSON file
        """
        solution = SolutionFormatter.format_solution_json(puzzle, result)

        with open(output_path, 'w') as f:
            json.dump(solution, f, indent=2)

        print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(puzzle: PuzzleData, result: SolutionResult, output_path: str):
        """
        Save human-readable solution to text file
        """
        text = SolutionFormatter.format_solution_human_readable(puzzle, result)
        text += "\n\n" + SolutionFormatter.format_grid_visualization(puzzle, result.placements)

        with open(output_path, 'w') as f:
            f.write(text)
