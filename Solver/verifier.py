"""
Verification of a user's (possibly partial) placement set

No search is done here: one pass over the placements, one pass over the
regions.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .constraints import ConstraintChecker
from .puzzle import CellId, Placement, PuzzleData, RegionId, validate_puzzle


@dataclass(frozen=True)
class Violation:
    """One broken rule; names either a region or the cell pair of a placement"""
    kind: str  # 'cell', 'adjacency', 'overlap', 'inventory' or 'region'
    message: str
    region_id: Optional[RegionId] = None
    cells: Optional[Tuple[CellId, CellId]] = None


@dataclass
class VerificationResult:
    valid: bool
    violations: List[Violation] = field(default_factory=list)
    complete: bool = False  # every open cell covered and no violation

    @property
    def region_ids(self) -> List[RegionId]:
        return [v.region_id for v in self.violations if v.region_id is not None]

    @property
    def cell_pairs(self) -> List[Tuple[CellId, CellId]]:
        return [v.cells for v in self.violations if v.cells is not None]


def verify(puzzle: PuzzleData, placements: Iterable[Placement]) -> VerificationResult:
    """
    Check placements against the puzzle rules:
      (a) no domino used beyond its inventory count
      (b) no cell covered more than once
      (c) every closed region satisfies its constraint
      (d) every open region can still be completed
    plus the placement shape itself (open cells, adjacent pair).

    Raises PuzzleError if the puzzle itself is malformed.
    """
    model = validate_puzzle(puzzle)
    available = model.inventory_counts()

    violations: List[Violation] = []
    values: Dict[CellId, int] = {}
    used: Counter = Counter()

    for placement in placements:
        pair = placement.cells

        closed_cells = [c for c in pair if not model.is_open(c)]
        if closed_cells:
            r, c = closed_cells[0]
            violations.append(Violation('cell', f"Cell ({r},{c}) is not an open cell", cells=pair))
            continue

        if not model.are_adjacent(*pair):
            (r1, c1), (r2, c2) = pair
            violations.append(Violation(
                'adjacency', f"Domino cells ({r1},{c1}) and ({r2},{c2}) are not adjacent", cells=pair
            ))
            continue

        used[placement.domino] += 1
        if used[placement.domino] > available.get(placement.domino, 0):
            violations.append(Violation(
                'inventory',
                f"Domino {placement.domino} used {used[placement.domino]} time(s), "
                f"only {available.get(placement.domino, 0)} available",
                cells=pair,
            ))

        for cell, pip in placement.values().items():
            if cell in values:
                r, c = cell
                violations.append(Violation('overlap', f"Cell ({r},{c}) used by multiple dominoes", cells=pair))
            else:
                values[cell] = pip

    for region in model.regions:
        assigned = [values[c] for c in sorted(region.cells) if c in values]
        remaining = len(region.cells) - len(assigned)
        reason = ConstraintChecker.explain(region.constraint, assigned, remaining)
        if reason is not None:
            violations.append(Violation(
                'region', f"Region {region.id} ({region.constraint.label()}): {reason}", region_id=region.id
            ))

    valid = not violations
    return VerificationResult(valid, violations, complete=valid and len(values) == len(model.cells))
