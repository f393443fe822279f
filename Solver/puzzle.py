"""
Core data structures for Pips puzzle representation and validation

PuzzleData is the immutable description handed to the engine by whatever
built it (photo extraction, manual editor, JSON file). PipsPuzzle is the
validated, indexed form the search runs on.
"""
import json
from collections import Counter, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Hashable, Iterable, List, Optional, Sequence, Tuple

import numpy as np


PIP_MIN = 0
PIP_MAX = 6

CellId = Tuple[int, int]  # (row, col)
RegionId = Hashable

# Row-major neighbor order: up, left, right, down
NEIGHBOR_OFFSETS = ((-1, 0), (0, -1), (0, 1), (1, 0))


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class ErrorKind(Enum):
    MALFORMED_PUZZLE = 'MalformedPuzzle'
    INVENTORY_MISMATCH = 'InventoryMismatch'
    UNSATISFIABLE = 'Unsatisfiable'
    TIMEOUT = 'Timeout'
    CANCELLED = 'Cancelled'


class PuzzleError(Exception):
    """Structural problem with a puzzle description, detected before search"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(f"[puzzle] {message}")
        self.kind = kind
        self.message = message


def _malformed(message: str) -> PuzzleError:
    return PuzzleError(ErrorKind.MALFORMED_PUZZLE, message)


# -----------------------------------------------------------------------------
# Constraints
# -----------------------------------------------------------------------------
class ConstraintKind(Enum):
    ANY = 'any'
    SUM = 'sum'
    EQUAL = 'equal'
    DIFFERENT = 'different'
    GREATER = 'greater'
    LESS = 'less'


# Kinds that carry a number (target for SUM, threshold for GREATER/LESS)
_VALUED_KINDS = {ConstraintKind.SUM, ConstraintKind.GREATER, ConstraintKind.LESS}


@dataclass(frozen=True)
class Constraint:
    """A region rule; each kind carries exactly the fields it needs"""
    kind: ConstraintKind
    value: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.kind, ConstraintKind):
            raise _malformed(f"Unknown constraint kind: {self.kind!r}")
        if self.kind in _VALUED_KINDS:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise _malformed(f"Constraint '{self.kind.value}' needs an integer value, got {self.value!r}")
        elif self.value is not None:
            raise _malformed(f"Constraint '{self.kind.value}' takes no value, got {self.value!r}")

    @classmethod
    def any(cls) -> 'Constraint':
        return cls(ConstraintKind.ANY)

    @classmethod
    def sum(cls, target: int) -> 'Constraint':
        return cls(ConstraintKind.SUM, target)

    @classmethod
    def equal(cls) -> 'Constraint':
        return cls(ConstraintKind.EQUAL)

    @classmethod
    def different(cls) -> 'Constraint':
        return cls(ConstraintKind.DIFFERENT)

    @classmethod
    def greater(cls, threshold: int) -> 'Constraint':
        return cls(ConstraintKind.GREATER, threshold)

    @classmethod
    def less(cls, threshold: int) -> 'Constraint':
        return cls(ConstraintKind.LESS, threshold)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Constraint':
        """Build from the app's {'type': ..., 'value': ...} shape"""
        if not isinstance(data, dict) or 'type' not in data:
            raise _malformed(f"Constraint must be a mapping with a 'type', got {data!r}")
        try:
            kind = ConstraintKind(data['type'])
        except ValueError:
            raise _malformed(f"Unknown constraint type: {data['type']!r}") from None
        extra = set(data) - {'type', 'value'}
        if extra:
            raise _malformed(f"Unexpected constraint fields: {sorted(extra)}")
        return cls(kind, data.get('value'))

    @classmethod
    def parse(cls, text: str) -> 'Constraint':
        """Parse badge text ('=', '≠', '>3', '<2', '12', '*') into a constraint"""
        text = (text or '').strip()

        if text in ('', '*'):
            return cls.any()
        if text == '=':
            return cls.equal()
        if text in ('≠', '!='):
            return cls.different()
        # isdecimal rejects superscripts and other digits int() cannot read
        if text[0] in '<>' and text[1:].isdecimal():
            if text[0] == '>':
                return cls.greater(int(text[1:]))
            return cls.less(int(text[1:]))
        if text.lstrip('Σ').isdecimal():
            return cls.sum(int(text.lstrip('Σ')))
        raise _malformed(f"Unreadable constraint badge: {text!r}")

    def to_dict(self) -> Dict:
        out = {'type': self.kind.value}
        if self.value is not None:
            out['value'] = self.value
        return out

    def label(self) -> str:
        """Short badge text for display"""
        if self.kind == ConstraintKind.SUM:
            return f"Σ{self.value}"
        if self.kind == ConstraintKind.EQUAL:
            return '='
        if self.kind == ConstraintKind.DIFFERENT:
            return '≠'
        if self.kind == ConstraintKind.GREATER:
            return f">{self.value}"
        if self.kind == ConstraintKind.LESS:
            return f"<{self.value}"
        return '*'

    def __repr__(self):
        return f"Constraint({self.label()})"


# -----------------------------------------------------------------------------
# Grid, regions, dominoes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Cell:
    """Represents a single cell in the puzzle grid"""
    row: int
    col: int
    blocked: bool = False
    region_id: Optional[RegionId] = None

    @property
    def id(self) -> CellId:
        return (self.row, self.col)


@dataclass(frozen=True)
class Region:
    """Represents a region with a constraint"""
    id: RegionId
    constraint: Constraint
    cells: FrozenSet[CellId] = frozenset()
    color: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'cells', frozenset(tuple(c) for c in self.cells))

    def __repr__(self):
        return f"Region(id={self.id}, size={len(self.cells)}, constraint={self.constraint.label()})"


@dataclass(frozen=True)
class Domino:
    """A domino tile, stored in canonical (low, high) form"""
    low: int
    high: int

    def __post_init__(self):
        if self.low > self.high:
            low, high = self.high, self.low
            object.__setattr__(self, 'low', low)
            object.__setattr__(self, 'high', high)

    @property
    def key(self) -> str:
        return f"{self.low}-{self.high}"

    @property
    def pips(self) -> int:
        """Total pip count"""
        return self.low + self.high

    @property
    def is_double(self) -> bool:
        return self.low == self.high

    def as_tuple(self) -> Tuple[int, int]:
        return (self.low, self.high)

    def __repr__(self):
        return f"[{self.low}|{self.high}]"


@dataclass(frozen=True)
class Placement:
    """A domino laid on two adjacent cells; pip_a lands on cell_a, pip_b on cell_b"""
    domino: Domino
    cell_a: CellId
    cell_b: CellId
    pip_a: int
    pip_b: int

    def __post_init__(self):
        object.__setattr__(self, 'cell_a', tuple(self.cell_a))
        object.__setattr__(self, 'cell_b', tuple(self.cell_b))
        if Domino(self.pip_a, self.pip_b) != self.domino:
            raise ValueError(f"Pips ({self.pip_a},{self.pip_b}) do not match domino {self.domino}")

    @classmethod
    def of(cls, cell_a: CellId, cell_b: CellId, pip_a: int, pip_b: int) -> 'Placement':
        return cls(Domino(pip_a, pip_b), tuple(cell_a), tuple(cell_b), pip_a, pip_b)

    @property
    def cells(self) -> Tuple[CellId, CellId]:
        return (self.cell_a, self.cell_b)

    def values(self) -> Dict[CellId, int]:
        return {self.cell_a: self.pip_a, self.cell_b: self.pip_b}

    def is_adjacent(self) -> bool:
        (r1, c1), (r2, c2) = self.cell_a, self.cell_b
        return abs(r1 - r2) + abs(c1 - c2) == 1

    def normalized(self) -> 'Placement':
        """Same placement with its cells in row-major order"""
        if self.cell_b < self.cell_a:
            return Placement(self.domino, self.cell_b, self.cell_a, self.pip_b, self.pip_a)
        return self

    def to_dict(self) -> Dict:
        return {
            'domino': list(self.domino.as_tuple()),
            'cells': [list(self.cell_a), list(self.cell_b)],
            'pips': [self.pip_a, self.pip_b],
        }

    def __repr__(self):
        return f"Placement({self.domino} {self.cell_a}={self.pip_a} {self.cell_b}={self.pip_b})"


# -----------------------------------------------------------------------------
# Raw puzzle description
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PuzzleData:
    """Immutable puzzle description as produced by an external collaborator"""
    width: int
    height: int
    cells: Tuple[Tuple[Cell, ...], ...]
    regions: Tuple[Region, ...]
    inventory: Tuple[Domino, ...]

    def __post_init__(self):
        # Freeze whatever sequences the caller passed so the value is hashable
        object.__setattr__(self, 'cells', tuple(tuple(row) for row in self.cells))
        object.__setattr__(self, 'regions', tuple(self.regions))
        object.__setattr__(self, 'inventory', tuple(self.inventory))

    def open_cells(self) -> List[CellId]:
        return [cell.id for row in self.cells for cell in row if not cell.blocked]

    @classmethod
    def from_ascii(
        cls,
        layout: Sequence[str],
        constraints: Dict[str, Constraint],
        dominoes: Iterable[Tuple[int, int]],
    ) -> 'PuzzleData':
        """
        Build a puzzle from a character map.

        Each character of `layout` is a cell: '#' marks a blocked cell, any other
        character is the label of the region the cell belongs to. `constraints`
        maps region labels to their rule.
        """
        height = len(layout)
        width = max((len(line) for line in layout), default=0)

        grid: List[Tuple[Cell, ...]] = []
        members: Dict[str, List[CellId]] = {}
        for r in range(height):
            row = []
            for c in range(width):
                ch = layout[r][c] if c < len(layout[r]) else '#'
                if ch in '# ':
                    row.append(Cell(r, c, blocked=True))
                else:
                    row.append(Cell(r, c, region_id=ch))
                    members.setdefault(ch, []).append((r, c))
            grid.append(tuple(row))

        missing = set(members) - set(constraints)
        if missing:
            raise _malformed(f"No constraint given for region(s) {sorted(missing)}")

        regions = tuple(
            Region(label, constraints[label], frozenset(members.get(label, ())))
            for label in sorted(constraints)
        )
        return cls(width, height, tuple(grid), regions, tuple(Domino(a, b) for a, b in dominoes))


def puzzle_from_dict(data: Dict) -> PuzzleData:
    """
    Build PuzzleData from the app's JSON shape:

        {"width", "height", "validCells": [{row, col}], "blockedCells": [...],
         "regions": [{"id", "cells", "color", "constraint": {"type", "value"}}],
         "availableDominoes": [{"id", "pips": [a, b]}]}

    Cells named neither valid nor blocked are treated as blocked.
    """
    try:
        width = data['width']
        height = data['height']
        valid = {(c['row'], c['col']) for c in data.get('validCells', [])}

        regions: List[Region] = []
        cell_region: Dict[CellId, RegionId] = {}
        for raw in data.get('regions', []):
            cells = frozenset((c['row'], c['col']) for c in raw['cells'])
            region = Region(raw['id'], Constraint.from_dict(raw['constraint']), cells, raw.get('color'))
            regions.append(region)
            for cell in sorted(cells):
                # first region wins; validation reports the overlap
                cell_region.setdefault(cell, region.id)

        grid = tuple(
            tuple(
                Cell(r, c, blocked=(r, c) not in valid, region_id=cell_region.get((r, c)))
                for c in range(width)
            )
            for r in range(height)
        )

        inventory = []
        for raw in data.get('availableDominoes', []):
            a, b = raw['pips']
            inventory.append(Domino(a, b))
    except (KeyError, TypeError, ValueError) as e:
        raise _malformed(f"Unreadable puzzle description: {e!r}") from e

    return PuzzleData(width, height, grid, tuple(regions), tuple(inventory))


def load_puzzle(json_path: str) -> PuzzleData:
    """Load puzzle from JSON file"""
    with open(json_path, 'r') as f:
        data = json.load(f)
    return puzzle_from_dict(data)


# -----------------------------------------------------------------------------
# Validated, indexed puzzle
# -----------------------------------------------------------------------------
class PipsPuzzle:
    """
    Frozen, indexable form of a validated PuzzleData.

    Open cells are numbered 0..n-1 in row-major order; everything the search
    touches is expressed through these indices.
    """

    def __init__(self, data: PuzzleData):
        self.data = data
        self.width = data.width
        self.height = data.height

        # Grid masks
        self.open_mask = np.zeros((data.height, data.width), dtype=bool)
        self.region_grid = np.full((data.height, data.width), -1, dtype=int)

        self.regions: Tuple[Region, ...] = data.regions
        region_index = {region.id: i for i, region in enumerate(self.regions)}

        for row in data.cells:
            for cell in row:
                if not cell.blocked:
                    self.open_mask[cell.row, cell.col] = True
                    self.region_grid[cell.row, cell.col] = region_index[cell.region_id]

        rows, cols = np.nonzero(self.open_mask)
        self.cells: Tuple[CellId, ...] = tuple(zip(rows.tolist(), cols.tolist()))
        self.index: Dict[CellId, int] = {cell: i for i, cell in enumerate(self.cells)}

        self.region_of: Tuple[int, ...] = tuple(
            int(self.region_grid[r, c]) for r, c in self.cells
        )
        members: List[List[int]] = [[] for _ in self.regions]
        for i, rid in enumerate(self.region_of):
            members[rid].append(i)
        self.region_members: Tuple[Tuple[int, ...], ...] = tuple(tuple(m) for m in members)

        self.adjacency: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(self.index[n] for n in self._grid_neighbors(cell)) for cell in self.cells
        )

        # Inventory as a count-per-kind table
        counts = Counter(data.inventory)
        self.kinds: Tuple[Domino, ...] = tuple(sorted(counts, key=Domino.as_tuple))
        self.kind_counts: Tuple[int, ...] = tuple(counts[d] for d in self.kinds)
        self.kind_index: Dict[Domino, int] = {d: i for i, d in enumerate(self.kinds)}

    def _grid_neighbors(self, cell: CellId) -> List[CellId]:
        r, c = cell
        out = []
        for dr, dc in NEIGHBOR_OFFSETS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.height and 0 <= nc < self.width and self.open_mask[nr, nc]:
                out.append((nr, nc))
        return out

    def is_open(self, cell: CellId) -> bool:
        return cell in self.index

    def are_adjacent(self, a: CellId, b: CellId) -> bool:
        """Check if two open cells are orthogonal neighbors"""
        if a not in self.index or b not in self.index:
            return False
        return self.index[b] in self.adjacency[self.index[a]]

    def region_for(self, cell: CellId) -> Region:
        """Get the region a cell belongs to"""
        return self.regions[self.region_of[self.index[cell]]]

    def inventory_counts(self) -> Dict[Domino, int]:
        return dict(zip(self.kinds, self.kind_counts))

    def islands(self) -> List[List[CellId]]:
        """Connected components of open cells (BFS over the adjacency lists)"""
        seen = set()
        islands = []
        for start in range(len(self.cells)):
            if start in seen:
                continue
            seen.add(start)
            queue = deque([start])
            island = []
            while queue:
                i = queue.popleft()
                island.append(self.cells[i])
                for n in self.adjacency[i]:
                    if n not in seen:
                        seen.add(n)
                        queue.append(n)
            islands.append(sorted(island))
        return islands

    @property
    def num_dominoes(self) -> int:
        return sum(self.kind_counts)

    def __repr__(self):
        return f"PipsPuzzle({self.height}x{self.width}, cells={len(self.cells)}, regions={len(self.regions)}, dominoes={self.num_dominoes})"


def validate_puzzle(data: PuzzleData) -> PipsPuzzle:
    """
    Check structural invariants and build the indexed puzzle.

    Raises PuzzleError(MALFORMED_PUZZLE) for a bad grid/region graph and
    PuzzleError(INVENTORY_MISMATCH) when the open-cell count is not twice the
    number of dominoes.
    """
    if not isinstance(data, PuzzleData):
        raise _malformed(f"Expected PuzzleData, got {type(data).__name__}")

    width, height = data.width, data.height
    if isinstance(width, bool) or isinstance(height, bool) or not isinstance(width, int) or not isinstance(height, int):
        raise _malformed(f"Grid dimensions must be integers, got {width!r}x{height!r}")
    if width <= 0 or height <= 0:
        raise _malformed(f"Grid dimensions must be positive, got {width}x{height}")

    # --- grid shape ---
    if len(data.cells) != height:
        raise _malformed(f"Grid has {len(data.cells)} rows, expected {height}")
    for r, row in enumerate(data.cells):
        if len(row) != width:
            raise _malformed(f"Row {r} has {len(row)} cells, expected {width}")
        for c, cell in enumerate(row):
            if not isinstance(cell, Cell) or cell.id != (r, c):
                raise _malformed(f"Cell at ({r},{c}) is {cell!r}")

    # --- regions ---
    regions_by_id: Dict[RegionId, Region] = {}
    for region in data.regions:
        if not isinstance(region, Region) or not isinstance(region.constraint, Constraint):
            raise _malformed(f"Bad region entry: {region!r}")
        if region.id in regions_by_id:
            raise _malformed(f"Duplicate region id {region.id!r}")
        if not region.cells:
            raise _malformed(f"Region {region.id!r} has no cells")
        regions_by_id[region.id] = region

        for (r, c) in sorted(region.cells):
            if not (0 <= r < height and 0 <= c < width):
                raise _malformed(f"Region {region.id!r} lists cell ({r},{c}) outside the grid")
            cell = data.cells[r][c]
            if cell.blocked:
                raise _malformed(f"Region {region.id!r} lists blocked cell ({r},{c})")
            if cell.region_id != region.id:
                raise _malformed(
                    f"Cell ({r},{c}) belongs to region {cell.region_id!r} but is listed by region {region.id!r}"
                )

    for row in data.cells:
        for cell in row:
            if cell.blocked:
                continue
            if cell.region_id is None:
                raise _malformed(f"Open cell ({cell.row},{cell.col}) has no region")
            region = regions_by_id.get(cell.region_id)
            if region is None or cell.id not in region.cells:
                raise _malformed(f"Open cell ({cell.row},{cell.col}) is not listed by region {cell.region_id!r}")

    # --- dominoes ---
    for domino in data.inventory:
        if not isinstance(domino, Domino):
            raise _malformed(f"Bad inventory entry: {domino!r}")
        if domino.low < PIP_MIN or domino.high > PIP_MAX:
            raise _malformed(f"Domino {domino} has pips outside {PIP_MIN}..{PIP_MAX}")

    open_count = len(data.open_cells())
    if open_count != 2 * len(data.inventory):
        raise PuzzleError(
            ErrorKind.INVENTORY_MISMATCH,
            f"Invalid puzzle: {open_count} cells but {len(data.inventory)} dominoes "
            f"(need {2 * len(data.inventory)} cells)",
        )

    return PipsPuzzle(data)
