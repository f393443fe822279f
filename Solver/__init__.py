"""
Pips Puzzle Solver Package

A backtracking tiling engine for Pips puzzles, with verification of partial
placements and hint/step generation from a computed solution.
"""

from .puzzle import (
    Cell,
    CellId,
    Constraint,
    ConstraintKind,
    Domino,
    ErrorKind,
    PipsPuzzle,
    Placement,
    PuzzleData,
    PuzzleError,
    Region,
    load_puzzle,
    puzzle_from_dict,
    validate_puzzle,
)
from .constraints import ConstraintChecker
from .solver import SearchConfig, SearchProgress, SearchResult, TilingSearch
from .engine import SolutionResult, solve
from .verifier import VerificationResult, Violation, verify
from .hints import (
    Contradiction,
    HintEngine,
    StepPlan,
    hint,
    hint_for_cell,
    reveal_steps,
    step_all,
    step_plan,
)
from .diagnostics import PuzzleDiagnostics
from .output import SolutionFormatter

__version__ = "1.0.0"
__all__ = [
    'Cell',
    'CellId',
    'Constraint',
    'ConstraintKind',
    'Domino',
    'ErrorKind',
    'PipsPuzzle',
    'Placement',
    'PuzzleData',
    'PuzzleError',
    'Region',
    'load_puzzle',
    'puzzle_from_dict',
    'validate_puzzle',
    'ConstraintChecker',
    'SearchConfig',
    'SearchProgress',
    'SearchResult',
    'TilingSearch',
    'SolutionResult',
    'solve',
    'VerificationResult',
    'Violation',
    'verify',
    'Contradiction',
    'HintEngine',
    'StepPlan',
    'hint',
    'hint_for_cell',
    'reveal_steps',
    'step_all',
    'step_plan',
    'PuzzleDiagnostics',
    'SolutionFormatter',
]
