"""
Public solving entry point

solve() validates the puzzle, runs the tiling search under its budget and
packages every outcome, including failures, into a SolutionResult. It never
raises to its caller.
"""
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .diagnostics import PuzzleDiagnostics
from .puzzle import ErrorKind, Placement, PuzzleData, PuzzleError, validate_puzzle
from .solver import SearchConfig, TilingSearch


_MESSAGES = {
    ErrorKind.UNSATISFIABLE: "No solution found. Check that regions and dominoes are correct.",
    ErrorKind.CANCELLED: "Solving was cancelled.",
}


@dataclass(frozen=True)
class SolutionResult:
    is_valid: bool
    placements: Tuple[Placement, ...] = ()
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    stats: Dict = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict:
        return {
            'isValid': self.is_valid,
            'placements': [p.to_dict() for p in self.placements],
            'error': self.error.value if self.error else None,
            'message': self.message,
        }


def _failure(kind: ErrorKind, message: str, stats: Optional[Dict] = None) -> SolutionResult:
    return SolutionResult(False, (), kind, message, stats or {})


def solve(puzzle: PuzzleData, config: Optional[SearchConfig] = None,
          cancel_event: Optional[threading.Event] = None) -> SolutionResult:
    """Solve a puzzle; all failure modes come back in the result"""
    config = config or SearchConfig()

    try:
        model = validate_puzzle(puzzle)
    except PuzzleError as e:
        if config.verbose:
            print(f"[solver] {e}")
        return _failure(e.kind, e.message)
    except (AttributeError, TypeError, ValueError, KeyError, IndexError) as e:
        # Input that is not even shaped like a puzzle
        if config.verbose:
            print(f"[solver] Unreadable puzzle: {e!r}")
        return _failure(ErrorKind.MALFORMED_PUZZLE, f"Unreadable puzzle: {e}")

    if config.verbose:
        PuzzleDiagnostics.print_summary(model)

    result = TilingSearch(model, config, cancel_event).run()

    if result.solved:
        if config.verbose:
            print(f"[solver] Solution found with {len(result.placements)} placements")
        return SolutionResult(True, tuple(result.placements), None, None, result.stats)

    if result.error == ErrorKind.TIMEOUT:
        message = (f"Search budget exceeded after {result.stats['iterations']} iterations "
                   f"({result.stats['elapsed']:.2f}s)")
    else:
        message = _MESSAGES[result.error]

    if config.verbose:
        print(f"[solver] {message}")
        if result.error == ErrorKind.UNSATISFIABLE:
            for warning in PuzzleDiagnostics.analyze(model):
                print(f"[solver]   {warning}")

    return _failure(result.error, message, result.stats)


def solution_placements(solution) -> Optional[List[Placement]]:
    """
    Accept a SolutionResult or a plain placement sequence.

    Returns None when no solution is known yet and an empty list for a failed
    SolutionResult.
    """
    if solution is None:
        return None
    if isinstance(solution, SolutionResult):
        return list(solution.placements) if solution.is_valid else []
    return [p.normalized() for p in solution]
