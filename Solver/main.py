#!/usr/bin/env python3
"""
Pips Solver - Main Entry Point

Usage:
    python -m Solver.main data/json/puzzle.json          # Solve one puzzle
    python -m Solver.main --steps data/json/puzzle.json  # Print the solution step by step
    python -m Solver.main --all data/json/               # Solve every puzzle in a directory
"""

import os
import sys
from pathlib import Path

from .diagnostics import PuzzleDiagnostics
from .engine import solve
from .hints import step_all
from .output import SolutionFormatter
from .puzzle import ErrorKind, PuzzleError, load_puzzle, validate_puzzle
from .solver import SearchConfig

# ============================================================================
# CONFIGURATION
# ============================================================================
OUTPUT_DIR = "data/debug"      # Base output directory

TIMEOUT_SECONDS = 300
# Maximum time to spend solving a single puzzle

MAX_ITERATIONS = None
# Maximum candidate attempts per puzzle (None = only the timeout applies)

CHECKPOINT_INTERVAL = 1000
# Iterations between clock checks
# ============================================================================


def solve_puzzle(input_path: str, output_dir: str = None, verbose: bool = True,
                 timeout_seconds: float = TIMEOUT_SECONDS,
                 max_iterations: int = MAX_ITERATIONS):
    """
    Solve a single puzzle and save results.

    Args:
        input_path: Path to input JSON file
        output_dir: Directory for output files (default: data/debug/<puzzle_name>/)
        verbose: Print detailed solving progress
        timeout_seconds: Maximum solving time in seconds
        max_iterations: Maximum candidate attempts
    """
    puzzle_name = Path(input_path).stem

    if output_dir is None:
        output_dir = Path(OUTPUT_DIR) / puzzle_name

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Loading puzzle: {input_path}")
    print(f"Output directory: {output_dir}")
    print(f"{'='*60}")

    try:
        puzzle = load_puzzle(str(input_path))
    except PuzzleError as e:
        print(f"\nError while loading {input_path}: {e}")
        return None, None
    except (OSError, ValueError) as e:
        print(f"\nError while reading {input_path}: {e}")
        return None, None

    config = SearchConfig(
        max_iterations=max_iterations,
        timeout_seconds=timeout_seconds,
        checkpoint_interval=CHECKPOINT_INTERVAL,
        verbose=verbose,
    )

    if verbose:
        print("\nSolver Configuration:")
        print(f"  Timeout: {timeout_seconds}s")
        print(f"  Max iterations: {max_iterations if max_iterations is not None else 'unlimited'}")

    print("\n💡 Tip: Press Ctrl+C at any time to stop solving\n")
    try:
        result = solve(puzzle, config)
    except KeyboardInterrupt:
        print(f"\n\n{'='*60}")
        print("⚠ Solving interrupted by user (Ctrl+C)")
        print(f"{'='*60}")
        return puzzle, None

    SolutionFormatter.save_solution(puzzle, result, str(output_dir / "solution.json"))

    if result.is_valid:
        print(f"\n{'='*60}")
        print("SUCCESS! Puzzle solved ✓")
        print(f"{'='*60}")

        SolutionFormatter.save_human_readable(puzzle, result, str(output_dir / "solution.txt"))

        if verbose:
            print("\n" + SolutionFormatter.format_solution_human_readable(puzzle, result))
            print(SolutionFormatter.format_grid_visualization(puzzle, result.placements))
    else:
        print(f"\n{'='*60}")
        print(f"FAILED: {result.message} ✗")
        print(f"{'='*60}")

        if result.error == ErrorKind.UNSATISFIABLE:
            warnings = PuzzleDiagnostics.analyze(validate_puzzle(puzzle))
            if warnings:
                print("\nLikely causes:")
                for w in warnings:
                    print(f"  - {w}")
        elif result.error == ErrorKind.TIMEOUT:
            print("\n💡 Tip: Raise TIMEOUT_SECONDS / MAX_ITERATIONS for large puzzles")

    return puzzle, result


def print_steps(input_path: str):
    """Solve a puzzle and print the placements one step at a time"""
    try:
        puzzle = load_puzzle(input_path)
    except PuzzleError as e:
        print(f"✗ {e}")
        return
    result = solve(puzzle)
    if not result.is_valid:
        print(f"✗ {result.message}")
        return

    shown = []
    for i, step in enumerate(step_all(puzzle, result, []), 1):
        shown.append(step)
        print(f"\nStep {i}: {step}")
        print(SolutionFormatter.format_grid_visualization(puzzle, shown))


def solve_all_puzzles(data_dir: str, output_dir: str = None,
                      timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve all puzzles in a directory
    """
    data_path = Path(data_dir)
    if not data_path.exists():
        print(f"Error: Directory not found: {data_dir}")
        return

    json_files = sorted(data_path.glob("*.json"))
    if not json_files:
        print(f"No JSON puzzles found in {data_dir}")
        return

    print(f"\nFound {len(json_files)} puzzle(s) to solve")
    print(f"  Timeout per puzzle: {timeout_seconds}s\n")

    results = []

    for i, json_file in enumerate(json_files, 1):
        print(f"\n[{i}/{len(json_files)}] Solving {json_file.name}...")

        sub_dir = Path(output_dir) / json_file.stem if output_dir else None
        puzzle, result = solve_puzzle(str(json_file), output_dir=sub_dir, verbose=False,
                                      timeout_seconds=timeout_seconds)

        results.append({
            'file': json_file.name,
            'solved': bool(result and result.is_valid),
            'error': result.error.value if result and result.error else None,
            'iterations': result.stats.get('iterations') if result else None,
            'backtracks': result.stats.get('backtracks') if result else None,
        })

    # ---------------------------
    # Print summary
    # ---------------------------
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    solved_count = sum(1 for r in results if r['solved'])
    total_count = len(results)
    solve_rate = (solved_count / total_count * 100) if total_count > 0 else 0

    print(f"Solved: {solved_count}/{total_count} puzzles ({solve_rate:.1f}%)")
    print(f"{'='*60}\n")

    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s}", end="")
        if r['solved']:
            print(f" - {r['iterations']} iterations, {r['backtracks']} backtracks")
        else:
            print(f" - Failed ({r['error']})")


def main():
    """Main entry point"""
    args = sys.argv[1:]

    if not args:
        print(__doc__)
        sys.exit(1)

    command = args[0]

    if command in ("--all", "-a"):
        if len(args) < 2:
            print("Usage: python -m Solver.main --all <directory>")
            sys.exit(1)
        solve_all_puzzles(args[1])
        return

    if command in ("--steps", "-s"):
        if len(args) < 2:
            print("Usage: python -m Solver.main --steps <puzzle.json>")
            sys.exit(1)
        if not os.path.exists(args[1]):
            print(f"Error: File not found: {args[1]}")
            sys.exit(1)
        print_steps(args[1])
        return

    if not os.path.exists(command):
        print(f"Error: File not found: {command}")
        sys.exit(1)

    puzzle, result = solve_puzzle(command, verbose=True)
    sys.exit(0 if result and result.is_valid else 1)


if __name__ == "__main__":
    main()
