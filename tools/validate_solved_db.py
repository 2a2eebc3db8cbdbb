#!/usr/bin/env python3
"""
Validate a solutions DB by replaying every stored move sequence.

- Rebuilds each starting board from its key and checks it is a valid deal.
- 'solved' rows must replay to a won board; 'unsolved' rows must hold no moves.
- Prints a JSON summary with counts and samples.

Usage:
  python tools/validate_solved_db.py data/kabufuda.db
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game import _board_from_key, replay_moves, IllegalMoveError, SolveOutcome, iter_solutions  # type: ignore


def check_row(key: str, outcome: str, moves: List[Any]) -> Optional[str]:
    """Returns None for a consistent row, otherwise what is wrong with it."""
    try:
        board = _board_from_key(key)
    except ValueError as e:
        return f"bad key: {e}"
    problem = board.validate()
    if problem is not None:
        return f"invalid board: {problem}"
    if outcome == SolveOutcome.UNSOLVED.value:
        return "unsolved row has moves" if moves else None
    if outcome == SolveOutcome.ALREADY_WON.value:
        return None if board.has_won() else "board is not won"
    if outcome != SolveOutcome.SOLVED.value:
        return f"unknown outcome {outcome!r}"
    try:
        final = replay_moves(board, moves)[-1]
    except IllegalMoveError as e:
        return str(e)
    return None if final.has_won() else "moves do not reach a win"


def validate(db_path: str) -> Dict[str, Any]:
    n = 0
    by_outcome: Dict[str, int] = {}
    lengths: List[int] = []
    bad_count = 0
    bad_sample: List[Dict[str, str]] = []

    for key, outcome, moves in iter_solutions(db_path):
        n += 1
        by_outcome[outcome] = by_outcome.get(outcome, 0) + 1
        if outcome == SolveOutcome.SOLVED.value:
            lengths.append(len(moves))
        problem = check_row(key, outcome, moves)
        if problem is not None:
            bad_count += 1
            if len(bad_sample) < 10:
                bad_sample.append({"key": key, "problem": problem})

    return {
        "count": n,
        "outcomes": by_outcome,
        "moves": {
            "min": (min(lengths) if lengths else None),
            "avg": (round(sum(lengths) / len(lengths), 2) if lengths else None),
            "max": (max(lengths) if lengths else None),
        },
        "bad_count": bad_count,
        "bad_sample": bad_sample,
    }


if __name__ == "__main__":
    db = sys.argv[1] if len(sys.argv) > 1 else os.path.join(os.getcwd(), "data", "kabufuda.db")
    print(json.dumps(validate(db), indent=2))
