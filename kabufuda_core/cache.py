from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from .board import Board
from .db import CachedSolution, db_lookup_solution, db_store_solution
from .moves import IllegalMoveError, Move, replay_moves
from .solver import SolveOutcome, SolveResult, debug_enabled, solve


def _debug(msg: str) -> None:
    if debug_enabled():
        print(f"[cache] {msg}")


def _result_from_cache(board: Board, cached: CachedSolution) -> Optional[SolveResult]:
    """Rebuilds a SolveResult from a stored row; None if the row does not hold up."""
    outcome_s, moves, explored = cached
    try:
        outcome = SolveOutcome(outcome_s)
    except ValueError:
        return None
    if outcome is SolveOutcome.UNSOLVED:
        return SolveResult(outcome, (), board, explored)
    if outcome is SolveOutcome.ALREADY_WON:
        return SolveResult(outcome, (), board) if board.has_won() else None
    if outcome is not SolveOutcome.SOLVED or not moves:
        return None
    try:
        final = replay_moves(board, moves)[-1]
    except IllegalMoveError:
        return None
    if not final.has_won():
        return None
    return SolveResult(outcome, tuple(moves), final, explored)


def solve_with_cache(
    board: Board,
    db_path: str,
    *,
    max_states: Optional[int] = None,
    solve_fn: Optional[Callable[..., SolveResult]] = None,
    db_lookup: Optional[Callable[[str, Board], Optional[CachedSolution]]] = None,
    db_store: Optional[Callable[[str, Board, str, Sequence[Move], Optional[int]], None]] = None,
) -> SolveResult:
    """
    Returns the stored result for the board when one exists and replays to a
    win, otherwise solves and stores the result. Abandoned searches are not
    stored; a larger budget may still find a solution.
    """
    solve_fn = solve_fn or solve
    db_lookup = db_lookup or db_lookup_solution
    db_store = db_store or db_store_solution

    try:
        cached = db_lookup(db_path, board)
    except Exception as e:
        _debug(f"lookup failed: {e}")
        cached = None
    if cached is not None:
        res = _result_from_cache(board, cached)
        if res is not None:
            _debug(f"hit: {res.outcome.value} in {len(res.moves)} moves")
            return res
        _debug("stale entry ignored")

    res = solve_fn(board, max_states=max_states)
    if res.outcome is not SolveOutcome.ABANDONED:
        moves: List[Move] = list(res.moves)
        try:
            db_store(db_path, board, res.outcome.value, moves, res.explored)
        except Exception as e:
            _debug(f"store failed: {e}")
    return res
