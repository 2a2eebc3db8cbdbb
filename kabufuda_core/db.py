from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Sequence, Tuple

from .board import Board
from .hashkey import _board_key
from .moves import Move

CachedSolution = Tuple[str, List[Move], int]  # (outcome, moves, explored)


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        pass
    candidates = [
        os.getenv('KABUFUDA_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'kabufuda.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    return base


def encode_moves(moves: Sequence[Move]) -> str:
    return ' '.join(f"{m.from_slot}:{m.to_slot}:{m.size}" for m in moves)


def decode_moves(text: Optional[str]) -> List[Move]:
    moves: List[Move] = []
    for tok in (text or '').split():
        f_s, t_s, n_s = tok.split(':')
        moves.append(Move(int(f_s), int(t_s), int(n_s)))
    return moves


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the table for solved boards exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS solutions (
            key TEXT PRIMARY KEY,
            free_swaps INTEGER NOT NULL,
            outcome TEXT NOT NULL,
            moves TEXT NOT NULL,
            explored INTEGER,
            solved_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    resolved = _resolve_db_path(db_path)
    conn = sqlite3.connect(resolved)
    _ensure_db(conn)
    return conn


def db_lookup_solution(db_path: str, board: Board) -> Optional[CachedSolution]:
    """Looks up the stored result for a starting board."""
    conn = _connect(db_path)
    try:
        cur = conn.execute(
            "SELECT outcome, moves, explored FROM solutions WHERE key = ?",
            (_board_key(board),),
        )
        row = cur.fetchone()
        if not row:
            return None
        outcome, moves_str, explored = row
        return (str(outcome), decode_moves(moves_str), int(explored or 0))
    finally:
        conn.close()


def db_store_solution(
    db_path: str,
    board: Board,
    outcome: str,
    moves: Sequence[Move],
    explored: Optional[int] = None,
) -> None:
    """Stores the search result for a starting board, replacing any previous row."""
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            INSERT OR REPLACE INTO solutions
            (key, free_swaps, outcome, moves, explored, solved_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                _board_key(board),
                board.free_swap_count(),
                outcome,
                encode_moves(moves),
                explored,
                datetime.now(timezone.utc).isoformat(timespec='seconds'),
            ),
        )
        conn.commit()
    finally:
        conn.close()


def iter_solutions(db_path: str) -> Iterator[Tuple[str, str, List[Move]]]:
    """Yields (key, outcome, moves) for every stored row, ordered by key."""
    conn = _connect(db_path)
    try:
        for key, outcome, moves_str in conn.execute(
            "SELECT key, outcome, moves FROM solutions ORDER BY key"
        ):
            yield str(key), str(outcome), decode_moves(moves_str)
    finally:
        conn.close()
