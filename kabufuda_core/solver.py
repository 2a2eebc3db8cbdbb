from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

from .board import Board
from .moves import Move, apply_move, legal_moves


class SolveOutcome(Enum):
    ALREADY_WON = "already_won"
    SOLVED = "solved"
    UNSOLVED = "unsolved"
    ABANDONED = "abandoned"  # state budget exhausted


@dataclass
class SolveResult:
    """Result of a depth-first search from a starting board."""
    outcome: SolveOutcome
    moves: Tuple[Move, ...]
    board: Board
    explored: int = 0
    skipped: int = 0

    @property
    def solved(self) -> bool:
        return self.outcome in (SolveOutcome.ALREADY_WON, SolveOutcome.SOLVED)


@dataclass
class _Frame:
    board: Board
    moves: List[Move]
    cursor: int = 0


@dataclass
class _Stats:
    started_at: float = field(default_factory=time.time)
    skipped: int = 0


def debug_enabled() -> bool:
    """True when KABUFUDA_DEBUG asks for diagnostic output."""
    return os.getenv('KABUFUDA_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')


def solve(board: Board, *, max_states: Optional[int] = None) -> SolveResult:
    """
    Depth-first search for a winning move sequence.

    Candidate moves are tried in legal_moves() order (larger transfers first).
    Boards already reached in this search are never expanded twice, since a
    board's options depend only on the board itself. The frame stack is an
    explicit list, so long solutions do not hit the recursion limit.

    `max_states` bounds the visited set; None searches the whole reachable space.
    """
    problem = board.validate()
    if problem is not None:
        raise ValueError(f"invalid board: {problem}")
    if board.has_won():
        return SolveResult(SolveOutcome.ALREADY_WON, (), board)

    debug = debug_enabled()
    stats = _Stats()
    frames: List[_Frame] = [_Frame(board, legal_moves(board))]
    path: List[Move] = []
    visited: Set[Board] = {board}

    while frames:
        top = frames[-1]
        if top.cursor == len(top.moves):
            # Dead end: backtrack. The root frame has no move on the path.
            frames.pop()
            if path:
                path.pop()
            continue

        m = top.moves[top.cursor]
        top.cursor += 1
        nxt = apply_move(top.board, m)
        if nxt in visited:
            stats.skipped += 1
            if debug and stats.skipped % (1 << 20) == 0:
                print(f"[solve] visited={len(visited)} skipped={stats.skipped} depth={len(path)}")
            continue

        visited.add(nxt)
        path.append(m)
        if nxt.has_won():
            if debug:
                print(f"[solve] won in {len(path)} moves; visited={len(visited)} "
                      f"elapsed={time.time() - stats.started_at:.2f}s")
            return SolveResult(SolveOutcome.SOLVED, tuple(path), nxt, len(visited), stats.skipped)
        if max_states is not None and len(visited) >= max_states:
            if debug:
                print(f"[solve] budget of {max_states} states exhausted")
            return SolveResult(SolveOutcome.ABANDONED, (), board, len(visited), stats.skipped)
        frames.append(_Frame(nxt, legal_moves(nxt)))

    if debug:
        print(f"[solve] exhausted; visited={len(visited)} skipped={stats.skipped}")
    return SolveResult(SolveOutcome.UNSOLVED, (), board, len(visited), stats.skipped)
