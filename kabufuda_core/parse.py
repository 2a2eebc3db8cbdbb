from __future__ import annotations

from typing import List, Optional

from .board import Board, Difficulty, STACK_COUNT, SUITS
from .moves import Move

LAYOUT_DEPTH = 5

_DIFFICULTY_NAMES = {
    'easy': Difficulty.EASY,
    'normal': Difficulty.NORMAL,
    'hard': Difficulty.HARD,
    'expert': Difficulty.EXPERT,
}


def parse_difficulty(name: Optional[str]) -> Difficulty:
    """Accepts a tier name or its number of free swap fields; empty means expert."""
    if name is None or not str(name).strip():
        return Difficulty.EXPERT
    key = str(name).strip().lower()
    if key in _DIFFICULTY_NAMES:
        return _DIFFICULTY_NAMES[key]
    for d in Difficulty:
        if key == str(d.free_swaps):
            return d
    raise ValueError(f"unknown difficulty: {name!r} (expected one of {', '.join(_DIFFICULTY_NAMES)})")


def parse_layout(text: str) -> List[List[int]]:
    """
    Parses a starting layout: 5 rows of 8 digits, the first row being the
    bottom card of every stack. Blank lines and '#' comments are ignored.
    Returns 8 bottom-to-top stacks.
    """
    rows: List[List[int]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split('#', 1)[0].strip()
        if not line:
            continue
        tokens = line.split()
        if len(tokens) != STACK_COUNT:
            raise ValueError(f"line {lineno}: expected {STACK_COUNT} cards, got {len(tokens)}")
        row: List[int] = []
        for tok in tokens:
            if not tok.isdigit() or int(tok) >= SUITS:
                raise ValueError(f"line {lineno}: bad card {tok!r}")
            row.append(int(tok))
        rows.append(row)
    if len(rows) != LAYOUT_DEPTH:
        raise ValueError(f"expected {LAYOUT_DEPTH} rows, got {len(rows)}")
    return [[row[i] for row in rows] for i in range(STACK_COUNT)]


def parse_board(text: str, difficulty: Difficulty = Difficulty.EXPERT) -> Board:
    board = Board.from_layout(parse_layout(text), difficulty)
    problem = board.validate()
    if problem is not None:
        raise ValueError(problem)
    return board


def parse_move(text: str) -> Move:
    """Parses "from to size" or "from,to,size"; size defaults to 1."""
    sep = ',' if ',' in text else None
    parts = [p for p in text.strip().split(sep) if p.strip()]
    if len(parts) not in (2, 3):
        raise ValueError(f"cannot parse move: {text!r}")
    try:
        nums = [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"cannot parse move: {text!r}") from None
    return Move(*nums)


def format_layout(board: Board) -> str:
    """Writes the stacks in the layout format read by parse_layout."""
    lines: List[str] = []
    for depth in range(board.max_stack_depth()):
        lines.append(' '.join(
            str(s.cards[depth]) if depth < len(s) else '.' for s in board.stacks
        ))
    return '\n'.join(lines)
