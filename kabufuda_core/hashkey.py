from __future__ import annotations

from typing import List

from .board import Board, CardStack, SwapField, SwapState


def _stack_key(stack: CardStack) -> str:
    s = ''.join(str(c) for c in stack.cards)
    return s + '*' if stack.collapsed else s


def _swap_key(field: SwapField) -> str:
    if field.state is SwapState.LOCKED:
        return 'X'
    if field.state is SwapState.FREE:
        return '_'
    if field.state is SwapState.OCCUPIED:
        return str(field.card)
    return f"*{field.card}"


def _board_key(board: Board) -> str:
    """Exact text key for a board: equal boards, and only equal boards, share a key.

    Format: stacks bottom-to-top joined by '/', a trailing '*' marking a
    collapsed stack, then '|' and the four swap fields joined by ','.
    Example: "85149/43092/.../06297|_,X,X,X".
    """
    stacks: List[str] = [_stack_key(s) for s in board.stacks]
    swaps: List[str] = [_swap_key(f) for f in board.swaps]
    return '/'.join(stacks) + '|' + ','.join(swaps)


def _board_from_key(key: str) -> Board:
    """Inverse of _board_key."""
    stacks_part, _, swaps_part = key.partition('|')
    stacks: List[CardStack] = []
    for token in stacks_part.split('/'):
        collapsed = token.endswith('*')
        digits = token[:-1] if collapsed else token
        stacks.append(CardStack(tuple(int(c) for c in digits), collapsed))
    swaps: List[SwapField] = []
    for token in swaps_part.split(','):
        if token == 'X':
            swaps.append(SwapField(SwapState.LOCKED))
        elif token == '_':
            swaps.append(SwapField(SwapState.FREE))
        elif token.startswith('*'):
            swaps.append(SwapField(SwapState.COLLAPSED, int(token[1:])))
        else:
            swaps.append(SwapField(SwapState.OCCUPIED, int(token)))
    return Board(tuple(stacks), tuple(swaps))
