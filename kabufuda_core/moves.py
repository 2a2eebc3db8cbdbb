from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .board import Board, Card, CardStack, CARDS_PER_SUIT, STACK_COUNT, SWAP_COUNT

# Stacks are addressed 0..7, swap fields -1..-4 (-1 is swap index 0).
STACK_SLOTS: Tuple[int, ...] = tuple(range(STACK_COUNT))
SWAP_SLOTS: Tuple[int, ...] = tuple(-(i + 1) for i in range(SWAP_COUNT))
SLOT_ORDER: Tuple[int, ...] = tuple(reversed(SWAP_SLOTS)) + STACK_SLOTS


class IllegalMoveError(ValueError):
    """Raised when a move is applied to a board it is not legal for."""


def slot_in_range(slot: int) -> bool:
    return -SWAP_COUNT <= slot < STACK_COUNT


def is_stack_slot(slot: int) -> bool:
    if not slot_in_range(slot):
        raise ValueError(f"slot out of range: {slot}")
    return slot >= 0


def is_swap_slot(slot: int) -> bool:
    if not slot_in_range(slot):
        raise ValueError(f"slot out of range: {slot}")
    return slot < 0


def swap_index(slot: int) -> int:
    """Maps a swap address -1..-4 to its field index 0..3."""
    if not is_swap_slot(slot):
        raise ValueError(f"not a swap slot: {slot}")
    return -slot - 1


def swap_slot(index: int) -> int:
    if not 0 <= index < SWAP_COUNT:
        raise ValueError(f"swap index out of range: {index}")
    return -(index + 1)


@dataclass(frozen=True)
class Move:
    """Transfer of `size` equal cards from one slot to another."""
    from_slot: int
    to_slot: int
    size: int = 1

    def __str__(self) -> str:
        plural = "" if self.size == 1 else "s"
        return f"{self.size} card{plural} from {self.from_slot} -> {self.to_slot}"


def _structural_reason(m: Move) -> Optional[str]:
    if not slot_in_range(m.from_slot) or not slot_in_range(m.to_slot):
        return "slot out of range"
    if not 1 <= m.size <= CARDS_PER_SUIT:
        return f"size must be between 1 and {CARDS_PER_SUIT}"
    if m.from_slot == m.to_slot:
        return "cannot move in place"
    if m.from_slot < 0 and m.size != 1:
        return "only 1 card can leave a swap field"
    if m.to_slot < 0 and m.size not in (1, CARDS_PER_SUIT):
        return f"a swap field accepts 1 or {CARDS_PER_SUIT} cards"
    return None


def _moved_card(board: Board, from_slot: int) -> Optional[Card]:
    if from_slot < 0:
        return board.swaps[swap_index(from_slot)].card
    stack = board.stacks[from_slot]
    return stack.cards[-1] if stack.cards else None


def illegal_move_reason(board: Board, m: Move) -> Optional[str]:
    """Returns None if the move can be applied to the board, otherwise why not."""
    reason = _structural_reason(m)
    if reason is not None:
        return reason

    if m.from_slot < 0:
        if not board.swaps[swap_index(m.from_slot)].is_occupied():
            return f"swap {m.from_slot} holds no movable card"
    else:
        src = board.stacks[m.from_slot]
        if src.collapsed:
            return f"stack {m.from_slot} is collapsed"
        if src.top_run_length() < m.size:
            return f"stack {m.from_slot} has no run of {m.size}"

    card = _moved_card(board, m.from_slot)
    if m.to_slot < 0:
        if not board.swaps[swap_index(m.to_slot)].is_free():
            return f"swap {m.to_slot} is not free"
    else:
        dst = board.stacks[m.to_slot]
        if dst.collapsed:
            return f"stack {m.to_slot} is collapsed"
        if dst.cards and dst.cards[-1] != card:
            return f"stack {m.to_slot} does not accept {card}"
    return None


def move_is_valid(m: Move) -> bool:
    """Board-independent checks on the move's addresses and size."""
    return _structural_reason(m) is None


def move_is_valid_for_board(board: Board, m: Move) -> bool:
    return illegal_move_reason(board, m) is None


def _movable_count(board: Board, slot: int) -> int:
    if slot < 0:
        return 1 if board.swaps[swap_index(slot)].is_occupied() else 0
    stack = board.stacks[slot]
    if not stack.cards or stack.collapsed:
        return 0
    return stack.top_run_length()


def legal_moves(board: Board) -> List[Move]:
    """All legal moves for the board, larger transfers first."""
    moves: List[Move] = []
    for src in SLOT_ORDER:
        max_count = _movable_count(board, src)
        if max_count == 0:
            continue
        card = _moved_card(board, src)
        for dst in SLOT_ORDER:
            if dst == src:
                continue
            if dst < 0:
                if board.swaps[swap_index(dst)].is_free():
                    moves.append(Move(src, dst, 1))
                    if max_count == CARDS_PER_SUIT:
                        moves.append(Move(src, dst, CARDS_PER_SUIT))
            else:
                target = board.stacks[dst]
                if target.collapsed:
                    continue
                if not target.cards or target.cards[-1] == card:
                    for size in range(1, max_count + 1):
                        moves.append(Move(src, dst, size))
    # Stable sort keeps generation order among equal sizes.
    moves.sort(key=lambda mv: -mv.size)
    return moves


def apply_move(board: Board, m: Move) -> Board:
    """Applies a legal move and returns the resulting board."""
    reason = illegal_move_reason(board, m)
    if reason is not None:
        raise IllegalMoveError(f"illegal move {m}: {reason}")

    card = _moved_card(board, m.from_slot)
    if card is None:
        raise IllegalMoveError(f"illegal move {m}: slot {m.from_slot} holds no card")

    if m.from_slot < 0:
        idx = swap_index(m.from_slot)
        nb = board.with_swap(idx, board.swaps[idx].pop())
    else:
        nb = board.with_stack(m.from_slot, board.stacks[m.from_slot].pop_run(m.size))

    if m.to_slot < 0:
        idx = swap_index(m.to_slot)
        nb = nb.with_swap(idx, nb.swaps[idx].push_run(card, m.size))
    else:
        stack: CardStack = nb.stacks[m.to_slot].push_run(card, m.size)
        collapsed = stack.try_collapse()
        if collapsed is not None:
            nb = nb.with_stack(m.to_slot, collapsed).unlock_next_swap()
        else:
            nb = nb.with_stack(m.to_slot, stack)

    problem = nb.validate()
    if problem is not None:
        raise RuntimeError(f"move {m} produced an invalid board: {problem}")
    return nb


def replay_moves(board: Board, moves: Iterable[Move]) -> List[Board]:
    """Applies moves in order; returns every board along the way, starting board first."""
    boards = [board]
    for m in moves:
        boards.append(apply_move(boards[-1], m))
    return boards
