from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Card = int  # suit value 0..9

SUITS = 10
CARDS_PER_SUIT = 4
TOTAL_CARDS = SUITS * CARDS_PER_SUIT
STACK_COUNT = 8
SWAP_COUNT = 4


def validate_card(value: int) -> Card:
    """Returns the value as a Card, rejecting anything outside the 10 suits."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"card must be an int, got {value!r}")
    if not 0 <= value < SUITS:
        raise ValueError(f"card out of range [0, {SUITS}): {value}")
    return value


class Difficulty(Enum):
    """Selects how many swap fields start unlocked."""
    EASY = 4
    NORMAL = 3
    HARD = 2
    EXPERT = 1

    @property
    def free_swaps(self) -> int:
        return self.value


class SwapState(Enum):
    LOCKED = "locked"
    FREE = "free"
    OCCUPIED = "occupied"
    COLLAPSED = "collapsed"


@dataclass(frozen=True)
class CardStack:
    """A pile of cards on the main field, bottom to top. Collapsed stacks are frozen."""
    cards: Tuple[Card, ...] = ()
    collapsed: bool = False

    def __len__(self) -> int:
        return len(self.cards)

    def is_empty(self) -> bool:
        return not self.cards

    def top(self) -> Card:
        if not self.cards:
            raise ValueError("top() on empty stack")
        return self.cards[-1]

    def top_run_length(self) -> int:
        """Number of cards at the top equal to the top card."""
        if not self.cards:
            return 0
        top = self.cards[-1]
        n = 0
        for card in reversed(self.cards):
            if card != top:
                break
            n += 1
        return n

    def _check_mutable(self) -> None:
        if self.collapsed:
            raise ValueError("stack is collapsed")

    def push(self, card: Card) -> 'CardStack':
        self._check_mutable()
        return CardStack(self.cards + (card,), False)

    def push_run(self, card: Card, size: int) -> 'CardStack':
        self._check_mutable()
        if size < 1:
            raise ValueError(f"run size must be positive, got {size}")
        return CardStack(self.cards + (card,) * size, False)

    def pop_run(self, size: int) -> 'CardStack':
        self._check_mutable()
        if size < 1 or size > self.top_run_length():
            raise ValueError(f"cannot pop {size} cards; top run is {self.top_run_length()}")
        return CardStack(self.cards[:-size], False)

    def can_collapse(self) -> bool:
        return (
            not self.collapsed
            and len(self.cards) == CARDS_PER_SUIT
            and self.top_run_length() == CARDS_PER_SUIT
        )

    def try_collapse(self) -> Optional['CardStack']:
        """Returns the collapsed stack, or None when it does not hold exactly 4 equal cards."""
        if not self.can_collapse():
            return None
        return CardStack(self.cards, True)


@dataclass(frozen=True)
class SwapField:
    """A single free cell. Holds a card only while OCCUPIED or COLLAPSED."""
    state: SwapState = SwapState.LOCKED
    card: Optional[Card] = None

    def is_locked(self) -> bool:
        return self.state is SwapState.LOCKED

    def is_free(self) -> bool:
        return self.state is SwapState.FREE

    def is_occupied(self) -> bool:
        return self.state is SwapState.OCCUPIED

    def is_collapsed(self) -> bool:
        return self.state is SwapState.COLLAPSED

    def unlock(self) -> 'SwapField':
        if self.state is not SwapState.LOCKED:
            raise ValueError(f"cannot unlock a {self.state.value} swap field")
        return SwapField(SwapState.FREE, None)

    def push(self, card: Card) -> 'SwapField':
        if self.state is not SwapState.FREE:
            raise ValueError(f"cannot push onto a {self.state.value} swap field")
        return SwapField(SwapState.OCCUPIED, card)

    def push_run(self, card: Card, size: int) -> 'SwapField':
        if size == 1:
            return self.push(card)
        if size != CARDS_PER_SUIT:
            raise ValueError(f"swap field accepts 1 or {CARDS_PER_SUIT} cards, got {size}")
        if self.state is not SwapState.FREE:
            raise ValueError(f"cannot push onto a {self.state.value} swap field")
        return SwapField(SwapState.COLLAPSED, card)

    def pop(self) -> 'SwapField':
        if self.state is not SwapState.OCCUPIED:
            raise ValueError(f"cannot pop from a {self.state.value} swap field")
        return SwapField(SwapState.FREE, None)

    def occupancy(self) -> int:
        if self.state is SwapState.OCCUPIED:
            return 1
        if self.state is SwapState.COLLAPSED:
            return CARDS_PER_SUIT
        return 0

    def pretty(self) -> str:
        if self.state is SwapState.LOCKED:
            return "<X>"
        if self.state is SwapState.FREE:
            return "< >"
        if self.state is SwapState.OCCUPIED:
            return f"<{self.card}>"
        return f"-{self.card}-"


def _empty_stacks() -> Tuple[CardStack, ...]:
    return tuple(CardStack() for _ in range(STACK_COUNT))


def _locked_swaps() -> Tuple[SwapField, ...]:
    return tuple(SwapField() for _ in range(SWAP_COUNT))


@dataclass(frozen=True)
class Board:
    """A full position: 8 stacks and 4 swap fields. Every move yields a new Board."""
    stacks: Tuple[CardStack, ...] = field(default_factory=_empty_stacks)
    swaps: Tuple[SwapField, ...] = field(default_factory=_locked_swaps)

    def __post_init__(self) -> None:
        if len(self.stacks) != STACK_COUNT:
            raise ValueError(f"expected {STACK_COUNT} stacks, got {len(self.stacks)}")
        if len(self.swaps) != SWAP_COUNT:
            raise ValueError(f"expected {SWAP_COUNT} swap fields, got {len(self.swaps)}")

    @classmethod
    def from_layout(
        cls,
        layout: Sequence[Sequence[int]],
        difficulty: Difficulty = Difficulty.EXPERT,
    ) -> 'Board':
        """Builds the starting board from 8 bottom-to-top card lists."""
        if len(layout) != STACK_COUNT:
            raise ValueError(f"expected {STACK_COUNT} stacks, got {len(layout)}")
        stacks = tuple(CardStack(tuple(validate_card(c) for c in cards)) for cards in layout)
        board = cls(stacks=stacks, swaps=_locked_swaps())
        for _ in range(difficulty.free_swaps):
            board = board.unlock_next_swap()
        return board

    def stack(self, index: int) -> CardStack:
        if not 0 <= index < STACK_COUNT:
            raise ValueError(f"stack index out of range: {index}")
        return self.stacks[index]

    def swap(self, index: int) -> SwapField:
        if not 0 <= index < SWAP_COUNT:
            raise ValueError(f"swap index out of range: {index}")
        return self.swaps[index]

    def with_stack(self, index: int, stack: CardStack) -> 'Board':
        stacks = list(self.stacks)
        stacks[index] = stack
        return Board(tuple(stacks), self.swaps)

    def with_swap(self, index: int, swap_field: SwapField) -> 'Board':
        swaps = list(self.swaps)
        swaps[index] = swap_field
        return Board(self.stacks, tuple(swaps))

    def unlock_next_swap(self) -> 'Board':
        """Unlocks the first locked swap field; no-op when none is locked."""
        for i, f in enumerate(self.swaps):
            if f.is_locked():
                return self.with_swap(i, f.unlock())
        return self

    def free_swap_count(self) -> int:
        return sum(1 for f in self.swaps if f.is_free())

    def card_count(self) -> int:
        return sum(len(s) for s in self.stacks) + sum(f.occupancy() for f in self.swaps)

    def suit_counts(self) -> Counter:
        counts: Counter = Counter()
        for s in self.stacks:
            counts.update(s.cards)
        for f in self.swaps:
            if f.card is not None:
                counts[f.card] += f.occupancy()
        return counts

    def validate(self) -> Optional[str]:
        """Returns None for a valid board, otherwise a description of the first mismatch."""
        total = self.card_count()
        if total != TOTAL_CARDS:
            return f"expected {TOTAL_CARDS} cards, found {total}"
        counts = self.suit_counts()
        for suit in range(SUITS):
            if counts[suit] != CARDS_PER_SUIT:
                return f"expected {CARDS_PER_SUIT} of suit {suit}, found {counts[suit]}"
        return None

    def is_valid(self) -> bool:
        return self.validate() is None

    def has_won(self) -> bool:
        for s in self.stacks:
            if s.cards and not s.collapsed:
                return False
        for f in self.swaps:
            if f.is_occupied():
                return False
        return True

    def max_stack_depth(self) -> int:
        return max(len(s) for s in self.stacks)

    def pretty(self) -> str:
        """Renders swaps on the first line, then the stacks row by row from the bottom card up."""
        lines: List[str] = ["Swaps: " + " ".join(f.pretty() for f in self.swaps)]
        for depth in range(self.max_stack_depth()):
            row: List[str] = []
            for s in self.stacks:
                if depth >= len(s):
                    row.append("   ")
                elif s.collapsed:
                    row.append(f"-{s.cards[depth]}-")
                else:
                    row.append(f" {s.cards[depth]} ")
            lines.append(" ".join(row).rstrip())
        return "\n".join(lines)
