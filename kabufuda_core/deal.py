from __future__ import annotations

import random
from typing import List, Optional

from .board import Board, Card, Difficulty, CARDS_PER_SUIT, STACK_COUNT, SUITS
from .parse import LAYOUT_DEPTH


def deal_layout(seed: Optional[int] = None) -> List[List[Card]]:
    """Shuffles the 40-card deck into 8 stacks of 5, bottom card first."""
    rng = random.Random(seed)
    deck: List[Card] = [suit for suit in range(SUITS) for _ in range(CARDS_PER_SUIT)]
    rng.shuffle(deck)
    return [deck[i * LAYOUT_DEPTH:(i + 1) * LAYOUT_DEPTH] for i in range(STACK_COUNT)]


def deal_board(seed: Optional[int] = None, difficulty: Difficulty = Difficulty.EXPERT) -> Board:
    """Deals a valid starting board. Dealt boards are not guaranteed to be solvable."""
    return Board.from_layout(deal_layout(seed), difficulty)
