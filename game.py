from __future__ import annotations

# Facade module that re-exports Kabufuda core functionality for the Flask app,
# the tools and the tests. Single-responsibility modules live under kabufuda_core/*.

from kabufuda_core.board import (  # noqa: F401
    Board,
    Card,
    CardStack,
    Difficulty,
    SwapField,
    SwapState,
    validate_card,
    CARDS_PER_SUIT,
    STACK_COUNT,
    SUITS,
    SWAP_COUNT,
    TOTAL_CARDS,
)
from kabufuda_core.moves import (  # noqa: F401
    IllegalMoveError,
    Move,
    SLOT_ORDER,
    STACK_SLOTS,
    SWAP_SLOTS,
    apply_move,
    illegal_move_reason,
    is_stack_slot,
    is_swap_slot,
    legal_moves,
    move_is_valid,
    move_is_valid_for_board,
    replay_moves,
    swap_index,
    swap_slot,
)
from kabufuda_core.solver import SolveOutcome, SolveResult, solve  # noqa: F401
from kabufuda_core.parse import (  # noqa: F401
    format_layout,
    parse_board,
    parse_difficulty,
    parse_layout,
    parse_move,
)
from kabufuda_core.deal import deal_board, deal_layout  # noqa: F401
from kabufuda_core.hashkey import _board_key, _board_from_key  # noqa: F401
from kabufuda_core.db import (  # noqa: F401
    _ensure_db_dir,
    _resolve_db_path,
    db_lookup_solution,
    db_store_solution,
    decode_moves,
    encode_moves,
    iter_solutions,
)
from kabufuda_core.cache import solve_with_cache  # noqa: F401

# Reference deal used by the tools and tests; 8 stacks, bottom card first.
SAMPLE_LAYOUT = [
    [8, 5, 1, 4, 9],
    [4, 3, 0, 9, 2],
    [0, 2, 0, 3, 2],
    [5, 7, 7, 1, 1],
    [5, 5, 3, 1, 7],
    [9, 8, 4, 6, 4],
    [6, 8, 8, 3, 6],
    [0, 6, 2, 9, 7],
]


def main() -> None:
    # CLI driver delegated to kabufuda_core.cli
    from kabufuda_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
