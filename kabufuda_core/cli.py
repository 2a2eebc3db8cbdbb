from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from .board import Board
from .cache import solve_with_cache
from .deal import deal_board
from .moves import legal_moves, replay_moves
from .parse import parse_board, parse_difficulty
from .solver import SolveOutcome, solve


def _read_layout(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _load_board(args: argparse.Namespace) -> Board:
    difficulty = parse_difficulty(args.difficulty)
    if args.layout:
        return parse_board(_read_layout(args.layout), difficulty)
    return deal_board(seed=args.seed, difficulty=difficulty)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Kabufuda solitaire solver')
    parser.add_argument('--layout', default=None, help="Layout file: 5 rows of 8 cards, bottom row first ('-' for stdin)")
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for a random deal when no layout is given')
    parser.add_argument('--difficulty', default='expert', help='easy, normal, hard or expert (4..1 free swaps)')
    parser.add_argument('--db', default=os.getenv('KABUFUDA_DB'), help='SQLite DB file for cached solutions')
    parser.add_argument('--max-states', type=int, default=None, help='Give up after visiting this many boards')
    parser.add_argument('--moves', action='store_true', help='List legal moves for the starting board and exit')
    parser.add_argument('--replay', action='store_true', help='Print the board after every move of the solution')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        board = _load_board(args)
    except (OSError, ValueError) as e:
        print(f"error: {e}")
        return 2

    print('Initial board:')
    print(board.pretty())

    if args.moves:
        for m in legal_moves(board):
            print(' -', m)
        return 0

    if args.db:
        res = solve_with_cache(board, args.db, max_states=args.max_states)
    else:
        res = solve(board, max_states=args.max_states)

    if res.outcome is SolveOutcome.ALREADY_WON:
        print('\nBoard is already won.')
        return 0
    if res.outcome is SolveOutcome.UNSOLVED:
        print(f'\nNo solution exists (explored {res.explored} boards).')
        return 1
    if res.outcome is SolveOutcome.ABANDONED:
        print(f'\nGave up after {res.explored} boards without a solution.')
        return 1

    print(f'\nWinning moves ({len(res.moves)}):')
    for m in res.moves:
        print(' -', m)
    if args.replay:
        boards = replay_moves(board, res.moves)
        for m, b in zip(res.moves, boards[1:]):
            print(f'\n{m}:')
            print(b.pretty())
    return 0
