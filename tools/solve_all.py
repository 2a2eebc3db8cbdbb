from __future__ import annotations

import argparse
import os
import sys
import time

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game import deal_board, parse_difficulty, solve_with_cache, SolveOutcome  # type: ignore


def process(args: argparse.Namespace) -> None:
    difficulty = parse_difficulty(args.difficulty)
    stride = max(1, int(args.stride))
    offset = max(0, int(args.offset))
    start_time = time.time()
    processed = 0
    counts = {o: 0 for o in SolveOutcome}

    for seed in range(args.first_seed, args.first_seed + args.count):
        if (seed % stride) != offset:
            continue
        board = deal_board(seed=seed, difficulty=difficulty)
        res = solve_with_cache(board, args.db, max_states=args.max_states)
        counts[res.outcome] += 1
        processed += 1
        if args.verbose:
            print(f"seed={seed} outcome={res.outcome.value} moves={len(res.moves)} explored={res.explored}")

    elapsed = time.time() - start_time
    summary = ' '.join(f"{o.value}={n}" for o, n in counts.items())
    print(f"Processed={processed} {summary} elapsed_sec={elapsed:.1f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Solve a range of seeded Kabufuda deals into the solution cache")
    parser.add_argument('--db', default='kabufuda.db', help='SQLite DB file path')
    parser.add_argument('--difficulty', default='expert', help='easy, normal, hard or expert')
    parser.add_argument('--first-seed', type=int, default=0, help='First deal seed')
    parser.add_argument('--count', type=int, default=100, help='Number of seeds to try')
    parser.add_argument('--max-states', type=int, default=None, help='Per-deal state budget')
    parser.add_argument('--stride', type=int, default=1, help='Shard stride for parallel runs (default 1)')
    parser.add_argument('--offset', type=int, default=0, help='Shard offset [0..stride-1] for parallel runs')
    parser.add_argument('--verbose', action='store_true', help='Print one line per deal')
    args = parser.parse_args()
    process(args)


if __name__ == '__main__':
    main()
