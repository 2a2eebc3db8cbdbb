import unittest

from game import (
    Board,
    CardStack,
    Difficulty,
    SwapField,
    SwapState,
    SolveOutcome,
    SAMPLE_LAYOUT,
    legal_moves,
    replay_moves,
    solve,
)


def _near_win_board():
    stacks = tuple(CardStack((s,) * 4, True) for s in range(6)) + (
        CardStack((7, 7, 7, 8, 8)),
        CardStack((8, 8, 9, 9, 9, 9)),
    )
    swaps = (
        SwapField(SwapState.COLLAPSED, 6),
        SwapField(SwapState.OCCUPIED, 7),
        SwapField(SwapState.FREE),
        SwapField(SwapState.LOCKED),
    )
    return Board(stacks, swaps)


def _won_board():
    stacks = tuple(CardStack((s,) * 4, True) for s in range(8))
    swaps = (
        SwapField(SwapState.COLLAPSED, 8),
        SwapField(SwapState.COLLAPSED, 9),
        SwapField(SwapState.FREE),
        SwapField(SwapState.FREE),
    )
    return Board(stacks, swaps)


def _stuck_board():
    """Valid deal whose stack tops all differ, with every swap locked."""
    lower = [s for s in range(10) for _ in range(3 if s < 8 else 4)]
    layout = [lower[i * 4:(i + 1) * 4] + [i] for i in range(8)]
    return Board(Board.from_layout(layout).stacks)


class TestSolver(unittest.TestCase):
    def test_given_won_board_when_solving_then_already_won_without_search(self):
        b = _won_board()
        res = solve(b)
        self.assertIs(res.outcome, SolveOutcome.ALREADY_WON)
        self.assertEqual(res.moves, ())
        self.assertIs(res.board, b)
        self.assertEqual(res.explored, 0)
        self.assertTrue(res.solved)

    def test_given_near_win_board_when_solving_then_moves_replay_to_win(self):
        b = _near_win_board()
        res = solve(b)
        self.assertIs(res.outcome, SolveOutcome.SOLVED)
        self.assertTrue(res.solved)
        self.assertGreater(len(res.moves), 0)
        final = replay_moves(b, res.moves)[-1]
        self.assertTrue(final.has_won())
        self.assertEqual(final, res.board)
        # The bulk transfer is tried before anything else.
        self.assertEqual(res.moves[0], legal_moves(b)[0])
        self.assertEqual(res.moves[0].size, 4)

    def test_given_stuck_board_when_solving_then_unsolved_and_distinguishable(self):
        b = _stuck_board()
        self.assertTrue(b.is_valid())
        res = solve(b)
        self.assertIs(res.outcome, SolveOutcome.UNSOLVED)
        self.assertFalse(res.solved)
        self.assertEqual(res.moves, ())
        self.assertIs(res.board, b)
        self.assertEqual(res.explored, 1)

    def test_given_invalid_board_when_solving_then_raises(self):
        layout = [list(s) for s in SAMPLE_LAYOUT]
        layout[0].pop()
        with self.assertRaises(ValueError):
            solve(Board.from_layout(layout))

    def test_given_tiny_budget_when_solving_then_abandoned_with_input_board(self):
        b = Board.from_layout(SAMPLE_LAYOUT)
        res = solve(b, max_states=1)
        self.assertIs(res.outcome, SolveOutcome.ABANDONED)
        self.assertEqual(res.moves, ())
        self.assertIs(res.board, b)
        self.assertFalse(res.solved)

    def test_given_same_board_when_solving_twice_then_identical_results(self):
        b = Board.from_layout(SAMPLE_LAYOUT, Difficulty.NORMAL)
        r1 = solve(b, max_states=3000)
        r2 = solve(b, max_states=3000)
        self.assertIs(r1.outcome, r2.outcome)
        self.assertEqual(r1.moves, r2.moves)
        self.assertEqual(r1.explored, r2.explored)
        self.assertEqual(r1.skipped, r2.skipped)

    def test_given_sample_deal_when_solving_expert_unbounded_then_solved_and_replays_to_win(self):
        b = Board.from_layout(SAMPLE_LAYOUT, Difficulty.EXPERT)
        res = solve(b)
        self.assertIs(res.outcome, SolveOutcome.SOLVED)
        self.assertTrue(res.solved)
        self.assertGreater(len(res.moves), 0)
        boards = replay_moves(b, res.moves)
        self.assertTrue(all(nb.is_valid() for nb in boards))
        self.assertFalse(any(nb.has_won() for nb in boards[:-1]))
        self.assertTrue(boards[-1].has_won())
        self.assertEqual(boards[-1], res.board)

    def test_given_solution_path_when_replayed_then_no_board_repeats(self):
        b = _near_win_board()
        res = solve(b)
        boards = replay_moves(b, res.moves)
        self.assertEqual(len(boards), len(set(boards)))


if __name__ == '__main__':
    unittest.main(verbosity=2)
