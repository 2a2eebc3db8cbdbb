import json
import os
import tempfile
import unittest

import app as app_mod
from app import app as flask_app
from app import board_from_json, board_to_json, move_from_json, move_to_json
from game import (
    Board,
    CardStack,
    Difficulty,
    Move,
    SwapField,
    SwapState,
    SAMPLE_LAYOUT,
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


class TestJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        for b in (Board.from_layout(SAMPLE_LAYOUT, Difficulty.HARD), _near_win_board()):
            bj = board_to_json(b)
            self.assertEqual(len(bj["stacks"]), 8)
            self.assertEqual(len(bj["swaps"]), 4)
            self.assertEqual(board_from_json(json.loads(json.dumps(bj))), b)

    def test_given_bad_board_json_when_parsing_then_raises(self):
        bj = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        bj["stacks"][0][0] = 12
        with self.assertRaises(ValueError):
            board_from_json(bj)
        bj2 = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        bj2["swaps"][0] = {"state": "occupied", "card": None}
        with self.assertRaises(ValueError):
            board_from_json(bj2)
        bj3 = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        bj3["stacks"] = bj3["stacks"][:7]
        bj3["collapsed"] = bj3["collapsed"][:7]
        with self.assertRaises(ValueError):
            board_from_json(bj3)
        for extra in (1, 4):
            bj4 = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
            bj4["collapsed"] = bj4["collapsed"] + [False] * extra
            with self.assertRaises(ValueError):
                board_from_json(bj4)

    def test_given_move_json_when_converting_then_both_shapes_accepted(self):
        self.assertEqual(move_to_json(Move(2, -1, 4)), [2, -1, 4])
        self.assertEqual(move_from_json([2, -1, 4]), Move(2, -1, 4))
        self.assertEqual(move_from_json([2, -1]), Move(2, -1, 1))
        self.assertEqual(move_from_json({"from": 3, "to": 5, "size": 2}), Move(3, 5, 2))


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._orig_db = app_mod.DEFAULT_DB
        app_mod.DEFAULT_DB = os.path.join(self._tmp.name, 'kabufuda.db')
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod.DEFAULT_DB = self._orig_db
        self._tmp.cleanup()

    def _post(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def test_given_new_game_when_posted_then_returns_board_and_legal_moves(self):
        r = self._post("/api/new", {"seed": 123, "difficulty": "hard"})
        self.assertEqual(r.status_code, 200)
        data = r.get_json()
        self.assertTrue(data["ok"])
        self.assertFalse(data["won"])
        board = board_from_json(data["board"])
        self.assertTrue(board.is_valid())
        self.assertEqual(board.free_swap_count(), 2)
        self.assertIsInstance(data["legalMoves"], list)
        r2 = self._post("/api/new", {"seed": 123, "difficulty": "hard"})
        self.assertEqual(r2.get_json()["board"], data["board"])

    def test_given_bad_difficulty_when_new_then_400(self):
        r = self._post("/api/new", {"difficulty": "nightmare"})
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.get_json()["ok"])

    def test_given_non_integer_seed_when_new_then_400(self):
        for seed in ([1, 2], {"a": 1}, "abc", True):
            r = self._post("/api/new", {"seed": seed})
            self.assertEqual(r.status_code, 400, seed)
            self.assertFalse(r.get_json()["ok"])
        r_ok = self._post("/api/new", {"seed": "7"})
        self.assertEqual(r_ok.status_code, 200)
        self.assertEqual(r_ok.get_json()["board"], self._post("/api/new", {"seed": 7}).get_json()["board"])

    def test_given_layout_text_when_parsing_then_board_or_error(self):
        text = "\n".join(" ".join(str(s[d]) for s in SAMPLE_LAYOUT) for d in range(5))
        r = self._post("/api/parse", {"text": text, "difficulty": "easy"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            board_from_json(r.get_json()["board"]),
            Board.from_layout(SAMPLE_LAYOUT, Difficulty.EASY),
        )
        r_bad = self._post("/api/parse", {"text": "1 2 3"})
        self.assertEqual(r_bad.status_code, 400)
        self.assertIn("error", r_bad.get_json())
        r_missing = self._post("/api/parse", {})
        self.assertEqual(r_missing.status_code, 400)

    def test_given_boards_when_validating_then_reports_problem(self):
        good = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        r = self._post("/api/validate", {"board": good})
        self.assertEqual(r.get_json(), {"ok": True, "valid": True, "problem": None})
        bad = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        bad["stacks"][0].pop()
        r2 = self._post("/api/validate", {"board": bad})
        self.assertFalse(r2.get_json()["valid"])
        self.assertEqual(r2.get_json()["problem"], "expected 40 cards, found 39")
        r3 = self._post("/api/validate", {"board": {"stacks": "nope"}})
        self.assertEqual(r3.status_code, 400)
        long_flags = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        long_flags["collapsed"] = [False] * 12
        r4 = self._post("/api/validate", {"board": long_flags})
        self.assertEqual(r4.status_code, 400)
        self.assertIn("collapsed flags", r4.get_json()["error"])

    def test_given_board_when_asking_legal_then_matches_generator(self):
        b = Board.from_layout(SAMPLE_LAYOUT)
        r = self._post("/api/legal", {"board": board_to_json(b)})
        self.assertEqual(r.status_code, 200)
        moves = [tuple(m) for m in r.get_json()["legalMoves"]]
        self.assertIn((4, 7, 1), moves)
        self.assertIn((3, -1, 1), moves)

    def test_given_illegal_move_when_post_to_move_then_400_with_legal_moves(self):
        b = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        r = self._post("/api/move", {"board": b, "move": [3, -2, 1]})
        self.assertEqual(r.status_code, 400)
        d = r.get_json()
        self.assertFalse(d["ok"])
        self.assertIn("Illegal move", d["error"])
        self.assertIsInstance(d["legalMoves"], list)
        r2 = self._post("/api/move", {"board": b, "move": [99, 99, 1]})
        self.assertEqual(r2.status_code, 400)

    def test_given_winning_moves_when_posted_then_board_won(self):
        b = _near_win_board()
        for mv in ([7, -3, 4], [6, 7, 2], [-2, 6, 1]):
            r = self._post("/api/move", {"board": board_to_json(b), "move": mv})
            self.assertEqual(r.status_code, 200)
            b = board_from_json(r.get_json()["board"])
        self.assertTrue(r.get_json()["won"])
        self.assertEqual(r.get_json()["legalMoves"], [])

    def test_given_near_win_board_when_solving_then_moves_returned_and_cached(self):
        b = board_to_json(_near_win_board())
        r = self._post("/api/solve", {"board": b})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["outcome"], "solved")
        self.assertTrue(d["solved"])
        self.assertGreater(len(d["moves"]), 0)
        self.assertTrue(board_from_json(d["board"]).has_won())
        self.assertTrue(os.path.isfile(app_mod.DEFAULT_DB))
        r2 = self._post("/api/solve", {"board": b})
        self.assertEqual(r2.get_json()["moves"], d["moves"])

    def test_given_budget_when_solving_then_abandoned(self):
        b = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        r = self._post("/api/solve", {"board": b, "maxStates": 1})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertEqual(d["outcome"], "abandoned")
        self.assertFalse(d["solved"])
        self.assertEqual(d["moves"], [])

    def test_given_invalid_board_when_solving_then_400(self):
        bad = board_to_json(Board.from_layout(SAMPLE_LAYOUT))
        bad["stacks"][0].pop()
        r = self._post("/api/solve", {"board": bad})
        self.assertEqual(r.status_code, 400)
        self.assertIn("invalid board", r.get_json()["error"])


if __name__ == '__main__':
    unittest.main(verbosity=2)
