from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from game import (
    Board,
    CardStack,
    IllegalMoveError,
    Move,
    SwapField,
    SwapState,
    apply_move,
    deal_board,
    illegal_move_reason,
    legal_moves,
    parse_board,
    parse_difficulty,
    solve_with_cache,
    validate_card,
)

DEFAULT_DB = os.getenv("KABUFUDA_DB", "data/kabufuda.db")

app = Flask(__name__)


def _default_max_states() -> int:
    try:
        return int(os.getenv("KABUFUDA_MAX_STATES", "200000"))
    except ValueError:
        return 200000


# ---------- JSON conversion ----------

def move_to_json(m: Move) -> List[int]:
    return [int(m.from_slot), int(m.to_slot), int(m.size)]


def move_from_json(obj: Any) -> Move:
    if isinstance(obj, dict):
        return Move(int(obj["from"]), int(obj["to"]), int(obj.get("size", 1)))
    from_slot, to_slot, *rest = obj
    return Move(int(from_slot), int(to_slot), int(rest[0]) if rest else 1)


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "stacks": [list(s.cards) for s in b.stacks],
        "collapsed": [bool(s.collapsed) for s in b.stacks],
        "swaps": [{"state": f.state.value, "card": f.card} for f in b.swaps],
    }


def board_from_json(obj: Dict[str, Any]) -> Board:
    stacks_in = obj["stacks"]
    collapsed_in = obj.get("collapsed") or [False] * len(stacks_in)
    if len(collapsed_in) != len(stacks_in):
        raise ValueError("collapsed flags do not match stacks")
    stacks = tuple(
        CardStack(tuple(validate_card(int(c)) for c in cards), bool(col))
        for cards, col in zip(stacks_in, collapsed_in)
    )
    swaps: List[SwapField] = []
    for f in obj["swaps"]:
        state = SwapState(str(f["state"]))
        card = f.get("card")
        if state in (SwapState.OCCUPIED, SwapState.COLLAPSED):
            if card is None:
                raise ValueError(f"{state.value} swap field needs a card")
            swaps.append(SwapField(state, validate_card(int(card))))
        else:
            swaps.append(SwapField(state, None))
    return Board(stacks, tuple(swaps))


def _board_payload(b: Board) -> Dict[str, Any]:
    return {
        "board": board_to_json(b),
        "legalMoves": [move_to_json(m) for m in legal_moves(b)],
        "won": b.has_won(),
    }


def _body_board(body: Dict[str, Any]) -> Optional[Board]:
    b_in = body.get("board")
    if not isinstance(b_in, dict):
        return None
    return board_from_json(b_in)


# ---------- API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        difficulty = parse_difficulty(body.get("difficulty"))
        seed = body.get("seed")
        if seed is not None:
            if isinstance(seed, bool):
                raise ValueError(f"seed must be an integer, got {seed!r}")
            seed = int(seed)
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    board = deal_board(seed=seed, difficulty=difficulty)
    return jsonify({"ok": True, **_board_payload(board)})


@app.post("/api/parse")
def api_parse() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    text = body.get("text")
    if not isinstance(text, str):
        return jsonify({"ok": False, "error": "text required"}), 400
    try:
        board = parse_board(text, parse_difficulty(body.get("difficulty")))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    return jsonify({"ok": True, **_board_payload(board)})


@app.post("/api/validate")
def api_validate() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _body_board(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad board: {e}"}), 400
    if board is None:
        return jsonify({"ok": False, "error": "board required"}), 400
    problem = board.validate()
    return jsonify({"ok": True, "valid": problem is None, "problem": problem})


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _body_board(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad board: {e}"}), 400
    if board is None:
        return jsonify({"ok": False, "error": "board required"}), 400
    return jsonify({"ok": True, "legalMoves": [move_to_json(m) for m in legal_moves(board)]})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _body_board(body)
        move = move_from_json(body["move"])
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    if board is None:
        return jsonify({"ok": False, "error": "board required"}), 400
    legal = [move_to_json(m) for m in legal_moves(board)]
    reason = illegal_move_reason(board, move)
    if reason is not None:
        return jsonify({"ok": False, "error": f"Illegal move: {reason}", "legalMoves": legal}), 400
    try:
        next_board = apply_move(board, move)
    except (IllegalMoveError, RuntimeError) as e:
        return jsonify({"ok": False, "error": str(e), "legalMoves": legal}), 400
    return jsonify({"ok": True, **_board_payload(next_board)})


@app.post("/api/solve")
def api_solve() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _body_board(body)
        max_states = int(body.get("maxStates") or _default_max_states())
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    if board is None:
        return jsonify({"ok": False, "error": "board required"}), 400
    problem = board.validate()
    if problem is not None:
        return jsonify({"ok": False, "error": f"invalid board: {problem}"}), 400
    res = solve_with_cache(board, DEFAULT_DB, max_states=max_states)
    return jsonify({
        "ok": True,
        "outcome": res.outcome.value,
        "solved": res.solved,
        "moves": [move_to_json(m) for m in res.moves],
        "explored": res.explored,
        "board": board_to_json(res.board),
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
