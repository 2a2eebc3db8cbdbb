"""
Kabufuda solitaire core package.

Modules:
- board.py: Card, CardStack, SwapField, Board, Difficulty
- moves.py: Move, slot addressing, legality, move generation and execution
- solver.py: depth-first solver and SolveResult
- parse.py / deal.py: building starting boards from text or a seeded shuffle
- hashkey.py, db.py, cache.py: SQLite cache of solved boards
- cli.py: command-line driver
"""
