"""
Pair 'em Up core Python package.

This package contains the grid/matching engine and the tool-and-lifecycle
state machine, kept free of UI so the Flask app, the CLI and the tests all
drive the same code.
Modules:
- board.py: Board, Cell
- config.py: EngineConfig
- moves.py: connectivity, pair validation, scoring, hints
- deal.py: per-mode supply (initial deal and add-numbers draws)
- state.py: GameSession, Snapshot, ResultRecord
- session.py / tools.py / lifecycle.py: engine entry points
- codec.py, db.py: serialization and SQLite persistence
"""
