"""
Onet core Python package.

This package contains the data structures and pure-logic helpers behind the
tile-connecting puzzle, kept separate from game.py so the Flask app, the CLI
and the tests share one implementation.
Modules:
- board.py: Tile, Board, Coord
- levels.py: LevelConfig and the level table
- pathfind.py: can_connect and the pairwise move scan
- deal.py: board generation
- shuffle.py: reshuffling, hints and board stats
- state.py: Session
- session.py: session transitions
- controller.py: GameController (serialized commands, deferred effects)
"""
