from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .board import Board, Coord, Tile
from .pathfind import Path

PLAYING = 'playing'
PAUSED = 'paused'
WON = 'won'
LOST = 'lost'
LEVEL_COMPLETE = 'levelComplete'

STATUSES = (PLAYING, PAUSED, WON, LOST, LEVEL_COMPLETE)


@dataclass(frozen=True)
class Session:
    """A player's run through the levels: board, selection, score and clock."""
    board: Board
    level: int = 1
    score: int = 0  # current level only
    total_score: int = 0
    time_left: int = 0
    status: str = PLAYING
    selected: Tuple[Coord, ...] = ()  # at most two, in click order
    game_completed: bool = False
    version: int = 0  # bumped whenever the board is dealt or re-typed
    last_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.status not in STATUSES:
            raise ValueError(f"Unknown session status {self.status!r}")

    def selected_tiles(self) -> List[Tile]:
        return [self.board.at(r, c) for (r, c) in self.selected]

    def active_count(self) -> int:
        return self.board.active_count()

    def is_terminal(self) -> bool:
        return self.status in (WON, LOST)
