from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

MAX_LEVEL = 5


@dataclass(frozen=True)
class LevelConfig:
    level: int
    time_limit: int  # seconds
    board_size: int  # interior side length
    piece_types: int


# Levels get harder by cutting time and adding piece types; the board stays 10x10.
LEVEL_CONFIG: Dict[int, LevelConfig] = {
    1: LevelConfig(level=1, time_limit=300, board_size=10, piece_types=12),
    2: LevelConfig(level=2, time_limit=240, board_size=10, piece_types=16),
    3: LevelConfig(level=3, time_limit=180, board_size=10, piece_types=20),
    4: LevelConfig(level=4, time_limit=120, board_size=10, piece_types=22),
    5: LevelConfig(level=5, time_limit=90, board_size=10, piece_types=24),
}


def has_level(level: int) -> bool:
    return level in LEVEL_CONFIG


def get_level_config(level: int) -> LevelConfig:
    """Looks up a level's configuration, rejecting anything outside the table."""
    try:
        return LEVEL_CONFIG[level]
    except KeyError:
        raise ValueError(f"Unknown level {level}; expected 1..{MAX_LEVEL}") from None


def all_levels() -> List[LevelConfig]:
    return [LEVEL_CONFIG[k] for k in sorted(LEVEL_CONFIG)]
