from __future__ import annotations

import random
from typing import List, Optional

from .board import Board, Tile, border_tile, tile_id
from .levels import get_level_config
from .shuffle import fisher_yates


def deal_board(
    width: int,
    height: int,
    piece_types: int,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Board:
    """
    Deals a width x height interior of paired tiles inside a one-cell empty frame.

    Each drawn type is placed exactly twice, so every type count is even.
    The frame gives paths room to leave and re-enter the play area.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Board must be at least 1x1, got {width}x{height}")
    if (width * height) % 2 != 0:
        raise ValueError(f"Board {width}x{height} has an odd number of cells; tiles come in pairs")
    if piece_types < 1:
        raise ValueError('Need at least one piece type')
    rng = rng or random.Random(seed)

    types: List[int] = []
    for _ in range(width * height // 2):
        t = rng.randrange(piece_types)
        types.extend((t, t))
    types = fisher_yates(types, rng)

    framed_w, framed_h = width + 2, height + 2
    cells: List[Tile] = []
    for r in range(framed_h):
        for c in range(framed_w):
            if r == 0 or c == 0 or r == framed_h - 1 or c == framed_w - 1:
                cells.append(border_tile(r, c))
            else:
                t = types[(r - 1) * width + (c - 1)]
                cells.append(Tile(id=tile_id(r, c), type=t, row=r, col=c))
    return Board(width=framed_w, height=framed_h, tiles=tuple(cells))


def deal_level_board(level: int, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> Board:
    """Deals a square board sized for the given level."""
    config = get_level_config(level)
    return deal_board(config.board_size, config.board_size, config.piece_types, seed=seed, rng=rng)
