from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, TypeVar

from .board import Board, Coord, Tile
from .pathfind import ConnectablePair, find_connectable_pair

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_ATTEMPTS = 100


@dataclass(frozen=True)
class BoardStats:
    total_tiles: int
    active_tiles: int
    matched_tiles: int
    empty_tiles: int
    type_distribution: Dict[int, int]


def fisher_yates(items: Sequence[T], rng: random.Random) -> List[T]:
    """
    Returns an unbiased permutation of a copy of ``items``.

    Drawn with ``rng.randrange`` rather than ``rng.shuffle`` so a seeded deal
    does not depend on how ``random.shuffle`` consumes the generator.
    """
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def shuffle_board_types(board: Board, rng: random.Random) -> Board:
    """Permutes the types of the active tiles in place; nothing else moves."""
    active = board.active_tiles()
    types = fisher_yates([t.type for t in active], rng)
    updates: Dict[Coord, Tile] = {
        tile.pos: replace(tile, type=new_type, selected=False)
        for tile, new_type in zip(active, types)
    }
    return board.with_tiles(updates).clear_selected()


def needs_shuffle(board: Board) -> bool:
    """True when no active same-type pair can be connected."""
    return find_connectable_pair(board) is None


def shuffle_until_solvable(
    board: Board,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> Board:
    """
    Reshuffles the active types until at least one move exists.

    Every attempt starts again from the input board. After ``max_attempts``
    failed retries the last attempt is returned as is; with the pairing
    invariant intact this should not happen, so it is only logged.
    """
    rng = rng or random.Random()
    shuffled = shuffle_board_types(board, rng)
    attempts = 0
    while needs_shuffle(shuffled) and attempts < max_attempts:
        shuffled = shuffle_board_types(board, rng)
        attempts += 1
    if attempts >= max_attempts and needs_shuffle(shuffled):
        logger.warning(
            "No solvable arrangement after %d shuffle attempts (%d active tiles); keeping last attempt",
            max_attempts,
            shuffled.active_count(),
        )
    elif attempts:
        logger.debug("Found a solvable arrangement after %d extra shuffles", attempts)
    return shuffled


def get_hint(board: Board) -> Optional[ConnectablePair]:
    """First connectable pair in scan order, or None on a dead end."""
    return find_connectable_pair(board)


def board_stats(board: Board) -> BoardStats:
    distribution: Dict[int, int] = {}
    active = matched = empty = 0
    for tile in board.tiles:
        if tile.empty:
            empty += 1
        else:
            active += 1
            distribution[tile.type] = distribution.get(tile.type, 0) + 1
        if tile.matched:
            matched += 1
    return BoardStats(
        total_tiles=len(board.tiles),
        active_tiles=active,
        matched_tiles=matched,
        empty_tiles=empty,
        type_distribution=dict(sorted(distribution.items())),
    )
