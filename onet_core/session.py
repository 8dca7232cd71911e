from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Optional, Tuple

from .board import Tile
from .deal import deal_board
from .levels import MAX_LEVEL, get_level_config, has_level
from .pathfind import ConnectablePair, ConnectResult, Path, can_connect
from .shuffle import DEFAULT_MAX_ATTEMPTS, get_hint, needs_shuffle, shuffle_until_solvable
from .state import LEVEL_COMPLETE, LOST, PAUSED, PLAYING, WON, Session

logger = logging.getLogger(__name__)

MATCH_SCORE = 100
LEVEL_COMPLETION_BONUS = 100


def new_game(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> Session:
    """Starts at level 1 with a fresh board and a full clock."""
    config = get_level_config(1)
    board = deal_board(config.board_size, config.board_size, config.piece_types, seed=seed, rng=rng)
    return Session(board=board, level=1, time_left=config.time_limit, status=PLAYING, version=1)


def reset_game(state: Session, rng: Optional[random.Random] = None) -> Session:
    fresh = new_game(rng=rng)
    return replace(fresh, version=state.version + 1)


def initialize_board(
    state: Session,
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
) -> Session:
    """Deals a new board for the current level and restarts its clock and score."""
    config = get_level_config(state.level)
    board = deal_board(width, height, config.piece_types, rng=rng)
    return replace(
        state,
        board=board,
        selected=(),
        score=0,
        time_left=config.time_limit,
        status=PLAYING,
        version=state.version + 1,
        last_path=None,
    )


def select_tile(state: Session, tile: Tile) -> Session:
    """
    Toggles a tile in the selection. Clicks while not playing, on empty tiles,
    or on a third tile are ignored. The tile is looked up on the current board,
    so a stale snapshot of it is fine.
    """
    if state.status != PLAYING or not state.board.in_bounds(tile.row, tile.col):
        return state
    current = state.board.at(tile.row, tile.col)
    if not current.active:
        return state
    pos = current.pos
    if pos in state.selected:
        return replace(
            state,
            selected=tuple(p for p in state.selected if p != pos),
            board=state.board.with_tiles({pos: replace(current, selected=False)}),
        )
    if len(state.selected) >= 2:
        return state
    return replace(
        state,
        selected=state.selected + (pos,),
        board=state.board.with_tiles({pos: replace(current, selected=True)}),
    )


def clear_selection(state: Session) -> Session:
    if not state.selected:
        return state
    return replace(state, selected=(), board=state.board.clear_selected())


def evaluate_selection(state: Session) -> Optional[ConnectResult]:
    """Checks the selected pair without changing anything; None unless two are selected."""
    if len(state.selected) != 2:
        return None
    first, second = state.selected_tiles()
    return can_connect(state.board, first, second)


def resolve_selection(state: Session) -> Tuple[Session, Optional[ConnectResult]]:
    """Evaluates the selected pair, then removes it on success or clears it on failure."""
    result = evaluate_selection(state)
    if result is None:
        return state, None
    if result.connected:
        first, second = state.selected_tiles()
        return remove_tiles(state, first, second, path=result.path), result
    return clear_selection(state), result


def _complete_level(state: Session) -> Session:
    total = state.total_score + state.score + LEVEL_COMPLETION_BONUS
    if state.level < MAX_LEVEL:
        logger.info("Level %d complete: level score %d, total %d", state.level, state.score, total)
        return replace(state, status=LEVEL_COMPLETE, total_score=total)
    logger.info("All %d levels cleared: total %d", MAX_LEVEL, total)
    return replace(state, status=WON, total_score=total, game_completed=True)


def remove_tiles(state: Session, tile_a: Tile, tile_b: Tile, path: Optional[Path] = None) -> Session:
    """Removes a matched pair, scores it, and ends the level once the board is clear."""
    if state.status != PLAYING:
        return state
    board = state.board
    if not (board.in_bounds(tile_a.row, tile_a.col) and board.in_bounds(tile_b.row, tile_b.col)):
        return state
    a = board.at(tile_a.row, tile_a.col)
    b = board.at(tile_b.row, tile_b.col)
    if not (a.active and b.active) or a.id == b.id or a.type != b.type:
        return state
    board = board.with_tiles({
        a.pos: replace(a, matched=True, empty=True, selected=False),
        b.pos: replace(b, matched=True, empty=True, selected=False),
    }).clear_selected()
    next_state = replace(
        state,
        board=board,
        selected=(),
        score=state.score + MATCH_SCORE,
        last_path=path,
    )
    if board.active_count() == 0:
        return _complete_level(next_state)
    return next_state


def update_timer(state: Session) -> Session:
    """One clock tick; running out of time loses the game."""
    if state.status != PLAYING or state.time_left <= 0:
        return state
    time_left = state.time_left - 1
    if time_left == 0:
        logger.info("Time up on level %d", state.level)
        return replace(state, time_left=0, status=LOST)
    return replace(state, time_left=time_left)


def pause_game(state: Session) -> Session:
    if state.status != PLAYING:
        return state
    return replace(state, status=PAUSED)


def resume_game(state: Session) -> Session:
    if state.status != PAUSED:
        return state
    return replace(state, status=PLAYING)


def next_level(state: Session, rng: Optional[random.Random] = None) -> Session:
    """Advances from a completed level. Past the last level nothing happens."""
    if state.status != LEVEL_COMPLETE:
        return state
    level = state.level + 1
    if not has_level(level):
        logger.warning("No configuration for level %d; staying on level %d", level, state.level)
        return state
    config = get_level_config(level)
    board = deal_board(config.board_size, config.board_size, config.piece_types, rng=rng)
    return replace(
        state,
        level=level,
        board=board,
        selected=(),
        score=0,
        time_left=config.time_limit,
        status=PLAYING,
        version=state.version + 1,
        last_path=None,
    )


def shuffle_board(
    state: Session,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> Session:
    """Re-types the remaining tiles until a move exists. Score is untouched."""
    if state.status != PLAYING or state.active_count() == 0:
        return state
    board = shuffle_until_solvable(state.board.clear_selected(), max_attempts=max_attempts, rng=rng)
    return replace(state, board=board, selected=(), version=state.version + 1)


def is_stuck(state: Session) -> bool:
    return state.status == PLAYING and state.active_count() > 0 and needs_shuffle(state.board)


def auto_shuffle_if_stuck(
    state: Session,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> Session:
    if not is_stuck(state):
        return state
    return shuffle_board(state, max_attempts=max_attempts, rng=rng)


def hint(state: Session) -> Optional[ConnectablePair]:
    return get_hint(state.board)
