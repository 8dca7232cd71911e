from __future__ import annotations

import argparse
import logging
import os
import random
from dataclasses import replace
from typing import List, Optional, Tuple

from .board import Board, Coord
from .deal import deal_board
from .levels import MAX_LEVEL, get_level_config
from .pathfind import expand_path
from .session import (
    initialize_board,
    new_game,
    next_level,
    resolve_selection,
    select_tile,
    shuffle_board,
)
from .shuffle import DEFAULT_MAX_ATTEMPTS, board_stats, get_hint, needs_shuffle
from .state import LEVEL_COMPLETE, Session


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application-wide logging with a standard format."""
    name = (level or os.getenv('ONET_LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


def parse_pair(text: str) -> Optional[Tuple[Coord, Coord]]:
    """Parses 'r,c r,c' (or four whitespace separated ints) into two coordinates."""
    parts = [p for p in text.replace(',', ' ').split() if p]
    if len(parts) != 4:
        return None
    try:
        r1, c1, r2, c2 = (int(p) for p in parts)
    except ValueError:
        return None
    return (r1, c1), (r2, c2)


def describe_board(board: Board, show_paths: bool = False) -> List[str]:
    lines = [board.pretty()]
    stats = board_stats(board)
    lines.append(f"Active tiles: {stats.active_tiles}, types in play: {len(stats.type_distribution)}")
    pair = get_hint(board)
    if pair is None:
        lines.append('No moves available; the board needs a shuffle.')
    else:
        lines.append(f"Hint: {pair.first.pos} <-> {pair.second.pos}")
        if show_paths:
            lines.append(f"Path: {list(pair.path)}")
            lines.append(f"Cells: {expand_path(pair.path)}")
    return lines


def _play(state: Session, rng: random.Random, show_paths: bool, max_attempts: int) -> Session:
    while True:
        if state.status == LEVEL_COMPLETE:
            print(f"Level {state.level} complete! Total score: {state.total_score}")
            state = next_level(state, rng=rng)
            continue
        if state.is_terminal():
            print(f"Game over ({state.status}). Total score: {state.total_score}")
            return state
        if needs_shuffle(state.board):
            print('No moves left, shuffling...')
            state = shuffle_board(state, max_attempts=max_attempts, rng=rng)
        print()
        print(f"Level {state.level}/{MAX_LEVEL}  score {state.score}  total {state.total_score}")
        print(state.board.pretty())
        text = input('Pair as "r,c r,c", or hint / shuffle / quit: ').strip().lower()
        if text in ('q', 'quit', 'exit'):
            return state
        if text == 'hint':
            pair = get_hint(state.board)
            print('No moves.' if pair is None else f"Try {pair.first.pos} and {pair.second.pos}")
            continue
        if text == 'shuffle':
            state = shuffle_board(state, max_attempts=max_attempts, rng=rng)
            continue
        parsed = parse_pair(text)
        if parsed is None:
            print('Could not parse. Try again.')
            continue
        for (r, c) in parsed:
            if state.board.in_bounds(r, c):
                state = select_tile(state, state.board.at(r, c))
        state, result = resolve_selection(state)
        if result is None:
            print('Pick two different tiles that are still on the board.')
        elif result.connected:
            print('Match!' if not show_paths else f"Match! Path: {list(result.path or ())}")
        else:
            print('Those two do not connect.')


def main() -> None:
    parser = argparse.ArgumentParser(description='Onet tile-connecting puzzle')
    parser.add_argument('--level', type=int, default=1, help=f"Level to deal (1..{MAX_LEVEL})")
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--width', type=int, default=None, help='Interior width (defaults to the level size)')
    parser.add_argument('--height', type=int, default=None, help='Interior height (defaults to the level size)')
    parser.add_argument('--play', action='store_true', help='Play interactively in the terminal')
    parser.add_argument('--show-paths', action='store_true', help='Show connecting paths')
    parser.add_argument('--stats', action='store_true', help='Print the type distribution of the dealt board')
    parser.add_argument('--log-level', default=None, help='Logging level (default from ONET_LOG_LEVEL)')
    args = parser.parse_args()

    configure_logging(args.log_level)
    try:
        config = get_level_config(args.level)
    except ValueError as e:
        parser.error(str(e))
    rng = random.Random(args.seed)
    max_attempts = int(os.getenv('ONET_MAX_SHUFFLE_ATTEMPTS', str(DEFAULT_MAX_ATTEMPTS)))
    width = args.width or config.board_size
    height = args.height or config.board_size

    if not args.play:
        try:
            board = deal_board(width, height, config.piece_types, rng=rng)
        except ValueError as e:
            parser.error(str(e))
        print(f"Level {config.level}: {width}x{height}, {config.piece_types} piece types, {config.time_limit}s")
        for line in describe_board(board, show_paths=args.show_paths):
            print(line)
        if args.stats:
            for t, n in board_stats(board).type_distribution.items():
                print(f"  type {t:2d}: {n}")
        return

    state = new_game(rng=rng)
    if args.level != 1 or args.width or args.height:
        try:
            state = initialize_board(replace(state, level=args.level), width, height, rng=rng)
        except ValueError as e:
            parser.error(str(e))
    _play(state, rng, args.show_paths, max_attempts)


if __name__ == '__main__':
    main()
