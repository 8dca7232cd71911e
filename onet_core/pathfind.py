from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Set, Tuple

from .board import Board, Coord, Tile

UP = 'up'
DOWN = 'down'
LEFT = 'left'
RIGHT = 'right'

# Search order matters: the first path found depends on it.
DIRECTIONS: Tuple[Tuple[str, int, int], ...] = (
    (UP, -1, 0),
    (DOWN, 1, 0),
    (LEFT, 0, -1),
    (RIGHT, 0, 1),
)

MAX_TURNS = 2

Path = Tuple[Coord, ...]


@dataclass(frozen=True)
class ConnectResult:
    connected: bool
    path: Optional[Path] = None  # polyline: start, corners, end


@dataclass(frozen=True)
class ConnectablePair:
    first: Tile
    second: Tile
    path: Path


NOT_CONNECTED = ConnectResult(connected=False)


def _search(board: Board, start: Coord, goal: Coord) -> Optional[Path]:
    """
    Breadth-first search over (row, col, direction, turns).
    Each direction slides through a run of empty cells, so a turn is counted
    once per direction change rather than once per cell.
    """
    visited: Set[Tuple[int, int, str, int]] = set()
    # (position, incoming direction, turns so far, polyline up to the last corner)
    queue: Deque[Tuple[Coord, Optional[str], int, Path]] = deque()
    queue.append((start, None, 0, (start,)))

    while queue:
        pos, direction, turns, corners = queue.popleft()
        if turns > MAX_TURNS:
            continue
        if pos == goal:
            return corners + (goal,)

        r, c = pos
        for name, dr, dc in DIRECTIONS:
            turning = direction is not None and direction != name
            next_turns = turns + 1 if turning else turns
            next_corners = corners + (pos,) if turning else corners
            nr, nc = r + dr, c + dc
            while board.in_bounds(nr, nc) and (board.at(nr, nc).empty or (nr, nc) == goal):
                key = (nr, nc, name, next_turns)
                if key not in visited:
                    visited.add(key)
                    queue.append(((nr, nc), name, next_turns, next_corners))
                if (nr, nc) == goal:
                    break
                nr += dr
                nc += dc
    return None


def can_connect(board: Board, tile_a: Tile, tile_b: Tile) -> ConnectResult:
    """
    Decides whether two tiles can be joined by an orthogonal path of empty
    cells with at most two turns, and returns that path.

    The search always runs from the tile that comes first in row-major order,
    so swapping the arguments yields the same path reversed.
    """
    if (
        tile_a.type != tile_b.type
        or not tile_a.active
        or not tile_b.active
        or tile_a.id == tile_b.id
    ):
        return NOT_CONNECTED

    if tile_b.pos < tile_a.pos:
        found = _search(board, tile_b.pos, tile_a.pos)
        if found is None:
            return NOT_CONNECTED
        return ConnectResult(connected=True, path=tuple(reversed(found)))

    found = _search(board, tile_a.pos, tile_b.pos)
    if found is None:
        return NOT_CONNECTED
    return ConnectResult(connected=True, path=found)


def _step(a: Coord, b: Coord) -> Coord:
    dr = (b[0] > a[0]) - (b[0] < a[0])
    dc = (b[1] > a[1]) - (b[1] < a[1])
    return dr, dc


def count_turns(path: Path) -> int:
    """Number of direction changes along a polyline."""
    steps = [_step(path[i], path[i + 1]) for i in range(len(path) - 1) if path[i] != path[i + 1]]
    return sum(1 for i in range(1, len(steps)) if steps[i] != steps[i - 1])


def expand_path(path: Path) -> List[Coord]:
    """Every unit cell visited along a polyline, endpoints included."""
    if not path:
        return []
    cells: List[Coord] = [path[0]]
    for a, b in zip(path, path[1:]):
        if a[0] != b[0] and a[1] != b[1]:
            raise ValueError(f"Segment {a} -> {b} is not orthogonal")
        dr, dc = _step(a, b)
        r, c = a
        while (r, c) != b:
            r, c = r + dr, c + dc
            cells.append((r, c))
    return cells


def find_connectable_pair(board: Board) -> Optional[ConnectablePair]:
    """Scans active same-type pairs in row-major order and returns the first that connects."""
    active = board.active_tiles()
    for i in range(len(active)):
        first = active[i]
        for j in range(i + 1, len(active)):
            second = active[j]
            if first.type != second.type:
                continue
            result = can_connect(board, first, second)
            if result.connected and result.path is not None:
                return ConnectablePair(first, second, result.path)
    return None


def has_valid_moves(board: Board) -> bool:
    return find_connectable_pair(board) is not None
