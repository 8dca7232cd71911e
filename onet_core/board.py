from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Tile:
    """A single board cell. Border cells and matched tiles are always empty."""
    id: str
    type: int
    row: int
    col: int
    selected: bool = False
    matched: bool = False
    empty: bool = False

    @property
    def pos(self) -> Coord:
        return (self.row, self.col)

    @property
    def active(self) -> bool:
        return not self.empty and not self.matched


def tile_id(r: int, c: int) -> str:
    return f"{r}-{c}"


def border_tile(r: int, c: int) -> Tile:
    return Tile(id=tile_id(r, c), type=0, row=r, col=c, empty=True)


@dataclass(frozen=True)
class Board:
    """The full grid, border included: width and height are the framed dimensions."""
    width: int
    height: int
    tiles: Tuple[Tile, ...]  # row-major, length == width * height

    @property
    def inner_width(self) -> int:
        return self.width - 2

    @property
    def inner_height(self) -> int:
        return self.height - 2

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * self.width + c

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.height and 0 <= c < self.width

    def at(self, r: int, c: int) -> Tile:
        """Gets the tile at a given row and column (no wrap-around)."""
        if not self.in_bounds(r, c):
            raise IndexError(f"({r}, {c}) is outside a {self.height}x{self.width} board")
        return self.tiles[self.index(r, c)]

    def is_border(self, r: int, c: int) -> bool:
        return r == 0 or c == 0 or r == self.height - 1 or c == self.width - 1

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates on the board, border included."""
        for r in range(self.height):
            for c in range(self.width):
                yield (r, c)

    def active_tiles(self) -> List[Tile]:
        """Active tiles in row-major order."""
        return [t for t in self.tiles if t.active]

    def active_count(self) -> int:
        return sum(1 for t in self.tiles if t.active)

    def with_tiles(self, updates: Dict[Coord, Tile]) -> 'Board':
        """Returns a copy with the given positions replaced."""
        if not updates:
            return self
        cells = list(self.tiles)
        for (r, c), tile in updates.items():
            cells[self.index(r, c)] = tile
        return Board(self.width, self.height, tuple(cells))

    def clear_selected(self) -> 'Board':
        if not any(t.selected for t in self.tiles):
            return self
        return Board(
            self.width,
            self.height,
            tuple(replace(t, selected=False) if t.selected else t for t in self.tiles),
        )

    def pretty(self, highlight: Optional[Sequence[Coord]] = None) -> str:
        """Generates a human-readable string representation of the board."""
        marks = set(highlight or ())
        lines: List[str] = []
        for r in range(self.height):
            row: List[str] = []
            for c in range(self.width):
                tile = self.at(r, c)
                if self.is_border(r, c):
                    row.append("  ")
                elif not tile.active:
                    row.append(" .")
                elif (r, c) in marks or tile.selected:
                    row.append(" *")
                else:
                    row.append(f"{tile.type:2d}")
            lines.append(" ".join(row))
        return "\n".join(lines)
