"""Tile Grid: the 2D per-cell state of one level.

Storage is row-major (``cells[y][x]``) to match the serialized layout
format; every accessor takes ``(x, y)``.
"""

from __future__ import annotations

from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .tiles import PASSABLE, Tile

Coord2D = Tuple[int, int]


class Point(NamedTuple):
    x: int
    y: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))


class TileGrid:
    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int, height: int, cells: Optional[List[List[Tile]]] = None):
        self.width = width
        self.height = height
        if cells is None:
            cells = [[Tile.wall() for _ in range(width)] for _ in range(height)]
        self.cells = cells

    @classmethod
    def from_rows(cls, rows: Sequence) -> "TileGrid":
        """Build a grid from glyph strings or lists of tile dicts (ragged rows padded with wall)."""
        if not rows:
            raise ValueError("layout has no tile rows")
        parsed: List[List[Tile]] = []
        for row in rows:
            if isinstance(row, str):
                parsed.append([Tile.from_glyph(ch) for ch in row])
            else:
                parsed.append([Tile.from_dict(cell) for cell in row])
        width = max(len(r) for r in parsed)
        if width == 0:
            raise ValueError("layout rows are empty")
        for r in parsed:
            r.extend(Tile.wall() for _ in range(width - len(r)))
        return cls(width, len(parsed), parsed)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def set(self, x: int, y: int, tile: Tile) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x},{y}) outside {self.width}x{self.height} grid")
        self.cells[y][x] = tile

    def type_at(self, x: int, y: int) -> Optional[str]:
        tile = self.get(x, y)
        return tile.type if tile is not None else None

    def neighbors(self, x: int, y: int) -> Iterator[Coord2D]:
        for dx, dy in ORTHOGONAL:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def coords(self) -> Iterator[Coord2D]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def count(self, tile_type: str) -> int:
        return sum(1 for row in self.cells for t in row if t.type == tile_type)

    def flood(self, start: Coord2D, passable=PASSABLE) -> set:
        """Return every coordinate reachable from ``start`` through passable tiles."""
        from collections import deque

        if self.type_at(*start) not in passable:
            return set()
        seen = {start}
        q = deque([start])
        while q:
            cx, cy = q.popleft()
            for nx, ny in self.neighbors(cx, cy):
                if (nx, ny) not in seen and self.cells[ny][nx].type in passable:
                    seen.add((nx, ny))
                    q.append((nx, ny))
        return seen

    def to_ascii(self) -> str:
        return "\n".join("".join(t.glyph for t in row) for row in self.cells)

    def to_rows(self) -> List[List[dict]]:
        return [[t.to_dict() for t in row] for row in self.cells]


__all__ = ["TileGrid", "Point", "Coord2D", "ORTHOGONAL"]
