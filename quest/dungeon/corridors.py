"""Corridor value type with pluggable path shapes.

A Corridor only computes the ordered coordinates between two points; carving
those coordinates into a grid is the router's job. Every shape yields an
orthogonally continuous path that starts at ``start`` and ends at ``end``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Coord2D = Tuple[int, int]
Bounds = Tuple[int, int, int, int]  # min_x, min_y, max_x, max_y (inclusive)

STRAIGHT = "straight"
L_SHAPED = "l_shaped"
Z_SHAPED = "z_shaped"
MAZE = "maze"
WIDE = "wide"
SECRET = "secret"

CORRIDOR_SHAPES = (STRAIGHT, L_SHAPED, Z_SHAPED, MAZE, WIDE, SECRET)

MAZE_DETOUR_CHANCE = 0.3


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def best_shape(start: Coord2D, end: Coord2D) -> str:
    dx = abs(end[0] - start[0])
    dy = abs(end[1] - start[1])
    if dx == 0 or dy == 0:
        return STRAIGHT
    if dx > 20 and dy > 20:
        return Z_SHAPED
    return L_SHAPED


@dataclass
class Corridor:
    start: Coord2D
    end: Coord2D
    shape: str = L_SHAPED
    path: List[Coord2D] = field(default_factory=list)
    width: int = 1
    secret: bool = False

    def __post_init__(self):
        if self.shape not in CORRIDOR_SHAPES:
            raise ValueError(f"unknown corridor shape {self.shape!r}")

    def generate(self, rng: Optional[random.Random] = None, bounds: Optional[Bounds] = None) -> List[Coord2D]:
        rng = rng or random.Random()
        self.path = []
        if self.shape == STRAIGHT:
            self._straight()
        elif self.shape == Z_SHAPED:
            self._z_shaped(rng, bounds)
        elif self.shape == MAZE:
            self._maze(rng, bounds)
        elif self.shape == WIDE:
            self._wide(rng, bounds)
        elif self.shape == SECRET:
            self.secret = True
            self._l_shaped(rng)
        else:
            self._l_shaped(rng)
        return self.path

    def __len__(self) -> int:
        return len(self.path)

    def __contains__(self, pos) -> bool:
        return tuple(pos) in self.path

    # ---- segment helpers -----------------------------------------------------
    def _add(self, x: int, y: int) -> None:
        if (x, y) not in self.path:
            self.path.append((x, y))

    def _horizontal(self, x1: int, y: int, x2: int) -> None:
        step = 1 if x2 >= x1 else -1
        for x in range(x1, x2 + step, step):
            self._add(x, y)

    def _vertical(self, x: int, y1: int, y2: int) -> None:
        step = 1 if y2 >= y1 else -1
        for y in range(y1, y2 + step, step):
            self._add(x, y)

    # ---- shapes --------------------------------------------------------------
    def _straight(self) -> None:
        (x, y), (ex, ey) = self.start, self.end
        self._add(x, y)
        while (x, y) != (ex, ey):
            # Step one axis at a time so unaligned endpoints stay orthogonally connected.
            if x != ex:
                x += _sign(ex - x)
            else:
                y += _sign(ey - y)
            self._add(x, y)

    def _l_shaped(self, rng: random.Random) -> None:
        (sx, sy), (ex, ey) = self.start, self.end
        if rng.random() < 0.5:
            self._horizontal(sx, sy, ex)
            self._vertical(ex, sy, ey)
        else:
            self._vertical(sx, sy, ey)
            self._horizontal(sx, ey, ex)

    def _z_shaped(self, rng: random.Random, bounds: Optional[Bounds]) -> None:
        (sx, sy), (ex, ey) = self.start, self.end
        mid_x = (sx + ex) // 2 + rng.randint(-2, 2)
        mid_y = (sy + ey) // 2 + rng.randint(-2, 2)
        if bounds is not None:
            mid_x = min(max(mid_x, bounds[0]), bounds[2])
            mid_y = min(max(mid_y, bounds[1]), bounds[3])
        if rng.random() < 0.5:
            self._horizontal(sx, sy, mid_x)
            self._vertical(mid_x, sy, ey)
            self._horizontal(mid_x, ey, ex)
        else:
            self._vertical(sx, sy, mid_y)
            self._horizontal(sx, mid_y, ex)
            self._vertical(ex, mid_y, ey)

    def _maze(self, rng: random.Random, bounds: Optional[Bounds]) -> None:
        (x, y), (ex, ey) = self.start, self.end
        self._add(x, y)
        max_steps = (abs(ex - x) + abs(ey - y)) * 3 + 1
        steps = 0
        while (x, y) != (ex, ey) and steps < max_steps:
            steps += 1
            dx, dy = _sign(ex - x), _sign(ey - y)
            choices = []
            if dx:
                choices.append((dx, 0))
            if dy:
                choices.append((0, dy))
            if rng.random() < MAZE_DETOUR_CHANCE:
                choices.extend([(1, 0), (-1, 0)] if dx == 0 else [(0, 1), (0, -1)])
            if bounds is not None:
                choices = [
                    (mx, my)
                    for mx, my in choices
                    if bounds[0] <= x + mx <= bounds[2] and bounds[1] <= y + my <= bounds[3]
                ]
            if not choices:
                break
            mx, my = rng.choice(choices)
            if (x + mx, y + my) in self.path:
                break
            x, y = x + mx, y + my
            self._add(x, y)
        if (x, y) != (ex, ey):
            self._horizontal(x, y, ex)
            self._vertical(ex, y, ey)

    def _wide(self, rng: random.Random, bounds: Optional[Bounds]) -> None:
        self.width = 2 + rng.randrange(2)
        self._l_shaped(rng)
        base = list(self.path)
        for i, (x, y) in enumerate(base):
            prev = base[i - 1] if i > 0 else None
            nxt = base[i + 1] if i + 1 < len(base) else None
            horizontal = (prev is not None and prev[1] == y) or (nxt is not None and nxt[1] == y)
            for w in range(1, self.width):
                px, py = (x, y + w) if horizontal else (x + w, y)
                if bounds is None or (bounds[0] <= px <= bounds[2] and bounds[1] <= py <= bounds[3]):
                    self._add(px, py)


__all__ = [
    "Corridor",
    "best_shape",
    "CORRIDOR_SHAPES",
    "STRAIGHT",
    "L_SHAPED",
    "Z_SHAPED",
    "MAZE",
    "WIDE",
    "SECRET",
]
