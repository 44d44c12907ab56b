"""Connectivity Verifier.

The pairwise chain built by the router can leave rooms stranded (early
termination, skipped redundant links). ``ensure_connectivity`` walks the
room connection graph from the entrance room and forces a corridor from
each stranded room to its nearest reached room until nothing is left out.
"""
from __future__ import annotations

import random
from collections import deque
from typing import List, Optional, Set

from ..logging_utils import get_logger
from .config import GeneratorConfig
from .grid import TileGrid
from .rooms import Room
from .router import connect_rooms

log = get_logger("quest.dungeon.connectivity")


def reachable_rooms(rooms: List[Room], start_index: int) -> Set[int]:
    if not rooms:
        return set()
    seen = {start_index}
    q = deque([start_index])
    while q:
        current = q.popleft()
        for other in rooms[current].connections:
            if other not in seen:
                seen.add(other)
                q.append(other)
    return seen


def ensure_connectivity(
    grid: TileGrid,
    rooms: List[Room],
    entrance_index: Optional[int],
    config: GeneratorConfig,
    rng: random.Random,
) -> int:
    """Connect every room to the entrance room; returns repairs performed."""
    if entrance_index is None or len(rooms) < 2:
        return 0
    repairs = 0
    # Each repair reaches at least one more room, so this bound is never hit in practice.
    for _ in range(len(rooms)):
        reached = reachable_rooms(rooms, entrance_index)
        stranded = [r for r in rooms if r.index not in reached]
        if not stranded:
            break
        reached_rooms = [rooms[i] for i in sorted(reached)]
        target = min(
            stranded,
            key=lambda r: (min(r.manhattan_distance_to(rr) for rr in reached_rooms), r.index),
        )
        anchor = min(reached_rooms, key=lambda rr: (rr.manhattan_distance_to(target), rr.index))
        connect_rooms(grid, rooms, anchor, target, config, rng)
        repairs += 1
        log.debug(event="connectivity_repair", room=target.index, anchor=anchor.index)
    if repairs:
        log.info(event="connectivity_repair", repairs=repairs, rooms=len(rooms))
    return repairs


def unreachable_rooms_by_tiles(grid: TileGrid, rooms: List[Room], entrance_index: Optional[int]) -> List[int]:
    """Indices of rooms with no tile reachable on foot from the entrance room center.

    Closed, locked and secret doors count as passable.
    """
    if entrance_index is None or not rooms:
        return []
    seen = grid.flood(rooms[entrance_index].center)
    return [r.index for r in rooms if not any(c in seen for c in r.cells())]


__all__ = ["reachable_rooms", "ensure_connectivity", "unreachable_rooms_by_tiles"]
