"""Monster identity selection for the Population Engine.

Picks a monster slug appropriate for a dungeon level from a static table.
Rarity weighting controls relative frequency; level bands control
eligibility. Stateless apart from the table handed to the catalog, so any
other backing (loaded JSON, database) only has to offer the same
``pick_monster_identifier(level, rng)`` method.
"""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, NamedTuple, Optional

RARITY_WEIGHTS = {
    "common": 1.0,
    "uncommon": 0.55,
    "rare": 0.30,
    "elite": 0.15,
}


class MonsterEntry(NamedTuple):
    slug: str
    level_min: int
    level_max: int
    rarity: str = "common"


DEFAULT_MONSTERS = (
    MonsterEntry("rat", 1, 4),
    MonsterEntry("bat", 1, 6, "uncommon"),
    MonsterEntry("goblin", 5, 9),
    MonsterEntry("kobold", 3, 9, "uncommon"),
    MonsterEntry("orc", 10, 19),
    MonsterEntry("hill-giant", 14, 24, "rare"),
    MonsterEntry("troll", 20, 29),
    MonsterEntry("minotaur-calf", 16, 30, "rare"),
    MonsterEntry("fire-imp", 31, 45, "uncommon"),
    MonsterEntry("dragon", 30, 100),
    MonsterEntry("wraith", 40, 100, "uncommon"),
    MonsterEntry("lich", 60, 100, "elite"),
)


class StaticMonsterCatalog:
    def __init__(self, entries: Optional[Iterable[MonsterEntry]] = None, rarity_weights: Optional[Dict] = None):
        self.entries: List[MonsterEntry] = list(entries if entries is not None else DEFAULT_MONSTERS)
        self.rarity_weights = dict(RARITY_WEIGHTS)
        if rarity_weights:
            for k, v in rarity_weights.items():
                if v > 0:
                    self.rarity_weights[k] = float(v)

    def eligible(self, level: int) -> List[MonsterEntry]:
        pool = [m for m in self.entries if m.level_min <= level <= m.level_max]
        if pool:
            return pool
        # Past every band: clamp to the entries with the highest ceiling.
        if not self.entries:
            return []
        top = max(m.level_max for m in self.entries)
        return [m for m in self.entries if m.level_max == top]

    def pick_monster_identifier(self, level: int, rng: Optional[random.Random] = None) -> str:
        """Return a monster slug for ``level``.

        Raises ValueError if the catalog is empty.
        """
        rng = rng or random
        pool = self.eligible(level)
        if not pool:
            raise ValueError(f"No monsters available for level {level}")
        weights = [max(self.rarity_weights.get(m.rarity, 0.1), 0.0001) for m in pool]
        total = sum(weights)
        pivot = rng.random() * total
        acc = 0.0
        chosen = pool[-1]
        for m, w in zip(pool, weights):
            acc += w
            if pivot <= acc:
                chosen = m
                break
        return chosen.slug


__all__ = ["StaticMonsterCatalog", "MonsterEntry", "DEFAULT_MONSTERS", "RARITY_WEIGHTS"]
