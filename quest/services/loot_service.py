"""Item identity selection for the Population Engine.

Each coarse category (weapon, armor, ...) maps to a table of
``(slug, min_level)`` pairs. Deeper levels unlock better entries and tilt
the odds toward them without excluding the basics.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

ITEM_TABLES: Dict[str, Tuple[Tuple[str, int], ...]] = {
    "weapon": (("dagger", 1), ("short-sword", 1), ("mace", 3), ("long-sword", 8), ("battle-axe", 15), ("runed-blade", 40)),
    "armor": (("leather-armor", 1), ("studded-leather", 4), ("chain-mail", 10), ("plate-mail", 25), ("mithril-coat", 50)),
    "potion": (("potion-healing", 1), ("potion-insight", 3), ("potion-greater-healing", 12), ("potion-restoration", 30)),
    "scroll": (("scroll-identify", 1), ("scroll-light", 1), ("scroll-teleport", 6), ("scroll-enchant", 18)),
    "ring": (("ring-protection", 3), ("ring-regeneration", 12), ("ring-wisdom", 30)),
    "wand": (("wand-light", 2), ("wand-striking", 8), ("wand-fire", 31), ("wand-wishing", 90)),
    "food": (("ration", 1), ("apple", 1), ("lembas", 20)),
}


class StaticItemCatalog:
    def __init__(self, tables: Optional[Dict[str, Sequence[Tuple[str, int]]]] = None):
        self.tables = dict(tables if tables is not None else ITEM_TABLES)

    def eligible(self, level: int, category: str) -> List[Tuple[str, int]]:
        try:
            table = self.tables[category]
        except KeyError:
            raise ValueError(f"unknown item category {category!r}") from None
        pool = [entry for entry in table if entry[1] <= level]
        return pool or [min(table, key=lambda e: e[1])]

    def pick_item_identifier(self, level: int, category: str, rng: Optional[random.Random] = None) -> str:
        rng = rng or random
        pool = self.eligible(level, category)
        weights = [1.0 + min_level / max(level, 1) for _, min_level in pool]
        return rng.choices(pool, weights=weights)[0][0]


__all__ = ["StaticItemCatalog", "ITEM_TABLES"]
