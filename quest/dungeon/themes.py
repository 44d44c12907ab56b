"""Level Theme Resolver.

Maps a level number onto one of seven ordered theme bands. Themes drive
graffiti text, the minotaur maze influence on corridors and the balrog
lava hazard; the renderer also keys its palette off the tag.
"""
from __future__ import annotations

from typing import Dict, Tuple

# (highest level in band, theme); levels past the last band are FINAL_THEME
THEME_BANDS: Tuple[Tuple[int, str], ...] = (
    (15, "dungeon"),
    (30, "minotaur"),
    (45, "balrog"),
    (60, "behemoth"),
    (75, "jormungandr"),
    (90, "fenrir"),
)
FINAL_THEME = "odin"
THEMES = tuple(name for _, name in THEME_BANDS) + (FINAL_THEME,)

MAZE_THEME = "minotaur"
LAVA_THEME = "balrog"

THEME_MESSAGES: Dict[str, Tuple[str, ...]] = {
    "dungeon": (
        "Abandon hope, all ye who enter here",
        "The Philosopher's Stone lies deep below",
    ),
    "minotaur": (
        "The walls seem to shift when you're not looking",
        "You hear distant bellowing",
        "THESEUS WAS HERE",
        "I've been walking in circles for days",
    ),
    "balrog": (
        "It's getting warmer...",
        "YOU SHALL NOT PASS",
        "The ancient evil stirs",
        "Flames consumed the last expedition",
    ),
    "behemoth": (
        "The earth trembles",
        "These passages were carved by something huge",
        "BEWARE THE EARTHSHAKER",
    ),
    "jormungandr": (
        "The World Serpent coils below",
        "Scales the size of shields litter the floor",
        "The walls glisten with venom",
    ),
    "fenrir": (
        "The chains are breaking",
        "Howls echo through the halls",
        "THE WOLF COMES",
    ),
    "odin": (
        "Knowledge is the final test",
        "The All-Father watches",
        "Two ravens were here",
    ),
}


def resolve_theme(level: int) -> str:
    for upper, name in THEME_BANDS:
        if level <= upper:
            return name
    return FINAL_THEME


def theme_messages(theme: str) -> Tuple[str, ...]:
    """Graffiti lines for ``theme`` (empty for unknown tags from hand-authored layouts)."""
    return THEME_MESSAGES.get(theme, ())


__all__ = [
    "THEME_BANDS",
    "THEMES",
    "FINAL_THEME",
    "MAZE_THEME",
    "LAVA_THEME",
    "THEME_MESSAGES",
    "resolve_theme",
    "theme_messages",
]
