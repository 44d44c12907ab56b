import pytest

from quest.dungeon.themes import THEME_MESSAGES, THEMES, resolve_theme, theme_messages


def test_level_15_and_16_differ():
    assert resolve_theme(15) == "dungeon"
    assert resolve_theme(16) == "minotaur"


@pytest.mark.parametrize(
    "level,theme",
    [
        (1, "dungeon"),
        (30, "minotaur"),
        (31, "balrog"),
        (45, "balrog"),
        (60, "behemoth"),
        (75, "jormungandr"),
        (90, "fenrir"),
        (91, "odin"),
        (100, "odin"),
        (250, "odin"),
    ],
)
def test_theme_bands(level, theme):
    assert resolve_theme(level) == theme


def test_every_theme_has_graffiti():
    assert set(THEME_MESSAGES) == set(THEMES)
    assert "THESEUS WAS HERE" in theme_messages("minotaur")
    assert theme_messages("unknown") == ()
