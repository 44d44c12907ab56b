"""Exception taxonomy for level generation.

Only invalid caller input propagates out of ``DungeonGenerator.generate``.
Boss layout problems are raised internally and downgraded to procedural
generation by the generator.
"""

from __future__ import annotations


class QuestError(Exception):
    """Base class for errors raised by the quest package."""


class InvalidLevelError(QuestError, ValueError):
    """Level number is not an integer >= 1."""


class InvalidDimensionsError(QuestError, ValueError):
    """Map is too small to hold a single bordered room."""


class BossLayoutError(QuestError):
    """A boss layout resource could not be fetched or parsed."""

    def __init__(self, level: int, reason: str):
        super().__init__(f"boss layout for level {level}: {reason}")
        self.level = level
        self.reason = reason


__all__ = ["QuestError", "InvalidLevelError", "InvalidDimensionsError", "BossLayoutError"]
