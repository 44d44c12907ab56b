"""Level lifecycle notifications.

The generator only emits; consumers (message log, renderer, save system)
register plain callables taking ``(event_name, payload)``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from .logging_utils import get_logger

LEVEL_GENERATED = "level:generated"
LEVEL_BOSS_FALLBACK = "level:boss_fallback"

Listener = Callable[[str, Dict[str, Any]], None]

log = get_logger("quest.events")


class LevelEvents:
    def __init__(self, listeners: List[Listener] | None = None):
        self._listeners: List[Listener] = list(listeners or [])

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, name: str, payload: Dict[str, Any]) -> int:
        """Deliver ``payload`` to every listener; returns the delivery count.

        A failing listener is logged and skipped so one bad subscriber cannot
        abort level generation.
        """
        delivered = 0
        for listener in list(self._listeners):
            try:
                listener(name, payload)
                delivered += 1
            except Exception as exc:  # noqa: BLE001 - subscriber code is foreign
                log.error(event="listener_failed", name=name, error=repr(exc))
        return delivered


__all__ = ["LevelEvents", "LEVEL_GENERATED", "LEVEL_BOSS_FALLBACK", "Listener"]
