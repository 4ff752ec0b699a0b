from __future__ import annotations

"""Tiny pub/sub event bus between the session manager and the presenter."""

from typing import Any, Callable, Dict, List

from .explain import trace as xtrace

STATE_CHANGED = "state_changed"
ANSWER = "answer"
CELEBRATE = "celebrate"
COMPLETE = "complete"
NAVIGATE = "navigate"


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception as e:
                # Best effort; a broken view must not stall the session
                xtrace("handler_error", {"event": event, "error": repr(e)})
