from __future__ import annotations

"""Screen router for the home, quiz, daily-challenge and game-mode screens."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..models import Topic
from . import events
from .events import EventBus
from .explain import trace as xtrace


class Screen(str, Enum):
    HOME = "home"
    QUIZ = "quiz"
    DAILY_CHALLENGE = "daily_challenge"
    GAME_MODE = "game_mode"


@dataclass(frozen=True)
class Route:
    screen: Screen
    topic: Optional[Topic] = None

    @property
    def path(self) -> str:
        if self.screen is Screen.QUIZ and self.topic is not None:
            return f"/quiz/{self.topic.value.lower()}"
        return {
            Screen.HOME: "/",
            Screen.DAILY_CHALLENGE: "/daily-challenge",
            Screen.GAME_MODE: "/game-mode",
        }.get(self.screen, "/")

    @classmethod
    def from_path(cls, path: str) -> "Route":
        p = "/" + path.strip().strip("/")
        if p == "/":
            return cls(Screen.HOME)
        if p == "/daily-challenge":
            return cls(Screen.DAILY_CHALLENGE)
        if p == "/game-mode":
            return cls(Screen.GAME_MODE)
        if p.startswith("/quiz/"):
            return cls(Screen.QUIZ, Topic.parse(p[len("/quiz/"):]))
        raise KeyError(f"Unknown route: {path}")


class Router:
    """History-stack navigation; each move is announced as a `navigate` event."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.bus = bus or EventBus()
        self._stack: List[Route] = [Route(Screen.HOME)]

    @property
    def current(self) -> Route:
        return self._stack[-1]

    def navigate(self, route: Route) -> Route:
        self._stack.append(route)
        xtrace("navigate", {"path": route.path})
        self.bus.emit(events.NAVIGATE, route)
        return route

    def go_to_home(self) -> Route:
        # Home resets the history
        self._stack = []
        return self.navigate(Route(Screen.HOME))

    def go_to_quiz(self, topic: Topic | str) -> Route:
        return self.navigate(Route(Screen.QUIZ, Topic.parse(topic)))

    def go_to_daily_challenge(self) -> Route:
        return self.navigate(Route(Screen.DAILY_CHALLENGE))

    def go_to_game_mode(self) -> Route:
        return self.navigate(Route(Screen.GAME_MODE))

    def go_to_path(self, path: str) -> Route:
        return self.navigate(Route.from_path(path))

    def back(self) -> Route:
        if len(self._stack) > 1:
            self._stack.pop()
            xtrace("navigate", {"path": self.current.path, "back": True})
            self.bus.emit(events.NAVIGATE, self.current)
        return self.current
