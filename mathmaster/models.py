from __future__ import annotations

"""Core data model shared by the sampler, distractors and session manager."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class Topic(str, Enum):
    ARITHMETIC = "ARITHMETIC"
    ALGEBRA = "ALGEBRA"
    GEOMETRY = "GEOMETRY"
    STATISTICS = "STATISTICS"
    PROBABILITY = "PROBABILITY"

    @classmethod
    def parse(cls, value: "str | Topic") -> "Topic":
        if isinstance(value, Topic):
            return value
        key = str(value).strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise KeyError(f"Unknown topic: {value}") from None

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Level(str, Enum):
    LEVEL_1 = "Level 1"
    LEVEL_2 = "Level 2"
    LEVEL_3 = "Level 3"

    @classmethod
    def parse(cls, value: "str | Level") -> "Level":
        if isinstance(value, Level):
            return value
        text = str(value).strip().lower().replace("level", "").replace("_", "").strip()
        for lvl in cls:
            if lvl.value.split()[-1] == text:
                return lvl
        raise KeyError(f"Unknown level: {value}")


class GameMode(str, Enum):
    CLASSIC = "classic"
    TIME_ATTACK = "timeAttack"
    SUDDEN_DEATH = "suddenDeath"

    @classmethod
    def parse(cls, value: "str | GameMode") -> "GameMode":
        if isinstance(value, GameMode):
            return value
        t = str(value).strip().lower().replace("-", "_")
        mapping = {
            "classic": cls.CLASSIC,
            "normal": cls.CLASSIC,
            "timeattack": cls.TIME_ATTACK,
            "time_attack": cls.TIME_ATTACK,
            "suddendeath": cls.SUDDEN_DEATH,
            "sudden_death": cls.SUDDEN_DEATH,
        }
        if t not in mapping:
            raise KeyError(f"Unknown game mode: {value}")
        return mapping[t]

    @property
    def is_tight(self) -> bool:
        """Timed and elimination modes use closer distractors."""
        return self is not GameMode.CLASSIC


@dataclass(frozen=True)
class QuestionRecord:
    question_text: str
    answer_text: str


@dataclass
class PresentedQuestion:
    text: str
    correct_answer: str
    options: List[str]
    topic: Topic
    level: Optional[Level] = None

    def is_correct(self, choice: str) -> bool:
        return choice == self.correct_answer

    def to_json(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "answer": self.correct_answer,
            "options": list(self.options),
            "topic": self.topic.value,
            "level": self.level.value if self.level else None,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PresentedQuestion":
        level = data.get("level")
        return cls(
            text=str(data["text"]),
            correct_answer=str(data["answer"]),
            options=[str(o) for o in data.get("options", [])],
            topic=Topic.parse(data["topic"]),
            level=Level.parse(level) if level else None,
        )
