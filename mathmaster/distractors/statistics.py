from __future__ import annotations

"""Statistics distractors: fixed deltas around a bare number."""

from typing import List

from .base_distractor import BaseDistractor, parse_number, random_offset
from ..errors import MalformedAnswerFormat
from ..models import Topic

DECIMAL_DELTAS = (-0.5, 0.5, 1.0)
INTEGER_DELTAS = (-1, 1, 2)


class StatisticsDistractor(BaseDistractor):
    topic = Topic.STATISTICS
    placeholders = (
        "No mode",
        "Cannot be determined",
        "{answer} (incorrect)",
    )

    def _number(self, answer: str):
        num = parse_number(answer)
        if num is None:
            raise MalformedAnswerFormat(self.topic.value, answer, "not a number")
        return num

    def variations(self, answer: str) -> List[str]:
        value, decimals = self._number(answer)
        if decimals > 0:
            return [f"{value + d:.2f}" for d in DECIMAL_DELTAS]
        n = int(round(value))
        return [str(n + d) for d in INTEGER_DELTAS]

    def filler(self, answer: str) -> str:
        value, decimals = self._number(answer)
        if decimals > 0:
            return f"{value + self.rng.choice((1, -1)) * self.rng.uniform(0.1, 2.0):.2f}"
        return str(int(round(value)) + random_offset(self.rng, 5 if self.tight else 8))
