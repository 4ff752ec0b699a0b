from __future__ import annotations

"""Arithmetic distractors: numeric answers nudged by small offsets."""

from typing import List

from .base_distractor import BaseDistractor, numeric_variations, parse_number
from ..errors import MalformedAnswerFormat
from ..models import Topic


class ArithmeticDistractor(BaseDistractor):
    """Integers move by ~10% (5% in timed modes), decimals by a few percent."""

    topic = Topic.ARITHMETIC

    def variations(self, answer: str) -> List[str]:
        num = parse_number(answer)
        if num is None:
            raise MalformedAnswerFormat(self.topic.value, answer, "not a number")
        value, decimals = num
        return numeric_variations(value, decimals, self.tight)
