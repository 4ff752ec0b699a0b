from __future__ import annotations

"""Probability distractors for fractions, percentages and decimals.

Supported shapes: "15/100 or 0.15", "3/8", "30%", "0.8333". Every candidate is
kept probability-shaped: numerators stay >= 1 with the denominator above them,
percentages stay in [0, 100] and decimals in [0, 1].
"""

import re
from typing import List, Tuple

from .base_distractor import BaseDistractor, unique_draws
from ..errors import MalformedAnswerFormat
from ..models import Topic

_FRACTION_RE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")
_PERCENT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%\s*$")
_DECIMAL_RE = re.compile(r"^\s*(\d*\.\d+|[01])\s*$")
_DUAL_RE = re.compile(r"^\s*\d+\s*/\s*\d+\s+or\s+(\d*\.\d+|[01])\s*$")


def closer_fraction(rng, num: int, den: int, step: int) -> Tuple[int, int]:
    """Move numerator, denominator or both by `step` and repair validity."""
    strategy = rng.random()
    new_num, new_den = num, den
    if strategy < 0.33:
        new_num = num + rng.choice((step, -step))
    elif strategy < 0.66:
        new_den = den + rng.choice((step * 2, -step * 2))
    else:
        new_num = num + rng.choice((step, -step))
        new_den = den + rng.choice((step, -step))
    if new_num <= 0:
        new_num = 1
    if new_den <= new_num:
        new_den = new_num + 1
    return new_num, new_den


class ProbabilityDistractor(BaseDistractor):
    topic = Topic.PROBABILITY
    placeholders = (
        "{answer} (incorrect)",
        "0",
        "1",
    )

    @property
    def decimal_spread(self) -> float:
        return 0.05 if self.tight else 0.1

    def _shifted_decimal(self, value: float) -> float:
        spread = self.decimal_spread
        offset = self.rng.random() * spread - spread / 2
        return max(0.0, min(1.0, value + offset))

    def variations(self, answer: str) -> List[str]:
        m = _DUAL_RE.match(answer)
        if m:
            decimal = float(m.group(1))

            def _dual() -> str:
                frac = round(self._shifted_decimal(decimal), 2)
                return f"{round(frac * 100)}/100 or {frac:.2f}"

            same = f"{round(decimal * 100)}/100 or {decimal:.2f}"
            return unique_draws(_dual, 3, [answer, same])

        m = _FRACTION_RE.match(answer)
        if m:
            num, den = int(m.group(1)), int(m.group(2))
            if den == 0:
                raise MalformedAnswerFormat(self.topic.value, answer, "zero denominator")
            step = 1 if self.tight else 2

            def _fraction() -> str:
                n, d = closer_fraction(self.rng, num, den, step)
                return f"{n}/{d}"

            return unique_draws(_fraction, 3, [answer])

        m = _PERCENT_RE.match(answer)
        if m:
            percent = int(float(m.group(1)))
            top = 5 if self.tight else 10

            def _percent() -> str:
                offset = self.rng.randint(2, top + 1)
                value = percent + self.rng.choice((offset, -offset))
                return f"{min(100, max(0, value))}%"

            return unique_draws(_percent, 3, [answer])

        m = _DECIMAL_RE.match(answer)
        if m:
            text = m.group(1)
            value = float(text)
            places = max(2, len(text.split(".", 1)[1]) if "." in text else 0)
            same = f"{value:.{places}f}"
            return unique_draws(lambda: f"{self._shifted_decimal(value):.{places}f}", 3, [answer, same])

        raise MalformedAnswerFormat(self.topic.value, answer, "not probability-shaped")

    def filler(self, answer: str) -> str:
        if _DUAL_RE.match(answer):
            frac = round(self.rng.random(), 2)
            return f"{round(frac * 100)}/100 or {frac:.2f}"
        if _FRACTION_RE.match(answer):
            max_den = 6 if self.tight else 10
            den = self.rng.randint(2, max_den + 1)
            num = self.rng.randint(1, den - 1)
            return f"{num}/{den}"
        if _PERCENT_RE.match(answer):
            step = 5 if self.tight else 10
            return f"{self.rng.randrange(100 // step) * step}%"
        precision = 3 if self.tight else 2
        return f"{self.rng.random():.{precision}f}"
