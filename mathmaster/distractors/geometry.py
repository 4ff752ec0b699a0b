from __future__ import annotations

"""Geometry distractors: scaled magnitudes that keep units and π."""

import re
from typing import List, Tuple

from .base_distractor import BaseDistractor, trim_number
from ..errors import MalformedAnswerFormat
from ..models import Topic

# Longest suffixes first so "square units" wins over "units".
UNIT_SUFFIXES = ("square units", "cubic units", "units", "degrees", "°")
MULTIPLIERS = (0.9, 1.1, 1.2)

_MAGNITUDE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)?\s*(π)?\s*$")


def split_answer(answer: str) -> Tuple[float, bool, str]:
    """Split "16π square units" into (16.0, True, "square units").

    A lone "π" has magnitude 1. Raises ValueError when the magnitude part is
    not a number, optionally followed by π.
    """
    text = answer.strip()
    unit = ""
    for suffix in UNIT_SUFFIXES:
        if text.endswith(suffix):
            unit = suffix
            text = text[: -len(suffix)]
            break
    m = _MAGNITUDE_RE.match(text)
    if not m or (m.group(1) is None and m.group(2) is None):
        raise ValueError(f"not a geometry magnitude: {answer!r}")
    value = float(m.group(1)) if m.group(1) is not None else 1.0
    return value, m.group(2) is not None, unit


def join_answer(value: float, has_pi: bool, unit: str) -> str:
    mag = trim_number(value)
    if has_pi:
        mag = "π" if mag == "1" else f"{mag}π"
    if not unit:
        return mag
    return f"{mag}{unit}" if unit == "°" else f"{mag} {unit}"


class GeometryDistractor(BaseDistractor):
    topic = Topic.GEOMETRY
    placeholders = (
        "Cannot be determined",
        "{answer} (incorrect)",
        "Not {answer}",
    )

    def _split(self, answer: str) -> Tuple[float, bool, str]:
        try:
            return split_answer(answer)
        except ValueError as exc:
            raise MalformedAnswerFormat(self.topic.value, answer, str(exc)) from exc

    def variations(self, answer: str) -> List[str]:
        value, has_pi, unit = self._split(answer)
        return [join_answer(value * k, has_pi, unit) for k in MULTIPLIERS]

    def filler(self, answer: str) -> str:
        value, has_pi, unit = self._split(answer)
        spread = 0.3 if self.tight else 0.5
        k = 1.0 + self.rng.choice((1, -1)) * self.rng.uniform(0.05, spread)
        if value == int(value) and abs(value) >= 10:
            return join_answer(round(value * k), has_pi, unit)
        return join_answer(value * k, has_pi, unit)
