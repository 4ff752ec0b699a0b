from __future__ import annotations

"""Distractor synthesis: one heuristic per topic, plus the option builder."""

import random
from typing import Dict, List, Type

from ..models import GameMode, Topic
from .algebra import AlgebraDistractor
from .arithmetic import ArithmeticDistractor
from .base_distractor import BaseDistractor
from .geometry import GeometryDistractor
from .probability import ProbabilityDistractor
from .statistics import StatisticsDistractor

DISTRACTORS: Dict[Topic, Type[BaseDistractor]] = {
    Topic.ARITHMETIC: ArithmeticDistractor,
    Topic.ALGEBRA: AlgebraDistractor,
    Topic.GEOMETRY: GeometryDistractor,
    Topic.STATISTICS: StatisticsDistractor,
    Topic.PROBABILITY: ProbabilityDistractor,
}

_missing = set(Topic) - set(DISTRACTORS)
if _missing:  # pragma: no cover - guards edits to Topic
    raise RuntimeError(f"No distractor registered for: {sorted(t.value for t in _missing)}")

OPTION_COUNT = 4


def make_distractor(topic: Topic | str, mode: GameMode | str = GameMode.CLASSIC, rng=None) -> BaseDistractor:
    return DISTRACTORS[Topic.parse(topic)](mode=mode, rng=rng)


def synthesize_options(
    correct_answer: str,
    topic: Topic | str,
    mode: GameMode | str = GameMode.CLASSIC,
    rng: random.Random | None = None,
) -> List[str]:
    """Return four unique options (the answer plus three distractors), shuffled."""
    distractor = make_distractor(topic, mode=mode, rng=rng)
    options = [correct_answer] + distractor.distractors(correct_answer, count=OPTION_COUNT - 1)
    (rng if rng is not None else random).shuffle(options)
    return options


__all__ = [
    "BaseDistractor",
    "DISTRACTORS",
    "OPTION_COUNT",
    "make_distractor",
    "synthesize_options",
]
