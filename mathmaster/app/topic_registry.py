from __future__ import annotations

"""Topic registry and metadata.

Lists the quiz topics with display metadata and builds the matching
distractor heuristic via a simple factory.
"""

from dataclasses import dataclass
from typing import List

from ..distractors import BaseDistractor, make_distractor as _make_distractor
from ..models import GameMode, Topic


@dataclass(frozen=True)
class TopicMeta:
    id: str
    name: str
    description: str
    symbol: str


_TOPICS: List[TopicMeta] = [
    TopicMeta(Topic.ARITHMETIC.value, "Arithmetic", "Sums, products, powers and percentages.", "🔢"),
    TopicMeta(Topic.ALGEBRA.value, "Algebra", "Equations, systems and factoring.", "📐"),
    TopicMeta(Topic.GEOMETRY.value, "Geometry", "Areas, volumes, angles and lengths.", "📏"),
    TopicMeta(Topic.PROBABILITY.value, "Probability", "Fractions, percentages and chance.", "🎲"),
    TopicMeta(Topic.STATISTICS.value, "Statistics", "Mean, median, mode and spread.", "📊"),
]


def list_topics() -> List[TopicMeta]:
    return list(_TOPICS)


def get_topic(topic_id: str) -> TopicMeta:
    t = Topic.parse(topic_id)
    for m in _TOPICS:
        if m.id == t.value:
            return m
    raise KeyError(f"Unknown topic id: {topic_id}")


def make_distractor(topic_id: str, mode: GameMode | str = GameMode.CLASSIC, rng=None) -> BaseDistractor:
    """Factory that builds the distractor heuristic for a topic."""
    return _make_distractor(get_topic(topic_id).id, mode=mode, rng=rng)
