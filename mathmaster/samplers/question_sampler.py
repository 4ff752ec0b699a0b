from __future__ import annotations

"""Question sampler: draws presented questions from the dataset.

A draw is a uniform shuffle of the topic/level pool truncated to the
requested count, so no record repeats within one draw. Each record gets its
option set from the topic's distractor heuristic.
"""

import random
from datetime import date
from typing import List, Optional, Tuple

from ..app.explain import trace as xtrace
from ..app.presets import mode_params
from ..data.dataset import Dataset
from ..distractors import synthesize_options
from ..errors import NoQuestionsAvailable
from ..models import GameMode, Level, PresentedQuestion, QuestionRecord, Topic
from ..util.randomness import daily_rng


def default_count(mode: GameMode | str) -> int:
    """5 for classic; a larger batch for timed/elimination modes."""
    return int(mode_params(mode)["questions"])


def _pool(dataset: Dataset, topic: Topic, level: Optional[Level]) -> List[Tuple[QuestionRecord, Level]]:
    levels = [level] if level is not None else list(Level)
    return [(rec, lvl) for lvl in levels for rec in dataset.records(topic, lvl)]


def _present(rec: QuestionRecord, topic: Topic, level: Level, mode: GameMode, rng) -> PresentedQuestion:
    return PresentedQuestion(
        text=rec.question_text,
        correct_answer=rec.answer_text,
        options=synthesize_options(rec.answer_text, topic, mode, rng=rng),
        topic=topic,
        level=level,
    )


def select_questions(
    dataset: Dataset,
    topic: Topic | str,
    level: Level | str | None,
    mode: GameMode | str = GameMode.CLASSIC,
    count: Optional[int] = None,
    rng: random.Random | None = None,
) -> List[PresentedQuestion]:
    """Draw up to `count` questions for topic/level (level None = every level).

    Raises:
        NoQuestionsAvailable: when the pool is empty.
    """
    t = Topic.parse(topic)
    lvl = Level.parse(level) if level is not None else None
    m = GameMode.parse(mode)
    n = default_count(m) if count is None else int(count)
    r = rng if rng is not None else random

    pool = _pool(dataset, t, lvl)
    if not pool:
        raise NoQuestionsAvailable(t.value, lvl.value if lvl else None)
    if n <= 0:
        return []
    r.shuffle(pool)
    picked = [_present(rec, t, rec_level, m, r) for rec, rec_level in pool[:n]]
    xtrace("questions_drawn", {"topic": t.value, "level": lvl.value if lvl else "mixed", "mode": m.value, "count": len(picked), "available": len(pool)})
    return picked


def select_daily_challenge(dataset: Dataset, day: date, count: int = 5) -> List[PresentedQuestion]:
    """Mixed-topic classic draw, identical for every player on `day`."""
    r = daily_rng(day)
    pool = [(rec, t, lvl) for t in dataset.topics() for lvl in Level for rec in dataset.records(t, lvl)]
    if not pool:
        raise NoQuestionsAvailable("DAILY", day.isoformat())
    r.shuffle(pool)
    picked = [_present(rec, t, lvl, GameMode.CLASSIC, r) for rec, t, lvl in pool[: max(0, int(count))]]
    xtrace("questions_drawn", {"daily": day.isoformat(), "count": len(picked), "available": len(pool)})
    return picked
