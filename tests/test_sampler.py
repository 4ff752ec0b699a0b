import random
import unittest
from datetime import date

from mathmaster.data.dataset import Dataset
from mathmaster.errors import NoQuestionsAvailable
from mathmaster.models import GameMode, Level, Topic
from mathmaster.samplers.question_sampler import default_count, select_daily_challenge, select_questions


def _dataset(n_level1: int = 8, n_level2: int = 3) -> Dataset:
    raw = {
        "ARITHMETIC": {
            "Level 1": [{f"Q{i}": f"What is {i} + {i}?", f"A{i}": str(2 * i)} for i in range(1, n_level1 + 1)],
            "Level 2": [{f"Q{i}": f"What is {i} x 10?", f"A{i}": str(10 * i)} for i in range(1, n_level2 + 1)],
        },
        "ALGEBRA": {"Level 1": []},
    }
    return Dataset(raw)


class SelectQuestionsTests(unittest.TestCase):
    def test_default_counts(self) -> None:
        self.assertEqual(default_count(GameMode.CLASSIC), 5)
        self.assertEqual(default_count(GameMode.TIME_ATTACK), 20)
        self.assertEqual(default_count("suddenDeath"), 20)

    def test_classic_draw_has_no_repeats(self) -> None:
        qs = select_questions(_dataset(), Topic.ARITHMETIC, Level.LEVEL_1, GameMode.CLASSIC, rng=random.Random(1))
        self.assertEqual(len(qs), 5)
        self.assertEqual(len({q.text for q in qs}), 5)
        for q in qs:
            self.assertEqual(q.topic, Topic.ARITHMETIC)
            self.assertEqual(q.level, Level.LEVEL_1)
            self.assertEqual(len(q.options), 4)
            self.assertIn(q.correct_answer, q.options)

    def test_count_capped_by_pool(self) -> None:
        qs = select_questions(_dataset(), Topic.ARITHMETIC, Level.LEVEL_2, GameMode.TIME_ATTACK, rng=random.Random(2))
        self.assertEqual(len(qs), 3)

    def test_mixed_levels(self) -> None:
        qs = select_questions(_dataset(), "arithmetic", None, GameMode.TIME_ATTACK, rng=random.Random(3))
        self.assertEqual(len(qs), 11)
        self.assertEqual({q.level for q in qs}, {Level.LEVEL_1, Level.LEVEL_2})

    def test_zero_count_returns_empty(self) -> None:
        self.assertEqual(select_questions(_dataset(), Topic.ARITHMETIC, Level.LEVEL_1, count=0), [])

    def test_empty_pool_raises(self) -> None:
        with self.assertRaises(NoQuestionsAvailable) as ctx:
            select_questions(_dataset(), Topic.ALGEBRA, Level.LEVEL_1)
        self.assertEqual(ctx.exception.topic, "ALGEBRA")
        self.assertEqual(ctx.exception.level, "Level 1")
        with self.assertRaises(NoQuestionsAvailable):
            select_questions(_dataset(), Topic.GEOMETRY, None)

    def test_seeded_draw_is_reproducible(self) -> None:
        a = select_questions(_dataset(), Topic.ARITHMETIC, Level.LEVEL_1, rng=random.Random(9))
        b = select_questions(_dataset(), Topic.ARITHMETIC, Level.LEVEL_1, rng=random.Random(9))
        self.assertEqual([q.to_json() for q in a], [q.to_json() for q in b])


class DailyChallengeTests(unittest.TestCase):
    def test_same_day_same_questions(self) -> None:
        ds = Dataset.load()
        day = date(2024, 3, 14)
        a = select_daily_challenge(ds, day)
        b = select_daily_challenge(ds, day)
        self.assertEqual(len(a), 5)
        self.assertEqual([q.to_json() for q in a], [q.to_json() for q in b])

    def test_count(self) -> None:
        qs = select_daily_challenge(Dataset.load(), date(2024, 1, 1), count=8)
        self.assertEqual(len(qs), 8)
        self.assertEqual(len({(q.topic, q.text) for q in qs}), 8)

    def test_empty_dataset_raises(self) -> None:
        with self.assertRaises(NoQuestionsAvailable):
            select_daily_challenge(Dataset({}), date(2024, 1, 1))


if __name__ == "__main__":
    unittest.main()
