import random
import re
import unittest

from mathmaster.distractors import OPTION_COUNT, make_distractor, synthesize_options
from mathmaster.distractors.base_distractor import (
    decimal_span,
    has_int_tokens,
    parse_number,
    perturb_integers,
    split_decimal,
    trim_number,
)
from mathmaster.distractors.geometry import join_answer, split_answer
from mathmaster.distractors.probability import closer_fraction
from mathmaster.models import GameMode, Topic


SAMPLE_ANSWERS = {
    Topic.ARITHMETIC: ["15", "0", "1000", "6.25", "1.5625", "Yes"],
    Topic.ALGEBRA: ["x = 7", "x=3, y=2", "x = ±5", "(x + 3)(x - 2)", "x^2 + 1", "No solution"],
    Topic.GEOMETRY: ["16π square units", "90°", "12 units", "π", "64 cubic units", "a right angle"],
    Topic.STATISTICS: ["7", "4.5", "12.25", "No mode"],
    Topic.PROBABILITY: ["15/100 or 0.15", "3/8", "30%", "0.8333", "1", "1/2", "even odds"],
}


class SynthesizeOptionsTests(unittest.TestCase):
    def test_four_unique_options_with_answer_once(self) -> None:
        for seed in range(5):
            rng = random.Random(seed)
            for topic, answers in SAMPLE_ANSWERS.items():
                for mode in GameMode:
                    for answer in answers:
                        with self.subTest(topic=topic, mode=mode, answer=answer, seed=seed):
                            options = synthesize_options(answer, topic, mode, rng=rng)
                            self.assertEqual(len(options), OPTION_COUNT)
                            self.assertEqual(len(set(options)), OPTION_COUNT)
                            self.assertEqual(options.count(answer), 1)

    def test_same_seed_same_options(self) -> None:
        a = synthesize_options("3/8", Topic.PROBABILITY, GameMode.CLASSIC, rng=random.Random(7))
        b = synthesize_options("3/8", Topic.PROBABILITY, GameMode.CLASSIC, rng=random.Random(7))
        self.assertEqual(a, b)


class ArithmeticTests(unittest.TestCase):
    def test_integer_offsets(self) -> None:
        d = make_distractor(Topic.ARITHMETIC, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("12"), ["11", "13", "14"])
        self.assertEqual(d.distractors("150"), ["135", "165", "172"])

    def test_timed_offsets_are_tighter(self) -> None:
        d = make_distractor(Topic.ARITHMETIC, GameMode.TIME_ATTACK, random.Random(0))
        self.assertEqual(d.distractors("150"), ["143", "157", "161"])

    def test_decimal_keeps_precision(self) -> None:
        d = make_distractor(Topic.ARITHMETIC, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("4.5"), ["4.4", "4.6", "4.7"])

    def test_non_numeric_answer_uses_placeholders(self) -> None:
        d = make_distractor(Topic.ARITHMETIC, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("Yes"), ["Yes (incorrect)", "Not Yes", "None of these"])


class AlgebraTests(unittest.TestCase):
    def test_plus_minus(self) -> None:
        d = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("x = ±5"), ["x = ±7", "x = ±3", "x = ±8"])
        tight = make_distractor(Topic.ALGEBRA, GameMode.SUDDEN_DEATH, random.Random(0))
        self.assertEqual(tight.distractors("x = ±5"), ["x = ±6", "x = ±4", "x = ±7"])

    def test_single_equality_keeps_variable(self) -> None:
        d = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(3))
        for option in d.distractors("y = 14"):
            m = re.match(r"^y = (-?\d+)$", option)
            self.assertIsNotNone(m, option)
            self.assertNotEqual(int(m.group(1)), 14)
            self.assertLessEqual(abs(int(m.group(1)) - 14), 4)

    def test_system_keeps_names(self) -> None:
        d = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(1))
        for option in d.distractors("x=3, y=2"):
            self.assertRegex(option, r"^x=-?\d+, y=-?\d+$")

    def test_factored_form_keeps_shape(self) -> None:
        d = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(2))
        for option in d.distractors("(x + 3)(x - 2)"):
            self.assertRegex(option, r"^\(x \+ \d+\)\(x - \d+\)$")

    def test_unparseable_uses_placeholders(self) -> None:
        d = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(
            d.distractors("All real numbers"),
            ["All real numbers (incorrect)", "No solution", "Infinitely many solutions"],
        )


class GeometryTests(unittest.TestCase):
    def test_pi_and_units_kept(self) -> None:
        d = make_distractor(Topic.GEOMETRY, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(
            d.distractors("16π square units"),
            ["14.4π square units", "17.6π square units", "19.2π square units"],
        )

    def test_degrees_symbol(self) -> None:
        d = make_distractor(Topic.GEOMETRY, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("90°"), ["81°", "99°", "108°"])

    def test_split_and_join(self) -> None:
        self.assertEqual(split_answer("π"), (1.0, True, ""))
        self.assertEqual(split_answer("12 units"), (12.0, False, "units"))
        self.assertEqual(join_answer(1.0, True, "square units"), "π square units")
        with self.assertRaises(ValueError):
            split_answer("a right angle")


class StatisticsTests(unittest.TestCase):
    def test_integer_deltas(self) -> None:
        d = make_distractor(Topic.STATISTICS, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("7"), ["6", "8", "9"])

    def test_decimal_deltas(self) -> None:
        d = make_distractor(Topic.STATISTICS, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("4.5"), ["4.00", "5.00", "5.50"])

    def test_non_numeric(self) -> None:
        d = make_distractor(Topic.STATISTICS, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(d.distractors("Bimodal"), ["No mode", "Cannot be determined", "Bimodal (incorrect)"])


class ProbabilityTests(unittest.TestCase):
    def test_percentages_in_range(self) -> None:
        for seed in range(10):
            d = make_distractor(Topic.PROBABILITY, GameMode.CLASSIC, random.Random(seed))
            for option in d.distractors("95%"):
                self.assertTrue(option.endswith("%"))
                self.assertTrue(0 <= int(option[:-1]) <= 100)

    def test_fractions_stay_valid(self) -> None:
        for seed in range(10):
            d = make_distractor(Topic.PROBABILITY, GameMode.CLASSIC, random.Random(seed))
            for option in d.distractors("1/2"):
                num, den = (int(x) for x in option.split("/"))
                self.assertGreaterEqual(num, 1)
                self.assertGreater(den, num)

    def test_closer_fraction_repairs(self) -> None:
        rng = random.Random(4)
        for _ in range(50):
            num, den = closer_fraction(rng, 1, 2, 2)
            self.assertGreaterEqual(num, 1)
            self.assertGreater(den, num)

    def test_dual_form_kept(self) -> None:
        d = make_distractor(Topic.PROBABILITY, GameMode.TIME_ATTACK, random.Random(5))
        for option in d.distractors("15/100 or 0.15"):
            self.assertRegex(option, r"^\d+/100 or \d\.\d\d$")
            self.assertNotEqual(option, "15/100 or 0.15")

    def test_decimals_in_unit_interval(self) -> None:
        d = make_distractor(Topic.PROBABILITY, GameMode.CLASSIC, random.Random(6))
        for option in d.distractors("0.8333"):
            self.assertRegex(option, r"^\d\.\d{4}$")
            self.assertTrue(0.0 <= float(option) <= 1.0)


class HelperTests(unittest.TestCase):
    def test_parse_number(self) -> None:
        self.assertEqual(parse_number("1,234"), (1234.0, 0))
        self.assertEqual(parse_number("6.25"), (6.25, 2))
        self.assertIsNone(parse_number("x = 7"))
        self.assertIsNone(parse_number("."))

    def test_trim_number(self) -> None:
        self.assertEqual(trim_number(4.50), "4.5")
        self.assertEqual(trim_number(6.0), "6")
        self.assertEqual(trim_number(17.6000001), "17.6")

    def test_perturb_skips_exponents(self) -> None:
        out = perturb_integers("x^2 + 3", random.Random(0), 2)
        self.assertTrue(out.startswith("x^2 + "))
        self.assertNotEqual(out, "x^2 + 3")

    def test_decimals_are_not_integer_tokens(self) -> None:
        self.assertFalse(has_int_tokens("12.5 cm"))
        self.assertEqual(perturb_integers("12.5 cm", random.Random(0), 4), "12.5 cm")
        self.assertEqual(split_decimal("12.5 cm"), ("", 12.5, 1, " cm"))
        self.assertIsNone(split_decimal("3.5 by 2.5"))

    def test_decimal_answers_with_text_move_a_few_percent(self) -> None:
        geo = make_distractor(Topic.GEOMETRY, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(geo.distractors("12.5 cm"), ["12.1 cm", "12.9 cm", "13.1 cm"])
        alg = make_distractor(Topic.ALGEBRA, GameMode.CLASSIC, random.Random(0))
        self.assertEqual(alg.distractors("x = 25.5"), ["x = 24.7", "x = 26.3", "x = 26.8"])

    def test_filler_window_follows_precision(self) -> None:
        self.assertAlmostEqual(decimal_span(3.2, 1, True), 0.64)
        self.assertAlmostEqual(decimal_span(0.05, 2, True), 0.03)
        self.assertAlmostEqual(decimal_span(12, 0, False), 4.8)
        d = make_distractor(Topic.ARITHMETIC, GameMode.SUDDEN_DEATH, random.Random(0))
        for _ in range(200):
            self.assertTrue(2.5 <= float(d.filler("3.2")) <= 3.9)


if __name__ == "__main__":
    unittest.main()
