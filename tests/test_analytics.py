import math
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from analytics import AnalyticsConfig, compute_metrics, ewma_by_session, load_and_prepare
from storage import append_sessions, init_store, validate_records

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _rows():
    return [
        dict(session_id="a", session_start=T0, mode="classic", topic="ARITHMETIC", level="Level 1",
             answered=5, score=4, points=45, max_streak=3, duration_s=50),
        dict(session_id="b", session_start=T0 + timedelta(hours=1), mode="timeAttack", topic="MIXED", level="Mixed",
             answered=12, score=10, points=110, max_streak=6, duration_s=60),
        dict(session_id="c", session_start=T0 + timedelta(hours=2), mode="classic", topic="ARITHMETIC", level="Level 1",
             answered=5, score=5, points=60, max_streak=5, duration_s=40),
    ]


class AnalyticsConfigTests(unittest.TestCase):
    def test_bounds(self) -> None:
        self.assertEqual(AnalyticsConfig().smoothing_span, 10)
        with self.assertRaises(ValidationError):
            AnalyticsConfig(smoothing_span=1)
        with self.assertRaises(ValidationError):
            AnalyticsConfig(streak_weight=1.5)


class MetricsTests(unittest.TestCase):
    def test_compute_metrics(self) -> None:
        df = compute_metrics(validate_records(_rows()), AnalyticsConfig(streak_weight=0.25, pace_ref_qpm=20))
        a, b, c = (df.iloc[i] for i in range(3))
        self.assertAlmostEqual(float(a["acc"]), 0.8, places=5)
        self.assertAlmostEqual(float(a["pts_per_q"]), 9.0, places=5)
        self.assertTrue(math.isnan(float(a["qpm"])))
        self.assertAlmostEqual(float(a["pace_factor"]), 1.0)
        # 0.75 * 0.8 + 0.25 * 0.6
        self.assertAlmostEqual(float(a["mark"]), 0.75, places=5)
        self.assertAlmostEqual(float(b["qpm"]), 10.0, places=4)
        self.assertAlmostEqual(float(b["pace_factor"]), 0.5, places=5)
        self.assertAlmostEqual(float(c["mark"]), 1.0, places=5)

    def test_zero_answered_row(self) -> None:
        rows = [dict(_rows()[0], answered=0, score=0, points=0, max_streak=0)]
        df = compute_metrics(validate_records(rows), AnalyticsConfig())
        self.assertEqual(float(df.iloc[0]["acc"]), 0.0)
        self.assertEqual(float(df.iloc[0]["mark"]), 0.0)


class PrepareAndSmoothTests(unittest.TestCase):
    def test_load_and_smooth(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_dir = Path(tmp)
            init_store(data_dir)
            append_sessions(validate_records(list(reversed(_rows()))), data_dir)
            df = load_and_prepare(data_dir, AnalyticsConfig())
        self.assertEqual(list(df["session_id"]), ["a", "b", "c"])
        self.assertEqual(list(df["session_idx"]), [0, 1, 2])

        sm = ewma_by_session(df, "acc", span=2, group_cols=["mode", "topic"])
        by_id = dict(zip(sm["session_id"], sm["acc_smooth"]))
        self.assertAlmostEqual(float(by_id["a"]), 0.8, places=5)
        self.assertAlmostEqual(float(by_id["b"]), 10 / 12, places=5)
        # adjusted EWMA with span 2 (alpha 2/3): (1.0 + 0.8 / 3) / (1 + 1 / 3)
        self.assertAlmostEqual(float(by_id["c"]), 0.95, places=5)

        flat = ewma_by_session(df, "acc", span=2)
        self.assertEqual(len(flat), 3)
        self.assertAlmostEqual(float(flat.iloc[0]["acc_smooth"]), 0.8, places=5)


if __name__ == "__main__":
    unittest.main()
