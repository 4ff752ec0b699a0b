import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from mathmaster.app.presets import MODE_PRESETS, mode_params, scoring_params
from mathmaster.config.config import load_config, validate_config
from mathmaster.models import GameMode


def _validate(cfg):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        result = validate_config(cfg)
    return result, out.getvalue()


class ConfigTests(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        cfg, printed = _validate(load_config())
        self.assertEqual(printed, "")
        self.assertEqual(cfg["modes"]["timeAttack"]["time_budget_s"], 60)
        self.assertEqual(cfg["scoring"]["level_points"]["Level 3"], 30)
        self.assertEqual(cfg["ui"]["default_mode"], "classic")
        self.assertFalse(cfg["history"]["enabled"])
        self.assertEqual(cfg["history"]["data_dir"], "~/.mathmaster")

    def test_empty_config_gets_presets(self) -> None:
        cfg, _ = _validate({})
        for mode_id, preset in MODE_PRESETS.items():
            self.assertEqual(cfg["modes"][mode_id]["questions"], preset["questions"])
        self.assertEqual(cfg["daily"]["questions"], 5)
        self.assertIsNone(cfg["dataset"]["path"])

    def test_invalid_values_fall_back(self) -> None:
        cfg, printed = _validate({
            "modes": {"zen": {}, "suddenDeath": {"lives": 0}, "timeAttack": {"time_bonus_s": "lots"}},
            "scoring": {"celebrate_ratio": 2, "level_points": "many", "streak_bonus_every": 0},
            "daily": {"questions": -1},
            "ui": {"default_mode": "normal"},
        })
        self.assertNotIn("zen", cfg["modes"])
        self.assertEqual(cfg["modes"]["suddenDeath"]["lives"], 3)
        self.assertEqual(cfg["modes"]["timeAttack"]["time_bonus_s"], 3)
        self.assertEqual(cfg["scoring"]["celebrate_ratio"], 0.8)
        self.assertEqual(cfg["scoring"]["level_points"]["Level 1"], 10)
        self.assertEqual(cfg["scoring"]["streak_bonus_every"], 3)
        self.assertEqual(cfg["daily"]["questions"], 5)
        self.assertEqual(cfg["ui"]["default_mode"], GameMode.CLASSIC.value)
        self.assertIn("WARNING: Unsupported mode 'zen'", printed)

    def test_missing_dataset_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cfg = {"dataset": {"path": str(Path(tmp) / "missing.json")}}
            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit):
                    validate_config(cfg)

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("modes:\n  classic:\n    questions: 3\n", encoding="utf-8")
            cfg, _ = _validate(load_config(str(path)))
        self.assertEqual(cfg["modes"]["classic"]["questions"], 3)
        self.assertEqual(cfg["modes"]["classic"]["feedback_delay_ms"], 1500)


class PresetTests(unittest.TestCase):
    def test_mode_params_override(self) -> None:
        p = mode_params("timeAttack", {"time_budget_s": 90})
        self.assertEqual(p["time_budget_s"], 90)
        self.assertEqual(p["time_cap_s"], 60)
        self.assertEqual(mode_params("normal")["questions"], 5)

    def test_scoring_params_merge_level_points(self) -> None:
        p = scoring_params({"level_points": {"Level 2": 25}})
        self.assertEqual(p["level_points"], {"Level 1": 10, "Level 2": 25, "Level 3": 30})
        self.assertEqual(p["streak_bonus_points"], 5)


if __name__ == "__main__":
    unittest.main()
