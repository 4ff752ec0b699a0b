from __future__ import annotations

"""Configuration loading and validation for MathMaster.

This module loads YAML configuration, applies defaults, and validates
that modes, scoring values and paths are sane for the CLI.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..app.presets import MODE_PRESETS, SCORING_DEFAULTS
from ..models import GameMode, Level


ALLOWED_MODES = {m.value for m in GameMode}
_POSITIVE_MODE_KEYS = ("questions", "time_budget_s", "time_cap_s", "lives")
_NON_NEGATIVE_MODE_KEYS = ("time_bonus_s", "feedback_delay_ms")


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unknown modes are dropped, out-of-range numbers fall back to the preset
    value, and an explicitly configured dataset file must exist.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    for section in ("dataset", "modes", "scoring", "daily", "stats", "history", "ui"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    dataset = cfg["dataset"]
    modes = cfg["modes"]
    scoring = cfg["scoring"]
    daily = cfg["daily"]
    stats = cfg["stats"]
    history = cfg["history"]
    ui = cfg["ui"]

    dataset.setdefault("path", None)

    for mode_id in list(modes.keys()):
        if mode_id not in ALLOWED_MODES:
            print(f"WARNING: Unsupported mode '{mode_id}' in config, ignoring.")
            del modes[mode_id]

    for mode_id, preset in MODE_PRESETS.items():
        section = modes.setdefault(mode_id, {})
        if not isinstance(section, dict):
            print(f"WARNING: Mode section '{mode_id}' must be a mapping, using presets.")
            section = modes[mode_id] = {}
        for key in _POSITIVE_MODE_KEYS + _NON_NEGATIVE_MODE_KEYS:
            if key not in preset:
                continue
            section.setdefault(key, preset[key])
            value = _as_int(section[key])
            floor = 1 if key in _POSITIVE_MODE_KEYS else 0
            if value is None or value < floor:
                print(f"WARNING: Invalid {mode_id}.{key} '{section[key]}', using {preset[key]}.")
                value = preset[key]
            section[key] = value

    level_points = scoring.get("level_points")
    if not isinstance(level_points, dict):
        level_points = scoring["level_points"] = dict(SCORING_DEFAULTS["level_points"])
    for level in Level:
        pts = _as_int(level_points.get(level.value))
        if pts is None or pts < 0:
            level_points[level.value] = SCORING_DEFAULTS["level_points"][level.value]
    scoring.setdefault("mixed_level_points", SCORING_DEFAULTS["mixed_level_points"])
    scoring.setdefault("streak_bonus_every", SCORING_DEFAULTS["streak_bonus_every"])
    scoring.setdefault("streak_bonus_points", SCORING_DEFAULTS["streak_bonus_points"])
    scoring.setdefault("celebrate_ratio", SCORING_DEFAULTS["celebrate_ratio"])
    try:
        ratio = float(scoring["celebrate_ratio"])
    except (TypeError, ValueError):
        ratio = -1.0
    if not (0.0 < ratio <= 1.0):
        print(f"WARNING: Invalid celebrate_ratio '{scoring['celebrate_ratio']}', using 0.8.")
        ratio = SCORING_DEFAULTS["celebrate_ratio"]
    scoring["celebrate_ratio"] = ratio
    if (_as_int(scoring["streak_bonus_every"]) or 0) < 1:
        print("WARNING: streak_bonus_every must be >= 1, using 3.")
        scoring["streak_bonus_every"] = SCORING_DEFAULTS["streak_bonus_every"]

    daily.setdefault("questions", 5)
    if (_as_int(daily["questions"]) or 0) < 1:
        print(f"WARNING: Invalid daily.questions '{daily['questions']}', using 5.")
        daily["questions"] = 5

    stats.setdefault("output_path", None)
    stats.setdefault("show_summary", True)

    history.setdefault("enabled", False)
    history.setdefault("data_dir", "~/.mathmaster")

    ui.setdefault("default_mode", GameMode.CLASSIC.value)
    ui.setdefault("feedback_delay", True)
    try:
        ui["default_mode"] = GameMode.parse(ui["default_mode"]).value
    except KeyError:
        print(f"WARNING: Unsupported default_mode '{ui['default_mode']}', using 'classic'.")
        ui["default_mode"] = GameMode.CLASSIC.value

    # An explicitly configured dataset must exist
    if dataset.get("path"):
        ds_path = Path(str(dataset["path"]))
        if not ds_path.exists():
            print(f"ERROR: Dataset not found at '{ds_path}'.", file=sys.stderr)
            sys.exit(1)

    return cfg
