from __future__ import annotations

"""Per-mode parameter presets and scoring defaults.

The `modes` and `scoring` config sections override these values.
"""

from typing import Any, Dict

from ..models import GameMode

MODE_PRESETS: Dict[str, Dict[str, Any]] = {
    GameMode.CLASSIC.value: {
        "name": "Classic",
        "description": "5 questions, no time limit",
        "questions": 5,
        "feedback_delay_ms": 1500,
    },
    GameMode.TIME_ATTACK.value: {
        "name": "Time Attack",
        "description": "60 seconds, score as many as you can",
        "questions": 20,
        "time_budget_s": 60,
        "time_bonus_s": 3,
        "time_cap_s": 60,
        "feedback_delay_ms": 500,
    },
    GameMode.SUDDEN_DEATH.value: {
        "name": "Sudden Death",
        "description": "3 lives, how far can you go?",
        "questions": 20,
        "lives": 3,
        "feedback_delay_ms": 1500,
    },
}

SCORING_DEFAULTS: Dict[str, Any] = {
    "level_points": {"Level 1": 10, "Level 2": 20, "Level 3": 30},
    "mixed_level_points": 10,
    "streak_bonus_every": 3,
    "streak_bonus_points": 5,
    "celebrate_ratio": 0.8,
}


def mode_params(mode: GameMode | str, overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Resolve parameters for a mode: preset first, then config overrides."""
    m = GameMode.parse(mode)
    return {**MODE_PRESETS[m.value], **(overrides or {})}


def scoring_params(overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    params = dict(SCORING_DEFAULTS)
    for k, v in (overrides or {}).items():
        if k == "level_points" and isinstance(v, dict):
            params[k] = {**SCORING_DEFAULTS["level_points"], **v}
        else:
            params[k] = v
    return params
