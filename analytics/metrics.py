from __future__ import annotations

"""Metric computations for per-session analytics."""

import numpy as np
import pandas as pd
from .config import AnalyticsConfig


def compute_metrics(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Compute accuracy, points per question, pace and composite mark.

    Returns a copy with added columns:
    - acc, pts_per_q, streak_ratio, qpm, pace_factor, mark

    qpm and pace_factor only apply to time attack rows; other modes get
    NaN pace and a neutral factor of 1.
    """
    out = df.copy()
    # answered is 0 for an abandoned sudden-death run
    q = out["answered"].astype("float32").where(out["answered"] > 0, other=1.0)
    score = out["score"].astype("float32")
    out["acc"] = (score / q).astype("float32")
    out["pts_per_q"] = (out["points"].astype("float32") / q).astype("float32")
    out["streak_ratio"] = (out["max_streak"].astype("float32") / q).astype("float32")

    minutes = out["duration_s"].astype("float32").to_numpy(dtype="float32", na_value=0.0) / 60.0
    timed = (out["mode"].astype("string") == "timeAttack").to_numpy(dtype=bool, na_value=False) & (minutes > 0)
    qpm = np.where(timed, score.to_numpy(dtype="float32", na_value=0.0) / np.where(minutes > 0, minutes, 1.0), np.nan)
    out["qpm"] = qpm.astype("float32")
    pace = np.where(timed, np.clip(qpm / float(cfg.pace_ref_qpm), 0.0, 1.0), 1.0)
    out["pace_factor"] = pace.astype("float32")

    # Composite mark
    w = float(cfg.streak_weight)
    blended = (1.0 - w) * out["acc"] + w * out["streak_ratio"]
    out["mark"] = (blended * out["pace_factor"]).clip(0, 1).astype("float32")
    return out
