from __future__ import annotations

"""Smoothing utilities (EWMA by session)."""

import pandas as pd


def ewma_by_session(
    df: pd.DataFrame,
    value_col: str,
    span: int,
    group_cols: list[str] | None = None,
) -> pd.DataFrame:
    """Apply EWMA smoothing per group over session order.

    Returns a copy of df sorted by session_idx with a new column
    f"{value_col}_smooth". Without group columns the whole history is one series.
    """
    g = df.sort_values("session_idx", kind="stable").copy()
    values = g[value_col].astype("float32")
    if group_cols:
        # transform keeps the original row index, so the result aligns with g
        smooth = values.groupby([g[c] for c in group_cols], observed=True).transform(
            lambda s: s.ewm(span=span).mean()
        )
    else:
        smooth = values.ewm(span=span).mean()
    g[f"{value_col}_smooth"] = smooth.astype("float32")
    return g
