from __future__ import annotations

"""Parquet-backed store for quiz session history using pandas + pyarrow.

Unit of data: one summary row per completed session.
"""

from pathlib import Path

import pandas as pd

from .schema import DTYPES, SessionRow, MODES, TOPICS


DATA_FILE = "sessions.parquet"


def _empty_df() -> pd.DataFrame:
    dtypes = DTYPES.copy()
    df = pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})
    return df


def init_store(data_dir: Path) -> None:
    """Ensure data directory and an empty Parquet file with correct schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / DATA_FILE
    if not path.exists():
        _empty_df().to_parquet(path, engine="pyarrow", compression="zstd")


def validate_records(records: list[SessionRow]) -> pd.DataFrame:
    """Validate a list of SessionRow (or dicts) and return a DataFrame with proper dtypes."""
    if not isinstance(records, list):
        raise TypeError("records must be a list[SessionRow]")
    rows = [r if isinstance(r, SessionRow) else SessionRow.model_validate(r) for r in records]
    if not rows:
        return _empty_df()
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df)


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col in df.columns:
            df[col] = df[col].astype(dt)
        else:
            df[col] = pd.Series(pd.NA, index=df.index).astype(dt)
    return df[list(DTYPES.keys())]


def append_sessions(df_new: pd.DataFrame, data_path: Path) -> None:
    """Append rows to the sessions table.

    - Reads existing, concatenates, fixes dtypes, removes duplicate session ids, and writes back.
    - Uses pyarrow with zstd compression.
    """
    data_path = Path(data_path)
    f = data_path / DATA_FILE
    if f.exists():
        df_old = pd.read_parquet(f, engine="pyarrow")
    else:
        df_old = _empty_df()
    df_new = _fix_dtypes(df_new.copy())
    frames = [d for d in (_fix_dtypes(df_old), df_new) if not d.empty]
    combined = pd.concat(frames, ignore_index=True) if frames else _empty_df()
    combined = _fix_dtypes(combined)
    combined = combined.drop_duplicates(subset=["session_id"], keep="last")
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_all(data_path: Path) -> pd.DataFrame:
    """Load the full session history, ensuring dtypes, and compute convenience columns.

    Adds:
    - acc: float32 = score / answered
    - pts_per_q: float32 = points / answered
    """
    f = Path(data_path) / DATA_FILE
    if not f.exists():
        return _empty_df().assign(acc=pd.Series(dtype="float32"), pts_per_q=pd.Series(dtype="float32"))
    df = pd.read_parquet(f, engine="pyarrow")
    df = _fix_dtypes(df)
    # Avoid division warnings; compute as float32
    q = df["answered"].astype("float32").where(df["answered"] > 0, other=1.0)
    df["acc"] = (df["score"].astype("float32") / q).astype("float32")
    df["pts_per_q"] = (df["points"].astype("float32") / q).astype("float32")
    return df


def best_scores(df: pd.DataFrame) -> list[tuple[str, str | None, int]]:
    """Best score per (mode, topic); the MIXED topic maps back to None."""
    if df.empty:
        return []
    g = df.groupby(["mode", "topic"], observed=True)["score"].max().reset_index()
    out = []
    for row in g.itertuples(index=False):
        topic = None if str(row.topic) == "MIXED" else str(row.topic)
        out.append((str(row.mode), topic, int(row.score)))
    return out


def query_trend(df: pd.DataFrame, *, mode: str, topic: str) -> pd.DataFrame:
    """Filter rows for a given (mode, topic) and sort by session_start."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    if topic not in TOPICS:
        raise ValueError(f"Unknown topic: {topic}")
    dff = df[(df["mode"].astype("string") == mode) & (df["topic"].astype("string") == topic)]
    return dff.sort_values("session_start").reset_index(drop=True)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
