from __future__ import annotations

"""Schema constants and Pydantic models for Parquet-backed session history."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# --- Constants ---

MODES = {"classic", "timeAttack", "suddenDeath"}
TOPICS = {"ARITHMETIC", "ALGEBRA", "GEOMETRY", "STATISTICS", "PROBABILITY", "MIXED"}
LEVELS = {"Level 1", "Level 2", "Level 3", "Mixed"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "mode": _cat_dtype(MODES),
    "topic": _cat_dtype(TOPICS),
    "level": _cat_dtype(LEVELS),
    "answered": "UInt16",
    "score": "UInt16",
    "points": "UInt32",
    "max_streak": "UInt16",
    "duration_s": "UInt32",
}


# --- Pydantic models ---

class SessionRow(BaseModel):
    session_id: str
    session_start: datetime
    mode: Literal["classic", "timeAttack", "suddenDeath"]
    topic: Literal["ARITHMETIC", "ALGEBRA", "GEOMETRY", "STATISTICS", "PROBABILITY", "MIXED"]
    level: Literal["Level 1", "Level 2", "Level 3", "Mixed"]
    answered: int = Field(ge=0, le=65535)
    score: int = Field(ge=0, le=65535)
    points: int = Field(default=0, ge=0, le=4294967295)
    max_streak: int = Field(default=0, ge=0, le=65535)
    duration_s: int = Field(default=0, ge=0, le=4294967295)

    @field_validator("score")
    @classmethod
    def _score_le_answered(cls, v: int, info: ValidationInfo) -> int:
        answered = info.data.get("answered")
        if answered is not None and v > int(answered):
            raise ValueError("score must be <= answered")
        return v

    @field_validator("max_streak")
    @classmethod
    def _streak_le_score(cls, v: int, info: ValidationInfo) -> int:
        score = info.data.get("score")
        if score is not None and v > int(score):
            raise ValueError("max_streak must be <= score")
        return v

    @field_validator("session_start")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
