from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for session analytics and smoothing.

    - streak_weight: share of the composite mark given to streak consistency (0..1)
    - pace_ref_qpm: questions per minute that counts as full pace in time attack (>0)
    - smoothing_span: EWMA span in sessions (>1)
    """

    streak_weight: float = Field(0.25, ge=0, le=1)
    pace_ref_qpm: float = Field(20.0, gt=0)
    smoothing_span: int = Field(10, gt=1)
