"""Session-history analytics: per-session metrics and EWMA trends."""

from .config import AnalyticsConfig
from .metrics import compute_metrics
from .prepare import load_and_prepare
from .smoothing import ewma_by_session

__all__ = ["AnalyticsConfig", "compute_metrics", "ewma_by_session", "load_and_prepare"]
