from .schema import MODES, TOPICS, LEVELS, DTYPES, SessionRow
from .store import (
    init_store,
    validate_records,
    append_sessions,
    load_all,
    best_scores,
    query_trend,
    export_ndjson,
)

__all__ = [
    "MODES",
    "TOPICS",
    "LEVELS",
    "DTYPES",
    "SessionRow",
    "init_store",
    "validate_records",
    "append_sessions",
    "load_all",
    "best_scores",
    "query_trend",
    "export_ndjson",
]
