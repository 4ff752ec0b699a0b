from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

`--explain` prints one JSON line per session milestone: questions drawn,
answers graded, ticks, completion, navigation. `--explain-only tick,navigate`
narrows the output to the named events.
"""

import json
from typing import Any, Dict, FrozenSet, Iterable, Optional

_ENABLED = False
_ONLY: Optional[FrozenSet[str]] = None


def enable(flag: bool = True, only: Iterable[str] | None = None) -> None:
    global _ENABLED, _ONLY
    _ENABLED = bool(flag)
    _ONLY = frozenset(e.strip() for e in only if e.strip()) if only else None


def enabled(event: str | None = None) -> bool:
    if not _ENABLED:
        return False
    return event is None or _ONLY is None or event in _ONLY


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not enabled(event):
        return
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        print(f"[EXPLAIN] {event}")
        return
    print(f"[EXPLAIN] {event} :: {line}")
