from __future__ import annotations

"""Basic session stats: JSON-based aggregation, formatting and high scores."""

import json
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple


def new_session_stats() -> Dict:
    """Create a new, empty stats structure."""
    return {"total": 0, "correct": 0, "per_level": {}}


def update_stats(stats: Dict, level: str, correct: bool) -> None:
    """Update stats for a single question outcome."""
    stats["total"] = int(stats.get("total", 0)) + 1
    if correct:
        stats["correct"] = int(stats.get("correct", 0)) + 1
    per = stats.setdefault("per_level", {})
    bucket = per.setdefault(level, {"asked": 0, "correct": 0})
    bucket["asked"] += 1
    bucket["correct"] += 1 if correct else 0


def write_stats(stats: Dict, path: str) -> None:
    """Write stats as JSON to path."""
    p = Path(path)
    with p.open("w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2)


def format_summary(stats: Dict) -> str:
    """Return a human-readable summary of stats."""
    total = int(stats.get("total", 0))
    correct = int(stats.get("correct", 0))
    lines = [f"Total: {correct}/{total} correct"]
    per = stats.get("per_level", {})
    for lvl in sorted(per.keys()):
        asked = per[lvl].get("asked", 0)
        corr = per[lvl].get("correct", 0)
        lines.append(f"{lvl}: {corr}/{asked}")
    return "\n".join(lines)


class HighScoreBook:
    """Best score per (mode, topic); topic None stands for mixed-topic sessions."""

    def __init__(self, initial: Optional[Dict[Tuple[str, Optional[str]], int]] = None) -> None:
        self._best: Dict[Tuple[str, Optional[str]], int] = dict(initial or {})

    @classmethod
    def from_rows(cls, rows: Iterable[Tuple[str, Optional[str], int]]) -> "HighScoreBook":
        book = cls()
        for mode, topic, score in rows:
            book.record(mode, topic, int(score))
        return book

    def best(self, mode: str, topic: Optional[str]) -> Optional[int]:
        return self._best.get((mode, topic))

    def record(self, mode: str, topic: Optional[str], score: int) -> bool:
        """Store `score` if it beats the current best; returns True for a new best."""
        prev = self._best.get((mode, topic))
        if prev is None or score > prev:
            self._best[(mode, topic)] = int(score)
            return prev is not None or score > 0
        return False
