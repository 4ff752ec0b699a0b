from __future__ import annotations

"""Bundled question dataset (topic -> level -> records).

Raw records carry their question under a key starting with "Q" and the answer
under a key starting with "A" (for example ``{"Q1": ..., "A1": ...}``).
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from ..models import Level, QuestionRecord, Topic


def default_dataset_path() -> Path:
    return Path(__file__).resolve().parents[1] / "resources" / "dataset.json"


def _read_raw(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yml", ".yaml"):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Dataset root must be a mapping: {path}")
    return data


def _iter_entries(bucket: Any) -> Iterable[Any]:
    if isinstance(bucket, dict):
        return bucket.values()
    if isinstance(bucket, list):
        return bucket
    return ()


def parse_record(entry: Any) -> Optional[QuestionRecord]:
    """Build a record from a raw entry, or None when the Q/A keys are missing."""
    if not isinstance(entry, dict):
        return None
    q_key = next((k for k in entry if str(k).startswith("Q")), None)
    a_key = next((k for k in entry if str(k).startswith("A")), None)
    if q_key is None or a_key is None:
        return None
    return QuestionRecord(question_text=str(entry[q_key]), answer_text=str(entry[a_key]))


class Dataset:
    """Read-only, in-memory view of the question bank."""

    def __init__(self, raw: Dict[str, Any]) -> None:
        self._records: Dict[Topic, Dict[Level, List[QuestionRecord]]] = {}
        for topic_key, levels in raw.items():
            try:
                topic = Topic.parse(topic_key)
            except KeyError:
                continue
            if not isinstance(levels, dict):
                continue
            per_level = self._records.setdefault(topic, {})
            for level_key, bucket in levels.items():
                try:
                    level = Level.parse(level_key)
                except KeyError:
                    continue
                recs = [r for r in (parse_record(e) for e in _iter_entries(bucket)) if r is not None]
                per_level.setdefault(level, []).extend(recs)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Dataset":
        p = Path(path) if path else default_dataset_path()
        return cls(_read_raw(p))

    def topics(self) -> List[Topic]:
        return [t for t in Topic if t in self._records]

    def levels(self, topic: Topic) -> List[Level]:
        per = self._records.get(topic, {})
        return [lvl for lvl in Level if per.get(lvl)]

    def records(self, topic: Topic, level: Level) -> List[QuestionRecord]:
        return list(self._records.get(topic, {}).get(level, []))

    def count(self, topic: Topic, level: Level | None = None) -> int:
        if level is None:
            return sum(len(v) for v in self._records.get(topic, {}).values())
        return len(self._records.get(topic, {}).get(level, []))
