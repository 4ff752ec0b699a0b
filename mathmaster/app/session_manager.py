from __future__ import annotations

"""Session Manager: the quiz/game state machine.

Phases run MODE_SELECT -> TOPIC_SELECT -> IN_PROGRESS -> COMPLETE. The
manager owns the session state, the question sequence and (for time attack)
the one-second ticker; every transition goes through the methods below and
is announced on the event bus. It is front-end agnostic: the CLI, or any
other presenter, forwards user input here and renders the snapshots.
"""

import math
import random
import threading
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from storage.schema import SessionRow
from storage.store import append_sessions as storage_append, init_store as storage_init_store, validate_records as storage_validate_records

from ..data.dataset import Dataset
from ..errors import NoQuestionsAvailable
from ..models import GameMode, Level, PresentedQuestion, Topic
from ..samplers.question_sampler import select_daily_challenge, select_questions
from ..stats.stats import HighScoreBook
from . import events
from .events import EventBus
from .explain import trace as xtrace
from .presets import mode_params, scoring_params
from .timer import SessionTimer


class Phase(str, Enum):
    MODE_SELECT = "mode_select"
    TOPIC_SELECT = "topic_select"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class SessionState:
    mode: GameMode = GameMode.CLASSIC
    topic: Optional[Topic] = None
    level: Optional[Level] = None
    phase: Phase = Phase.MODE_SELECT
    index: int = 0
    score: int = 0
    points: int = 0
    streak: int = 0
    max_streak: int = 0
    lives: Optional[int] = None
    time_remaining: Optional[int] = None
    answered: int = 0
    elapsed_s: int = 0
    celebrating: bool = False
    daily: Optional[date] = None
    questions: List[PresentedQuestion] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    def snapshot(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        data["topic"] = self.topic.value if self.topic else None
        data["level"] = self.level.value if self.level else None
        data["phase"] = self.phase.value
        data["daily"] = self.daily.isoformat() if self.daily else None
        data["questions"] = len(self.questions)
        return data


@dataclass(frozen=True)
class AnswerFeedback:
    correct: bool
    correct_answer: str
    celebrate: bool
    delay_ms: int
    complete: bool


class SessionManager:
    def __init__(
        self,
        dataset: Dataset,
        cfg: Optional[Dict[str, Any]] = None,
        *,
        rng: random.Random | None = None,
        bus: Optional[EventBus] = None,
        high_scores: Optional[HighScoreBook] = None,
        timer_factory: Optional[Callable[[float, Callable[[], None]], SessionTimer]] = None,
        auto_tick: bool = False,
        history_dir: Optional[Path] = None,
    ) -> None:
        self.dataset = dataset
        self.cfg = cfg or {}
        self.rng = rng
        self.bus = bus or EventBus()
        self.high_scores = high_scores or HighScoreBook()
        self.timer_factory = timer_factory or SessionTimer
        self.auto_tick = auto_tick
        self.history_dir = history_dir
        self.state = SessionState()
        self.new_best = False
        self._scoring = scoring_params(self.cfg.get("scoring"))
        self._timer: Optional[SessionTimer] = None
        self._lock = threading.RLock()
        # Bumped on every reset so a late tick for an old session is ignored
        self._generation = 0
        self._started_at: Optional[datetime] = None
        self._session_id: Optional[str] = None

    # --- parameters ---

    def params(self, mode: GameMode | None = None) -> Dict[str, Any]:
        m = mode or self.state.mode
        return mode_params(m, (self.cfg.get("modes") or {}).get(m.value))

    @property
    def current_question(self) -> Optional[PresentedQuestion]:
        s = self.state
        if s.phase is not Phase.IN_PROGRESS or s.index >= len(s.questions):
            return None
        return s.questions[s.index]

    # --- transitions ---

    def select_mode(self, mode: GameMode | str) -> None:
        with self._lock:
            self._stop_timer()
            m = GameMode.parse(mode)
            self.state = SessionState(mode=m, phase=Phase.TOPIC_SELECT)
            self._reset_counters()
            xtrace("mode_selected", {"mode": m.value})
            self._changed()

    def select_topic(self, topic: Topic | str, level: Level | str | None = None) -> None:
        """Draw the question sequence and start play.

        Raises NoQuestionsAvailable with the session left in TOPIC_SELECT.
        """
        with self._lock:
            if self.state.phase is Phase.MODE_SELECT:
                # Entering straight from a topic link implies classic mode
                self.select_mode(GameMode.CLASSIC)
            t = Topic.parse(topic)
            lvl = Level.parse(level) if level is not None else None
            self._stop_timer()
            try:
                questions = select_questions(
                    self.dataset, t, lvl, self.state.mode, count=int(self.params()["questions"]), rng=self.rng
                )
            except NoQuestionsAvailable:
                self.state = SessionState(mode=self.state.mode, phase=Phase.TOPIC_SELECT)
                self._reset_counters()
                self._changed()
                raise
            self.state.topic = t
            self.state.level = lvl
            self.state.daily = None
            self._begin(questions)

    def start_daily(self, day: Optional[date] = None) -> None:
        with self._lock:
            self._stop_timer()
            d = day or date.today()
            count = int((self.cfg.get("daily") or {}).get("questions", 5))
            questions = select_daily_challenge(self.dataset, d, count=count)
            self.state = SessionState(mode=GameMode.CLASSIC, daily=d)
            self._begin(questions)

    def submit_answer(self, choice: str) -> Optional[AnswerFeedback]:
        with self._lock:
            q = self.current_question
            if q is None:
                return None
            s = self.state
            p = self.params()
            correct = q.is_correct(choice)
            s.answered += 1
            celebrate = False
            if correct:
                prev_streak = s.streak
                s.score += 1
                s.streak += 1
                s.max_streak = max(s.max_streak, s.streak)
                s.points += self._question_points(q) + self._streak_bonus(prev_streak)
                if s.mode is GameMode.TIME_ATTACK and s.time_remaining is not None:
                    s.time_remaining = min(s.time_remaining + int(p["time_bonus_s"]), int(p["time_cap_s"]))
                celebrate = self._should_celebrate()
            else:
                s.streak = 0
                if s.mode is GameMode.SUDDEN_DEATH and s.lives is not None:
                    s.lives = max(0, s.lives - 1)

            xtrace("answer_graded", {"index": s.index, "answer": choice, "truth": q.correct_answer, "correct": correct})

            if s.mode is GameMode.SUDDEN_DEATH and s.lives == 0:
                self._finish()
            else:
                self._advance()

            feedback = AnswerFeedback(
                correct=correct,
                correct_answer=q.correct_answer,
                celebrate=celebrate,
                delay_ms=int(p["feedback_delay_ms"]),
                complete=s.complete,
            )
            self.bus.emit(events.ANSWER, feedback)
            if celebrate:
                self.bus.emit(events.CELEBRATE, s.snapshot())
            self._changed()
            return feedback

    def tick(self, generation: Optional[int] = None) -> None:
        """One second of time attack. A tick from a superseded session is ignored."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            s = self.state
            if s.mode is not GameMode.TIME_ATTACK or s.phase is not Phase.IN_PROGRESS or s.time_remaining is None:
                return
            s.time_remaining = max(0, s.time_remaining - 1)
            s.elapsed_s += 1
            xtrace("tick", {"time_remaining": s.time_remaining})
            if s.time_remaining <= 0:
                self._finish()
            self._changed()

    def retry(self) -> None:
        with self._lock:
            s = self.state
            if s.daily is not None:
                self.start_daily(s.daily)
                return
            if s.topic is None:
                self.select_mode(s.mode)
                return
            mode, topic, level = s.mode, s.topic, s.level
            self.select_mode(mode)
            self.select_topic(topic, level)

    def exit(self) -> None:
        with self._lock:
            self._stop_timer()
            self.state = SessionState()
            self._generation += 1
            xtrace("session_exit", {})
            self._changed()

    def close(self) -> None:
        self._stop_timer()

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    # --- summaries ---

    def summary(self) -> Dict[str, Any]:
        s = self.state
        minutes = s.elapsed_s / 60.0
        return {
            "mode": s.mode.value,
            "topic": s.topic.value if s.topic else None,
            "level": s.level.value if s.level else None,
            "daily": s.daily.isoformat() if s.daily else None,
            "score": s.score,
            "points": s.points,
            "answered": s.answered,
            "accuracy": (s.score / s.answered) if s.answered else 0.0,
            "max_streak": s.max_streak,
            "questions_per_minute": round(s.score / minutes, 1) if (s.mode is GameMode.TIME_ATTACK and minutes > 0) else None,
            "new_best": self.new_best,
        }

    # --- internals ---

    def _reset_counters(self) -> None:
        s = self.state
        p = self.params()
        s.index = 0
        s.score = 0
        s.points = 0
        s.streak = 0
        s.max_streak = 0
        s.answered = 0
        s.elapsed_s = 0
        s.celebrating = False
        s.lives = int(p["lives"]) if s.mode is GameMode.SUDDEN_DEATH else None
        s.time_remaining = int(p["time_budget_s"]) if s.mode is GameMode.TIME_ATTACK else None
        self.new_best = False
        self._generation += 1

    def _begin(self, questions: List[PresentedQuestion]) -> None:
        self._reset_counters()
        self.state.questions = questions
        self.state.phase = Phase.IN_PROGRESS
        self._started_at = datetime.now(timezone.utc)
        self._session_id = str(uuid4())
        xtrace("session_started", {
            "mode": self.state.mode.value,
            "topic": self.state.topic.value if self.state.topic else None,
            "level": self.state.level.value if self.state.level else None,
            "questions": len(questions),
        })
        if self.state.mode is GameMode.TIME_ATTACK and self.auto_tick:
            gen = self._generation
            self._timer = self.timer_factory(1.0, lambda: self.tick(gen))
            self._timer.start()
        self._changed()

    def _advance(self) -> None:
        s = self.state
        s.index += 1
        if s.index < len(s.questions):
            return
        if s.mode is GameMode.CLASSIC:
            self._finish()
            return
        # Timed and elimination modes end on time or lives only: draw a fresh batch
        if s.topic is not None:
            s.questions = select_questions(
                self.dataset, s.topic, s.level, s.mode, count=int(self.params()["questions"]), rng=self.rng
            )
        else:
            (self.rng or random).shuffle(s.questions)
        s.index = 0

    def _question_points(self, q: PresentedQuestion) -> int:
        if q.level is None:
            return int(self._scoring["mixed_level_points"])
        return int(self._scoring["level_points"].get(q.level.value, self._scoring["mixed_level_points"]))

    def _streak_bonus(self, prev_streak: int) -> int:
        every = max(1, int(self._scoring["streak_bonus_every"]))
        return (prev_streak // every) * int(self._scoring["streak_bonus_points"])

    def _should_celebrate(self) -> bool:
        s = self.state
        if s.celebrating:
            return False
        threshold = math.floor(len(s.questions) * float(self._scoring["celebrate_ratio"]))
        best = self.high_scores.best(s.mode.value, s.topic.value if s.topic else None)
        hit_ratio = threshold > 0 and s.score >= threshold
        beat_best = best is not None and s.score > best
        if hit_ratio or beat_best:
            s.celebrating = True
            return True
        return False

    def _finish(self) -> None:
        s = self.state
        if s.phase is Phase.COMPLETE:
            return
        self._stop_timer()
        s.phase = Phase.COMPLETE
        self.new_best = self.high_scores.record(s.mode.value, s.topic.value if s.topic else None, s.score)
        summary = self.summary()
        xtrace("session_complete", summary)
        self._persist()
        self.bus.emit(events.COMPLETE, summary)

    def _persist(self) -> None:
        if self.history_dir is None or self._started_at is None:
            return
        s = self.state
        duration = int((datetime.now(timezone.utc) - self._started_at).total_seconds())
        try:
            row = SessionRow(
                session_id=self._session_id or str(uuid4()),
                session_start=self._started_at,
                mode=s.mode.value,
                topic=s.topic.value if s.topic else "MIXED",
                level=s.level.value if s.level else "Mixed",
                answered=s.answered,
                score=s.score,
                points=s.points,
                max_streak=s.max_streak,
                duration_s=max(0, duration),
            )
            storage_init_store(Path(self.history_dir))
            storage_append(storage_validate_records([row]), Path(self.history_dir))
        except (OSError, ValueError) as e:
            print(f"[WARN] Could not save session history: {e}")

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _changed(self) -> None:
        self.bus.emit(events.STATE_CHANGED, self.state.snapshot())
