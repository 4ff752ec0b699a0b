from __future__ import annotations

"""CLI for MathMaster using SessionManager, Router and the topic registry."""

import argparse
import time
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from storage.store import best_scores, load_all

from ..config.config import load_config, validate_config
from ..data.dataset import Dataset
from ..errors import NoQuestionsAvailable
from ..models import GameMode, Level
from ..stats.stats import HighScoreBook, format_summary, new_session_stats, update_stats, write_stats
from ..util.randomness import seed_if_needed
from .presets import MODE_PRESETS
from .router import Router, Screen
from .session_manager import Phase, SessionManager
from .topic_registry import get_topic, list_topics

NO_QUESTIONS_MSG = "No questions available for this level. Please try another level."


def _build_ui() -> Dict[str, Callable]:
    def ask(prompt: str) -> str:
        return input(prompt)

    def inform(msg: str) -> None:
        print(msg)

    return {"ask": ask, "inform": inform}


def _history_dir(cfg: Dict[str, Any], args: argparse.Namespace) -> Optional[Path]:
    hist = cfg.get("history", {})
    if getattr(args, "no_history", False) or not bool(hist.get("enabled", False)):
        return None
    return Path(str(hist.get("data_dir", "~/.mathmaster"))).expanduser()


def _load_high_scores(history_dir: Optional[Path]) -> HighScoreBook:
    if history_dir is None:
        return HighScoreBook()
    try:
        return HighScoreBook.from_rows(best_scores(load_all(history_dir)))
    except (OSError, ValueError) as e:
        print(f"[WARN] Could not read session history: {e}")
        return HighScoreBook()


def _status_line(sm: SessionManager) -> str:
    s = sm.state
    total = str(len(s.questions)) if s.mode is GameMode.CLASSIC else "∞"
    parts = [f"Question {s.index + 1} of {total}"]
    if s.time_remaining is not None:
        parts.append(f"Time: {s.time_remaining}s")
    if s.lives is not None:
        parts.append("Lives: " + "❤️" * s.lives)
    parts.append(f"Score: {s.score}")
    parts.append(f"Streak: {s.streak}")
    return " | ".join(parts)


def run_session(sm: SessionManager, ui: Dict[str, Callable], *, feedback_delay: bool = True) -> Optional[Dict[str, Any]]:
    """Drive an in-progress session from the terminal; None when the player quits."""
    ask = ui["ask"]
    inform = ui["inform"]
    stats = new_session_stats()

    while sm.state.phase is Phase.IN_PROGRESS:
        q = sm.current_question
        if q is None:
            break
        inform("\n" + _status_line(sm))
        inform(q.text)
        for i, opt in enumerate(q.options, start=1):
            inform(f"  {i}) {opt}")
        raw = ask("Your answer (1-4, 'q' to quit): ").strip().lower()
        if sm.state.complete:
            inform("Time's up!")
            break
        if raw == "q":
            sm.exit()
            return None
        if not raw.isdigit() or not (1 <= int(raw) <= len(q.options)):
            inform("Please pick one of the listed options.")
            continue
        fb = sm.submit_answer(q.options[int(raw) - 1])
        if fb is None:
            break
        update_stats(stats, q.level.value if q.level else "Mixed", fb.correct)
        if fb.correct:
            inform("Correct!")
        else:
            inform(f"Incorrect. The correct answer is: {fb.correct_answer}")
        if fb.celebrate:
            inform("🎉 Great job! 🎉")
        if feedback_delay and not fb.complete:
            time.sleep(fb.delay_ms / 1000.0)

    summary = sm.summary()
    summary["per_level"] = stats["per_level"]
    return summary


def _print_summary(summary: Dict[str, Any], inform: Callable[[str], None], *, per_level: bool = True) -> None:
    inform("\nQuiz Complete!")
    inform(f"Final Score: {summary['score']}")
    inform(f"Points: {summary['points']}")
    inform(f"Best Streak: {summary['max_streak']}")
    if summary["mode"] == GameMode.SUDDEN_DEATH.value:
        inform(f"Questions Answered: {summary['answered']}")
    if summary.get("questions_per_minute") is not None:
        inform(f"Questions Per Minute: {summary['questions_per_minute']}")
    if summary.get("new_best"):
        inform("New high score!")
    if per_level:
        stats = {"total": summary["answered"], "correct": summary["score"], "per_level": summary.get("per_level", {})}
        inform(format_summary(stats))


def _make_manager(cfg: Dict[str, Any], args: argparse.Namespace, router: Optional[Router] = None) -> SessionManager:
    dataset = Dataset.load(cfg["dataset"].get("path"))
    history_dir = _history_dir(cfg, args)
    bus = router.bus if router is not None else None
    return SessionManager(
        dataset,
        cfg,
        bus=bus,
        high_scores=_load_high_scores(history_dir),
        auto_tick=True,
        history_dir=history_dir,
    )


def _play(sm: SessionManager, cfg: Dict[str, Any], args: argparse.Namespace, ui: Dict[str, Callable], start: Callable[[], None]) -> int:
    inform = ui["inform"]
    delay = bool(cfg["ui"].get("feedback_delay", True)) and not getattr(args, "no_delay", False)
    try:
        start()
    except NoQuestionsAvailable:
        inform(NO_QUESTIONS_MSG)
        return 1
    try:
        while True:
            summary = run_session(sm, ui, feedback_delay=delay)
            if summary is None:
                inform("Session abandoned.")
                return 0
            _print_summary(summary, inform, per_level=bool(cfg["stats"].get("show_summary", True)))
            out = cfg["stats"].get("output_path")
            if out:
                write_stats(summary, str(out))
            again = ui["ask"]("Try again? [y/N]: ").strip().lower()
            if again != "y":
                return 0
            sm.retry()
    finally:
        sm.close()


def _cmd_history(cfg: Dict[str, Any], args: argparse.Namespace) -> int:
    from analytics import AnalyticsConfig, ewma_by_session, load_and_prepare

    data_dir = Path(str(cfg["history"].get("data_dir", "~/.mathmaster"))).expanduser()
    acfg = AnalyticsConfig()
    df = load_and_prepare(data_dir, acfg)
    if df.empty:
        print("No sessions recorded yet.")
        return 0
    df = ewma_by_session(df, "acc", span=acfg.smoothing_span, group_cols=["mode", "topic"])
    table = (
        df.groupby(["mode", "topic"], observed=True)
        .agg(sessions=("session_id", "count"), best=("score", "max"), acc=("acc", "mean"), trend=("acc_smooth", "last"))
        .reset_index()
    )
    for row in table.itertuples(index=False):
        print(f"{str(row.mode):<12} {str(row.topic):<12} sessions={int(row.sessions):<4} best={int(row.best):<4} acc={float(row.acc):.0%} trend={float(row.trend):.0%}")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="mathmaster")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--explain", action="store_true", help="Print one-line traces of session milestones")
    p.add_argument("--explain-only", default=None, metavar="EVENTS", help="Comma-separated trace events to keep (implies --explain)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-topics")
    sub.add_parser("show-modes")

    pp = sub.add_parser("play", help="Topic quiz")
    pp.add_argument("--topic", required=True)
    pp.add_argument("--level", default="Level 1")
    pp.add_argument("--mode", default=None)
    pp.add_argument("--no-history", action="store_true")
    pp.add_argument("--no-delay", action="store_true", help="Skip the pause after each answer")

    gp = sub.add_parser("game", help="Game mode: mixed levels, time attack or sudden death")
    gp.add_argument("--topic", required=True)
    gp.add_argument("--mode", default=GameMode.TIME_ATTACK.value)
    gp.add_argument("--no-history", action="store_true")
    gp.add_argument("--no-delay", action="store_true")

    dp = sub.add_parser("daily", help="Daily challenge")
    dp.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")
    dp.add_argument("--no-history", action="store_true")
    dp.add_argument("--no-delay", action="store_true")

    mp = sub.add_parser("menu", help="Interactive home screen")
    mp.add_argument("--no-history", action="store_true")
    mp.add_argument("--no-delay", action="store_true")

    sub.add_parser("history")

    args = p.parse_args(argv)

    if args.cmd == "list-topics":
        for m in list_topics():
            print(f"{m.id.lower()}: {m.symbol} {m.name} - {m.description}")
        return 0

    if args.cmd == "show-modes":
        for mode_id, params in MODE_PRESETS.items():
            print(f"{mode_id}: {params['name']} - {params['description']}")
        return 0

    if args.explain or args.explain_only:
        from .explain import enable as explain_enable
        explain_enable(True, args.explain_only.split(",") if args.explain_only else None)
    seed_if_needed()
    cfg = validate_config(load_config(args.config))
    ui = _build_ui()

    if args.cmd == "history":
        return _cmd_history(cfg, args)

    if args.cmd == "play":
        try:
            topic = get_topic(args.topic).id
            level = Level.parse(args.level)
            mode = GameMode.parse(args.mode or cfg["ui"]["default_mode"])
        except KeyError as e:
            print(e.args[0])
            return 2
        sm = _make_manager(cfg, args)

        def start() -> None:
            sm.select_mode(mode)
            sm.select_topic(topic, level)

        return _play(sm, cfg, args, ui, start)

    if args.cmd == "game":
        try:
            topic = get_topic(args.topic).id
            mode = GameMode.parse(args.mode)
        except KeyError as e:
            print(e.args[0])
            return 2
        sm = _make_manager(cfg, args)

        def start() -> None:
            sm.select_mode(mode)
            sm.select_topic(topic, None)

        return _play(sm, cfg, args, ui, start)

    if args.cmd == "daily":
        try:
            day = date.fromisoformat(args.date) if args.date else date.today()
        except ValueError:
            print(f"Invalid date: {args.date}")
            return 2
        sm = _make_manager(cfg, args)
        return _play(sm, cfg, args, ui, lambda: sm.start_daily(day))

    if args.cmd == "menu":
        return _menu(cfg, args, ui)

    return 0


def _menu(cfg: Dict[str, Any], args: argparse.Namespace, ui: Dict[str, Callable]) -> int:
    """Home screen loop: pick a topic quiz, the daily challenge or game mode."""
    ask = ui["ask"]
    inform = ui["inform"]
    router = Router()
    topics = list_topics()

    while True:
        route = router.current
        if route.screen is Screen.HOME:
            inform("\nMathMaster")
            for i, m in enumerate(topics, start=1):
                inform(f"  {i}) {m.symbol} {m.name}")
            inform("  d) Daily Challenge")
            inform("  g) Game Mode")
            inform("  q) Quit")
            choice = ask("> ").strip().lower()
            if choice == "q":
                return 0
            if choice == "d":
                router.go_to_daily_challenge()
            elif choice == "g":
                router.go_to_game_mode()
            elif choice.isdigit() and 1 <= int(choice) <= len(topics):
                router.go_to_quiz(topics[int(choice) - 1].id)
            continue

        sm = _make_manager(cfg, args, router)
        if route.screen is Screen.QUIZ:
            raw_mode = ask("Mode (classic/timeAttack/suddenDeath) [classic]: ").strip() or GameMode.CLASSIC.value
            raw_level = ask("Level (1-3) [1]: ").strip() or "1"
            try:
                mode = GameMode.parse(raw_mode)
                level = Level.parse(raw_level)
            except KeyError as e:
                inform(e.args[0])
                sm.close()
                router.go_to_home()
                continue
            topic = route.topic

            def start() -> None:
                sm.select_mode(mode)
                sm.select_topic(topic, level)

            _play(sm, cfg, args, ui, start)
        elif route.screen is Screen.DAILY_CHALLENGE:
            _play(sm, cfg, args, ui, sm.start_daily)
        elif route.screen is Screen.GAME_MODE:
            raw_mode = ask("Mode (timeAttack/suddenDeath) [timeAttack]: ").strip() or GameMode.TIME_ATTACK.value
            raw_topic = ask("Topic: ").strip()
            try:
                mode = GameMode.parse(raw_mode)
                topic = get_topic(raw_topic).id
            except KeyError as e:
                inform(e.args[0])
                sm.close()
                router.go_to_home()
                continue

            def start_game() -> None:
                sm.select_mode(mode)
                sm.select_topic(topic, None)

            _play(sm, cfg, args, ui, start_game)
        router.go_to_home()


if __name__ == "__main__":
    raise SystemExit(main())
