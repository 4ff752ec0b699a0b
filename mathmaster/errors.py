from __future__ import annotations

"""Error kinds raised by the quiz engine."""


class NoQuestionsAvailable(LookupError):
    """A topic/level combination has no backing questions."""

    def __init__(self, topic: str, level: str | None) -> None:
        self.topic = topic
        self.level = level
        where = f"{topic}/{level}" if level else f"{topic} (any level)"
        super().__init__(f"No questions available for {where}")


class MalformedAnswerFormat(ValueError):
    """A distractor heuristic could not parse the answer syntax it expects."""

    def __init__(self, topic: str, answer: str, reason: str = "") -> None:
        self.topic = topic
        self.answer = answer
        msg = f"Cannot parse {topic} answer {answer!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
