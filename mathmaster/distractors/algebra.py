from __future__ import annotations

"""Algebra distractors.

Answer shapes handled, in order of detection:
- systems of equations: "x=2, y=-3"
- plus/minus roots:     "x = ±5"
- single equalities:    "x = 7"
- factored expressions: "(x + 3)(x - 2)"
Anything else goes through the generic fallback.
"""

import re
from typing import List, Tuple

from .base_distractor import (
    BaseDistractor,
    perturb_integers,
    random_offset,
    unique_draws,
)
from ..errors import MalformedAnswerFormat
from ..models import Topic

_ASSIGN_RE = re.compile(r"^\s*([A-Za-z]\w*)\s*=\s*(-?\d+)\s*$")
_SINGLE_RE = re.compile(r"^(\s*[A-Za-z]\w*\s*=\s*)(-?\d+)(\s*)$")
_PLUS_MINUS_RE = re.compile(r"^(.*?±\s*)(\d+)(.*)$")
_FACTORED_RE = re.compile(r"\([^()]*\d[^()]*\)")


class AlgebraDistractor(BaseDistractor):
    topic = Topic.ALGEBRA
    placeholders = (
        "{answer} (incorrect)",
        "No solution",
        "Infinitely many solutions",
    )

    @property
    def max_offset(self) -> int:
        return 2 if self.tight else 4

    def _closer(self, value: int) -> int:
        return value + random_offset(self.rng, self.max_offset)

    # --- parsing helpers ---

    def _parse_system(self, answer: str) -> List[Tuple[str, int]]:
        pairs = []
        for part in answer.split(","):
            m = _ASSIGN_RE.match(part)
            if not m:
                raise MalformedAnswerFormat(self.topic.value, answer, f"bad assignment {part.strip()!r}")
            pairs.append((m.group(1), int(m.group(2))))
        return pairs

    def variations(self, answer: str) -> List[str]:
        if "," in answer:
            pairs = self._parse_system(answer)
            return unique_draws(
                lambda: ", ".join(f"{name}={self._closer(v)}" for name, v in pairs),
                3,
                [answer],
            )

        if "±" in answer:
            m = _PLUS_MINUS_RE.match(answer)
            if not m:
                raise MalformedAnswerFormat(self.topic.value, answer, "no magnitude after ±")
            prefix, base, suffix = m.group(1), int(m.group(2)), m.group(3)
            deltas = (1, -1, 2) if self.tight else (2, -2, 3)
            return [f"{prefix}{base + d}{suffix}" for d in deltas if base + d > 0]

        m = _SINGLE_RE.match(answer)
        if m:
            head, value, tail = m.group(1), int(m.group(2)), m.group(3)
            return unique_draws(lambda: f"{head}{self._closer(value)}{tail}", 3, [answer])

        if _FACTORED_RE.search(answer):
            return unique_draws(lambda: perturb_integers(answer, self.rng, self.max_offset), 3, [answer])

        raise MalformedAnswerFormat(self.topic.value, answer, "no known algebra form")

    def filler(self, answer: str) -> str:
        spread = 10 if self.tight else 20
        if "," in answer:
            names = [p.split("=", 1)[0].strip() for p in answer.split(",")]
            return ", ".join(f"{n}={self.rng.randrange(spread) - spread // 2}" for n in names)
        if "±" in answer:
            m = _PLUS_MINUS_RE.match(answer)
            prefix = m.group(1) if m else "x = ±"
            suffix = m.group(3) if m else ""
            top = 5 if self.tight else 10
            return f"{prefix}{self.rng.randint(1, top)}{suffix}"
        m = _SINGLE_RE.match(answer)
        if m:
            return f"{m.group(1)}{self.rng.randrange(spread) - spread // 2}{m.group(3)}"
        return super().filler(answer)
