from __future__ import annotations

"""Base distractor abstraction and shared number/format helpers.

A distractor turns the correct answer of a question into plausible but wrong
alternatives. Subclasses parse the surface syntax of their topic's answers and
raise MalformedAnswerFormat when it is not understood; the base class then
falls back to generic strategies so a full option set is always produced.
"""

import math
import random
import re
from typing import Callable, List, Optional, Sequence, Tuple

from ..app.explain import trace as xtrace
from ..errors import MalformedAnswerFormat
from ..models import GameMode, Topic

_NUMBER_RE = re.compile(r"^[-+]?(?:\d{1,3}(?:,\d{3})+|\d+)?(?:\.\d+)?$")
# Integers that are not exponents ("x^2"), part of a name ("x1") or part of a decimal.
_INT_TOKEN_RE = re.compile(r"(?<![\^\w.])\d+(?!\d|\.\d)")
# Exactly one decimal number with free text around it ("12.5 cm", "x = 2.5").
_DECIMAL_IN_TEXT_RE = re.compile(r"^(\D*?)(-?\d+\.\d+)(\D*)$")


def parse_number(text: str) -> Optional[Tuple[float, int]]:
    """Parse a bare number; returns (value, decimal places) or None."""
    s = text.strip()
    if not s or not any(ch.isdigit() for ch in s) or not _NUMBER_RE.match(s):
        return None
    body = s.replace(",", "")
    decimals = len(body.split(".", 1)[1]) if "." in body else 0
    return float(body), decimals


def format_number(value: float, decimals: int) -> str:
    if decimals <= 0:
        return str(int(round(value)))
    return f"{value:.{decimals}f}"


def trim_number(value: float, places: int = 2) -> str:
    """Round to `places` and drop trailing zeros (4.50 -> "4.5", 6.0 -> "6")."""
    s = f"{round(value, places):.{places}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def random_offset(rng, max_offset: int) -> int:
    """Non-zero integer offset in [-max_offset, max_offset]."""
    return rng.randint(1, max(1, int(max_offset))) * rng.choice((1, -1))


def numeric_variations(value: float, decimals: int, tight: bool) -> List[str]:
    """Near-miss numbers around `value` at the same precision.

    Decimals move by a percentage of their scaled integer form; integers by a
    percentage with a floor of one or two units.
    """
    if decimals > 0:
        multiplier = 10 ** decimals
        base = round(value * multiplier)
        pcts = (0.02, 0.02, 0.03) if tight else (0.03, 0.03, 0.05)
        signs = (-1, 1, 1)
        return [
            format_number((base + s * round(abs(base) * p)) / multiplier, decimals)
            for s, p in zip(signs, pcts)
        ]
    else:
        n = int(round(value))
        pct = 0.05 if tight else 0.1
        d = max(1, math.floor(abs(n) * pct))
        e = max(2, math.floor(abs(n) * pct * 1.5))
        return [str(n - d), str(n + d), str(n + e)]


def perturb_integers(text: str, rng, max_offset: int) -> str:
    """Move every standalone integer in `text` by a small non-zero offset.

    Results stay positive; everything around the integers is kept verbatim.
    """

    def _shift(m: re.Match) -> str:
        n = int(m.group(0))
        off = random_offset(rng, max_offset)
        new = n + off
        if new <= 0:
            new = n + abs(off)
        return str(new)

    return _INT_TOKEN_RE.sub(_shift, text)


def has_int_tokens(text: str) -> bool:
    return bool(_INT_TOKEN_RE.search(text))


def split_decimal(text: str) -> Optional[Tuple[str, float, int, str]]:
    """Split "12.5 cm" into ("", 12.5, 1, " cm"); None unless exactly one decimal is present."""
    m = _DECIMAL_IN_TEXT_RE.match(text)
    if not m:
        return None
    body = m.group(2)
    return m.group(1), float(body), len(body.split(".", 1)[1]), m.group(3)


def decimal_span(value: float, decimals: int, tight: bool) -> float:
    """Half-width of the random filler window, never narrower than three last-place steps."""
    return max(3 * 10 ** -decimals, abs(value) * (0.2 if tight else 0.4))


def unique_draws(make: Callable[[], str], count: int, exclude: Sequence[str], attempts: int = 60) -> List[str]:
    """Call `make` until `count` distinct values outside `exclude` exist or attempts run out."""
    seen = set(exclude)
    out: List[str] = []
    for _ in range(attempts):
        if len(out) >= count:
            break
        v = make()
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class BaseDistractor:
    """Abstract base for per-topic distractor heuristics."""

    topic: Topic = Topic.ARITHMETIC
    placeholders: Tuple[str, ...] = (
        "{answer} (incorrect)",
        "Not {answer}",
        "None of these",
    )
    max_filler_attempts = 40

    def __init__(self, mode: GameMode | str = GameMode.CLASSIC, rng: random.Random | None = None) -> None:
        self.mode = GameMode.parse(mode)
        self.rng = rng if rng is not None else random

    @property
    def tight(self) -> bool:
        return self.mode.is_tight

    def variations(self, answer: str) -> List[str]:
        raise NotImplementedError

    def filler(self, answer: str) -> str:
        num = parse_number(answer)
        if num is not None:
            value, decimals = num
            span = decimal_span(value, decimals, self.tight)
            if decimals > 0:
                return format_number(value + self.rng.uniform(-span, span), decimals)
            return str(int(round(value)) + random_offset(self.rng, int(span)))
        parts = split_decimal(answer)
        if parts is not None:
            head, value, decimals, tail = parts
            span = decimal_span(value, decimals, self.tight)
            return f"{head}{format_number(value + self.rng.uniform(-span, span), decimals)}{tail}"
        if has_int_tokens(answer):
            return perturb_integers(answer, self.rng, 5 if self.tight else 9)
        raise MalformedAnswerFormat(self.topic.value, answer, "no numeric content for filler")

    def fallback(self, answer: str) -> List[str]:
        """Generic strategy used when the topic heuristic cannot parse the answer."""
        num = parse_number(answer)
        if num is not None:
            return numeric_variations(num[0], num[1], self.tight)
        parts = split_decimal(answer)
        if parts is not None:
            head, value, decimals, tail = parts
            return [f"{head}{v}{tail}" for v in numeric_variations(value, decimals, self.tight)]
        if has_int_tokens(answer):
            max_off = 2 if self.tight else 4
            return unique_draws(lambda: perturb_integers(answer, self.rng, max_off), 3, [answer])
        return [p.format(answer=answer) for p in self.placeholders]

    def placeholder(self, answer: str, n: int) -> str:
        if n <= len(self.placeholders):
            return self.placeholders[n - 1].format(answer=answer)
        return f"{answer} ({n - len(self.placeholders)})"

    def distractors(self, answer: str, count: int = 3) -> List[str]:
        """Return `count` unique wrong options for `answer`."""
        try:
            candidates = self.variations(answer)
        except MalformedAnswerFormat as exc:
            xtrace("distractor_fallback", {"topic": self.topic.value, "answer": answer, "reason": str(exc)})
            candidates = self.fallback(answer)

        seen = {answer}
        picked: List[str] = []
        for c in candidates:
            if len(picked) >= count:
                break
            if c not in seen:
                seen.add(c)
                picked.append(c)

        attempts = 0
        while len(picked) < count and attempts < self.max_filler_attempts:
            attempts += 1
            try:
                c = self.filler(answer)
            except MalformedAnswerFormat:
                break
            if c not in seen:
                seen.add(c)
                picked.append(c)

        n = 0
        while len(picked) < count:
            n += 1
            c = self.placeholder(answer, n)
            if c not in seen:
                seen.add(c)
                picked.append(c)
        return picked
