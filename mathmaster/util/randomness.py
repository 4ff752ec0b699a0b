from __future__ import annotations

"""Randomness helpers for seeding and per-day generators."""

import os
import random
from datetime import date


def seed_if_needed() -> None:
    """Seed the module RNG if the SEED env var is set."""
    seed = os.environ.get("SEED")
    if seed is not None:
        try:
            s = int(seed)
        except ValueError:
            return
        random.seed(s)


def daily_rng(day: date) -> random.Random:
    """RNG that yields the same sequence for everyone on a given calendar day."""
    return random.Random(int(day.strftime("%Y%m%d")))
