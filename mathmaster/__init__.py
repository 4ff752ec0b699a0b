"""MathMaster package initialization.

Exposes the question dataset, the option synthesizer and the session
state machine so notebooks and front ends can simply `import mathmaster`.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .data.dataset import Dataset
from .distractors import synthesize_options
from .errors import MalformedAnswerFormat, NoQuestionsAvailable
from .models import GameMode, Level, PresentedQuestion, QuestionRecord, Topic
from .samplers.question_sampler import select_daily_challenge, select_questions

__all__ = [
    "__version__",
    "Dataset",
    "GameMode",
    "Level",
    "MalformedAnswerFormat",
    "NoQuestionsAvailable",
    "PresentedQuestion",
    "QuestionRecord",
    "Topic",
    "select_daily_challenge",
    "select_questions",
    "synthesize_options",
]
