"""Deterministic daily selection of quiz questions.

Every request recomputes today's sample from the pool. Because the shuffle is
seeded only by the UTC date, the quiz endpoint and the answer-key endpoint
agree on which questions were picked, and in which order.
"""
import math
import random
from datetime import datetime, timezone
from typing import Optional, Sequence, TypeVar

from .models import Question

T = TypeVar("T")


def daily_seed(now: Optional[datetime] = None) -> str:
    """Return the current UTC calendar day as ``YYYYMMDD``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%d")


def shuffle(sequence: Sequence[T], seed: str) -> list[T]:
    """Seeded Fisher-Yates shuffle on a copy of ``sequence``."""
    rng = random.Random(seed)
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def sample_questions(
    k: int, pool: Sequence[Question], seed: Optional[str] = None
) -> list[Question]:
    """Pick today's ``k`` questions from the pool."""
    if k < 0:
        raise ValueError(f"sample size must be non-negative, got {k}")
    if seed is None:
        seed = daily_seed()
    count = min(k, len(pool))
    return shuffle(pool, seed)[:count]


def sanitize_questions(questions: Sequence[Question]) -> list[dict]:
    """Strip the correct answer so questions can be sent to players."""
    return [
        {"id": q.id, **q.model_dump(by_alias=True, exclude={"id", "correct_answer_index"})}
        for q in questions
    ]


def build_answer_key(questions: Sequence[Question]) -> dict[int, int]:
    """Map question id to the index of its correct choice."""
    answer_key: dict[int, int] = {}
    for q in questions:
        qid = getattr(q, "id", None)
        index = getattr(q, "correct_answer_index", None)
        # bool is an int subclass but never a valid id or index
        if type(qid) is not int or type(index) is not int:
            continue
        answer_key[qid] = index
    return answer_key
