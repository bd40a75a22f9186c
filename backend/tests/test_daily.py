from datetime import datetime, timedelta, timezone

import pytest

from backend.quiz.daily import (
    build_answer_key,
    daily_seed,
    sample_questions,
    sanitize_questions,
    shuffle,
)
from backend.quiz.models import Question, QuestionDraft, assign_ids


def _pool(n):
    drafts = [
        QuestionDraft(
            text=f"Question {i}?",
            choices=["a", "b", "c", "d"],
            correct_answer_index=i % 4,
            explanation=f"Because {i}",
        )
        for i in range(n)
    ]
    return assign_ids(drafts)


def test_daily_seed_format_is_zero_padded():
    assert daily_seed(datetime(2024, 3, 7, 12, 0, tzinfo=timezone.utc)) == "20240307"


def test_daily_seed_stable_within_utc_day_and_changes_at_midnight():
    start = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
    last = datetime(2024, 1, 1, 23, 59, 59, tzinfo=timezone.utc)
    assert daily_seed(start) == daily_seed(last) == "20240101"
    assert daily_seed(last + timedelta(seconds=1)) == "20240102"


def test_daily_seed_converts_to_utc():
    seoul = timezone(timedelta(hours=9))
    # 08:00 in Seoul on Jan 2 is still Jan 1 in UTC
    assert daily_seed(datetime(2024, 1, 2, 8, 0, tzinfo=seoul)) == "20240101"


def test_shuffle_is_a_deterministic_permutation():
    items = list(range(20))
    first = shuffle(items, "20240101")
    assert sorted(first) == items
    assert shuffle(items, "20240101") == first


def test_shuffle_does_not_mutate_input():
    items = [1, 2, 3, 4, 5]
    shuffle(items, "seed")
    assert items == [1, 2, 3, 4, 5]


def test_shuffle_depends_on_seed():
    items = list(range(10))
    assert shuffle(items, "20240101") != shuffle(items, "20240102")


def test_shuffle_handles_tiny_sequences():
    assert shuffle([], "x") == []
    assert shuffle(["only"], "x") == ["only"]


def test_sample_takes_min_of_k_and_pool():
    pool = _pool(3)
    assert len(sample_questions(5, pool, "20240101")) == 3
    assert len(sample_questions(2, pool, "20240101")) == 2
    assert sample_questions(0, pool, "20240101") == []


def test_sample_empty_pool_returns_empty():
    assert sample_questions(5, (), "20240101") == []


def test_sample_rejects_negative_k():
    with pytest.raises(ValueError):
        sample_questions(-1, _pool(3), "20240101")


def test_sample_is_repeatable_within_a_day():
    pool = _pool(10)
    assert sample_questions(5, pool, "20240101") == sample_questions(5, pool, "20240101")


def test_sanitize_removes_only_the_answer():
    questions = sample_questions(5, _pool(10), "20240101")
    safe = sanitize_questions(questions)
    assert [q["id"] for q in safe] == [q.id for q in questions]
    for original, public in zip(questions, safe):
        assert "correctAnswerIndex" not in public
        assert "correct_answer_index" not in public
        assert public == {
            "id": original.id,
            "text": original.text,
            "choices": original.choices,
            "explanation": original.explanation,
        }


def test_quiz_and_answer_key_select_same_ids():
    pool = _pool(10)
    assert [q.id for q in pool] == list(range(1, 11))

    quiz_ids = [q["id"] for q in sanitize_questions(sample_questions(5, pool, "20240101"))]
    answer_key = build_answer_key(sample_questions(5, pool, "20240101"))

    assert len(quiz_ids) == 5
    assert list(answer_key) == quiz_ids
    by_id = {q.id: q for q in pool}
    for qid, index in answer_key.items():
        assert index == by_id[qid].correct_answer_index


def test_answer_key_skips_non_integer_fields():
    class Loose:
        def __init__(self, id, correct_answer_index):
            self.id = id
            self.correct_answer_index = correct_answer_index

    key = build_answer_key([Loose(1, 2), Loose("2", 0), Loose(3, True), Loose(4, None)])
    assert key == {1: 2}


def test_assign_ids_ignores_provider_ids():
    drafts = [
        QuestionDraft.model_validate(
            {"id": 99, "question": "Q?", "choices": ["a", "b", "c"], "correctAnswerIndex": 1}
        ),
        QuestionDraft.model_validate(
            {"id": 99, "text": "R?", "choices": ["a", "b", "c"], "correctAnswerIndex": 2}
        ),
    ]
    pool = assign_ids(drafts)
    assert [q.id for q in pool] == [1, 2]
    assert pool[0].text == "Q?"
    assert isinstance(pool[0], Question)


def test_draft_rejects_out_of_range_answer():
    with pytest.raises(ValueError):
        QuestionDraft(text="Q?", choices=["a", "b", "c"], correct_answer_index=3)


def test_draft_requires_three_choices():
    with pytest.raises(ValueError):
        QuestionDraft(text="Q?", choices=["a", "b"], correct_answer_index=0)
