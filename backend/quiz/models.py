"""Data models for daily trivia questions."""
from typing import Iterable, NamedTuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class QuestionDraft(BaseModel):
    """A question as returned by the generation provider, before it has an id."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(validation_alias=AliasChoices("text", "question"))
    choices: list[str] = Field(min_length=3)
    correct_answer_index: int = Field(
        alias="correctAnswerIndex",
        validation_alias=AliasChoices("correctAnswerIndex", "correct_answer_index"),
    )
    explanation: str = ""

    @model_validator(mode="after")
    def check_answer_index(self):
        if not 0 <= self.correct_answer_index < len(self.choices):
            raise ValueError(
                f"correctAnswerIndex {self.correct_answer_index} out of range "
                f"for {len(self.choices)} choices"
            )
        return self


class Question(QuestionDraft):
    """A question in the live pool."""
    id: int = Field(gt=0)  # 1-based, assigned at ingestion


class FreshnessState(NamedTuple):
    """Pool and refresh time, always replaced together."""
    pool: tuple[Question, ...] = ()
    last_refreshed_at: float = 0.0  # epoch seconds, 0 = never


def assign_ids(drafts: Iterable[QuestionDraft]) -> tuple[Question, ...]:
    """Build a fresh pool with contiguous ids starting at 1."""
    return tuple(
        Question(
            id=index,
            text=draft.text,
            choices=list(draft.choices),
            correct_answer_index=draft.correct_answer_index,
            explanation=draft.explanation,
        )
        for index, draft in enumerate(drafts, start=1)
    )
