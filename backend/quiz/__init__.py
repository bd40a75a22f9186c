"""Daily trivia quiz core: sampling, sanitizing and the refreshing pool."""
from .cache import FreshnessCache
from .daily import build_answer_key, daily_seed, sample_questions, sanitize_questions, shuffle
from .errors import DataUnavailable, ProviderFailure, SampleError
from .models import Question, QuestionDraft, assign_ids
from .provider import GeminiProvider

__all__ = [
    "FreshnessCache",
    "GeminiProvider",
    "Question",
    "QuestionDraft",
    "assign_ids",
    "build_answer_key",
    "daily_seed",
    "sample_questions",
    "sanitize_questions",
    "shuffle",
    "DataUnavailable",
    "ProviderFailure",
    "SampleError",
]
