"""Error types raised by the quiz core."""


class QuizError(Exception):
    """Base class for quiz service errors."""


class ProviderFailure(QuizError):
    """The question provider could not produce a usable batch."""


class DataUnavailable(QuizError):
    """No questions are loaded yet."""


class SampleError(QuizError):
    """Sampling or sanitizing the daily questions failed."""
