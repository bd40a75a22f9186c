"""FastAPI backend for the Daily Trivia Quiz."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from backend.quiz.cache import FreshnessCache, QuestionProvider
from backend.quiz.config import Settings, settings as default_settings
from backend.quiz.daily import build_answer_key, daily_seed, sample_questions, sanitize_questions
from backend.quiz.errors import DataUnavailable, SampleError
from backend.quiz.models import Question
from backend.quiz.provider import GeminiProvider

logger = logging.getLogger(__name__)

INDEX_PATH = Path(__file__).parent.parent / "static" / "index.html"

router = APIRouter()


# Pydantic models for API
class QuizQuestionResponse(BaseModel):
    id: int
    text: str
    choices: list[str]
    explanation: str
    # correctAnswerIndex is only served by /api/answer-key


def get_cache(request: Request) -> FreshnessCache:
    return request.app.state.cache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _todays_questions(cache: FreshnessCache, k: int) -> list[Question]:
    """Sample today's questions, seeded by the cache clock's UTC date."""
    if cache.is_empty:
        raise DataUnavailable("Question pool is empty")
    today = datetime.fromtimestamp(cache.clock(), tz=timezone.utc)
    try:
        return sample_questions(k, cache.pool, daily_seed(today))
    except Exception as e:
        raise SampleError(f"Could not sample questions: {e}") from e


@router.get("/")
async def index() -> FileResponse:
    """Serve the landing page."""
    if not INDEX_PATH.exists():
        raise HTTPException(status_code=404, detail="Landing page not found")
    return FileResponse(INDEX_PATH)


@router.get("/api/quiz", response_model=list[QuizQuestionResponse])
async def get_quiz(
    cache: FreshnessCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """Get today's questions without their answers."""
    await cache.ensure_fresh()

    try:
        return sanitize_questions(_todays_questions(cache, settings.sample_size))
    except DataUnavailable:
        return JSONResponse(
            status_code=503,
            content={
                "errorCode": "DATA_UNAVAILABLE",
                "message": "Quiz data is currently loading or unavailable. Please try again shortly.",
            },
        )
    except Exception:
        logger.exception("Quiz API error")
        return JSONResponse(
            status_code=500,
            content={
                "errorCode": "SERVER_ERROR",
                "message": "Internal server error occurred during data retrieval.",
            },
        )


@router.get("/api/answer-key", response_model=dict[int, int])
async def get_answer_key(
    cache: FreshnessCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """Get the correct choice index for each of today's questions."""
    await cache.ensure_fresh()

    try:
        return build_answer_key(_todays_questions(cache, settings.sample_size))
    except DataUnavailable:
        return JSONResponse(status_code=503, content={"error": "Data unavailable"})
    except Exception:
        logger.exception("Answer key API error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.get("/health")
async def health_check(
    cache: FreshnessCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "cache": cache.status(),
        "questions_loaded": len(cache.pool),
        "last_refreshed_at": cache.last_refreshed_at,
        "model": settings.gemini_model,
    }


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[QuestionProvider] = None,
    clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
    """Create the app. ``provider`` defaults to Gemini using ``settings``."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the question cache on startup."""
        async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
            source = provider or GeminiProvider.from_settings(settings, client=client)
            cache_kwargs = {"clock": clock} if clock is not None else {}
            app.state.settings = settings
            app.state.cache = FreshnessCache(
                source, ttl=settings.cache_ttl_seconds, **cache_kwargs
            )
            logger.info(
                "Quiz cache ready (ttl=%ss, sample size=%d)",
                settings.cache_ttl_seconds,
                settings.sample_size,
            )
            yield

    app = FastAPI(
        title="Daily Trivia Quiz API",
        description="API serving a daily rotating set of AI-generated trivia questions",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
