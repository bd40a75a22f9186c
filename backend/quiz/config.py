"""Runtime settings for the quiz service."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file, if present
_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_ROOT / ".env")


def _first(*keys: str) -> Optional[str]:
    """Return the value of the first environment variable found in keys."""
    for key in keys:
        val = os.getenv(key)
        if val:
            return val
    return None


class Settings(BaseModel):
    gemini_api_key: Optional[str] = _first("GEMINI_API_KEY", "GOOGLE_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    cache_ttl_seconds: float = Field(
        default=float(os.getenv("QUIZ_CACHE_TTL_SECONDS", "3600")), ge=0
    )
    sample_size: int = Field(default=int(os.getenv("QUIZ_SAMPLE_SIZE", "5")), ge=0)
    batch_size: int = Field(default=int(os.getenv("QUIZ_BATCH_SIZE", "5")), gt=0)
    temperature: float = float(os.getenv("QUIZ_TEMPERATURE", "0.9"))
    request_timeout: float = float(os.getenv("QUIZ_REQUEST_TIMEOUT", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for app-wide settings
settings = Settings()
