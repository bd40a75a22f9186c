"""Question generation through the Gemini ``generateContent`` API."""
import json
import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import ProviderFailure
from .models import QuestionDraft

logger = logging.getLogger(__name__)

QUIZ_PROMPT = """You are an expert writer of general-knowledge trivia quizzes. Never reuse a question you have generated before.

Generate {count} unique, new trivia questions drawn from a different mix of fields than any previous request (for example science, history, spelling and grammar, programming, digital literacy, sports, economics, geography, politics, society).

Return ONLY a JSON array. Each element must have exactly this shape:
{{"text": "question text", "choices": ["choice 1", "choice 2", "choice 3"], "correctAnswerIndex": 0, "explanation": "why the answer is correct"}}

Rules:
1. Every question has at least 3 choices
2. correctAnswerIndex is the 0-based index of the correct choice
3. Do not add any text outside the JSON array

[REQUEST_ID: {request_id}]"""


def build_prompt(count: int, request_id: Optional[int] = None) -> str:
    """Build the generation prompt with a per-request nonce."""
    if request_id is None:
        request_id = int(time.time() * 1000)
    return QUIZ_PROMPT.format(count=count, request_id=request_id)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model may wrap around JSON."""
    return text.replace("```json", "").replace("```", "").strip()


def parse_questions(text: str) -> list[QuestionDraft]:
    """Parse a model reply into validated drafts.

    Invalid entries are dropped; a reply with no usable entries is a failure.
    """
    cleaned = strip_code_fences(text)
    start = cleaned.find("[")
    end = cleaned.rfind("]") + 1
    if start < 0 or end <= start:
        raise ProviderFailure("Provider reply does not contain a JSON array")

    try:
        data = json.loads(cleaned[start:end])
    except json.JSONDecodeError as e:
        raise ProviderFailure(f"Provider reply is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ProviderFailure("Provider reply is not a JSON array")

    drafts: list[QuestionDraft] = []
    for position, item in enumerate(data):
        try:
            drafts.append(QuestionDraft.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping malformed question #%d: %s", position, e.errors()[0]["msg"])

    if not drafts:
        raise ProviderFailure("Provider returned no usable questions")
    return drafts


class GeminiProvider:
    """Fetches question batches from Gemini."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        batch_size: int = 5,
        temperature: float = 0.9,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size
        self.temperature = temperature
        self.timeout = timeout
        self.client = client

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> "GeminiProvider":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            batch_size=settings.batch_size,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
            client=client,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _payload(self) -> dict:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": build_prompt(self.batch_size)}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self.temperature,
            },
        }

    async def _post(self, client: httpx.AsyncClient) -> dict:
        response = await client.post(
            self.url,
            params={"key": self.api_key},
            json=self._payload(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def fetch_batch(self) -> list[QuestionDraft]:
        """Request one batch of new questions."""
        if not self.api_key:
            raise ProviderFailure("GEMINI_API_KEY is not configured")

        try:
            if self.client is not None:
                result = await self._post(self.client)
            else:
                async with httpx.AsyncClient() as client:
                    result = await self._post(client)
        except httpx.HTTPStatusError as e:
            raise ProviderFailure(f"Gemini returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise ProviderFailure(f"Gemini service unavailable: {e}") from e
        except ValueError as e:
            raise ProviderFailure(f"Gemini response is not JSON: {e}") from e

        try:
            text = result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderFailure("Gemini response has no usable candidate") from e

        return parse_questions(text)
