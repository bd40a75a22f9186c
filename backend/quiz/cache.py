"""Time-based cache of the question pool."""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from .errors import ProviderFailure
from .models import FreshnessState, Question, QuestionDraft, assign_ids

logger = logging.getLogger(__name__)

ONE_HOUR = 3600.0


class QuestionProvider(Protocol):
    def fetch_batch(self) -> Awaitable[Sequence[QuestionDraft]]: ...


class FreshnessCache:
    """Owns the question pool and refreshes it once it is older than ``ttl``.

    Freshness is measured only by time since the last successful fetch. The
    pool and its timestamp are swapped as one immutable ``FreshnessState`` so
    readers never see one without the other. Concurrent callers share a single
    in-flight refresh.
    """

    def __init__(
        self,
        provider: QuestionProvider,
        ttl: float = ONE_HOUR,
        clock: Callable[[], float] = time.time,
    ):
        self.provider = provider
        self.ttl = ttl
        self.clock = clock
        self._state = FreshnessState()
        self._inflight: Optional[asyncio.Task] = None

    @property
    def state(self) -> FreshnessState:
        return self._state

    @property
    def pool(self) -> tuple[Question, ...]:
        return self._state.pool

    @property
    def last_refreshed_at(self) -> float:
        return self._state.last_refreshed_at

    @property
    def is_empty(self) -> bool:
        return not self._state.pool

    def is_stale(self) -> bool:
        return (self.clock() - self._state.last_refreshed_at) > self.ttl

    def status(self) -> str:
        if self.is_empty:
            return "empty"
        return "stale" if self.is_stale() else "fresh"

    async def ensure_fresh(self) -> bool:
        """Refresh the pool if it is empty or stale.

        Returns True when the pool is fresh, False when a needed refresh failed.
        """
        if not self.is_empty and not self.is_stale():
            return True

        logger.info("Question pool is %s, attempting refresh", self.status())
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._run_refresh())
        return await asyncio.shield(self._inflight)

    async def _run_refresh(self) -> bool:
        try:
            return await self.refresh()
        finally:
            self._inflight = None

    async def refresh(self) -> bool:
        """Fetch a new batch and swap it in. Never raises."""
        try:
            pool = assign_ids(await self.provider.fetch_batch())
        except ProviderFailure as e:
            logger.warning("Question refresh failed: %s", e)
            return False
        except Exception:
            logger.exception("Unexpected error while refreshing questions")
            return False

        if not pool:
            logger.warning("Provider returned an empty batch, keeping current pool")
            return False

        self._state = FreshnessState(pool=pool, last_refreshed_at=self.clock())
        logger.info("Question pool refreshed with %d questions", len(self._state.pool))
        return True
