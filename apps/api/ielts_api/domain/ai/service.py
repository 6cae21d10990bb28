import asyncio
import logging
from typing import Awaitable, Callable

from ielts_api.domain.ai.providers.base import (
    ChatCompletionProvider,
    GenerationFailure,
    GenerationRequest,
)


logger = logging.getLogger(__name__)

MAX_ATTEMPTS_LIMIT = 3


class AIService:
    """Bounded retry loop around a single-attempt provider.

    After failed attempt ``i`` the call waits ``i * backoff_unit_sec`` before
    the next attempt (1 unit, then 2 units). The growth is linear, not
    exponential; callers and tests rely on exactly this timing.
    """

    def __init__(
        self,
        *,
        primary: ChatCompletionProvider,
        max_attempts: int = MAX_ATTEMPTS_LIMIT,
        backoff_unit_sec: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.primary = primary
        self.max_attempts = max(1, min(MAX_ATTEMPTS_LIMIT, int(max_attempts)))
        self.backoff_unit_sec = max(0.0, float(backoff_unit_sec))
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        return attempt * self.backoff_unit_sec

    async def call(self, request: GenerationRequest) -> str | None:
        for attempt in range(1, self.max_attempts + 1):
            logger.info("generation attempt %d/%d", attempt, self.max_attempts)
            outcome = await self.primary.send(request)
            if not isinstance(outcome, GenerationFailure):
                logger.info("generation attempt %d succeeded (%d chars)", attempt, len(outcome.raw_text))
                return outcome.raw_text

            logger.warning(
                "generation attempt %d failed: %s (%s)",
                attempt,
                outcome.kind,
                outcome.reason,
            )
            if attempt < self.max_attempts:
                await self._sleep(self.backoff_delay(attempt))

        logger.warning("generation gave up after %d attempts", self.max_attempts)
        return None
