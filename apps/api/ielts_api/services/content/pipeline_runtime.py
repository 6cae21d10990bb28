import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from ielts_api.domain.ai.service import AIService
from ielts_api.services.content.prompt_builder import PromptSpec
from ielts_api.services.content.response_extractor import extract_json_text, locate_payload


logger = logging.getLogger(__name__)

T = TypeVar("T")

EXTRACTION_FAILURE = "extraction_failure"
DECODE_FAILURE = "decode_failure"

Part = Callable[[], Awaitable[T | None]]


async def run_pipeline(
    ai_service: AIService,
    spec: PromptSpec,
    decode: Callable[[str], T | None],
    *,
    pipeline: str = "content",
) -> T | None:
    """retry -> extract -> decode. Returns None on any terminal failure."""
    raw_text = await ai_service.call(spec.to_request())
    if raw_text is None:
        return None

    if locate_payload(raw_text, spec.expect) is None:
        # The decoder still gets the cleaned text and reports the final outcome.
        logger.warning("%s: %s: no json %s in response", pipeline, EXTRACTION_FAILURE, spec.expect)
    record = decode(extract_json_text(raw_text, spec.expect))
    if record is None:
        logger.warning("%s: %s", pipeline, DECODE_FAILURE)
    return record


async def collect_best_effort(parts: Sequence[Part[T]], *, pipeline: str = "content") -> list[T]:
    """Run parts in order and keep the ones that produced a result."""
    collected: list[T] = []
    for index, part in enumerate(parts, start=1):
        result = await part()
        if result is None:
            logger.warning("%s: part %d/%d unavailable, skipping", pipeline, index, len(parts))
            continue
        collected.append(result)
    return collected


async def collect_all_or_nothing(parts: Sequence[Part[T]], *, pipeline: str = "content") -> list[T] | None:
    """Run parts in order; the first missing part discards the whole aggregate."""
    collected: list[T] = []
    for index, part in enumerate(parts, start=1):
        result = await part()
        if result is None:
            logger.warning("%s: part %d/%d unavailable, discarding aggregate", pipeline, index, len(parts))
            return None
        collected.append(result)
    return collected
