"""AI providers."""

from ielts_api.domain.ai.providers.base import (
    ChatCompletionProvider,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationSuccess,
)
from ielts_api.domain.ai.providers.openai import OpenAICompatibleProvider

__all__ = [
    "ChatCompletionProvider",
    "GenerationFailure",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationSuccess",
    "OpenAICompatibleProvider",
]
