from ielts_api.core.config import Settings
from ielts_api.domain.ai.providers.openai import OpenAICompatibleProvider
from ielts_api.domain.ai.service import AIService


def build_ai_service(settings: Settings) -> AIService:
    primary = _build_primary_provider(settings)
    return AIService(
        primary=primary,
        max_attempts=settings.ai_max_attempts,
        backoff_unit_sec=settings.ai_backoff_unit_sec,
    )


def _build_primary_provider(settings: Settings) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(
        api_key=settings.ai_api_key,
        model=settings.ai_model,
        base_url=settings.ai_base_url,
        timeout_sec=settings.ai_request_timeout_sec,
        temperature=settings.ai_temperature,
    )
