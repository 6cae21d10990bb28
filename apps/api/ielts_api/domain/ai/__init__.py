"""AI domain services and provider abstractions."""

from ielts_api.domain.ai.factory import build_ai_service
from ielts_api.domain.ai.service import AIService

__all__ = ["AIService", "build_ai_service"]
