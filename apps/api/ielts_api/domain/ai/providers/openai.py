import logging
from typing import Any

import httpx

from ielts_api.domain.ai.providers.base import (
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationSuccess,
)


logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        timeout_sec: int = 60,
        temperature: float = 0.3,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("ai_api_key_missing")
        if not base_url:
            raise ValueError("ai_base_url_missing")
        try:
            httpx.URL(f"{base_url.rstrip('/')}/chat/completions")
        except httpx.InvalidURL as exc:
            raise ValueError("ai_base_url_invalid") from exc

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.temperature = temperature
        self._http_client = http_client

    def build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def send(self, request: GenerationRequest) -> GenerationOutcome:
        endpoint = f"{self.base_url}/chat/completions"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = self.build_payload(request)

        try:
            if self._http_client is not None:
                response = await self._http_client.post(endpoint, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_sec) as client:
                    response = await client.post(endpoint, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return GenerationFailure(kind="transport_failure", reason=f"request_failed:{exc!r}"[:300])

        if not response.is_success:
            logger.debug("chat completion non-2xx body: %s", response.text[:300])
            return GenerationFailure(kind="transport_failure", reason=f"http_status:{response.status_code}")

        try:
            decoded = response.json()
        except ValueError:
            return GenerationFailure(kind="empty_response", reason="response_not_json")

        text = self._extract_text(decoded)
        if text is None:
            return GenerationFailure(kind="empty_response", reason="content_missing")
        return GenerationSuccess(raw_text=text)

    @staticmethod
    def _extract_text(response_json: Any) -> str | None:
        if not isinstance(response_json, dict):
            return None
        choices = response_json.get("choices")
        if not isinstance(choices, list) or not choices:
            return None

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None

        if isinstance(content, str) and content.strip():
            return content

        if isinstance(content, list):
            texts: list[str] = []
            for part in content:
                if isinstance(part, dict):
                    text = part.get("text")
                    if isinstance(text, str) and text.strip():
                        texts.append(text)
            if texts:
                return "\n".join(texts)

        return None
