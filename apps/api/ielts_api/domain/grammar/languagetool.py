import logging

import httpx

from ielts_api.services.content.records import GrammarCheckResult, GrammarMatch
from ielts_api.services.content.schema_decoder import decode_record


logger = logging.getLogger(__name__)


class LanguageToolClient:
    def __init__(
        self,
        *,
        url: str,
        language: str = "en-US",
        timeout_sec: int = 30,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url:
            raise ValueError("grammar_check_url_missing")
        try:
            httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise ValueError("grammar_check_url_invalid") from exc

        self.url = url
        self.language = language
        self.timeout_sec = timeout_sec
        self._http_client = http_client

    async def check(self, text: str) -> list[GrammarMatch] | None:
        """Single attempt. Returns None when the check could not be performed."""
        form = {"text": text, "language": self.language}

        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.url, data=form)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_sec) as client:
                    response = await client.post(self.url, data=form)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("grammar check failed: transport_failure (%r)", exc)
            return None

        if not response.is_success:
            logger.warning("grammar check failed: http_status:%d", response.status_code)
            return None

        result = decode_record(response.text, GrammarCheckResult)
        if result is None:
            return None
        logger.info("grammar check returned %d match(es)", len(result.matches))
        return result.matches
