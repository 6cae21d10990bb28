import json
import unittest

import httpx

from ielts_api.domain.ai.providers import (
    GenerationFailure,
    GenerationRequest,
    GenerationSuccess,
    OpenAICompatibleProvider,
)


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class OpenAICompatibleProviderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.captured: list[httpx.Request] = []

    def _provider(self, handler) -> OpenAICompatibleProvider:
        def _record(request: httpx.Request) -> httpx.Response:
            self.captured.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        self.addAsyncCleanup(client.aclose)
        return OpenAICompatibleProvider(
            api_key="test-key",
            model="llama-3.1-8b-instant",
            base_url="https://llm.test/openai/v1/",
            http_client=client,
        )

    async def test_success_returns_raw_assistant_text(self) -> None:
        provider = self._provider(lambda request: httpx.Response(200, json=_completion('{"a": 1}')))

        outcome = await provider.send(GenerationRequest(prompt="hello", system_prompt="sys", max_tokens=4000))

        self.assertEqual(outcome, GenerationSuccess(raw_text='{"a": 1}'))
        sent = self.captured[0]
        self.assertEqual(str(sent.url), "https://llm.test/openai/v1/chat/completions")
        self.assertEqual(sent.headers["authorization"], "Bearer test-key")
        body = json.loads(sent.content)
        self.assertEqual(body["model"], "llama-3.1-8b-instant")
        self.assertEqual(body["max_tokens"], 4000)
        self.assertEqual(body["temperature"], 0.3)
        self.assertEqual(body["response_format"], {"type": "json_object"})
        self.assertEqual(
            body["messages"],
            [{"role": "system", "content": "sys"}, {"role": "user", "content": "hello"}],
        )

    async def test_json_mode_off_omits_response_format(self) -> None:
        provider = self._provider(lambda request: httpx.Response(200, json=_completion("[1, 2]")))

        await provider.send(GenerationRequest(prompt="p", system_prompt="s", json_mode=False))

        self.assertNotIn("response_format", json.loads(self.captured[0].content))

    async def test_list_of_parts_content_is_joined(self) -> None:
        content = [{"type": "text", "text": "first"}, {"type": "text", "text": "second"}]
        provider = self._provider(lambda request: httpx.Response(200, json=_completion(content)))

        outcome = await provider.send(GenerationRequest(prompt="p", system_prompt="s"))

        self.assertEqual(outcome, GenerationSuccess(raw_text="first\nsecond"))

    async def test_non_2xx_status_is_transport_failure(self) -> None:
        provider = self._provider(lambda request: httpx.Response(429, json={"error": "rate limited"}))

        outcome = await provider.send(GenerationRequest(prompt="p", system_prompt="s"))

        self.assertIsInstance(outcome, GenerationFailure)
        self.assertEqual(outcome.kind, "transport_failure")
        self.assertEqual(outcome.reason, "http_status:429")

    async def test_network_error_is_transport_failure(self) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = self._provider(_raise)

        outcome = await provider.send(GenerationRequest(prompt="p", system_prompt="s"))

        self.assertIsInstance(outcome, GenerationFailure)
        self.assertEqual(outcome.kind, "transport_failure")

    async def test_missing_or_blank_content_is_empty_response(self) -> None:
        bodies = [
            {"choices": []},
            {"choices": [{"message": {}}]},
            _completion("   "),
            {"unexpected": True},
        ]
        for body in bodies:
            with self.subTest(body=body):
                provider = self._provider(lambda request, body=body: httpx.Response(200, json=body))

                outcome = await provider.send(GenerationRequest(prompt="p", system_prompt="s"))

                self.assertEqual(outcome, GenerationFailure(kind="empty_response", reason="content_missing"))

    async def test_non_json_body_is_empty_response(self) -> None:
        provider = self._provider(lambda request: httpx.Response(200, text="<html>gateway</html>"))

        outcome = await provider.send(GenerationRequest(prompt="p", system_prompt="s"))

        self.assertEqual(outcome, GenerationFailure(kind="empty_response", reason="response_not_json"))


class OpenAICompatibleProviderConfigTests(unittest.TestCase):
    def test_missing_api_key_raises(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            OpenAICompatibleProvider(api_key="", model="m", base_url="https://llm.test/v1")
        self.assertEqual(str(ctx.exception), "ai_api_key_missing")

    def test_missing_base_url_raises(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            OpenAICompatibleProvider(api_key="k", model="m", base_url="")
        self.assertEqual(str(ctx.exception), "ai_base_url_missing")

    def test_malformed_base_url_raises_config_error(self) -> None:
        for base_url in ("https://api.groq.com:abc/openai/v1", "http://[::1/v1"):
            with self.subTest(base_url=base_url):
                with self.assertRaises(ValueError) as ctx:
                    OpenAICompatibleProvider(api_key="k", model="m", base_url=base_url)
                self.assertEqual(str(ctx.exception), "ai_base_url_invalid")


if __name__ == "__main__":
    unittest.main()
