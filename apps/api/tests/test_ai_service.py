import unittest

from ielts_api.domain.ai.providers.base import (
    GenerationFailure,
    GenerationRequest,
    GenerationSuccess,
)
from ielts_api.domain.ai.service import AIService


class _ScriptedProvider:
    def __init__(self, outcomes: list) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    async def send(self, request: GenerationRequest):
        self.calls += 1
        return self.outcomes.pop(0)


def _failure() -> GenerationFailure:
    return GenerationFailure(kind="transport_failure", reason="request_failed:ConnectError")


class AIServiceRetryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.delays: list[float] = []
        self.request = GenerationRequest(prompt="p", system_prompt="s")

    async def _sleep(self, delay: float) -> None:
        self.delays.append(delay)

    def _service(self, provider: _ScriptedProvider, **kwargs) -> AIService:
        return AIService(primary=provider, sleep=self._sleep, **kwargs)

    async def test_first_success_returns_without_delay(self) -> None:
        provider = _ScriptedProvider([GenerationSuccess(raw_text="{}")])

        result = await self._service(provider).call(self.request)

        self.assertEqual(result, "{}")
        self.assertEqual(provider.calls, 1)
        self.assertEqual(self.delays, [])

    async def test_success_on_kth_attempt_uses_linear_delays(self) -> None:
        for k in (2, 3):
            with self.subTest(k=k):
                self.delays.clear()
                outcomes = [_failure()] * (k - 1) + [GenerationSuccess(raw_text=f"ok-{k}")]
                provider = _ScriptedProvider(outcomes)

                result = await self._service(provider).call(self.request)

                self.assertEqual(result, f"ok-{k}")
                self.assertEqual(provider.calls, k)
                self.assertEqual(self.delays, [1.0, 2.0][: k - 1])

    async def test_three_failures_return_none_after_delays_one_and_two(self) -> None:
        provider = _ScriptedProvider([_failure(), _failure(), _failure()])

        result = await self._service(provider).call(self.request)

        self.assertIsNone(result)
        self.assertEqual(provider.calls, 3)
        self.assertEqual(self.delays, [1.0, 2.0])

    async def test_backoff_unit_scales_delays(self) -> None:
        provider = _ScriptedProvider([_failure(), _failure(), _failure()])

        await self._service(provider, backoff_unit_sec=0.5).call(self.request)

        self.assertEqual(self.delays, [0.5, 1.0])

    async def test_max_attempts_is_clamped_to_three(self) -> None:
        provider = _ScriptedProvider([_failure()] * 5)
        service = self._service(provider, max_attempts=10)

        result = await service.call(self.request)

        self.assertIsNone(result)
        self.assertEqual(service.max_attempts, 3)
        self.assertEqual(provider.calls, 3)

    async def test_single_attempt_never_sleeps(self) -> None:
        provider = _ScriptedProvider([GenerationFailure(kind="empty_response", reason="content_missing")])

        result = await self._service(provider, max_attempts=1).call(self.request)

        self.assertIsNone(result)
        self.assertEqual(self.delays, [])


if __name__ == "__main__":
    unittest.main()
