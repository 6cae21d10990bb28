from dataclasses import dataclass
from typing import Literal, Protocol, Union


FailureKind = Literal["transport_failure", "empty_response"]


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    system_prompt: str
    max_tokens: int = 3000
    json_mode: bool = True


@dataclass(frozen=True)
class GenerationSuccess:
    raw_text: str


@dataclass(frozen=True)
class GenerationFailure:
    """Opaque failure; `kind` and `reason` exist for logging only."""

    kind: FailureKind
    reason: str


GenerationOutcome = Union[GenerationSuccess, GenerationFailure]


class ChatCompletionProvider(Protocol):
    """Single-attempt chat-completion contract returning raw assistant text."""

    async def send(self, request: GenerationRequest) -> GenerationOutcome:
        ...
