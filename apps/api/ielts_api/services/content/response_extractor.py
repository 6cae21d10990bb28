import logging
import re
from dataclasses import dataclass
from typing import Literal


logger = logging.getLogger(__name__)

PayloadShape = Literal["object", "array"]

_CODE_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
_DELIMITERS: dict[str, tuple[str, str]] = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


@dataclass(frozen=True)
class ExtractedPayload:
    text: str
    shape: PayloadShape


def strip_code_fences(text: str) -> str:
    return _CODE_FENCE_PATTERN.sub("", text or "").strip()


def _find_balanced_region(text: str, opener: str, closer: str) -> str | None:
    start = text.find(opener)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    # Unbalanced (usually a truncated completion): widest region still wins.
    end = text.rfind(closer)
    if end > start:
        return text[start : end + 1]
    return None


def locate_payload(text: str, expect: PayloadShape = "object") -> ExtractedPayload | None:
    cleaned = strip_code_fences(text)
    order: tuple[PayloadShape, ...] = ("object", "array") if expect == "object" else ("array", "object")
    for shape in order:
        opener, closer = _DELIMITERS[shape]
        region = _find_balanced_region(cleaned, opener, closer)
        if region is not None:
            return ExtractedPayload(text=region, shape=shape)
    return None


def extract_json_text(text: str, expect: PayloadShape = "object") -> str:
    """Return the JSON region of ``text``, or the fence-stripped text itself.

    Never raises and never turns a non-empty response into an empty string, so
    a response without JSON fails loudly in the decoder instead of silently here.
    """
    payload = locate_payload(text, expect)
    if payload is not None:
        return payload.text

    cleaned = strip_code_fences(text)
    logger.debug("no json region found in response: %s", cleaned[:200])
    return cleaned
