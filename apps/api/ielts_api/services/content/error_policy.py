from typing import Any

from fastapi import HTTPException


KNOWN_ERROR_CODES = {
    "generation_unavailable",
    "grammar_check_unavailable",
    "config_error",
    "unknown",
}

RETRYABLE_ERROR_CODES = {
    "generation_unavailable",
    "grammar_check_unavailable",
}

_DEFAULT_MESSAGES = {
    "generation_unavailable": "Content could not be generated. Please try again.",
    "grammar_check_unavailable": "Grammar check service is unavailable",
    "config_error": "AI service configuration error",
    "unknown": "Request failed",
}


def normalize_error_code(value: Any) -> str:
    raw = str(value or "").strip().lower()
    if raw in KNOWN_ERROR_CODES:
        return raw
    return "unknown"


def _build_message(code: str, reason: str) -> str:
    message = " ".join(str(reason or "").split()).strip()
    if message:
        return message[:260]
    return _DEFAULT_MESSAGES.get(code, "Request failed")


def build_structured_error_detail(
    *,
    error_code: str,
    message: str | None = None,
    retryable: bool | None = None,
    detail: Any = None,
) -> dict[str, Any]:
    code = normalize_error_code(error_code)
    message_text = _build_message(code, message or "")
    if retryable is None:
        retryable = code in RETRYABLE_ERROR_CODES

    detail_text = " ".join(str(detail or "").split()).strip() or message_text
    return {
        "error_code": code,
        "message": message_text,
        "retryable": bool(retryable),
        "detail": detail_text,
    }


def generation_unavailable(pipeline: str) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail=build_structured_error_detail(
            error_code="generation_unavailable",
            detail=f"{pipeline}_failed:generation_unavailable",
        ),
    )


def _payload_from_detail_dict(detail: dict[str, Any]) -> tuple[str, str, bool, str]:
    code = normalize_error_code(detail.get("error_code"))
    message = _build_message(code, detail.get("message") or "")
    retryable = bool(detail.get("retryable")) if "retryable" in detail else code in RETRYABLE_ERROR_CODES
    detail_text = str(detail.get("detail") or "").strip() or message
    return code, message, retryable, detail_text


def build_http_error_payload(exc: HTTPException, trace_id: str) -> dict[str, Any]:
    detail = exc.detail

    if isinstance(detail, dict):
        code, message, retryable, detail_text = _payload_from_detail_dict(detail)
    else:
        # Plain-string details (framework 404/405 and the like).
        code = "unknown"
        detail_text = " ".join(str(detail or "").split()).strip()
        message = _build_message(code, detail_text)
        retryable = False

    return {
        "error_code": code,
        "message": message,
        "retryable": retryable,
        "trace_id": trace_id,
        "detail": detail_text or message,
    }


def build_unexpected_error_payload(trace_id: str) -> dict[str, Any]:
    return {
        "error_code": "unknown",
        "message": "Unexpected server error",
        "retryable": False,
        "trace_id": trace_id,
        "detail": "unexpected_server_error",
    }
