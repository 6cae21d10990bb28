import logging
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ielts_api.api.content import router as content_router
from ielts_api.api.public.grammar import router as public_grammar_router
from ielts_api.core.config import get_settings
from ielts_api.core.logging import configure_logging
from ielts_api.services.content.error_policy import build_http_error_payload, build_unexpected_error_payload


settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="IELTS Prep API",
    version="0.1.0",
    description="Structured IELTS practice content generation API",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok", "env": settings.env}


@app.exception_handler(HTTPException)
async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    trace_id = request.headers.get("x-trace-id") or uuid4().hex
    payload = build_http_error_payload(exc, trace_id)
    return JSONResponse(status_code=exc.status_code, content=payload)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    trace_id = request.headers.get("x-trace-id") or uuid4().hex
    logger.error("unhandled error trace_id=%s", trace_id, exc_info=exc)
    payload = build_unexpected_error_payload(trace_id)
    return JSONResponse(status_code=500, content=payload)


app.include_router(content_router)
app.include_router(public_grammar_router)
