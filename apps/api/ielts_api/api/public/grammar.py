from typing import Any

from fastapi import APIRouter

from ielts_api.services.content.generation_service import (
    GrammarCheckRequest,
    WritingEstimateRequest,
    grammar_check as service_grammar_check,
    writing_estimate as service_writing_estimate,
)


router = APIRouter(prefix="/api", tags=["public"])


@router.post("/grammar/check")
async def grammar_check(payload: GrammarCheckRequest) -> dict[str, Any]:
    return await service_grammar_check(payload)


@router.post("/writing/estimate")
async def writing_estimate(payload: WritingEstimateRequest) -> dict[str, Any]:
    return await service_writing_estimate(payload)
