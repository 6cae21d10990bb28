from typing import Any

from fastapi import APIRouter

from ielts_api.services.content.generation_service import (
    EssayFeedbackRequest,
    ListeningRequest,
    MockTestRequest,
    TopicRequest,
    WordExplainRequest,
    WritingTaskRequest,
    content_daily_topic as service_daily_topic,
    content_essay_feedback as service_essay_feedback,
    content_explain_word as service_explain_word,
    content_grammar_lesson as service_grammar_lesson,
    content_listening_exercise as service_listening_exercise,
    content_mock_listening as service_mock_listening,
    content_mock_reading as service_mock_reading,
    content_mock_speaking as service_mock_speaking,
    content_mock_writing as service_mock_writing,
    content_reading_passage as service_reading_passage,
    content_speaking_set as service_speaking_set,
    content_vocabulary as service_vocabulary,
    content_writing_task as service_writing_task,
)


router = APIRouter(prefix="/api", tags=["content"])


@router.post("/vocabulary")
async def content_vocabulary(payload: TopicRequest) -> dict[str, Any]:
    return await service_vocabulary(payload)


@router.post("/vocabulary/explain")
async def content_explain_word(payload: WordExplainRequest) -> dict[str, Any]:
    return await service_explain_word(payload)


@router.post("/reading/passage")
async def content_reading_passage(payload: TopicRequest) -> dict[str, Any]:
    return await service_reading_passage(payload)


@router.post("/writing/task")
async def content_writing_task(payload: WritingTaskRequest) -> dict[str, Any]:
    return await service_writing_task(payload)


@router.post("/writing/feedback")
async def content_essay_feedback(payload: EssayFeedbackRequest) -> dict[str, Any]:
    return await service_essay_feedback(payload)


@router.post("/speaking/set")
async def content_speaking_set(payload: TopicRequest) -> dict[str, Any]:
    return await service_speaking_set(payload)


@router.post("/listening/exercise")
async def content_listening_exercise(payload: ListeningRequest) -> dict[str, Any]:
    return await service_listening_exercise(payload)


@router.post("/grammar/lesson")
async def content_grammar_lesson(payload: TopicRequest) -> dict[str, Any]:
    return await service_grammar_lesson(payload)


@router.post("/mock-test/reading")
async def content_mock_reading(payload: MockTestRequest) -> dict[str, Any]:
    return await service_mock_reading(payload)


@router.post("/mock-test/listening")
async def content_mock_listening(payload: MockTestRequest) -> dict[str, Any]:
    return await service_mock_listening(payload)


@router.post("/mock-test/writing")
async def content_mock_writing(payload: MockTestRequest) -> dict[str, Any]:
    return await service_mock_writing(payload)


@router.post("/mock-test/speaking")
async def content_mock_speaking(payload: MockTestRequest) -> dict[str, Any]:
    return await service_mock_speaking(payload)


@router.get("/daily-topic")
def content_daily_topic() -> dict[str, Any]:
    return service_daily_topic()
