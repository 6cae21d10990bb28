from functools import lru_cache, partial
import logging
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, Field

from ielts_api.core.config import get_settings
from ielts_api.domain.ai import AIService, build_ai_service
from ielts_api.domain.grammar import LanguageToolClient, build_grammar_checker
from ielts_api.services.content.error_policy import build_structured_error_detail, generation_unavailable
from ielts_api.services.content.normalizer_validator import (
    JUDGEMENT_OPTIONS,
    clamp_answer_index,
    extract_enumerated_options,
    normalize_judgement_answer,
    normalize_options,
)
from ielts_api.services.content.pipeline_runtime import (
    collect_all_or_nothing,
    collect_best_effort,
    run_pipeline,
)
from ielts_api.services.content.prompt_builder import (
    READING_QUESTION_RANGES,
    Feature,
    PromptBuilder,
)
from ielts_api.services.content.records import (
    CambridgeListeningSection,
    CambridgeListeningTest,
    CambridgeReadingPassage,
    CambridgeReadingTest,
    CambridgeSpeakingTest,
    CambridgeWritingTask,
    CambridgeWritingTest,
    EssayFeedback,
    GrammarExercise,
    GrammarLesson,
    ListeningExercise,
    ReadingPassage,
    ReadingQuestion,
    SpeakingSet,
    VocabularyItem,
    WritingTask,
)
from ielts_api.services.content.response_extractor import strip_code_fences
from ielts_api.services.content.schema_decoder import decode_record, decode_record_list
from ielts_api.services.content.writing_feedback import estimate_writing_band


logger = logging.getLogger(__name__)

READING_PASSAGE_COUNT = 3
LISTENING_SECTION_COUNT = 4
WRITING_TASK_SHAPES = {1: (150, 20), 2: (250, 40)}


def _normalize_choice_questions(
    questions: list[ReadingQuestion] | list[GrammarExercise],
) -> None:
    for question in questions:
        options = normalize_options(question.options)
        if len(options) < 2:
            options = extract_enumerated_options(question.question) or options
        question.options = options
        question.correct_answer = clamp_answer_index(question.correct_answer, len(options))


def _normalize_cambridge_passage(passage: CambridgeReadingPassage, passage_number: int) -> None:
    first, last = READING_QUESTION_RANGES.get(passage_number, READING_QUESTION_RANGES[1])
    passage.passage_number = passage_number
    if not passage.question_range:
        passage.question_range = f"Questions {first}-{last}"

    for index, question in enumerate(passage.questions):
        if question.number <= 0:
            question.number = first + index
        if question.type in JUDGEMENT_OPTIONS:
            question.options = list(JUDGEMENT_OPTIONS[question.type])
            question.answer = normalize_judgement_answer(question.answer)
        elif question.type == "multipleChoice":
            question.options = normalize_options(question.options)


def _normalize_cambridge_section(section: CambridgeListeningSection, section_number: int) -> None:
    section.section_number = section_number
    for index, question in enumerate(section.questions):
        question.number = (section_number - 1) * 10 + index + 1


class ContentGenerationService:
    """Feature-level generation: prompt -> retry -> extract -> decode -> normalize.

    Every method returns the finished record, or None when no usable result
    could be produced. Transport and parse failures never raise.
    """

    def __init__(self, ai_service: AIService, prompt_builder: PromptBuilder | None = None) -> None:
        self.ai_service = ai_service
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def generate_vocabulary(self, topic: str) -> list[VocabularyItem] | None:
        spec = self.prompt_builder.build(Feature.VOCABULARY, topic)
        words = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record_list, schema=VocabularyItem),
            pipeline="vocabulary",
        )
        return words or None

    async def generate_reading_passage(self, topic: str) -> ReadingPassage | None:
        spec = self.prompt_builder.build(Feature.READING_PASSAGE, topic)
        passage = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=ReadingPassage),
            pipeline="reading_passage",
        )
        if passage is None:
            return None
        passage.topic = topic
        _normalize_choice_questions(passage.questions)
        return passage

    async def generate_writing_task(self, topic: str, task_type: int = 2) -> WritingTask | None:
        spec = self.prompt_builder.build(Feature.WRITING_TASK, topic, task_type=task_type)
        task = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=WritingTask, defaults={"category": topic}),
            pipeline="writing_task",
        )
        if task is None:
            return None
        task.task_type = 1 if task_type == 1 else 2
        return task

    async def generate_speaking_set(self, topic: str) -> SpeakingSet | None:
        spec = self.prompt_builder.build(Feature.SPEAKING_SET, topic)
        return await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=SpeakingSet, defaults={"topic": topic}),
            pipeline="speaking_set",
        )

    async def generate_listening_exercise(self, topic: str, section: int = 2) -> ListeningExercise | None:
        spec = self.prompt_builder.build(Feature.LISTENING_EXERCISE, topic, section=section)
        exercise = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=ListeningExercise),
            pipeline="listening_exercise",
        )
        if exercise is None:
            return None
        exercise.section = section
        exercise.topic = topic
        return exercise

    async def generate_grammar_lesson(self, topic: str) -> GrammarLesson | None:
        grammar_point = self.prompt_builder.pick_grammar_point()
        spec = self.prompt_builder.build(Feature.GRAMMAR_LESSON, topic, grammar_point=grammar_point)
        lesson = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=GrammarLesson, defaults={"topic": grammar_point}),
            pipeline="grammar_lesson",
        )
        if lesson is None:
            return None
        _normalize_choice_questions(lesson.exercises)
        return lesson

    async def generate_essay_feedback(self, essay: str, topic: str) -> EssayFeedback | None:
        spec = self.prompt_builder.build(Feature.ESSAY_FEEDBACK, topic, essay=essay)
        feedback = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=EssayFeedback),
            pipeline="essay_feedback",
        )
        if feedback is None:
            return None
        feedback.band_score = max(0.0, min(9.0, feedback.band_score))
        return feedback

    async def explain_word(self, word: str, context: str = "") -> str | None:
        spec = self.prompt_builder.build(Feature.WORD_EXPLANATION, word, context=context)
        raw_text = await self.ai_service.call(spec.to_request())
        if raw_text is None:
            return None
        return strip_code_fences(raw_text) or None

    # ─── Cambridge mock tests ──────────────────────────────────────────────────

    async def _cambridge_reading_passage(
        self, book: str, test_number: int, passage_number: int, topic: str = ""
    ) -> CambridgeReadingPassage | None:
        spec = self.prompt_builder.build(
            Feature.CAMBRIDGE_READING_PASSAGE,
            topic,
            book=book,
            test_number=test_number,
            passage_number=passage_number,
        )
        passage = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=CambridgeReadingPassage),
            pipeline=f"cambridge_reading_passage_{passage_number}",
        )
        if passage is None:
            return None
        _normalize_cambridge_passage(passage, passage_number)
        return passage

    async def generate_cambridge_reading_test(
        self, book: str, test_number: int, topic: str = ""
    ) -> CambridgeReadingTest | None:
        parts = [
            partial(self._cambridge_reading_passage, book, test_number, number, topic)
            for number in range(1, READING_PASSAGE_COUNT + 1)
        ]
        passages = await collect_best_effort(parts, pipeline="cambridge_reading")
        if not passages:
            return None
        return CambridgeReadingTest(book=book, test_number=test_number, passages=passages)

    async def _cambridge_listening_section(
        self, book: str, test_number: int, section_number: int, topic: str = ""
    ) -> CambridgeListeningSection | None:
        spec = self.prompt_builder.build(
            Feature.CAMBRIDGE_LISTENING_SECTION,
            topic,
            book=book,
            test_number=test_number,
            section_number=section_number,
        )
        section = await run_pipeline(
            self.ai_service,
            spec,
            partial(decode_record, schema=CambridgeListeningSection),
            pipeline=f"cambridge_listening_section_{section_number}",
        )
        if section is None:
            return None
        _normalize_cambridge_section(section, section_number)
        return section

    async def generate_cambridge_listening_test(
        self, book: str, test_number: int, topic: str = ""
    ) -> CambridgeListeningTest | None:
        parts = [
            partial(self._cambridge_listening_section, book, test_number, number, topic)
            for number in range(1, LISTENING_SECTION_COUNT + 1)
        ]
        sections = await collect_best_effort(parts, pipeline="cambridge_listening")
        if not sections:
            return None
        return CambridgeListeningTest(book=book, test_number=test_number, sections=sections)

    async def _cambridge_writing_task(
        self, book: str, test_number: int, task_number: int, topic: str = ""
    ) -> CambridgeWritingTask | None:
        spec = self.prompt_builder.build(
            Feature.CAMBRIDGE_WRITING_TASK,
            topic,
            book=book,
            test_number=test_number,
            task_number=task_number,
        )
        minimum_words, minutes = WRITING_TASK_SHAPES[task_number]
        task = await run_pipeline(
            self.ai_service,
            spec,
            partial(
                decode_record,
                schema=CambridgeWritingTask,
                defaults={"minimum_words": minimum_words, "suggested_minutes": minutes},
            ),
            pipeline=f"cambridge_writing_task_{task_number}",
        )
        if task is None:
            return None
        task.task_number = task_number
        return task

    async def generate_cambridge_writing_test(
        self, book: str, test_number: int, topic: str = ""
    ) -> CambridgeWritingTest | None:
        parts = [
            partial(self._cambridge_writing_task, book, test_number, number, topic)
            for number in (1, 2)
        ]
        tasks = await collect_all_or_nothing(parts, pipeline="cambridge_writing")
        if tasks is None:
            return None
        task1, task2 = tasks
        return CambridgeWritingTest(book=book, test_number=test_number, task1=task1, task2=task2)

    async def generate_cambridge_speaking_test(
        self, book: str, test_number: int, topic: str = ""
    ) -> CambridgeSpeakingTest | None:
        spec = self.prompt_builder.build(
            Feature.CAMBRIDGE_SPEAKING_TEST,
            topic,
            book=book,
            test_number=test_number,
        )
        # part1/part2/part3 are required fields: a missing part fails the whole test.
        test = await run_pipeline(
            self.ai_service,
            spec,
            partial(
                decode_record,
                schema=CambridgeSpeakingTest,
                defaults={"book": book, "test_number": test_number},
            ),
            pipeline="cambridge_speaking",
        )
        if test is None:
            return None
        test.book = book
        test.test_number = test_number
        return test


# ─── HTTP-facing request models and handlers ───────────────────────────────────

settings = get_settings()


class TopicRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)


class WritingTaskRequest(TopicRequest):
    taskType: int = Field(default=2, ge=1, le=2)


class ListeningRequest(TopicRequest):
    section: int = Field(default=2, ge=1, le=4)


class EssayFeedbackRequest(BaseModel):
    essay: str = Field(min_length=1)
    topic: str = ""


class WordExplainRequest(BaseModel):
    word: str = Field(min_length=1, max_length=100)
    context: str = ""


class MockTestRequest(BaseModel):
    book: str = Field(min_length=1, max_length=20)
    testNumber: int = Field(default=1, ge=1, le=4)
    topic: str = ""


class GrammarCheckRequest(BaseModel):
    text: str = Field(min_length=1)


class WritingEstimateRequest(BaseModel):
    essay: str = Field(min_length=1)


@lru_cache(maxsize=1)
def _get_prompt_builder() -> PromptBuilder:
    return PromptBuilder()


@lru_cache(maxsize=1)
def _get_content_service() -> ContentGenerationService:
    service = ContentGenerationService(build_ai_service(settings), _get_prompt_builder())
    logger.info("content service ready (model=%s)", settings.ai_model)
    return service


@lru_cache(maxsize=1)
def _get_grammar_checker() -> LanguageToolClient:
    return build_grammar_checker(settings)


def _config_error(exc: Exception) -> HTTPException:
    reason = str(exc).strip() or "ai_service_init_failed"
    return HTTPException(
        status_code=503,
        detail=build_structured_error_detail(
            error_code="config_error",
            message=reason,
            retryable=False,
            detail=f"ai_service_init_failed:config_error:{reason}",
        ),
    )


def _require_content_service() -> ContentGenerationService:
    try:
        return _get_content_service()
    except ValueError as exc:
        raise _config_error(exc) from exc


def _require_grammar_checker() -> LanguageToolClient:
    try:
        return _get_grammar_checker()
    except ValueError as exc:
        raise _config_error(exc) from exc


def _dump(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(by_alias=True)


def _require_result(result: Any, pipeline: str) -> Any:
    if result is None:
        raise generation_unavailable(pipeline)
    return result


async def content_vocabulary(payload: TopicRequest) -> dict[str, Any]:
    service = _require_content_service()
    words = _require_result(await service.generate_vocabulary(payload.topic), "vocabulary")
    return {"topic": payload.topic, "words": [_dump(word) for word in words]}


async def content_reading_passage(payload: TopicRequest) -> dict[str, Any]:
    service = _require_content_service()
    passage = await service.generate_reading_passage(payload.topic)
    return _dump(_require_result(passage, "reading_passage"))


async def content_writing_task(payload: WritingTaskRequest) -> dict[str, Any]:
    service = _require_content_service()
    task = await service.generate_writing_task(payload.topic, payload.taskType)
    return _dump(_require_result(task, "writing_task"))


async def content_speaking_set(payload: TopicRequest) -> dict[str, Any]:
    service = _require_content_service()
    speaking_set = await service.generate_speaking_set(payload.topic)
    return _dump(_require_result(speaking_set, "speaking_set"))


async def content_listening_exercise(payload: ListeningRequest) -> dict[str, Any]:
    service = _require_content_service()
    exercise = await service.generate_listening_exercise(payload.topic, payload.section)
    return _dump(_require_result(exercise, "listening_exercise"))


async def content_grammar_lesson(payload: TopicRequest) -> dict[str, Any]:
    service = _require_content_service()
    lesson = await service.generate_grammar_lesson(payload.topic)
    return _dump(_require_result(lesson, "grammar_lesson"))


async def content_essay_feedback(payload: EssayFeedbackRequest) -> dict[str, Any]:
    service = _require_content_service()
    feedback = await service.generate_essay_feedback(payload.essay, payload.topic)
    return _dump(_require_result(feedback, "essay_feedback"))


async def content_explain_word(payload: WordExplainRequest) -> dict[str, Any]:
    service = _require_content_service()
    explanation = await service.explain_word(payload.word, payload.context)
    return {"word": payload.word, "explanation": _require_result(explanation, "word_explanation")}


async def content_mock_reading(payload: MockTestRequest) -> dict[str, Any]:
    service = _require_content_service()
    test = await service.generate_cambridge_reading_test(payload.book, payload.testNumber, payload.topic)
    return _dump(_require_result(test, "cambridge_reading"))


async def content_mock_listening(payload: MockTestRequest) -> dict[str, Any]:
    service = _require_content_service()
    test = await service.generate_cambridge_listening_test(payload.book, payload.testNumber, payload.topic)
    return _dump(_require_result(test, "cambridge_listening"))


async def content_mock_writing(payload: MockTestRequest) -> dict[str, Any]:
    service = _require_content_service()
    test = await service.generate_cambridge_writing_test(payload.book, payload.testNumber, payload.topic)
    return _dump(_require_result(test, "cambridge_writing"))


async def content_mock_speaking(payload: MockTestRequest) -> dict[str, Any]:
    service = _require_content_service()
    test = await service.generate_cambridge_speaking_test(payload.book, payload.testNumber, payload.topic)
    return _dump(_require_result(test, "cambridge_speaking"))


def content_daily_topic() -> dict[str, Any]:
    return {"topic": _get_prompt_builder().pick_daily_topic()}


def _grammar_check_unavailable() -> HTTPException:
    return HTTPException(
        status_code=502,
        detail=build_structured_error_detail(
            error_code="grammar_check_unavailable",
            detail="grammar_check_failed:grammar_check_unavailable",
        ),
    )


async def grammar_check(payload: GrammarCheckRequest) -> dict[str, Any]:
    checker = _require_grammar_checker()
    matches = await checker.check(payload.text)
    if matches is None:
        raise _grammar_check_unavailable()
    return {"matches": [_dump(match) for match in matches]}


async def writing_estimate(payload: WritingEstimateRequest) -> dict[str, Any]:
    checker = _require_grammar_checker()
    matches = await checker.check(payload.essay)
    if matches is None:
        raise _grammar_check_unavailable()
    estimate = estimate_writing_band(payload.essay, matches)
    return {**_dump(estimate), "grammarErrors": [_dump(match) for match in matches]}
