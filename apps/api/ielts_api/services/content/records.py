"""Content records returned to the app.

Every field declares its default; a field without one is required and the
schema decoder treats its absence as a broken record. JSON keys are
camelCase on the wire.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContentRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Vocabulary ────────────────────────────────────────────────────────────────

class VocabularyItem(ContentRecord):
    word: str
    bangla: str
    definition: str
    example: str
    part_of_speech: str
    synonyms: list[str]


# ─── Reading ───────────────────────────────────────────────────────────────────

class ReadingQuestion(ContentRecord):
    question: str
    options: list[str]
    correct_answer: int
    explanation: str


class ReadingPassage(ContentRecord):
    title: str = "Reading Passage"
    content: str = ""
    difficulty: str = "Medium"
    topic: str = ""
    questions: list[ReadingQuestion] = Field(default_factory=list)
    vocabulary: list[str] = Field(default_factory=list)


# ─── Writing ───────────────────────────────────────────────────────────────────

class WritingTask(ContentRecord):
    task_type: int = 2
    topic: str = ""
    category: str = ""
    instructions: str = ""
    sample_essay: str = ""
    key_vocabulary: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    bangla_tips: str = ""


class EssayFeedback(ContentRecord):
    band_score: float = 0.0
    task_achievement: str = ""
    coherence_cohesion: str = ""
    lexical_resource: str = ""
    grammatical_range: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    bangla_summary: str = ""


class WritingEstimate(ContentRecord):
    feedback: str
    band_score: float
    word_count: int
    paragraph_count: int
    error_count: int


# ─── Speaking ──────────────────────────────────────────────────────────────────

class CueCard(ContentRecord):
    main_topic: str = ""
    bullet_points: list[str] = Field(default_factory=list)
    think_time: str = "1 minute"
    speak_time: str = "1-2 minutes"


class SpeakingSet(ContentRecord):
    topic: str = ""
    part1_questions: list[str] = Field(default_factory=list)
    part2_cue_card: CueCard = Field(default_factory=CueCard)
    part3_questions: list[str] = Field(default_factory=list)
    sample_answers: dict[str, str] = Field(default_factory=dict)
    vocabulary: list[str] = Field(default_factory=list)


# ─── Listening ─────────────────────────────────────────────────────────────────

class ListeningQuestion(ContentRecord):
    question: str
    answer: str
    question_type: str


class ListeningExercise(ContentRecord):
    title: str = "Listening Exercise"
    section: int = 1
    transcript: str = ""
    questions: list[ListeningQuestion] = Field(default_factory=list)
    topic: str = ""


# ─── Grammar ───────────────────────────────────────────────────────────────────

class GrammarExercise(ContentRecord):
    question: str
    options: list[str]
    correct_answer: int
    explanation: str


class GrammarLesson(ContentRecord):
    topic: str = ""
    explanation: str = ""
    bangla_explanation: str = ""
    examples: list[str] = Field(default_factory=list)
    exercises: list[GrammarExercise] = Field(default_factory=list)


class GrammarReplacement(ContentRecord):
    value: str


class GrammarMatch(ContentRecord):
    message: str = ""
    offset: int = 0
    length: int = 0
    replacements: list[GrammarReplacement] = Field(default_factory=list)


class GrammarCheckResult(ContentRecord):
    matches: list[GrammarMatch] = Field(default_factory=list)


# ─── Cambridge mock tests ──────────────────────────────────────────────────────

CambridgeQuestionType = Literal[
    "multipleChoice",
    "trueFalseNotGiven",
    "yesNoNotGiven",
    "fillInBlank",
    "shortAnswer",
]


class CambridgeReadingQuestion(ContentRecord):
    number: int = 0
    type: CambridgeQuestionType = "shortAnswer"
    text: str
    options: list[str] = Field(default_factory=list)
    answer: str = ""


class CambridgeReadingPassage(ContentRecord):
    passage_number: int = 0
    title: str = "Reading Passage"
    paragraphs: list[str] = Field(default_factory=list)
    question_range: str = ""
    questions: list[CambridgeReadingQuestion] = Field(default_factory=list)


class CambridgeReadingTest(ContentRecord):
    book: str = ""
    test_number: int = 0
    passages: list[CambridgeReadingPassage] = Field(default_factory=list)


class CambridgeListeningQuestion(ContentRecord):
    number: int = 0
    text: str
    answer: str = ""


class CambridgeListeningSection(ContentRecord):
    section_number: int = 0
    title: str = ""
    context: str = ""
    transcript: str = ""
    questions: list[CambridgeListeningQuestion] = Field(default_factory=list)


class CambridgeListeningTest(ContentRecord):
    book: str = ""
    test_number: int = 0
    sections: list[CambridgeListeningSection] = Field(default_factory=list)


class CambridgeWritingTask(ContentRecord):
    task_number: int = 0
    instruction: str = ""
    prompt: str
    minimum_words: int = 0
    suggested_minutes: int = 0


class CambridgeWritingTest(ContentRecord):
    book: str = ""
    test_number: int = 0
    task1: CambridgeWritingTask
    task2: CambridgeWritingTask


class CambridgeSpeakingPart(ContentRecord):
    topic: str = ""
    questions: list[str] = Field(default_factory=list)


class CambridgeSpeakingPart2(ContentRecord):
    topic: str = ""
    instruction: str = ""
    bullet_points: list[str] = Field(default_factory=list)
    follow_up: str = ""
    think_time: str = "1 minute"
    speak_time: str = "1-2 minutes"


class CambridgeSpeakingTest(ContentRecord):
    book: str = ""
    test_number: int = 0
    part1: CambridgeSpeakingPart
    part2: CambridgeSpeakingPart2
    part3: CambridgeSpeakingPart
