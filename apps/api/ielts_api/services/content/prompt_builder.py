import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ielts_api.domain.ai.providers.base import GenerationRequest
from ielts_api.services.content.response_extractor import PayloadShape


DEFAULT_SYSTEM_PROMPT = (
    "You are an expert IELTS tutor. Always respond with valid JSON only. "
    "Do NOT wrap JSON in markdown code blocks. Return raw JSON directly."
)
WORD_EXPLANATION_SYSTEM_PROMPT = (
    "You are an English vocabulary teacher helping Bengali students prepare for IELTS. "
    "Mix English and Bangla in your explanations."
)
DEFAULT_MAX_TOKENS = 3000

DAILY_TOPICS = [
    "Environment and Climate Change",
    "Technology and Innovation",
    "Education and Learning",
    "Health and Lifestyle",
    "Work and Career",
    "Travel and Culture",
    "Society and Social Issues",
    "Media and Communication",
    "Science and Research",
    "Cities and Urban Life",
]

GRAMMAR_POINTS = [
    "Conditional Sentences (If clauses)",
    "Passive Voice",
    "Relative Clauses",
    "Articles (a, an, the)",
    "Linking Words and Transitions",
    "Reported Speech",
    "Comparatives and Superlatives",
    "Modal Verbs",
    "Perfect Tenses",
    "Gerunds and Infinitives",
]

LISTENING_SECTION_CONTEXTS = {
    1: "Section 1: A conversation between two people in an everyday social context (e.g., booking, inquiry)",
    2: "Section 2: A monologue in an everyday social context (e.g., speech, tour guide)",
    3: "Section 3: A conversation between up to four people in an educational context",
    4: "Section 4: A university lecture or talk on an academic subject",
}

READING_QUESTION_RANGES = {1: (1, 13), 2: (14, 26), 3: (27, 40)}


class Feature(str, Enum):
    VOCABULARY = "vocabulary"
    READING_PASSAGE = "reading_passage"
    WRITING_TASK = "writing_task"
    SPEAKING_SET = "speaking_set"
    LISTENING_EXERCISE = "listening_exercise"
    GRAMMAR_LESSON = "grammar_lesson"
    ESSAY_FEEDBACK = "essay_feedback"
    WORD_EXPLANATION = "word_explanation"
    CAMBRIDGE_READING_PASSAGE = "cambridge_reading_passage"
    CAMBRIDGE_LISTENING_SECTION = "cambridge_listening_section"
    CAMBRIDGE_WRITING_TASK = "cambridge_writing_task"
    CAMBRIDGE_SPEAKING_TEST = "cambridge_speaking_test"


@dataclass(frozen=True)
class PromptSpec:
    prompt: str
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_tokens: int = DEFAULT_MAX_TOKENS
    json_mode: bool = True
    expect: PayloadShape = "object"

    def to_request(self) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.prompt,
            system_prompt=self.system_prompt,
            max_tokens=self.max_tokens,
            json_mode=self.json_mode,
        )


# ─── Prompt templates ──────────────────────────────────────────────────────────

VOCABULARY_PROMPT = """Generate 15 important IELTS vocabulary words related to "{topic}".

Return JSON array:
[
    {{
        "word": "sustainable",
        "bangla": "<Bangla translation>",
        "definition": "able to continue over a long time",
        "example": "We need sustainable development to protect our planet.",
        "partOfSpeech": "adjective",
        "synonyms": ["maintainable", "viable", "enduring"]
    }}
]

Make sure words are:
- Band 7+ level vocabulary
- Commonly used in IELTS exams
- Related to {topic}
- Include accurate Bangla translations"""

READING_PASSAGE_PROMPT = """Generate an IELTS Academic Reading passage about "{topic}".

Return JSON:
{{
    "title": "The Impact of...",
    "content": "Full passage here (400-500 words, academic style, multiple paragraphs)...",
    "difficulty": "Medium",
    "vocabulary": ["word1", "word2", "word3", "word4", "word5"],
    "questions": [
        {{
            "question": "According to the passage, what is...?",
            "options": ["Option A", "Option B", "Option C", "Option D"],
            "correctAnswer": 0,
            "explanation": "The answer is A because..."
        }}
    ]
}}

Requirements:
- Cambridge IELTS style
- Academic vocabulary
- 5 varied question types (main idea, detail, inference, vocabulary, summary)
- Clear explanations for each answer"""

WRITING_TASK_PROMPT = """Generate an IELTS Writing {task_description} about "{topic}".

Return JSON:
{{
    "taskType": {task_type},
    "topic": "The full question/prompt here...",
    "category": "{topic}",
    "instructions": "You should spend about {minutes} minutes on this task...",
    "sampleEssay": "Full band 8 sample answer here (250+ words for Task 2, 150+ for Task 1)...",
    "keyVocabulary": ["word1", "word2", "word3", "word4", "word5"],
    "tips": ["Tip 1", "Tip 2", "Tip 3"],
    "banglaTips": "<short tips in Bangla, e.g. write the introduction first, then...>"
}}

Requirements:
- Cambridge IELTS style question
- Band 8+ sample answer
- Practical tips for students
- Include Bangla tips for Bengali students"""

SPEAKING_SET_PROMPT = """Generate a complete IELTS Speaking test set about "{topic}".

Return JSON:
{{
    "topic": "{topic}",
    "part1Questions": ["Do you like...?", "How often do you...?", "Did you... when you were a child?", "Do you think... is important?"],
    "part2CueCard": {{
        "mainTopic": "Describe a...",
        "bulletPoints": ["What it is", "When/where you...", "Why you...", "How you felt about it"],
        "thinkTime": "1 minute",
        "speakTime": "1-2 minutes"
    }},
    "part3Questions": ["What do you think about...?", "How has... changed in recent years?", "Do you think... will change in the future?", "What are the advantages and disadvantages of...?"],
    "sampleAnswers": {{
        "part1_1": "Yes, I really enjoy... because...",
        "part2": "I'd like to talk about... This happened when...",
        "part3_1": "In my opinion, ... I think this because..."
    }},
    "vocabulary": ["useful word 1", "useful word 2", "useful phrase 1"]
}}

Requirements:
- Natural, conversational questions
- Band 7+ sample answers
- Relevant vocabulary for this topic"""

LISTENING_EXERCISE_PROMPT = """Generate an IELTS Listening exercise for {section_context} about "{topic}".

Return JSON:
{{
    "title": "Title of the listening",
    "section": {section},
    "transcript": "Full transcript here with natural dialogue/speech (300-400 words)...",
    "questions": [
        {{"question": "What is the...?", "answer": "the answer", "questionType": "fill-blank"}},
        {{"question": "What does the speaker suggest about...?", "answer": "detailed answer", "questionType": "short-answer"}}
    ]
}}

Requirements:
- Realistic dialogue/monologue
- Clear answers that can be heard in the transcript
- Mix of question types
- 5-8 questions"""

GRAMMAR_LESSON_PROMPT = """Generate an IELTS Grammar lesson about "{grammar_point}" with examples related to "{topic}".

Return JSON:
{{
    "topic": "{grammar_point}",
    "explanation": "Clear English explanation of the grammar rule...",
    "banglaExplanation": "<explanation in Bangla that Bangladeshi students can follow easily>",
    "examples": ["Example sentence 1 about {topic}", "Example sentence 2 about {topic}", "Example sentence 3 about {topic}"],
    "exercises": [
        {{
            "question": "If the government ____ (invest) more in renewable energy, pollution would decrease.",
            "options": ["invest", "invested", "will invest", "had invested"],
            "correctAnswer": 1,
            "explanation": "Second conditional uses past simple in the if-clause."
        }}
    ]
}}

Requirements:
- Clear, simple explanations
- Bangla explanation for Bengali students
- Examples related to the current topic ({topic})
- 3-5 practice exercises"""

ESSAY_FEEDBACK_PROMPT = """You are an IELTS examiner. Evaluate this essay:

Topic: {topic}
Essay: {essay}

Return JSON:
{{
    "bandScore": 6.5,
    "taskAchievement": "feedback...",
    "coherenceCohesion": "feedback...",
    "lexicalResource": "feedback...",
    "grammaticalRange": "feedback...",
    "strengths": ["strength1", "strength2"],
    "improvements": ["improvement1", "improvement2"],
    "banglaSummary": "<short summary in Bangla>"
}}"""

WORD_EXPLANATION_PROMPT = """Explain the word "{word}"{context_clause}

Provide:
1. Bangla meaning
2. English definition
3. Part of speech
4. Example sentence
5. Synonyms
6. How to use in IELTS Writing/Speaking

Keep it helpful for IELTS preparation."""

CAMBRIDGE_READING_PROMPT = """Generate Reading Passage {passage_number} of Cambridge IELTS {book} Academic Test {test_number}{topic_clause}.

Return JSON:
{{
    "title": "Passage title",
    "paragraphs": ["A  First paragraph...", "B  Second paragraph..."],
    "questionRange": "Questions {first}-{last}",
    "questions": [
        {{"number": {first}, "type": "trueFalseNotGiven", "text": "Statement to judge...", "options": [], "answer": "TRUE"}},
        {{"number": {second}, "type": "multipleChoice", "text": "Question...?", "options": ["A ...", "B ...", "C ...", "D ..."], "answer": "B"}},
        {{"number": {third}, "type": "fillInBlank", "text": "Complete the sentence: ...", "options": [], "answer": "one to three words"}}
    ]
}}

Requirements:
- Authentic Cambridge IELTS Academic style, 700-900 words across 5-8 lettered paragraphs
- Passage {passage_number} difficulty: {difficulty}
- Exactly the questions numbered {first} to {last}
- type is one of multipleChoice, trueFalseNotGiven, yesNoNotGiven, fillInBlank, shortAnswer"""

CAMBRIDGE_LISTENING_PROMPT = """Generate Listening {section_context} of Cambridge IELTS {book} Test {test_number}{topic_clause}.

Return JSON:
{{
    "title": "Section title",
    "context": "One sentence describing the speakers and situation",
    "transcript": "Full transcript (400-500 words)...",
    "questions": [
        {{"number": {first}, "text": "Question or gap-fill sentence...", "answer": "answer heard in the transcript"}}
    ]
}}

Requirements:
- Exactly 10 questions numbered {first} to {last}
- Every answer must be audible in the transcript, at most three words"""

CAMBRIDGE_WRITING_PROMPT = """Generate Writing Task {task_number} of Cambridge IELTS {book} Academic Test {test_number}{topic_clause}.

Return JSON:
{{
    "instruction": "You should spend about {minutes} minutes on this task.",
    "prompt": "{prompt_hint}",
    "minimumWords": {minimum_words},
    "suggestedMinutes": {minutes}
}}

Requirements:
- Authentic Cambridge IELTS wording
- {task_requirement}"""

CAMBRIDGE_SPEAKING_PROMPT = """Generate the Speaking test of Cambridge IELTS {book} Test {test_number}{topic_clause}.

Return JSON:
{{
    "part1": {{"topic": "Familiar topic", "questions": ["Question 1?", "Question 2?", "Question 3?", "Question 4?"]}},
    "part2": {{
        "topic": "Describe a...",
        "instruction": "You will have to talk about the topic for one to two minutes. You have one minute to think about what you are going to say.",
        "bulletPoints": ["what it is", "when it happened", "who was involved", "and explain why..."],
        "followUp": "Rounding-off question?",
        "thinkTime": "1 minute",
        "speakTime": "1-2 minutes"
    }},
    "part3": {{"topic": "Discussion topic", "questions": ["Question 1?", "Question 2?", "Question 3?", "Question 4?"]}}
}}

Requirements:
- Part 3 questions develop the Part 2 theme in abstract terms
- Natural examiner phrasing"""


def _topic_clause(topic: str) -> str:
    return f' on the theme "{topic}"' if topic else ""


class PromptBuilder:
    """Maps (feature, topic, params) to a PromptSpec. No I/O.

    The only non-determinism (grammar point and daily topic choice) comes
    from ``rng``; pass a seeded ``random.Random`` for reproducible prompts.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self._builders: dict[Feature, Callable[[str, dict[str, Any]], PromptSpec]] = {
            Feature.VOCABULARY: self._vocabulary,
            Feature.READING_PASSAGE: self._reading_passage,
            Feature.WRITING_TASK: self._writing_task,
            Feature.SPEAKING_SET: self._speaking_set,
            Feature.LISTENING_EXERCISE: self._listening_exercise,
            Feature.GRAMMAR_LESSON: self._grammar_lesson,
            Feature.ESSAY_FEEDBACK: self._essay_feedback,
            Feature.WORD_EXPLANATION: self._word_explanation,
            Feature.CAMBRIDGE_READING_PASSAGE: self._cambridge_reading_passage,
            Feature.CAMBRIDGE_LISTENING_SECTION: self._cambridge_listening_section,
            Feature.CAMBRIDGE_WRITING_TASK: self._cambridge_writing_task,
            Feature.CAMBRIDGE_SPEAKING_TEST: self._cambridge_speaking_test,
        }

    def build(self, feature: Feature | str, topic: str, **params: Any) -> PromptSpec:
        builder = self._builders[Feature(feature)]
        return builder(topic.strip(), params)

    def pick_daily_topic(self) -> str:
        return self.rng.choice(DAILY_TOPICS)

    def pick_grammar_point(self) -> str:
        return self.rng.choice(GRAMMAR_POINTS)

    def _vocabulary(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        # JSON-object mode cannot return a top-level array.
        return PromptSpec(
            prompt=VOCABULARY_PROMPT.format(topic=topic),
            json_mode=False,
            expect="array",
        )

    def _reading_passage(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        return PromptSpec(prompt=READING_PASSAGE_PROMPT.format(topic=topic), max_tokens=4000)

    def _writing_task(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        task_type = 1 if int(params.get("task_type", 2)) == 1 else 2
        task_description = (
            "Task 1 (describe a graph/chart/process)"
            if task_type == 1
            else "Task 2 (essay question - opinion/discussion/problem-solution)"
        )
        prompt = WRITING_TASK_PROMPT.format(
            task_description=task_description,
            topic=topic,
            task_type=task_type,
            minutes=20 if task_type == 1 else 40,
        )
        return PromptSpec(prompt=prompt, max_tokens=3500)

    def _speaking_set(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        return PromptSpec(prompt=SPEAKING_SET_PROMPT.format(topic=topic))

    def _listening_exercise(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        section = int(params.get("section", 2))
        section_context = LISTENING_SECTION_CONTEXTS.get(section, LISTENING_SECTION_CONTEXTS[2])
        prompt = LISTENING_EXERCISE_PROMPT.format(section_context=section_context, section=section, topic=topic)
        return PromptSpec(prompt=prompt)

    def _grammar_lesson(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        grammar_point = str(params.get("grammar_point") or self.pick_grammar_point())
        prompt = GRAMMAR_LESSON_PROMPT.format(grammar_point=grammar_point, topic=topic)
        return PromptSpec(prompt=prompt, max_tokens=2500)

    def _essay_feedback(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        essay = str(params.get("essay") or "").strip()
        return PromptSpec(prompt=ESSAY_FEEDBACK_PROMPT.format(topic=topic, essay=essay))

    def _word_explanation(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        context = str(params.get("context") or "").strip()
        context_clause = f' in this context: "{context}"' if context else ""
        return PromptSpec(
            prompt=WORD_EXPLANATION_PROMPT.format(word=topic, context_clause=context_clause),
            system_prompt=WORD_EXPLANATION_SYSTEM_PROMPT,
            json_mode=False,
        )

    def _cambridge_reading_passage(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        passage_number = int(params.get("passage_number", 1))
        first, last = READING_QUESTION_RANGES.get(passage_number, READING_QUESTION_RANGES[1])
        difficulty = {1: "moderate", 2: "upper-intermediate", 3: "hardest of the three"}.get(passage_number, "moderate")
        prompt = CAMBRIDGE_READING_PROMPT.format(
            passage_number=passage_number,
            book=params.get("book", ""),
            test_number=params.get("test_number", 1),
            topic_clause=_topic_clause(topic),
            first=first,
            second=first + 1,
            third=first + 2,
            last=last,
            difficulty=difficulty,
        )
        return PromptSpec(prompt=prompt, max_tokens=4000)

    def _cambridge_listening_section(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        section_number = int(params.get("section_number", 1))
        section_context = LISTENING_SECTION_CONTEXTS.get(section_number, LISTENING_SECTION_CONTEXTS[1])
        first = (section_number - 1) * 10 + 1
        prompt = CAMBRIDGE_LISTENING_PROMPT.format(
            section_context=section_context,
            book=params.get("book", ""),
            test_number=params.get("test_number", 1),
            topic_clause=_topic_clause(topic),
            first=first,
            last=first + 9,
        )
        return PromptSpec(prompt=prompt)

    def _cambridge_writing_task(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        task_number = 1 if int(params.get("task_number", 1)) == 1 else 2
        if task_number == 1:
            prompt_hint = "The chart below shows... Summarise the information by selecting and reporting the main features, and make comparisons where relevant."
            task_requirement = "Describe the visual data in words (chart, table, map or process) so it can be rendered without an image"
            minimum_words, minutes = 150, 20
        else:
            prompt_hint = "Some people believe that... To what extent do you agree or disagree?"
            task_requirement = "An opinion, discussion or problem-solution essay question"
            minimum_words, minutes = 250, 40
        prompt = CAMBRIDGE_WRITING_PROMPT.format(
            task_number=task_number,
            book=params.get("book", ""),
            test_number=params.get("test_number", 1),
            topic_clause=_topic_clause(topic),
            minutes=minutes,
            prompt_hint=prompt_hint,
            minimum_words=minimum_words,
            task_requirement=task_requirement,
        )
        return PromptSpec(prompt=prompt, max_tokens=2000)

    def _cambridge_speaking_test(self, topic: str, params: dict[str, Any]) -> PromptSpec:
        prompt = CAMBRIDGE_SPEAKING_PROMPT.format(
            book=params.get("book", ""),
            test_number=params.get("test_number", 1),
            topic_clause=_topic_clause(topic),
        )
        return PromptSpec(prompt=prompt)
