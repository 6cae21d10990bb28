import re
from typing import Sequence

from ielts_api.services.content.records import GrammarMatch, WritingEstimate


MIN_BAND = 4.0
MAX_BAND = 8.0
BASE_BAND = 5.0

_SENTENCE_SPLIT = re.compile(r"[.!?]")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


def _count_sentences(essay: str) -> int:
    return len([part for part in _SENTENCE_SPLIT.split(essay) if part.strip()])


def _count_paragraphs(essay: str) -> int:
    return len([part for part in _PARAGRAPH_SPLIT.split(essay) if part.strip()])


def _focus_areas(band: float) -> str:
    if band < 5.5:
        return "Focus areas:\n- Grammar fundamentals\n- Vocabulary expansion\n- Essay structure"
    if band < 6.5:
        return "Focus areas:\n- Complex sentences\n- Topic-specific vocabulary\n- Coherence and cohesion"
    return (
        "Keep practicing! You're on track for Band 7+.\n"
        "- Focus on academic vocabulary\n- Practice varied sentence structures"
    )


def estimate_writing_band(essay: str, grammar_matches: Sequence[GrammarMatch]) -> WritingEstimate:
    """Rule-based band estimate for a Task 2 essay.

    Starts from band 5.0 and adjusts for length, paragraphing, grammar errors
    and average sentence length. The result is clamped to [4.0, 8.0].
    """
    word_count = len(essay.split())
    sentence_count = _count_sentences(essay)
    paragraph_count = _count_paragraphs(essay)
    error_count = len(grammar_matches)

    notes: list[str] = []
    band = BASE_BAND

    if word_count < 150:
        notes.append(f"Word count too low ({word_count} words). Aim for 250+ words for Task 2.")
        band -= 1.0
    elif word_count > 300:
        notes.append(f"Excellent word count ({word_count} words).")
        band += 0.5
    elif word_count >= 250:
        notes.append(f"Good word count ({word_count} words).")
        band += 0.5

    if paragraph_count < 4:
        notes.append(
            "Essay structure needs improvement. Use 4-5 paragraphs: "
            "Introduction, 2-3 Body paragraphs, Conclusion."
        )
        band -= 0.5
    else:
        notes.append(f"Good paragraph structure ({paragraph_count} paragraphs).")
        band += 0.5

    if error_count == 0:
        notes.append("No grammar errors detected!")
        band += 1.0
    elif error_count <= 3:
        notes.append(f"Minor grammar issues ({error_count} errors). Review and fix them.")
    elif error_count <= 7:
        notes.append(f"Several grammar errors ({error_count} errors). Focus on grammar practice.")
        band -= 0.5
    else:
        notes.append(f"Many grammar errors ({error_count} errors). Grammar needs significant improvement.")
        band -= 1.0

    average_sentence_length = word_count // max(sentence_count, 1)
    if average_sentence_length < 10:
        notes.append("Tip: Your sentences are too short. Try using complex sentences.")
    elif average_sentence_length > 25:
        notes.append("Tip: Some sentences may be too long. Break them into smaller sentences.")
    else:
        notes.append("Good sentence variety.")
        band += 0.5

    band = max(MIN_BAND, min(MAX_BAND, band))
    notes.append(f"Estimated Band Score: {band:.1f}")
    notes.append(_focus_areas(band))

    return WritingEstimate(
        feedback="\n\n".join(notes),
        band_score=band,
        word_count=word_count,
        paragraph_count=paragraph_count,
        error_count=error_count,
    )
