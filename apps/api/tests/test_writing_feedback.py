import unittest

from ielts_api.services.content.records import GrammarMatch
from ielts_api.services.content.writing_feedback import estimate_writing_band


def _paragraph(sentences: int, words_per_sentence: int = 15) -> str:
    sentence = " ".join(["word"] * (words_per_sentence - 1)) + " end."
    return " ".join([sentence] * sentences)


class WritingFeedbackTests(unittest.TestCase):
    def test_short_single_paragraph_essay(self) -> None:
        estimate = estimate_writing_band("Technology is good. It helps people.", [])

        self.assertEqual(estimate.word_count, 6)
        self.assertEqual(estimate.paragraph_count, 1)
        self.assertEqual(estimate.error_count, 0)
        # 5.0 - 1.0 (length) - 0.5 (structure) + 1.0 (no errors), short sentences
        self.assertEqual(estimate.band_score, 4.5)
        self.assertIn("Word count too low (6 words)", estimate.feedback)
        self.assertGreaterEqual(estimate.band_score, 4.0)
        self.assertLessEqual(estimate.band_score, 8.0)

    def test_well_structured_essay_scores_high(self) -> None:
        essay = "\n\n".join(_paragraph(5) for _ in range(4))

        estimate = estimate_writing_band(essay, [])

        self.assertEqual(estimate.word_count, 300)
        self.assertEqual(estimate.paragraph_count, 4)
        # 5.0 + 0.5 + 0.5 + 1.0 + 0.5
        self.assertEqual(estimate.band_score, 7.5)
        self.assertIn("You're on track for Band 7+", estimate.feedback)

    def test_many_grammar_errors_lower_the_band(self) -> None:
        essay = "\n\n".join(_paragraph(4) for _ in range(4))
        matches = [GrammarMatch(message=f"error {index}") for index in range(8)]

        estimate = estimate_writing_band(essay, matches)

        self.assertEqual(estimate.error_count, 8)
        # 240 words: no length adjustment; +0.5 structure, -1.0 errors, +0.5 sentences
        self.assertEqual(estimate.band_score, 5.0)
        self.assertIn("Many grammar errors (8 errors)", estimate.feedback)
        self.assertIn("Grammar fundamentals", estimate.feedback)

    def test_band_never_drops_below_four(self) -> None:
        matches = [GrammarMatch() for _ in range(10)]

        estimate = estimate_writing_band("bad", matches)

        self.assertEqual(estimate.band_score, 4.0)


if __name__ == "__main__":
    unittest.main()
