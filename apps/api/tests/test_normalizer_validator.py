import unittest

from ielts_api.services.content.normalizer_validator import (
    clamp_answer_index,
    extract_enumerated_options,
    normalize_judgement_answer,
    normalize_option_text,
    normalize_options,
)


class NormalizerValidatorTests(unittest.TestCase):
    def test_option_labels_are_stripped(self) -> None:
        self.assertEqual(normalize_option_text("A) foo"), "foo")
        self.assertEqual(normalize_option_text("(b) bar"), "bar")
        self.assertEqual(normalize_option_text("3. baz"), "baz")
        self.assertEqual(normalize_option_text("Option C: qux"), "qux")
        self.assertEqual(normalize_option_text("Renewable energy"), "Renewable energy")

    def test_normalize_options_keeps_length(self) -> None:
        self.assertEqual(normalize_options(["A) one", "B) two", ""]), ["one", "two", ""])

    def test_answer_index_is_clamped(self) -> None:
        self.assertEqual(clamp_answer_index(9, 4), 3)
        self.assertEqual(clamp_answer_index(-2, 4), 0)
        self.assertEqual(clamp_answer_index(2, 4), 2)
        self.assertEqual(clamp_answer_index(5, 0), 0)

    def test_enumerated_options_are_extracted_from_text(self) -> None:
        text = "Which is correct?\nA) invested\nB) invest\nC) will invest\nD) had invested\nE) extra"
        self.assertEqual(
            extract_enumerated_options(text),
            ["invested", "invest", "will invest", "had invested"],
        )

    def test_judgement_answers_are_canonical(self) -> None:
        self.assertEqual(normalize_judgement_answer("true"), "TRUE")
        self.assertEqual(normalize_judgement_answer("Not  Given"), "NOT GIVEN")
        self.assertEqual(normalize_judgement_answer("NG"), "NOT GIVEN")
        self.assertEqual(normalize_judgement_answer("maybe"), "maybe")


if __name__ == "__main__":
    unittest.main()
