import json
import unittest

from ielts_api.services.content.records import (
    CambridgeSpeakingTest,
    GrammarCheckResult,
    ReadingPassage,
    SpeakingSet,
    VocabularyItem,
    WritingTask,
)
from ielts_api.services.content.schema_decoder import decode_record, decode_record_list


def _word(index: int) -> dict:
    return {
        "word": f"word{index}",
        "bangla": f"bn{index}",
        "definition": f"definition {index}",
        "example": f"Example sentence {index}.",
        "partOfSpeech": "noun",
        "synonyms": [f"syn{index}"],
    }


class VocabularyDecodeTests(unittest.TestCase):
    def test_fifteen_well_formed_items_decode_fully(self) -> None:
        words = decode_record_list(json.dumps([_word(i) for i in range(15)]), VocabularyItem)

        self.assertEqual(len(words), 15)
        self.assertEqual(words[0].part_of_speech, "noun")
        self.assertEqual(words[14].word, "word14")
        self.assertEqual(words[3].synonyms, ["syn3"])

    def test_item_missing_required_key_is_dropped(self) -> None:
        items = [_word(i) for i in range(15)]
        del items[6]["bangla"]

        words = decode_record_list(json.dumps(items), VocabularyItem)

        self.assertEqual(len(words), 14)
        self.assertNotIn("word6", [word.word for word in words])

    def test_non_object_elements_are_dropped(self) -> None:
        words = decode_record_list(json.dumps([_word(0), "oops", 7, None]), VocabularyItem)

        self.assertEqual([word.word for word in words], ["word0"])

    def test_wrapper_object_is_unwrapped(self) -> None:
        words = decode_record_list(json.dumps({"words": [_word(0), _word(1)]}), VocabularyItem)

        self.assertEqual(len(words), 2)

    def test_unparseable_or_wrong_shape_returns_none(self) -> None:
        self.assertIsNone(decode_record_list("not json", VocabularyItem))
        self.assertIsNone(decode_record_list('{"count": 3}', VocabularyItem))


class RecordDecodeTests(unittest.TestCase):
    def test_missing_fields_take_declared_defaults(self) -> None:
        passage = decode_record('{"content": "Body"}', ReadingPassage)

        self.assertEqual(passage.title, "Reading Passage")
        self.assertEqual(passage.difficulty, "Medium")
        self.assertEqual(passage.content, "Body")
        self.assertEqual(passage.questions, [])
        self.assertEqual(passage.vocabulary, [])

    def test_mistyped_fields_take_defaults(self) -> None:
        task = decode_record(
            json.dumps({"taskType": "two", "topic": 42, "tips": "not a list", "keyVocabulary": ["a", 3, "b"]}),
            WritingTask,
        )

        self.assertEqual(task.task_type, 2)
        self.assertEqual(task.topic, "")
        self.assertEqual(task.tips, [])
        self.assertEqual(task.key_vocabulary, ["a", "b"])

    def test_integral_float_is_accepted_for_int_and_bool_is_not(self) -> None:
        self.assertEqual(decode_record('{"taskType": 1.0}', WritingTask).task_type, 1)
        self.assertEqual(decode_record('{"taskType": true}', WritingTask).task_type, 2)

    def test_request_defaults_fill_missing_fields_only(self) -> None:
        missing = decode_record("{}", WritingTask, defaults={"category": "Health"})
        present = decode_record('{"category": "Sport"}', WritingTask, defaults={"category": "Health"})

        self.assertEqual(missing.category, "Health")
        self.assertEqual(present.category, "Sport")

    def test_question_missing_required_field_is_filtered(self) -> None:
        payload = {
            "title": "Bees",
            "questions": [
                {"question": "Q1?", "options": ["a", "b"], "correctAnswer": 1, "explanation": "because"},
                {"question": "Q2?", "options": ["a", "b"], "explanation": "no answer"},
            ],
        }

        passage = decode_record(json.dumps(payload), ReadingPassage)

        self.assertEqual(len(passage.questions), 1)
        self.assertEqual(passage.questions[0].correct_answer, 1)

    def test_snake_case_keys_are_accepted(self) -> None:
        task = decode_record('{"sample_essay": "Essay text"}', WritingTask)

        self.assertEqual(task.sample_essay, "Essay text")

    def test_optional_nested_record_and_dict_values(self) -> None:
        payload = {
            "part2CueCard": {"mainTopic": "Describe a trip", "bulletPoints": ["where", 5]},
            "sampleAnswers": {"part1_1": "Yes.", "part2": 12},
        }

        speaking = decode_record(json.dumps(payload), SpeakingSet, defaults={"topic": "Travel"})

        self.assertEqual(speaking.topic, "Travel")
        self.assertEqual(speaking.part2_cue_card.main_topic, "Describe a trip")
        self.assertEqual(speaking.part2_cue_card.bullet_points, ["where"])
        self.assertEqual(speaking.part2_cue_card.think_time, "1 minute")
        self.assertEqual(speaking.sample_answers, {"part1_1": "Yes."})

    def test_required_nested_part_missing_fails_whole_record(self) -> None:
        payload = {
            "part1": {"topic": "Home", "questions": ["Where do you live?"]},
            "part2": {"topic": "Describe a place"},
        }

        self.assertIsNone(decode_record(json.dumps(payload), CambridgeSpeakingTest))

    def test_required_nested_parts_present_decode(self) -> None:
        payload = {
            "part1": {"topic": "Home"},
            "part2": {"topic": "Describe a place", "bulletPoints": ["where"]},
            "part3": {"topic": "Cities", "questions": ["Why?"]},
        }

        test = decode_record(json.dumps(payload), CambridgeSpeakingTest)

        self.assertEqual(test.part2.bullet_points, ["where"])
        self.assertEqual(test.part3.questions, ["Why?"])

    def test_top_level_array_is_not_a_record(self) -> None:
        self.assertIsNone(decode_record("[1, 2]", ReadingPassage))
        self.assertIsNone(decode_record("", ReadingPassage))

    def test_pathologically_deep_payload_returns_none(self) -> None:
        self.assertIsNone(decode_record("[" * 100000 + "]" * 100000, ReadingPassage))
        self.assertIsNone(decode_record_list("[" * 100000 + "]" * 100000, VocabularyItem))

    def test_replacements_without_value_are_dropped(self) -> None:
        payload = {
            "matches": [
                {
                    "message": "Possible spelling mistake",
                    "offset": 4,
                    "length": 5,
                    "replacements": [{"value": "their"}, {"shortDescription": "x"}, {"value": "there"}],
                }
            ]
        }

        result = decode_record(json.dumps(payload), GrammarCheckResult)

        self.assertEqual(len(result.matches), 1)
        self.assertEqual([item.value for item in result.matches[0].replacements], ["their", "there"])


if __name__ == "__main__":
    unittest.main()
