"""
Tests for decoding and normalizing model output in guide_pipeline/types.py
"""
import unittest

from guide_pipeline.tests.fixtures import make_guide_document
from guide_pipeline.types import (
    Difficulty,
    dedupe_preserving_order,
    guide_from_dict,
    normalize_environmental_score,
    quiz_answers_from_dict,
    quiz_answers_to_dict,
)


class TestNormalization(unittest.TestCase):

    def test_difficulty(self):
        self.assertEqual(Difficulty.parse("advanced"), Difficulty.ADVANCED)
        self.assertEqual(Difficulty.parse("Expert"), Difficulty.INTERMEDIATE)
        self.assertEqual(Difficulty.parse(None), Difficulty.INTERMEDIATE)

    def test_environmental_score(self):
        self.assertEqual(normalize_environmental_score(4.2), 4.2)
        self.assertEqual(normalize_environmental_score("3.5"), 3.5)
        self.assertEqual(normalize_environmental_score(85), 4.4)
        self.assertEqual(normalize_environmental_score(0.2), 1.0)
        self.assertEqual(normalize_environmental_score(250), 5.0)
        self.assertEqual(normalize_environmental_score(None), 3.0)
        self.assertEqual(normalize_environmental_score("high"), 3.0)

    def test_dedupe(self):
        self.assertEqual(
            dedupe_preserving_order(["Paint", "paint ", "Wax", "", "WAX", "Brush"]),
            ["Paint", "Wax", "Brush"],
        )


class TestGuideFromDict(unittest.TestCase):

    def test_recyclables_list_becomes_note(self):
        guide = guide_from_dict(make_guide_document(recyclables_used=["jars", "corks"]))
        self.assertEqual(guide.recyclables_used, "jars, corks")

    def test_explicit_materials_list_is_kept(self):
        guide = guide_from_dict(make_guide_document(materials_list=["Chalk paint", "chalk paint", "Brush"]))
        self.assertEqual(guide.materials_list, ["Chalk paint", "Brush"])

    def test_missing_title(self):
        with self.assertRaises(ValueError):
            guide_from_dict(make_guide_document(title=""))

    def test_step_without_description(self):
        document = make_guide_document()
        document["steps"][1]["description"] = ""
        with self.assertRaises(ValueError):
            guide_from_dict(document)


class TestQuizAnswers(unittest.TestCase):

    def test_snapshot_uses_wire_keys(self):
        quiz = quiz_answers_from_dict({
            "furniture_type": " dresser ",
            "rooms": ["Bedroom", ""],
            "budget": "120",
            "custom_recyclables": None,
        })
        snapshot = quiz_answers_to_dict(quiz)

        self.assertEqual(snapshot["furnitureType"], "dresser")
        self.assertEqual(snapshot["rooms"], ["Bedroom"])
        self.assertEqual(snapshot["budget"], 120.0)
        self.assertEqual(snapshot["customRecyclables"], "")


if __name__ == '__main__':
    unittest.main()
