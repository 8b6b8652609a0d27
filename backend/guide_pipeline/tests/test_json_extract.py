"""
Tests for guide_pipeline/utils/json_extract.py

Run with: python -m pytest guide_pipeline/tests/test_json_extract.py -v
"""
import unittest

from guide_pipeline.utils.json_extract import extract_json_object, find_balanced_object


class TestFindBalancedObject(unittest.TestCase):

    def test_extracts_object_from_code_fence(self):
        text = 'Sure!\n```json\n{"title": "Chair"}\n```\nEnjoy'
        self.assertEqual(find_balanced_object(text), '{"title": "Chair"}')

    def test_nested_objects(self):
        text = 'x {"a": {"b": {"c": 1}}, "d": 2} trailing {"e": 3}'
        self.assertEqual(find_balanced_object(text), '{"a": {"b": {"c": 1}}, "d": 2}')

    def test_braces_inside_strings_are_ignored(self):
        text = '{"description": "use {brand} paint } carefully", "n": 1}'
        self.assertEqual(find_balanced_object(text), text)

    def test_escaped_quotes_inside_strings(self):
        text = '{"description": "say \\"hi}\\" twice"} tail'
        self.assertEqual(find_balanced_object(text), '{"description": "say \\"hi}\\" twice"}')

    def test_no_brace(self):
        self.assertIsNone(find_balanced_object("no json here"))
        self.assertIsNone(find_balanced_object(""))

    def test_unclosed_object(self):
        self.assertIsNone(find_balanced_object('{"title": "Chair"'))


class TestExtractJsonObject(unittest.TestCase):

    def test_decodes_first_object(self):
        self.assertEqual(extract_json_object('prefix {"a": 1} suffix'), {"a": 1})

    def test_missing_object_raises(self):
        with self.assertRaises(ValueError):
            extract_json_object("I cannot help with that")

    def test_invalid_json_raises(self):
        with self.assertRaises(ValueError):
            extract_json_object("{'single': 'quotes'}")


if __name__ == '__main__':
    unittest.main()
