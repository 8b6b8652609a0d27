import unittest

from projects.quiz import can_submit, invalid_steps, is_step_valid


def complete_answers(**overrides):
    answers = {
        'photos': ['https://img.test/1.jpg', 'https://img.test/2.jpg'],
        'furnitureType': 'dresser',
        'size': 'Large',
        'materials': ['Wood'],
        'condition': 'Worn',
        'rooms': ['Bedroom'],
        'style': 'Boho',
        'colorVibe': 'Earthy',
        'addons': ['Knobs'],
        'recyclables': [],
        'customRecyclables': 'old belts',
        'tools': ['Drill'],
        'budget': 0,
    }
    answers.update(overrides)
    return answers


class QuizRuleTests(unittest.TestCase):

    def test_complete_answers_pass_every_step(self):
        self.assertEqual(invalid_steps(complete_answers()), [])
        self.assertTrue(can_submit(complete_answers()))

    def test_photos_need_at_least_two(self):
        self.assertFalse(is_step_valid(1, complete_answers(photos=['one.jpg'])))

    def test_recyclables_accept_custom_text(self):
        self.assertTrue(is_step_valid(10, complete_answers()))
        self.assertFalse(is_step_valid(10, complete_answers(customRecyclables='  ')))

    def test_zero_budget_is_an_answer(self):
        self.assertTrue(is_step_valid(12, complete_answers(budget=0)))
        self.assertFalse(is_step_valid(12, complete_answers(budget=None)))

    def test_submit_only_needs_first_eight_steps(self):
        answers = complete_answers(addons=[], tools=[], budget=None)
        self.assertTrue(can_submit(answers))
        self.assertEqual(invalid_steps(answers), [9, 11, 12])

    def test_submit_blocked_by_early_step(self):
        answers = complete_answers(style='', rooms=[])
        self.assertFalse(can_submit(answers))
        self.assertEqual(invalid_steps(answers, 8), [6, 7])

    def test_step_without_rule_is_valid(self):
        self.assertTrue(is_step_valid(13, {}))
        self.assertTrue(is_step_valid(0, {}))


if __name__ == '__main__':
    unittest.main()
