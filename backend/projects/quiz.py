"""
Validation rules of the project quiz wizard.

Each wizard step collects one answer; a project can be created once the
first eight steps are valid. Answers are the camelCase wire form.
"""
from typing import Any, Callable, Dict, List

TOTAL_STEPS = 12
REQUIRED_STEPS_FOR_SUBMIT = 8
MIN_PHOTOS = 2


def _text(answers: Dict[str, Any], key: str) -> bool:
    return bool(str(answers.get(key) or '').strip())


def _non_empty_list(answers: Dict[str, Any], key: str, minimum: int = 1) -> bool:
    value = answers.get(key) or []
    return isinstance(value, (list, tuple)) and len(value) >= minimum


STEP_RULES: Dict[int, Callable[[Dict[str, Any]], bool]] = {
    1: lambda a: _non_empty_list(a, 'photos', MIN_PHOTOS),
    2: lambda a: _text(a, 'furnitureType'),
    3: lambda a: _text(a, 'size'),
    4: lambda a: _non_empty_list(a, 'materials'),
    5: lambda a: _text(a, 'condition'),
    6: lambda a: _non_empty_list(a, 'rooms'),
    7: lambda a: _text(a, 'style'),
    8: lambda a: _text(a, 'colorVibe'),
    9: lambda a: _non_empty_list(a, 'addons'),
    10: lambda a: _non_empty_list(a, 'recyclables') or _text(a, 'customRecyclables'),
    11: lambda a: _non_empty_list(a, 'tools'),
    12: lambda a: a.get('budget') is not None,
}


def is_step_valid(step: int, answers: Dict[str, Any]) -> bool:
    """Whether the answer for a 1-based wizard step is complete"""
    rule = STEP_RULES.get(step)
    if rule is None:
        # steps past the last rule carry no required answer
        return True
    return rule(answers)


def invalid_steps(answers: Dict[str, Any], up_to: int = TOTAL_STEPS) -> List[int]:
    return [step for step in range(1, up_to + 1) if not is_step_valid(step, answers)]


def can_submit(answers: Dict[str, Any]) -> bool:
    return not invalid_steps(answers, REQUIRED_STEPS_FOR_SUBMIT)
