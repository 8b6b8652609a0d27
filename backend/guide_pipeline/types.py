"""
Shared types for the guide generation pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Case-insensitive lookup; unknown values fall back to Intermediate"""
        text = str(value or '').strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.INTERMEDIATE


MIN_ENVIRONMENTAL_SCORE = 1.0
MAX_ENVIRONMENTAL_SCORE = 5.0
DEFAULT_ENVIRONMENTAL_SCORE = 3.0


@dataclass(frozen=True)
class QuizAnswers:
    """Answers collected by the quiz wizard. Consumed once per pipeline run."""
    furniture_type: str = ""
    size: str = ""
    condition: str = ""
    rooms: Tuple[str, ...] = ()
    style: str = ""
    color_vibe: str = ""
    custom_color: str = ""
    materials: Tuple[str, ...] = ()
    tools: Tuple[str, ...] = ()
    budget: Optional[float] = None
    addons: Tuple[str, ...] = ()
    recyclables: Tuple[str, ...] = ()
    custom_recyclables: str = ""
    initial_idea: str = ""
    photos: Tuple[str, ...] = ()


@dataclass
class Step:
    """One instruction unit of a guide"""
    title: str
    description: str
    tools_needed: List[str] = field(default_factory=list)
    materials_needed: List[str] = field(default_factory=list)
    estimated_time: str = "30 minutes"
    image_url: Optional[str] = None
    image_prompt: Optional[str] = None


@dataclass
class Guide:
    """Generated upcycling plan"""
    title: str
    overview: str
    steps: List[Step] = field(default_factory=list)
    materials_list: List[str] = field(default_factory=list)
    recyclables_used: str = ""
    estimated_time: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    environmental_score: float = DEFAULT_ENVIRONMENTAL_SCORE


@dataclass
class StepImage:
    """Outcome of image generation for a single step"""
    step_index: int
    url: str
    is_placeholder: bool = False
    model: Optional[str] = None


@dataclass
class GuideDraft:
    """Guide skeleton returned by text generation (no images yet)"""
    guide: Guide
    used_fallback: bool = False


@dataclass
class PipelineResult:
    """Final output of a pipeline run"""
    guide: Guide
    used_fallback: bool = False
    images: List[StepImage] = field(default_factory=list)


# Helper functions for type conversions

def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value if item is not None and str(item).strip())


def _as_str_list(value: Any) -> List[str]:
    return list(_as_str_tuple(value))


def dedupe_preserving_order(items: List[str]) -> List[str]:
    """Drop case-insensitive duplicates, keeping the first spelling"""
    seen = set()
    result = []
    for item in items:
        key = item.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(item.strip())
    return result


def normalize_environmental_score(value: Any) -> float:
    """
    Coerce a model-provided score into the 1.0-5.0 range.

    Scores in (5, 100] are read as percentages (older prompts asked for 0-100).
    """
    try:
        score = float(value)
    except (TypeError, ValueError):
        return DEFAULT_ENVIRONMENTAL_SCORE

    if score != score:  # NaN
        return DEFAULT_ENVIRONMENTAL_SCORE
    if MAX_ENVIRONMENTAL_SCORE < score <= 100:
        score = MIN_ENVIRONMENTAL_SCORE + (score / 100.0) * (MAX_ENVIRONMENTAL_SCORE - MIN_ENVIRONMENTAL_SCORE)
    score = max(MIN_ENVIRONMENTAL_SCORE, min(MAX_ENVIRONMENTAL_SCORE, score))
    return round(score, 1)


def quiz_answers_from_dict(data: Dict[str, Any]) -> QuizAnswers:
    """Build QuizAnswers from snake_case keys (serializer validated_data)"""
    budget = data.get('budget')
    return QuizAnswers(
        furniture_type=str(data.get('furniture_type') or '').strip(),
        size=str(data.get('size') or '').strip(),
        condition=str(data.get('condition') or '').strip(),
        rooms=_as_str_tuple(data.get('rooms')),
        style=str(data.get('style') or '').strip(),
        color_vibe=str(data.get('color_vibe') or '').strip(),
        custom_color=str(data.get('custom_color') or '').strip(),
        materials=_as_str_tuple(data.get('materials')),
        tools=_as_str_tuple(data.get('tools')),
        budget=float(budget) if budget is not None else None,
        addons=_as_str_tuple(data.get('addons')),
        recyclables=_as_str_tuple(data.get('recyclables')),
        custom_recyclables=str(data.get('custom_recyclables') or '').strip(),
        initial_idea=str(data.get('initial_idea') or '').strip(),
        photos=_as_str_tuple(data.get('photos')),
    )


def quiz_answers_to_dict(quiz: QuizAnswers) -> Dict[str, Any]:
    """Convert QuizAnswers to the camelCase wire/snapshot form"""
    return {
        'furnitureType': quiz.furniture_type,
        'size': quiz.size,
        'condition': quiz.condition,
        'rooms': list(quiz.rooms),
        'style': quiz.style,
        'colorVibe': quiz.color_vibe,
        'customColor': quiz.custom_color,
        'materials': list(quiz.materials),
        'tools': list(quiz.tools),
        'budget': quiz.budget,
        'addons': list(quiz.addons),
        'recyclables': list(quiz.recyclables),
        'customRecyclables': quiz.custom_recyclables,
        'initialIdea': quiz.initial_idea,
        'photos': list(quiz.photos),
    }


def step_from_dict(data: Dict[str, Any], position: int) -> Step:
    """Build a Step from model output; raises ValueError on unusable entries"""
    if not isinstance(data, dict):
        raise ValueError(f"step {position} is not an object")
    title = str(data.get('title') or '').strip()
    description = str(data.get('description') or '').strip()
    if not title or not description:
        raise ValueError(f"step {position} is missing a title or description")

    image_prompt = data.get('image_prompt')
    return Step(
        title=title,
        description=description,
        tools_needed=_as_str_list(data.get('tools_needed')),
        materials_needed=_as_str_list(data.get('materials_needed')),
        estimated_time=str(data.get('estimated_time') or '30 minutes').strip(),
        image_url=data.get('image_url') or None,
        image_prompt=str(image_prompt).strip() if image_prompt else None,
    )


def guide_from_dict(data: Dict[str, Any]) -> Guide:
    """
    Build a structurally complete Guide from decoded model output.

    Raises:
        ValueError: if the document has no title or no usable steps
    """
    if not isinstance(data, dict):
        raise ValueError("guide document is not an object")

    title = str(data.get('title') or '').strip()
    if not title:
        raise ValueError("guide is missing a title")

    raw_steps = data.get('steps')
    if not isinstance(raw_steps, list) or not raw_steps:
        raise ValueError("guide has no steps")

    steps = [step_from_dict(raw, position) for position, raw in enumerate(raw_steps, 1)]

    materials = _as_str_list(data.get('materials_list'))
    if not materials:
        for step in steps:
            materials.extend(step.materials_needed)

    recyclables = data.get('recyclables_used')
    if isinstance(recyclables, (list, tuple)):
        recyclables = ', '.join(_as_str_list(recyclables))

    return Guide(
        title=title,
        overview=str(data.get('overview') or '').strip(),
        steps=steps,
        materials_list=dedupe_preserving_order(materials),
        recyclables_used=str(recyclables or '').strip(),
        estimated_time=str(data.get('estimated_time') or '').strip(),
        difficulty=Difficulty.parse(data.get('difficulty')),
        environmental_score=normalize_environmental_score(data.get('environmental_score')),
    )


def step_to_dict(step: Step) -> Dict[str, Any]:
    """Convert Step to dict for serialization"""
    return {
        'title': step.title,
        'description': step.description,
        'tools_needed': list(step.tools_needed),
        'materials_needed': list(step.materials_needed),
        'estimated_time': step.estimated_time,
        'image_url': step.image_url,
        'image_prompt': step.image_prompt,
    }


def guide_to_dict(guide: Guide) -> Dict[str, Any]:
    """Convert Guide to dict for serialization"""
    return {
        'title': guide.title,
        'overview': guide.overview,
        'steps': [step_to_dict(step) for step in guide.steps],
        'materials_list': list(guide.materials_list),
        'recyclables_used': guide.recyclables_used,
        'estimated_time': guide.estimated_time,
        'difficulty': guide.difficulty.value,
        'environmental_score': guide.environmental_score,
    }
