"""
Shared fixture builders for guide_pipeline tests.
"""
import json

from guide_pipeline.config import AppConfig
from guide_pipeline.types import QuizAnswers


def make_config(**overrides) -> AppConfig:
    """Config with a fake key and no real waiting between retries."""
    values = {
        "gemini_api_key": "test-key",
        "max_retries": 3,
        "retry_base_delay_seconds": 1.0,
        "retry_max_delay_seconds": 8.0,
    }
    values.update(overrides)
    return AppConfig(**values)


def make_quiz(**overrides) -> QuizAnswers:
    values = {
        "furniture_type": "chair",
        "size": "Medium",
        "condition": "Scratched finish",
        "rooms": ("Living Room",),
        "style": "Scandinavian",
        "color_vibe": "Neutral",
        "materials": ("Wood",),
        "tools": ("Sander", "Paint brushes"),
        "budget": 50.0,
        "recyclables": ("Glass jars",),
    }
    values.update(overrides)
    return QuizAnswers(**values)


def make_guide_document(num_steps: int = 2, **overrides) -> dict:
    steps = [
        {
            "step_number": i + 1,
            "title": f"Step {i + 1} title",
            "description": f"Do thing number {i + 1} carefully.",
            "tools_needed": ["Sander"],
            "materials_needed": ["Sandpaper", "Paint"] if i == 0 else ["paint", "Wax"],
            "estimated_time": "1 hour",
            "image_prompt": f"chair during step {i + 1}",
        }
        for i in range(num_steps)
    ]
    document = {
        "title": "Scandinavian Chair Refresh",
        "overview": "Give the old chair a light Nordic look.",
        "difficulty": "Beginner",
        "estimated_time": "1 day",
        "environmental_score": 4.5,
        "recyclables_used": "Glass jars become brush holders",
        "steps": steps,
    }
    document.update(overrides)
    return document


def make_guide_text(num_steps: int = 2, **overrides) -> str:
    """Model output wrapped in chatter and a code fence, as Gemini often replies."""
    return "Here is your guide:\n```json\n" + json.dumps(make_guide_document(num_steps, **overrides)) + "\n```\nEnjoy!"
