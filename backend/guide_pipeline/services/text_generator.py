"""
Guide text generation service - prompts Gemini and decodes the guide JSON.
"""
import logging
import time
from typing import Callable, Optional

from guide_pipeline.config import AppConfig
from guide_pipeline.errors import ParseError
from guide_pipeline.prompts import build_guide_prompt
from guide_pipeline.services.gemini_client import GeminiClient, build_safety_settings
from guide_pipeline.types import (
    Difficulty,
    Guide,
    GuideDraft,
    QuizAnswers,
    Step,
    dedupe_preserving_order,
    guide_from_dict,
)
from guide_pipeline.utils.json_extract import extract_json_object
from guide_pipeline.utils.retry import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)


class GuideTextGenerator:
    """Generates a guide skeleton (steps without images) from quiz answers"""

    def __init__(
        self,
        client: GeminiClient,
        config: AppConfig,
        sleep: Callable[[float], None] = time.sleep,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.client = client
        self.config = config
        self.sleep = sleep
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=config.max_retries,
            base_delay=config.retry_base_delay_seconds,
            max_delay=config.retry_max_delay_seconds,
        )

    def generate_guide_text(self, quiz: QuizAnswers) -> GuideDraft:
        """
        Generate and decode a guide for the given quiz answers.

        Transient upstream failures (429, 5xx) are retried with backoff.
        Authentication and parse failures are raised immediately.

        Returns:
            GuideDraft whose ``used_fallback`` is True only when the template
            guide replaced unparsable output (``use_fallback_guide`` enabled)
        """
        prompt = build_guide_prompt(quiz)
        logger.info(f"Generating guide text for {quiz.furniture_type or 'furniture'} (prompt length {len(prompt)})")

        raw_text = call_with_retry(
            lambda: self._request_text(prompt),
            policy=self.retry_policy,
            sleep=self.sleep,
            label="Guide text generation",
        )
        logger.info(f"Generated guide content length: {len(raw_text)}")

        try:
            guide = self._parse_guide(raw_text)
        except ParseError:
            if not self.config.use_fallback_guide:
                raise
            logger.warning("Guide output was unparsable, substituting the template guide")
            return GuideDraft(guide=build_fallback_guide(quiz), used_fallback=True)

        logger.info(f"Parsed guide '{guide.title}' with {len(guide.steps)} steps")
        return GuideDraft(guide=guide, used_fallback=False)

    def _request_text(self, prompt: str) -> str:
        generation_config = {
            "temperature": self.config.text_temperature,
            "top_k": self.config.text_top_k,
            "top_p": self.config.text_top_p,
            "max_output_tokens": self.config.text_max_output_tokens,
        }
        return self.client.generate_text(
            prompt=prompt,
            model=self.config.text_model_name,
            generation_config=generation_config,
            safety_settings=build_safety_settings(self.config.safety_threshold),
            timeout=self.config.text_generation_timeout,
        )

    @staticmethod
    def _parse_guide(raw_text: str) -> Guide:
        try:
            document = extract_json_object(raw_text)
            return guide_from_dict(document)
        except ValueError as e:
            logger.error(f"Guide parsing failed: {e}")
            logger.debug(f"Raw content: {raw_text[:1000]}")
            raise ParseError(details=str(e)) from e


def build_fallback_guide(quiz: QuizAnswers) -> Guide:
    """Template guide used when the fallback policy is enabled"""
    furniture = quiz.furniture_type or 'furniture'
    style = quiz.style or 'refreshed'
    room = quiz.rooms[0] if quiz.rooms else 'space'
    prep_tools = list(quiz.tools[:3]) or ['Screwdriver', 'Sandpaper', 'Cleaning cloth']

    steps = [
        Step(
            title='Preparation and Cleaning',
            description=(
                'Remove all hardware and clean the furniture thoroughly. Sand any rough areas '
                'and wipe down with a damp cloth to ensure proper paint adhesion.'
            ),
            tools_needed=prep_tools,
            materials_needed=['Wood cleaner', 'Sandpaper', 'Tack cloth'],
            estimated_time='2 hours',
            image_prompt=f'{furniture} with hardware removed, freshly sanded on a workshop floor',
        ),
        Step(
            title='Surface Preparation',
            description=(
                'Apply primer to ensure even coverage and better paint adhesion. '
                'Allow to dry completely according to manufacturer instructions.'
            ),
            tools_needed=['Paint brushes', 'Roller', 'Paint tray'],
            materials_needed=['Primer', 'Drop cloths'],
            estimated_time='3 hours',
            image_prompt=f'{furniture} coated in white primer on drop cloths',
        ),
        Step(
            title='Main Finish Application',
            description=(
                'Apply your chosen paint or stain in thin, even coats. Work in the direction of '
                'the wood grain and maintain a wet edge to avoid lap marks.'
            ),
            tools_needed=['Paint brushes', 'Roller', 'Paint tray'],
            materials_needed=['Paint or stain', 'Stirring stick'],
            estimated_time='4 hours',
            image_prompt=f'{furniture} being painted in a {style} color scheme',
        ),
        Step(
            title='Final Details and Protection',
            description=(
                'Install new hardware if desired and apply a protective topcoat. '
                'Allow to cure completely before use.'
            ),
            tools_needed=['Drill', 'Screwdriver', 'Fine brush'],
            materials_needed=['Hardware', 'Protective finish', 'Screws'],
            estimated_time='2 hours',
            image_prompt=f'finished {style} {furniture} styled in a {room}',
        ),
    ]

    materials = []
    for step in steps:
        materials.extend(step.materials_needed)

    return Guide(
        title=f"{furniture.title()} Upcycling Project",
        overview=(
            f"Transform your {furniture} with a {style} style makeover "
            f"that fits perfectly in your {room}."
        ),
        steps=steps,
        materials_list=dedupe_preserving_order(materials),
        recyclables_used=', '.join(quiz.recyclables) or quiz.custom_recyclables,
        estimated_time='2-3 days',
        difficulty=Difficulty.INTERMEDIATE,
        environmental_score=4.0,
    )
