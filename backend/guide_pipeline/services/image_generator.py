"""
Step image generation service using Imagen with a single fallback model.
"""
import logging
from typing import List, Sequence

from guide_pipeline.config import AppConfig
from guide_pipeline.errors import PipelineError
from guide_pipeline.prompts import build_image_prompt
from guide_pipeline.services.gemini_client import GeminiClient
from guide_pipeline.services.image_storage import ImageStorage
from guide_pipeline.types import QuizAnswers, Step, StepImage

logger = logging.getLogger(__name__)


PLACEHOLDER_IMAGES: Sequence[str] = (
    "https://images.pexels.com/photos/1648377/pexels-photo-1648377.jpeg",
    "https://images.pexels.com/photos/1866149/pexels-photo-1866149.jpeg",
    "https://images.pexels.com/photos/1090638/pexels-photo-1090638.jpeg",
    "https://images.pexels.com/photos/2251247/pexels-photo-2251247.jpeg",
    "https://images.pexels.com/photos/1571459/pexels-photo-1571459.jpeg",
)


def placeholder_for(step_index: int, pool: Sequence[str] = PLACEHOLDER_IMAGES) -> str:
    """Deterministic placeholder for a step index"""
    return pool[step_index % len(pool)]


class StepImageGenerator:
    """Generates and stores one illustrative image per guide step"""

    def __init__(
        self,
        client: GeminiClient,
        storage: ImageStorage,
        config: AppConfig,
        placeholders: Sequence[str] = PLACEHOLDER_IMAGES,
    ):
        self.client = client
        self.storage = storage
        self.config = config
        self.placeholders = placeholders

    @property
    def models(self) -> List[str]:
        return [m for m in (self.config.primary_image_model, self.config.fallback_image_model) if m]

    def generate_step_image(
        self,
        step: Step,
        quiz: QuizAnswers,
        step_index: int,
        project_id: str,
    ) -> StepImage:
        """
        Generate, upload and return the image for one step. Never raises.

        Tries the primary model, then the fallback model; if both fail, or the
        upload fails, the step gets its deterministic placeholder.
        """
        if not step.image_prompt:
            logger.info(f"Step {step_index} has no image prompt, using placeholder")
            return self.placeholder(step_index)

        prompt = build_image_prompt(step.image_prompt, quiz)
        parameters = {
            "number_of_images": self.config.image_sample_count,
            "aspect_ratio": self.config.image_aspect_ratio,
        }
        if self.config.image_negative_prompt:
            parameters["negative_prompt"] = self.config.image_negative_prompt

        for model in self.models:
            try:
                image_bytes, mime_type = self.client.generate_image(
                    prompt=prompt,
                    model=model,
                    parameters=parameters,
                    timeout=self.config.image_generation_timeout,
                )
            except PipelineError as e:
                logger.warning(f"Image model {model} failed for step {step_index}: {e.code} {e.details}")
                continue
            except Exception as e:
                logger.error(f"Unexpected error from image model {model} for step {step_index}: {e}", exc_info=True)
                continue

            try:
                url = self.storage.upload(project_id, step_index, image_bytes, mime_type)
            except PipelineError as e:
                logger.error(f"Upload failed for step {step_index}: {e.details}")
                return self.placeholder(step_index)
            except Exception as e:
                logger.error(f"Unexpected upload error for step {step_index}: {e}", exc_info=True)
                return self.placeholder(step_index)

            logger.info(f"Generated step {step_index} image with {model}")
            return StepImage(step_index=step_index, url=url, is_placeholder=False, model=model)

        logger.warning(f"All image models failed for step {step_index}, using placeholder")
        return self.placeholder(step_index)

    def placeholder(self, step_index: int) -> StepImage:
        """Placeholder StepImage drawn from this generator's pool"""
        return StepImage(
            step_index=step_index,
            url=placeholder_for(step_index, self.placeholders),
            is_placeholder=True,
        )
