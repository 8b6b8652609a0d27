"""
Main orchestrator pipeline.

Turns quiz answers into a persisted guide with per-step images.
"""
import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from guide_pipeline.config import AppConfig, load_config
from guide_pipeline.errors import InvalidInput, ParseError
from guide_pipeline.pipelines.image_strategy import ImageStrategy, SequentialImageStrategy
from guide_pipeline.services.gemini_client import GeminiClient
from guide_pipeline.services.guide_store import DjangoGuideStore, GuideStore
from guide_pipeline.services.image_generator import StepImageGenerator
from guide_pipeline.services.image_storage import ImageStorage
from guide_pipeline.services.text_generator import GuideTextGenerator
from guide_pipeline.types import PipelineResult, QuizAnswers

logger = logging.getLogger(__name__)


class GuideGenerationPipeline:
    """
    Orchestrates one guide generation run for a project.

    This coordinates:
    1. Guide text generation (retried on transient upstream failures)
    2. Sequential step image generation (failures degrade to placeholders)
    3. Persistence of the guide document, summary fields and step rows
    """

    def __init__(
        self,
        text_generator: GuideTextGenerator,
        image_generator: StepImageGenerator,
        store: GuideStore,
        image_strategy: Optional[ImageStrategy] = None,
    ):
        self.text_generator = text_generator
        self.image_generator = image_generator
        self.store = store
        self.image_strategy = image_strategy or SequentialImageStrategy()

    def run(self, project_id: str, quiz: Optional[QuizAnswers]) -> PipelineResult:
        """
        Generate, illustrate and persist a guide.

        Args:
            project_id: Project the guide belongs to
            quiz: Quiz answers snapshot

        Returns:
            PipelineResult with the completed guide (at least one step)

        Raises:
            PipelineError subclasses; image failures never surface here
        """
        if not project_id or quiz is None:
            raise InvalidInput(details="projectId and quizData are required")

        logger.info(f"=== Starting guide generation for project {project_id} ===")

        # STEP 1: Guide text
        logger.info("Step 1: Generating guide text...")
        draft = self.text_generator.generate_guide_text(quiz)
        guide = draft.guide
        if not guide.steps:
            raise ParseError(details="Generated guide has no steps")

        # STEP 2: Step images, in step order
        logger.info(f"Step 2: Generating images for {len(guide.steps)} steps...")
        images = self.image_strategy.render(
            guide.steps,
            lambda step, index: self.image_generator.generate_step_image(step, quiz, index, project_id),
            self.image_generator.placeholder,
        )
        steps = [
            replace(step, image_url=image.url)
            for step, image in zip(guide.steps, images)
        ]
        guide = replace(guide, steps=steps)

        # STEP 3: Persist project + steps
        logger.info("Step 3: Saving guide...")
        self.store.save_guide(project_id, guide, quiz)

        logger.info(f"=== Guide generation complete for project {project_id} ===")
        logger.info(f"Steps: {len(guide.steps)}, fallback guide: {draft.used_fallback}")

        return PipelineResult(guide=guide, used_fallback=draft.used_fallback, images=images)


def build_pipeline(
    config: Optional[AppConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> GuideGenerationPipeline:
    """
    Wire a pipeline with real collaborators.

    Raises:
        MissingCredentials: if no Gemini API key is configured
    """
    config = config or load_config()
    client = GeminiClient(api_key=config.gemini_api_key)
    return GuideGenerationPipeline(
        text_generator=GuideTextGenerator(client, config, sleep=sleep),
        image_generator=StepImageGenerator(
            client,
            ImageStorage(prefix=config.image_storage_prefix),
            config,
        ),
        store=DjangoGuideStore(),
    )
