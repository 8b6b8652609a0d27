"""
Strategies for producing step images.

A strategy receives the steps and a per-step generator and must return one
StepImage per step, in step order. The cover image is taken from index 0, so
any parallel implementation still has to return results ordered by step.
``fallback`` supplies the image for a step whose generator raised.
"""
import logging
from typing import Callable, List, Protocol

from guide_pipeline.types import Step, StepImage

logger = logging.getLogger(__name__)

StepImageFn = Callable[[Step, int], StepImage]
FallbackFn = Callable[[int], StepImage]


class ImageStrategy(Protocol):
    def render(self, steps: List[Step], generate: StepImageFn, fallback: FallbackFn) -> List[StepImage]:
        ...


class SequentialImageStrategy:
    """Generate images one step at a time, in step order"""

    def render(self, steps: List[Step], generate: StepImageFn, fallback: FallbackFn) -> List[StepImage]:
        logger.info(f"Generating images for {len(steps)} steps sequentially")
        results: List[StepImage] = []

        for index, step in enumerate(steps):
            try:
                image = generate(step, index)
            except Exception as e:
                # A failing step never affects the others
                logger.error(f"Unexpected error generating image for step {index}: {e}", exc_info=True)
                image = fallback(index)
            results.append(image)

        placeholders = sum(1 for image in results if image.is_placeholder)
        logger.info(f"Step images ready: {len(results) - placeholders} generated, {placeholders} placeholders")
        return results
