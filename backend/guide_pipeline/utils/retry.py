"""
Exponential backoff for calls that raise classified pipeline errors.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from guide_pipeline.errors import PipelineError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class RetryPolicy:
    """Delays double from ``base_delay`` and never exceed ``max_delay``"""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 8.0

    def delay_for(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (0-based)"""
        return min(self.base_delay * (2 ** retry_number), self.max_delay)


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    label: str = "call",
) -> T:
    """
    Run ``func`` until it succeeds, raises a non-retryable error, or retries run out.

    Only ``PipelineError`` instances with ``retryable`` set are retried; any
    other exception propagates immediately. At most ``policy.max_retries + 1``
    attempts are made.
    """
    attempts = policy.max_retries + 1
    for attempt in range(attempts):
        try:
            return func()
        except PipelineError as e:
            if not e.retryable:
                logger.error(f"{label} failed with non-retryable {e.code}: {e.details or e.message}")
                raise
            if attempt == attempts - 1:
                logger.error(f"{label} failed after {attempts} attempts: {e.code}")
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"{label} attempt {attempt + 1}/{attempts} failed with {e.code}; retrying in {delay:.1f}s"
            )
            sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{label} exhausted retries without a result")
