"""
Gemini text and Imagen image generation through the google-genai SDK.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from google import genai
from google.genai import errors, types

from guide_pipeline.errors import (
    MissingCredentials,
    ParseError,
    UpstreamServiceError,
    error_for_status,
)

logger = logging.getLogger(__name__)


SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_safety_settings(threshold: str) -> List[types.SafetySetting]:
    return [types.SafetySetting(category=category, threshold=threshold) for category in SAFETY_CATEGORIES]


def _http_options(timeout: float) -> types.HttpOptions:
    # SDK timeouts are in milliseconds
    return types.HttpOptions(timeout=int(timeout * 1000))


class GeminiClient:
    """Wraps ``genai.Client`` and classifies its failures as pipeline errors"""

    def __init__(self, api_key: str, client: Optional[genai.Client] = None):
        if not api_key:
            raise MissingCredentials(details="GEMINI_API_KEY is not set in the environment")
        self.api_key = api_key
        self.client = client or genai.Client(api_key=api_key)

    def generate_text(
        self,
        prompt: str,
        model: str,
        generation_config: Dict[str, Any],
        safety_settings: List[types.SafetySetting],
        timeout: float = 60,
    ) -> str:
        """
        Call ``models.generate_content`` and return the generated text.

        Raises:
            RateLimited, AuthenticationFailed, UpstreamServiceError: classified API failures
            ParseError: if the response carries no generated text
        """
        config = types.GenerateContentConfig(
            safety_settings=safety_settings,
            http_options=_http_options(timeout),
            **generation_config,
        )
        response = self._call(
            model,
            lambda: self.client.models.generate_content(model=model, contents=prompt, config=config),
        )

        text = response.text
        if not text or not text.strip():
            feedback = getattr(response, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None)
            raise ParseError(
                "Invalid response from AI service",
                details=f"No generated text in response (block reason: {reason or 'none'})",
            )
        return text

    def generate_image(
        self,
        prompt: str,
        model: str,
        parameters: Dict[str, Any],
        timeout: float = 120,
    ) -> Tuple[bytes, str]:
        """
        Call ``models.generate_images`` and return ``(image_bytes, mime_type)``.

        Raises:
            UpstreamServiceError: non-retryable when the response holds no image
        """
        config = types.GenerateImagesConfig(http_options=_http_options(timeout), **parameters)
        response = self._call(
            model,
            lambda: self.client.models.generate_images(model=model, prompt=prompt, config=config),
        )

        generated = getattr(response, "generated_images", None) or []
        image = getattr(generated[0], "image", None) if generated else None
        image_bytes = getattr(image, "image_bytes", None)
        if not isinstance(image_bytes, bytes) or not image_bytes:
            reason = getattr(generated[0], "rai_filtered_reason", None) if generated else None
            raise UpstreamServiceError(
                "Image model returned no image",
                details=f"{model} response had no image bytes (filtered: {reason or 'no'})",
                retryable=False,
            )
        return image_bytes, getattr(image, "mime_type", None) or "image/png"

    def _call(self, model: str, request):
        try:
            return request()
        except errors.APIError as e:
            logger.warning(f"Gemini API returned {e.code} for {model}: {e.message}")
            raise error_for_status(e.code or 500, details=f"Gemini API returned {e.code}: {e.message}") from e
        except httpx.TransportError as e:
            # timeouts and connection failures
            raise UpstreamServiceError(details=f"Request to {model} failed: {e}") from e
        except (ValueError, TypeError) as e:
            # SDK-side request validation
            raise UpstreamServiceError(details=f"Request to {model} rejected: {e}", retryable=False) from e
