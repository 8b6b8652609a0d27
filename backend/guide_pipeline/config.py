"""
Configuration for the guide generation pipeline.
"""
import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class AppConfig:
    """Application configuration loaded from environment variables"""

    # Gemini (text + image models share the same key)
    gemini_api_key: str = ""
    text_model_name: str = "gemini-2.0-flash"

    # Text generation parameters
    text_temperature: float = 0.7
    text_top_k: int = 40
    text_top_p: float = 0.95
    text_max_output_tokens: int = 4096
    safety_threshold: str = "BLOCK_MEDIUM_AND_ABOVE"

    # Image generation
    primary_image_model: str = "imagen-3.0-generate-002"
    fallback_image_model: str = "imagen-3.0-fast-generate-001"
    image_aspect_ratio: str = "4:3"
    # Only honoured by Vertex AI; the Gemini Developer API rejects it
    image_negative_prompt: str = ""
    image_sample_count: int = 1
    image_storage_prefix: str = "guide-images"

    # API timeouts (seconds)
    text_generation_timeout: int = 60
    image_generation_timeout: int = 120

    # Retry configuration (text generation only)
    max_retries: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 8.0

    # Substitute a template guide when the model output cannot be parsed
    use_fallback_guide: bool = False


def load_config() -> AppConfig:
    """Load configuration from environment variables"""
    return AppConfig(
        # Gemini
        gemini_api_key=os.getenv('GEMINI_API_KEY', ''),
        text_model_name=os.getenv('GEMINI_TEXT_MODEL', 'gemini-2.0-flash'),

        # Text generation
        text_temperature=float(os.getenv('TEXT_TEMPERATURE', '0.7')),
        text_top_k=int(os.getenv('TEXT_TOP_K', '40')),
        text_top_p=float(os.getenv('TEXT_TOP_P', '0.95')),
        text_max_output_tokens=int(os.getenv('TEXT_MAX_OUTPUT_TOKENS', '4096')),
        safety_threshold=os.getenv('SAFETY_THRESHOLD', 'BLOCK_MEDIUM_AND_ABOVE'),

        # Image generation
        primary_image_model=os.getenv('IMAGE_MODEL_PRIMARY', 'imagen-3.0-generate-002'),
        fallback_image_model=os.getenv('IMAGE_MODEL_FALLBACK', 'imagen-3.0-fast-generate-001'),
        image_aspect_ratio=os.getenv('IMAGE_ASPECT_RATIO', '4:3'),
        image_negative_prompt=os.getenv('IMAGE_NEGATIVE_PROMPT', ''),
        image_sample_count=int(os.getenv('IMAGE_SAMPLE_COUNT', '1')),
        image_storage_prefix=os.getenv('IMAGE_STORAGE_PREFIX', 'guide-images'),

        # Timeouts
        text_generation_timeout=int(os.getenv('TEXT_GENERATION_TIMEOUT', '60')),
        image_generation_timeout=int(os.getenv('IMAGE_GENERATION_TIMEOUT', '120')),

        # Retry
        max_retries=int(os.getenv('MAX_RETRIES', '3')),
        retry_base_delay_seconds=float(os.getenv('RETRY_BASE_DELAY_SECONDS', '1.0')),
        retry_max_delay_seconds=float(os.getenv('RETRY_MAX_DELAY_SECONDS', '8.0')),

        use_fallback_guide=_env_bool('USE_FALLBACK_GUIDE'),
    )
