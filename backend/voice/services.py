"""
Text-to-speech for reading guide steps aloud, backed by ElevenLabs.
"""
import logging
import os
from typing import Any, Dict, Optional

from elevenlabs import VoiceSettings
from elevenlabs.client import ElevenLabs
from elevenlabs.core.api_error import ApiError

from guide_pipeline.errors import PipelineError

logger = logging.getLogger(__name__)

DEFAULT_VOICE_ID = "pNInz6obpgDQGcFmaJgB"
DEFAULT_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"
DEFAULT_VOICE_SETTINGS: Dict[str, Any] = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.0,
    "use_speaker_boost": True,
}


class SpeechError(PipelineError):
    """Failure while synthesizing speech; code and status vary per cause."""
    default_message = "Text-to-speech request failed"

    def __init__(self, message=None, details=None, code: str = "EXTERNAL_API_ERROR", http_status: int = 500):
        super().__init__(message, details)
        self.code = code
        self.http_status = http_status


def speech_error_for_status(status_code: Optional[int], details: str = "") -> SpeechError:
    if status_code == 401:
        return SpeechError("Invalid ElevenLabs API key", details, code="INVALID_API_KEY", http_status=401)
    if status_code == 429:
        return SpeechError("Rate limit exceeded", details, code="RATE_LIMIT_EXCEEDED", http_status=429)
    if status_code == 422:
        return SpeechError("Invalid parameters", details, code="INVALID_PARAMETERS", http_status=422)
    if status_code is not None and status_code >= 500:
        return SpeechError("Speech service unavailable", details, code="SERVICE_UNAVAILABLE", http_status=502)
    return SpeechError(details=details, code="EXTERNAL_API_ERROR", http_status=status_code or 500)


def merge_voice_settings(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Defaults with caller overrides applied per key"""
    settings = dict(DEFAULT_VOICE_SETTINGS)
    for key, value in (overrides or {}).items():
        if key in settings and value is not None:
            settings[key] = value
    return settings


class TextToSpeechService:
    def __init__(self, api_key: Optional[str] = None, client: Optional[ElevenLabs] = None):
        self.api_key = api_key if api_key is not None else os.getenv("ELEVENLABS_API_KEY", "")
        if client is None and not self.api_key:
            raise SpeechError(
                "Text-to-speech service is not configured",
                "ELEVENLABS_API_KEY is not set",
                code="MISSING_API_KEY",
                http_status=500,
            )
        self.client = client or ElevenLabs(api_key=self.api_key)

    def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        voice_settings: Optional[Dict[str, Any]] = None,
    ) -> bytes:
        """
        Convert text to MP3 bytes.

        Raises:
            SpeechError: with the code and status matching the upstream failure
        """
        voice_id = voice_id or DEFAULT_VOICE_ID
        settings = merge_voice_settings(voice_settings)
        logger.info(f"Synthesizing {len(text)} chars with voice {voice_id}")

        try:
            audio = self.client.text_to_speech.convert(
                text=text,
                voice_id=voice_id,
                model_id=model_id or DEFAULT_MODEL_ID,
                output_format=DEFAULT_OUTPUT_FORMAT,
                voice_settings=VoiceSettings(**settings),
            )
            # convert() streams chunks
            return audio if isinstance(audio, bytes) else b"".join(audio)
        except ApiError as e:
            logger.error(f"ElevenLabs API error {e.status_code}: {e.body}")
            raise speech_error_for_status(e.status_code, str(e.body)) from e
