import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .services import SpeechError, TextToSpeechService

logger = logging.getLogger(__name__)


def _error_response(error: SpeechError) -> Response:
    body = error.to_dict()
    body['timestamp'] = timezone.now().isoformat()
    return Response(body, status=error.http_status)


class TextToSpeechView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        """
        POST /api/voice/tts/

        Request: {"text": "...", "voice_id": "...", "model_id": "...", "voice_settings": {...}}
        Response: audio/mpeg bytes
        """
        text = str(request.data.get('text') or '').strip()
        if not text:
            return _error_response(SpeechError(
                "Text is required", "Provide non-empty text", code="MISSING_TEXT", http_status=400,
            ))

        voice_settings = request.data.get('voice_settings')
        if voice_settings is not None and not isinstance(voice_settings, dict):
            return _error_response(SpeechError(
                "Invalid parameters", "voice_settings must be an object",
                code="INVALID_PARAMETERS", http_status=400,
            ))

        try:
            service = TextToSpeechService()
            audio = service.synthesize(
                text,
                voice_id=request.data.get('voice_id'),
                model_id=request.data.get('model_id'),
                voice_settings=voice_settings,
            )
        except SpeechError as e:
            return _error_response(e)
        except Exception as e:
            logger.error(f"Text-to-speech crashed: {e}", exc_info=True)
            return _error_response(SpeechError(details=str(e), code="INTERNAL_ERROR", http_status=500))

        response = HttpResponse(audio, content_type='audio/mpeg')
        response['Cache-Control'] = 'public, max-age=3600'
        response['Content-Length'] = str(len(audio))
        return response
