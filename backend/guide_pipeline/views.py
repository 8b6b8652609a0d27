"""
API views for the guide generation pipeline.
"""
import logging
import time

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from guide_pipeline.config import load_config
from guide_pipeline.errors import InvalidInput, PipelineError
from guide_pipeline.pipelines.orchestrator import build_pipeline
from guide_pipeline.serializers import GenerateGuideRequestSerializer
from guide_pipeline.types import guide_to_dict
from projects.models import Project

logger = logging.getLogger(__name__)


def _error_response(error: PipelineError) -> Response:
    body = error.to_dict()
    body['timestamp'] = timezone.now().isoformat()
    return Response(body, status=error.http_status)


class GenerateGuideView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        """
        POST /api/guides/generate/

        Request:
        {
            "projectId": "7f0c...",
            "quizData": {"furnitureType": "chair", "style": "Scandinavian", ...}
        }

        Response:
        {
            "success": true,
            "guide": {"title": "...", "steps": [...], ...},
            "metadata": {"processingTime": 8123, "timestamp": "...", "usedFallback": false}
        }

        Errors respond with {"error", "code", "details", "timestamp"}.
        """
        started = time.monotonic()

        serializer = GenerateGuideRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return _error_response(InvalidInput(details=str(serializer.errors)))

        project_id = str(serializer.validated_data['project_id'])
        if not Project.objects.filter(pk=project_id, user=request.user).exists():
            return Response({
                'error': 'Project not found',
                'code': 'PROJECT_NOT_FOUND',
                'details': f'No project {project_id} for this user',
                'timestamp': timezone.now().isoformat(),
            }, status=404)

        quiz = serializer.to_quiz_answers()
        logger.info(f"Generating guide for project {project_id}")

        try:
            pipeline = build_pipeline()
            result = pipeline.run(project_id, quiz)
        except PipelineError as e:
            logger.error(f"Guide generation failed for project {project_id}: {e.code} {e.details}")
            return _error_response(e)
        except Exception as e:
            logger.error(f"Guide generation crashed for project {project_id}: {e}", exc_info=True)
            return _error_response(PipelineError(details=str(e)))

        processing_ms = int((time.monotonic() - started) * 1000)
        return Response({
            'success': True,
            'guide': guide_to_dict(result.guide),
            'metadata': {
                'processingTime': processing_ms,
                'timestamp': timezone.now().isoformat(),
                'usedFallback': result.used_fallback,
            },
        })


@csrf_exempt
def health_check(request):
    """
    GET /api/guides/health/

    Report whether the AI services are configured.
    """
    config = load_config()
    configured = bool(config.gemini_api_key)

    health = {
        'ok': configured,
        'services': {
            'text_generation': {
                'configured': configured,
                'model': config.text_model_name,
            },
            'image_generation': {
                'configured': configured,
                'models': [config.primary_image_model, config.fallback_image_model],
            },
        },
    }

    status_code = 200 if health['ok'] else 503
    return JsonResponse(health, status=status_code)
