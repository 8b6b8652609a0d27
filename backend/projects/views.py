import logging

from django.db import models, transaction
from django.db.models import Avg
from rest_framework import generics, serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from guide_pipeline.serializers import QuizAnswersSerializer
from guide_pipeline.types import quiz_answers_to_dict

from .models import Comment, Feedback, Like, Project
from .quiz import REQUIRED_STEPS_FOR_SUBMIT, invalid_steps
from .serializers import (
    CommentSerializer,
    FeedbackSerializer,
    ProjectDetailSerializer,
    ProjectSerializer,
)

logger = logging.getLogger(__name__)

FEED_MAX_LIMIT = 50


def _parse_positive_int(raw_value, field_name):
    try:
        value = int(raw_value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({field_name: 'Must be a whole number'})
    if value <= 0:
        raise serializers.ValidationError({field_name: 'Must be positive'})
    return value


def _visible_projects(user):
    """Public projects plus, for a signed-in user, their own"""
    visible = models.Q(public=True)
    if user.is_authenticated:
        visible |= models.Q(user=user)
    return Project.objects.filter(visible)


def _get_visible_project(request, project_id):
    return _visible_projects(request.user).select_related('user').filter(id=project_id).first()


class CreateProjectView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """
        POST /api/projects/

        Request: {"quizData": {...wizard answers...}}
        Response: 201 with the created (private, guide-less) project
        """
        quiz_data = request.data.get('quizData')
        if not isinstance(quiz_data, dict):
            return Response({'error': 'quizData is required'}, status=status.HTTP_400_BAD_REQUEST)

        missing = invalid_steps(quiz_data, REQUIRED_STEPS_FOR_SUBMIT)
        if missing:
            return Response(
                {'error': 'Quiz is incomplete', 'invalid_steps': missing},
                status=status.HTTP_400_BAD_REQUEST,
            )

        quiz_serializer = QuizAnswersSerializer(data=quiz_data)
        quiz_serializer.is_valid(raise_exception=True)
        quiz = quiz_serializer.to_quiz_answers()

        project = Project.objects.create(
            user=request.user,
            title=f"{quiz.furniture_type} Upcycling Project",
            quiz_data=quiz_answers_to_dict(quiz),
            style=quiz.style or None,
            room=quiz.rooms[0] if quiz.rooms else None,
            budget=quiz.budget,
        )
        logger.info(f"Created project {project.id} for user {request.user.id}")

        serializer = ProjectSerializer(project, context={'request': request})
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class MyProjectsView(generics.ListAPIView):
    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Project.objects.filter(user=self.request.user).select_related('user').order_by('-created_at')


class FeedView(generics.ListAPIView):
    """Community feed: public projects, newest first, with optional search"""
    serializer_class = ProjectSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = Project.objects.filter(public=True).select_related('user').order_by('-created_at')

        search = (self.request.query_params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                models.Q(title__icontains=search)
                | models.Q(style__icontains=search)
                | models.Q(room__icontains=search)
                | models.Q(user__full_name__icontains=search)
            )

        raw_limit = self.request.query_params.get('limit')
        if raw_limit is not None:
            limit = min(_parse_positive_int(raw_limit, 'limit'), FEED_MAX_LIMIT)
            queryset = queryset[:limit]
        return queryset


class ProjectDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = ProjectDetailSerializer(project, context={'request': request})
        return Response(serializer.data)

    def delete(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)
        if project.user_id != request.user.id:
            return Response({'error': 'Not authorized'}, status=status.HTTP_403_FORBIDDEN)

        project.delete()
        logger.info(f"Deleted project {project_id}")
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProjectVisibilityView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, project_id):
        """Set `public` from the body, or flip it when the body omits it"""
        project = Project.objects.filter(id=project_id, user=request.user).first()
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        requested = request.data.get('public')
        if requested is None:
            project.public = not project.public
        else:
            project.public = serializers.BooleanField().to_internal_value(requested)
        project.save(update_fields=['public'])

        return Response({'id': str(project.id), 'public': project.public})


class ProjectStatusView(APIView):
    """Lightweight polling endpoint used while a guide is being generated"""
    permission_classes = [IsAuthenticated]

    def get(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            'project_id': str(project.id),
            'guide_ready': project.guide_ready,
            'step_count': project.steps.count(),
            'cover_image_url': project.cover_image_url,
        })


class ProjectLikeView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        liked = request.user.is_authenticated and Like.objects.filter(user=request.user, project=project).exists()
        return Response({'liked': liked, 'likes_count': project.likes_count})

    @transaction.atomic
    def post(self, request, project_id):
        """Toggle the caller's like"""
        project = _visible_projects(request.user).select_for_update().filter(id=project_id).first()
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        existing = Like.objects.filter(user=request.user, project=project).first()
        if existing:
            existing.delete()
            project.likes_count = max(0, project.likes_count - 1)
            liked = False
        else:
            Like.objects.create(user=request.user, project=project)
            project.likes_count += 1
            liked = True
        project.save(update_fields=['likes_count'])

        return Response({'liked': liked, 'likes_count': project.likes_count})


class ProjectCommentsView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        comments = Comment.objects.filter(project=project).select_related('user').order_by('-created_at')
        return Response(CommentSerializer(comments, many=True).data)

    def post(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user, project=project)
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class ProjectFeedbackView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        feedback = Feedback.objects.filter(project=project).select_related('user').order_by('-created_at')
        average = feedback.aggregate(avg=Avg('rating'))['avg']
        return Response({
            'average_rating': round(average, 1) if average is not None else None,
            'count': feedback.count(),
            'results': FeedbackSerializer(feedback, many=True).data,
        })

    def post(self, request, project_id):
        project = _get_visible_project(request, project_id)
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user, project=project)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
