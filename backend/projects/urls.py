from django.urls import path
from .views import (
    CreateProjectView,
    FeedView,
    MyProjectsView,
    ProjectCommentsView,
    ProjectDetailView,
    ProjectFeedbackView,
    ProjectLikeView,
    ProjectStatusView,
    ProjectVisibilityView,
)

urlpatterns = [
    path("", CreateProjectView.as_view(), name="project_create"),
    path("mine/", MyProjectsView.as_view(), name="project_mine"),
    path("feed/", FeedView.as_view(), name="project_feed"),
    path("<uuid:project_id>/", ProjectDetailView.as_view(), name="project_detail"),
    path("<uuid:project_id>/visibility/", ProjectVisibilityView.as_view(), name="project_visibility"),
    path("<uuid:project_id>/status/", ProjectStatusView.as_view(), name="project_status"),
    path("<uuid:project_id>/like/", ProjectLikeView.as_view(), name="project_like"),
    path("<uuid:project_id>/comments/", ProjectCommentsView.as_view(), name="project_comments"),
    path("<uuid:project_id>/feedback/", ProjectFeedbackView.as_view(), name="project_feedback"),
]
