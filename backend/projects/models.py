import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Project(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='projects')
    title = models.CharField(max_length=255)
    quiz_data = models.JSONField(default=dict)
    # Null until the guide pipeline has completed a run
    guide_json = models.JSONField(null=True, blank=True)
    public = models.BooleanField(default=False)
    cover_image_url = models.URLField(max_length=1024, null=True, blank=True)
    style = models.CharField(max_length=100, null=True, blank=True)
    room = models.CharField(max_length=100, null=True, blank=True)
    difficulty = models.CharField(max_length=20, null=True, blank=True)
    estimated_time = models.CharField(max_length=100, null=True, blank=True)
    budget = models.FloatField(null=True, blank=True)
    environmental_score = models.FloatField(null=True, blank=True)
    likes_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.user})"

    @property
    def guide_ready(self):
        return self.guide_json is not None


class Step(models.Model):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='steps')
    step_number = models.PositiveIntegerField()
    title = models.CharField(max_length=255)
    description = models.TextField()
    image_url = models.URLField(max_length=1024, null=True, blank=True)
    image_prompt = models.TextField(blank=True, default='')
    tools_needed = models.JSONField(default=list)
    materials_needed = models.JSONField(default=list)
    estimated_time = models.CharField(max_length=100, default='30 minutes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['step_number']
        constraints = [
            models.UniqueConstraint(fields=['project', 'step_number'], name='unique_step_number_per_project'),
        ]

    def __str__(self):
        return f"Step {self.step_number}: {self.title}"


class Like(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='likes')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'project'], name='unique_like_per_user'),
        ]

    def __str__(self):
        return f"{self.user} likes {self.project_id}"


class Comment(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='comments')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='comments')
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Comment by {self.user} on {self.project_id}"


class Feedback(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='feedback')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='feedback')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    feedback_text = models.TextField(blank=True, default='')
    completed_image_url = models.URLField(max_length=1024, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rating}/5 from {self.user} on {self.project_id}"
