from rest_framework import serializers

from users.serializers import PublicUserSerializer

from .models import Comment, Feedback, Project, Step


class StepSerializer(serializers.ModelSerializer):
    class Meta:
        model = Step
        fields = [
            "id",
            "step_number",
            "title",
            "description",
            "image_url",
            "tools_needed",
            "materials_needed",
            "estimated_time",
        ]
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer):
    owner = PublicUserSerializer(source="user", read_only=True)
    guide_ready = serializers.BooleanField(read_only=True)
    is_mine = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "owner",
            "quiz_data",
            "guide_json",
            "guide_ready",
            "public",
            "cover_image_url",
            "style",
            "room",
            "difficulty",
            "estimated_time",
            "budget",
            "environmental_score",
            "likes_count",
            "created_at",
            "is_mine",
        ]
        read_only_fields = fields

    def get_is_mine(self, obj):
        request = self.context.get("request")
        return bool(request and request.user.is_authenticated and obj.user_id == request.user.id)


class ProjectDetailSerializer(ProjectSerializer):
    steps = StepSerializer(many=True, read_only=True)

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ["steps"]
        read_only_fields = fields


class CommentSerializer(serializers.ModelSerializer):
    author = PublicUserSerializer(source="user", read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "author", "content", "created_at"]
        read_only_fields = ["id", "author", "created_at"]

    def validate_content(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment cannot be empty")
        return value


class FeedbackSerializer(serializers.ModelSerializer):
    author = PublicUserSerializer(source="user", read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Feedback
        fields = ["id", "author", "rating", "feedback_text", "completed_image_url", "created_at"]
        read_only_fields = ["id", "author", "created_at"]
        extra_kwargs = {
            "feedback_text": {"required": False, "allow_blank": True},
            "completed_image_url": {"required": False, "allow_null": True},
        }
