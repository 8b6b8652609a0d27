"""DRF serializers for the guide generation request contract."""
from rest_framework import serializers

from guide_pipeline.types import QuizAnswers, quiz_answers_from_dict


def _string_list(**kwargs):
    return serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        default=list,
        **kwargs,
    )


class QuizAnswersSerializer(serializers.Serializer):
    """Quiz wizard answers in their camelCase wire form."""
    furnitureType = serializers.CharField(source='furniture_type', required=False, allow_blank=True, default='')
    size = serializers.CharField(required=False, allow_blank=True, default='')
    condition = serializers.CharField(required=False, allow_blank=True, default='')
    rooms = _string_list()
    style = serializers.CharField(required=False, allow_blank=True, default='')
    colorVibe = serializers.CharField(source='color_vibe', required=False, allow_blank=True, default='')
    customColor = serializers.CharField(
        source='custom_color', required=False, allow_blank=True, allow_null=True, default='',
    )
    materials = _string_list()
    tools = _string_list()
    budget = serializers.FloatField(required=False, allow_null=True, default=None, min_value=0)
    addons = _string_list()
    recyclables = _string_list()
    customRecyclables = serializers.CharField(
        source='custom_recyclables', required=False, allow_blank=True, allow_null=True, default='',
    )
    initialIdea = serializers.CharField(
        source='initial_idea', required=False, allow_blank=True, allow_null=True, default='',
    )
    photos = _string_list()

    def to_quiz_answers(self) -> QuizAnswers:
        return quiz_answers_from_dict(self.validated_data)


class GenerateGuideRequestSerializer(serializers.Serializer):
    """Body of the guide generation trigger."""
    projectId = serializers.UUIDField(source='project_id')
    quizData = QuizAnswersSerializer(source='quiz_data')

    def to_quiz_answers(self) -> QuizAnswers:
        return quiz_answers_from_dict(self.validated_data['quiz_data'])
