from rest_framework import serializers
from .models import CustomUser


class PublicUserSerializer(serializers.ModelSerializer):
    """Owner / author info shown next to projects, comments and feedback"""

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'full_name', 'avatar_url']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'full_name', 'avatar_url']
        read_only_fields = ['id', 'username']
