from django.db import models
from django.contrib.auth.models import AbstractUser


class CustomUser(AbstractUser):
    full_name = models.CharField(max_length=255, blank=True, default='')
    avatar_url = models.URLField(max_length=1024, blank=True, null=True)
