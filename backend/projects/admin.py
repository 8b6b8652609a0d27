from django.contrib import admin
from .models import Comment, Feedback, Like, Project, Step

admin.site.register(Project)
admin.site.register(Step)
admin.site.register(Like)
admin.site.register(Comment)
admin.site.register(Feedback)
