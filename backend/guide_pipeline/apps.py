from django.apps import AppConfig


class GuidePipelineConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'guide_pipeline'
    verbose_name = 'Guide Generation Pipeline'
