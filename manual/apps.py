"""
Manual App Configuration
Help center content (articles, categories, news, legal pages) and analytics.
"""
from django.apps import AppConfig


class ManualConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'manual'
    verbose_name = 'Manual'
