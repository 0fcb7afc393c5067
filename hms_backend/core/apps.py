"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'hms_backend.core'
    verbose_name = 'Core (Users & Audit)'
