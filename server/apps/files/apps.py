"""Django app configuration for the shop file manager."""

from django.apps import AppConfig


class FilesConfig(AppConfig):
    """Per-shop files and folders."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.files'
    label = 'files'
    verbose_name = 'Shop files'
