"""
Caja — Application Configuration
"""

from django.apps import AppConfig


class CajaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'caja'
    verbose_name = 'Cash Drawer'
