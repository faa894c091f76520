"""
Terceros — Application Configuration
"""

from django.apps import AppConfig


class TercerosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'terceros'
    verbose_name = 'Suppliers & Clients'
