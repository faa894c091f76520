"""
Vehiculos — Application Configuration
"""

from django.apps import AppConfig


class VehiculosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'vehiculos'
    verbose_name = 'Fleet & Vehicle Expenses'
