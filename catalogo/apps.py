"""
Catalogo — Application Configuration
"""

from django.apps import AppConfig


class CatalogoConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'catalogo'
    verbose_name = 'Product Catalogue'

    def ready(self):
        import catalogo.signals  # noqa: F401
