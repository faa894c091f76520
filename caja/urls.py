"""
Caja — URL Configuration

@file caja/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MovimientoCajaViewSet

app_name = 'caja'

router = DefaultRouter()
router.register('', MovimientoCajaViewSet, basename='caja')

urlpatterns = [
    path('', include(router.urls)),
]
