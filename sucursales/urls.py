"""
Sucursales — URL Configuration

@file sucursales/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import SucursalViewSet

app_name = 'sucursales'

router = DefaultRouter()
router.register('', SucursalViewSet, basename='sucursal')

urlpatterns = [
    path('', include(router.urls)),
]
