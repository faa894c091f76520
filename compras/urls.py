"""
Compras — URL Configuration

@file compras/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CompraViewSet

app_name = 'compras'

router = DefaultRouter()
router.register('', CompraViewSet, basename='compra')

urlpatterns = [
    path('', include(router.urls)),
]
