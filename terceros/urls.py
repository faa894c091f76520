"""
Terceros — URL Configuration

@file terceros/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ClienteViewSet, ProveedorViewSet

app_name = 'terceros'

proveedor_router = DefaultRouter()
proveedor_router.register('', ProveedorViewSet, basename='proveedor')

cliente_router = DefaultRouter()
cliente_router.register('', ClienteViewSet, basename='cliente')

urlpatterns = [
    path('proveedores/', include(proveedor_router.urls)),
    path('clientes/', include(cliente_router.urls)),
]
