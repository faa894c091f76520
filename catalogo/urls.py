"""
Catalogo — URL Configuration

/categorias/ and /productos/ are mounted separately from config/urls.py.

@file catalogo/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CategoriaViewSet, ProductoViewSet

app_name = 'catalogo'

categoria_router = DefaultRouter()
categoria_router.register('', CategoriaViewSet, basename='categoria')

producto_router = DefaultRouter()
producto_router.register('', ProductoViewSet, basename='producto')

urlpatterns = [
    path('categorias/', include(categoria_router.urls)),
    path('productos/', include(producto_router.urls)),
]
