"""
Stock — URL Configuration

@file stock/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MovimientoStockViewSet, StockSucursalViewSet

app_name = 'stock'

router = DefaultRouter()
router.register('', StockSucursalViewSet, basename='stock')

movimiento_router = DefaultRouter()
movimiento_router.register('', MovimientoStockViewSet, basename='movimiento')

urlpatterns = [
    path('movimientos/', include(movimiento_router.urls)),
    path('', include(router.urls)),
]
