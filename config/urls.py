"""
Despensa — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'Despensa Administration'
admin.site.site_title = 'Despensa'
admin.site.index_title = 'Back office'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """Despensa API v1 endpoint directory."""
    return Response({
        'auth': {
            'login': reverse('api-v1:auth:login', request=request, format=format),
            'refresh': reverse('api-v1:auth:token-refresh', request=request, format=format),
            'logout': reverse('api-v1:auth:logout', request=request, format=format),
            'me': reverse('api-v1:auth:me', request=request, format=format),
        },
        'usuarios': reverse('api-v1:usuarios:user-list', request=request, format=format),
        'sucursales': reverse('api-v1:sucursales:sucursal-list', request=request, format=format),
        'categorias': reverse('api-v1:catalogo:categoria-list', request=request, format=format),
        'productos': reverse('api-v1:catalogo:producto-list', request=request, format=format),
        'proveedores': reverse('api-v1:terceros:proveedor-list', request=request, format=format),
        'clientes': reverse('api-v1:terceros:cliente-list', request=request, format=format),
        'stock': {
            'registros': reverse('api-v1:stock:stock-list', request=request, format=format),
            'movimientos': reverse('api-v1:stock:movimiento-list', request=request, format=format),
        },
        'compras': reverse('api-v1:compras:compra-list', request=request, format=format),
        'ventas': reverse('api-v1:ventas:venta-list', request=request, format=format),
        'vehiculos': reverse('api-v1:vehiculos:vehiculo-list', request=request, format=format),
        'caja': reverse('api-v1:caja:caja-list', request=request, format=format),
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/', include('users.urls', namespace='auth')),
    path('usuarios/', include('users.urls_users', namespace='usuarios')),
    path('sucursales/', include('sucursales.urls', namespace='sucursales')),
    path('', include('catalogo.urls', namespace='catalogo')),
    path('', include('terceros.urls', namespace='terceros')),
    path('stock/', include('stock.urls', namespace='stock')),
    path('compras/', include('compras.urls', namespace='compras')),
    path('ventas/', include('ventas.urls', namespace='ventas')),
    path('vehiculos/', include('vehiculos.urls', namespace='vehiculos')),
    path('caja/', include('caja.urls', namespace='caja')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
