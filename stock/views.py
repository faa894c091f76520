"""
Stock — Views

Read access to branch counters and the movement trail, plus manual
adjustments, inter-branch transfers and the low-stock report.

@file stock/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from catalogo.services import ProductoService
from core.context import RequestContext
from sucursales.services import SucursalService
from users.permissions import HasRole

from .models import MovimientoStock, StockSucursal
from .serializers import (
    AjusteStockSerializer,
    MovimientoStockSerializer,
    StockSucursalSerializer,
    TransferenciaSerializer,
)
from .services import StockService


class StockSucursalViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = StockSucursalSerializer
    filterset_fields = ['sucursal', 'producto']
    search_fields = ['producto__nombre', 'producto__codigo']
    ordering_fields = ['cantidad', 'updated_at']
    ordering = ['producto__nombre']
    required_roles = ['admin', 'gerente']

    def get_queryset(self):
        return StockSucursal.objects.filter(
            producto__is_deleted=False,
        ).select_related('producto', 'sucursal')

    @action(
        detail=False,
        methods=['post'],
        url_path='ajustar',
        permission_classes=[IsAuthenticated, HasRole],
    )
    def ajustar(self, request):
        serializer = AjusteStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        ProductoService.get_active(data['producto_id'])
        SucursalService.get(data['sucursal_id'])

        movimiento = StockService.adjust(
            producto_id=data['producto_id'],
            sucursal_id=data['sucursal_id'],
            ajuste=data['ajuste'],
            motivo=data['motivo'],
            actor=request.user,
        )
        return Response({
            'stock_anterior': movimiento.stock_anterior,
            'ajuste': data['ajuste'],
            'stock_nuevo': movimiento.stock_nuevo,
            'movimiento': MovimientoStockSerializer(movimiento).data,
        })

    @action(
        detail=False,
        methods=['post'],
        url_path='transferir',
        permission_classes=[IsAuthenticated, HasRole],
    )
    def transferir(self, request):
        serializer = TransferenciaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        SucursalService.get(data['sucursal_origen_id'])
        SucursalService.get(data['sucursal_destino_id'])
        ProductoService.get_many(item['producto_id'] for item in data['productos'])

        pares = StockService.transfer(
            sucursal_origen_id=data['sucursal_origen_id'],
            sucursal_destino_id=data['sucursal_destino_id'],
            items=[(item['producto_id'], item['cantidad']) for item in data['productos']],
            motivo=data.get('motivo', ''),
            actor=request.user,
        )
        movimientos = [mov for par in pares for mov in par]
        return Response(
            MovimientoStockSerializer(movimientos, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['get'], url_path='bajo-stock')
    def bajo_stock(self, request):
        ctx = RequestContext.from_request(request, sucursal_id=request.query_params.get('sucursal'))
        registros = StockService.low_stock(ctx.sucursal_id)
        return Response(StockSucursalSerializer(registros, many=True).data)


class MovimientoStockViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = MovimientoStockSerializer
    filterset_fields = ['sucursal', 'producto', 'tipo', 'referencia_tipo', 'referencia_id']
    search_fields = ['motivo', 'producto__nombre']
    ordering_fields = ['fecha']
    ordering = ['-fecha']

    def get_queryset(self):
        return MovimientoStock.objects.select_related('producto', 'sucursal', 'usuario')
