"""
Ventas — Views

Sale CRUD, payments, status changes, partial returns, search, daily
statistics, the deleted-sales list and the edit history. All writes go
through VentaService with a RequestContext built from the request.

@file ventas/views.py
"""

from django.conf import settings
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.context import RequestContext
from users.permissions import EsAdministrador

from .filters import VentaFilter
from .models import Venta
from .serializers import (
    DevolucionParcialSerializer,
    HistorialVentaSerializer,
    PagoCreateSerializer,
    PagoVentaSerializer,
    VentaCreateSerializer,
    VentaDetailSerializer,
    VentaEliminadaSerializer,
    VentaEliminarSerializer,
    VentaEstadoSerializer,
    VentaListSerializer,
    VentaUpdateSerializer,
)
from .services import VentaService


class VentaViewSet(viewsets.ModelViewSet):
    filterset_class = VentaFilter
    search_fields = ['numero', 'cliente__nombre', 'notas']
    ordering_fields = ['fecha', 'total', 'numero', 'saldo_pendiente']
    ordering = ['-fecha']

    def get_queryset(self):
        qs = Venta.objects.vigentes().select_related('cliente', 'sucursal')
        if self.action == 'retrieve':
            qs = qs.prefetch_related('detalles__producto', 'pagos')
        return qs

    def get_serializer_class(self):
        if self.action == 'list':
            return VentaListSerializer
        if self.action == 'create':
            return VentaCreateSerializer
        if self.action in ('update', 'partial_update'):
            return VentaUpdateSerializer
        return VentaDetailSerializer

    def get_permissions(self):
        if self.action in ('destroy', 'estado', 'eliminadas'):
            return [IsAuthenticated(), EsAdministrador()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        ser = VentaCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        venta = VentaService.create_sale(
            ctx=RequestContext.from_request(request),
            **ser.validated_data,
        )
        return Response(VentaDetailSerializer(venta).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        ser = VentaUpdateSerializer(data=request.data, partial=kwargs.get('partial', False))
        ser.is_valid(raise_exception=True)
        venta = VentaService.update_sale(
            venta_id=self.get_object().pk,
            ctx=RequestContext.from_request(request),
            **ser.validated_data,
        )
        return Response(VentaDetailSerializer(venta).data)

    def destroy(self, request, *args, **kwargs):
        ser = VentaEliminarSerializer(data=request.data or request.query_params)
        ser.is_valid(raise_exception=True)
        VentaService.delete_sale(
            venta_id=self.get_object().pk,
            ctx=RequestContext.from_request(request),
            motivo=ser.validated_data['motivo'],
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    # --- Payments ---

    @action(detail=True, methods=['get', 'post'], url_path='pagos')
    def pagos(self, request, pk=None):
        venta = self.get_object()
        if request.method == 'GET':
            return Response(PagoVentaSerializer(venta.pagos.all(), many=True).data)

        ser = PagoCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pago = VentaService.register_payment(
            venta_id=venta.pk,
            ctx=RequestContext.from_request(request),
            **ser.validated_data,
        )
        return Response(PagoVentaSerializer(pago).data, status=status.HTTP_201_CREATED)

    # --- Lifecycle ---

    @action(detail=True, methods=['put', 'patch'], url_path='estado')
    def estado(self, request, pk=None):
        ser = VentaEstadoSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        venta = VentaService.change_status(
            venta_id=pk,
            estado=ser.validated_data['estado'],
            ctx=RequestContext.from_request(request),
        )
        return Response(VentaDetailSerializer(venta).data)

    @action(detail=True, methods=['post'], url_path='devolucion-parcial')
    def devolucion_parcial(self, request, pk=None):
        ser = DevolucionParcialSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        venta = VentaService.partial_return(
            venta_id=pk,
            items=ser.validated_data['productos'],
            motivo=ser.validated_data.get('motivo', ''),
            ctx=RequestContext.from_request(request),
        )
        return Response(VentaDetailSerializer(venta).data)

    @action(detail=True, methods=['get'], url_path='historial')
    def historial(self, request, pk=None):
        venta = self.get_object()
        return Response(HistorialVentaSerializer(venta.historial.all(), many=True).data)

    # --- Queries ---

    @action(detail=False, methods=['get'], url_path='buscar')
    def buscar(self, request):
        termino = (request.query_params.get('q') or request.query_params.get('termino') or '').strip()
        if not termino:
            raise ValidationError({'q': ['A search term is required.']})
        ventas = VentaService.search(termino, sucursal_id=request.query_params.get('sucursal_id'))
        page = self.paginate_queryset(ventas)
        if page is not None:
            return self.get_paginated_response(VentaListSerializer(page, many=True).data)
        return Response(VentaListSerializer(ventas, many=True).data)

    @action(detail=False, methods=['get'], url_path='estadisticas/dia')
    def estadisticas_dia(self, request):
        raw = request.query_params.get('fecha')
        fecha = parse_date(raw) if raw else None
        if raw and fecha is None:
            raise ValidationError({'fecha': ['Expected a date in YYYY-MM-DD format.']})
        ctx = RequestContext.from_request(request, sucursal_id=request.query_params.get('sucursal_id'))
        return Response(VentaService.daily_stats(fecha=fecha, sucursal_id=ctx.sucursal_id))

    @action(detail=False, methods=['get'], url_path='eliminadas')
    def eliminadas(self, request):
        limite = settings.VENTAS_ELIMINADAS_LIMITE
        ventas = (
            Venta.objects.eliminados()
            .select_related('cliente', 'sucursal')
            .order_by('-deleted_at')[:limite]
        )
        return Response(VentaEliminadaSerializer(ventas, many=True).data)
