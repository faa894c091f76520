"""
Caja — Views

@file caja/views.py
"""

from django.utils.dateparse import parse_date
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from core.context import RequestContext

from .models import MovimientoCaja
from .serializers import MovimientoCajaSerializer, VerificarSaldoSerializer
from .services import CajaService


def _fecha_param(request):
    raw = request.query_params.get('fecha')
    if not raw:
        return None
    fecha = parse_date(raw)
    if fecha is None:
        raise ValidationError({'fecha': ['Expected a date in YYYY-MM-DD format.']})
    return fecha


class MovimientoCajaViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = MovimientoCajaSerializer
    filterset_fields = ['tipo']
    search_fields = ['concepto', 'observaciones']
    ordering_fields = ['fecha', 'monto']
    ordering = ['-fecha']

    def get_queryset(self):
        qs = MovimientoCaja.objects.select_related('usuario')
        sucursal_id = self.request.query_params.get('sucursal_id')
        if sucursal_id:
            qs = qs.filter(sucursal_id=sucursal_id)
        fecha = _fecha_param(self.request)
        if fecha:
            qs = qs.filter(fecha__date=fecha)
        return qs

    def create(self, request, *args, **kwargs):
        ser = MovimientoCajaSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        movimiento = CajaService.registrar(ctx=RequestContext.from_request(request), **ser.validated_data)
        return Response(MovimientoCajaSerializer(movimiento).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='resumen')
    def resumen(self, request):
        return Response(CajaService.resumen(
            fecha=_fecha_param(request),
            sucursal_id=request.query_params.get('sucursal_id'),
        ))

    @action(detail=False, methods=['get'], url_path='saldo-acumulado')
    def saldo_acumulado(self, request):
        return Response(CajaService.saldo_acumulado(sucursal_id=request.query_params.get('sucursal_id')))

    @action(detail=False, methods=['post'], url_path='verificar-saldo')
    def verificar_saldo(self, request):
        ser = VerificarSaldoSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(CajaService.verificar_saldo(
            saldo_fisico=ser.validated_data['saldo_fisico'],
            sucursal_id=request.query_params.get('sucursal_id'),
        ))
