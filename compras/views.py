"""
Compras — Views

Purchase CRUD plus the receipt and status endpoints. Writes go through
CompraService so stock is credited exactly once.

@file compras/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.context import RequestContext

from .filters import CompraFilter
from .models import Compra
from .serializers import (
    CompraEstadoSerializer,
    CompraReadSerializer,
    CompraRecibirSerializer,
    CompraWriteSerializer,
)
from .services import CompraService


class CompraViewSet(viewsets.ModelViewSet):
    filterset_class = CompraFilter
    search_fields = ['numero', 'proveedor__nombre', 'notas']
    ordering_fields = ['fecha', 'total', 'numero']
    ordering = ['-fecha']

    def get_queryset(self):
        return (
            Compra.objects.vigentes()
            .select_related('proveedor', 'sucursal', 'recibida_por')
            .prefetch_related('detalles__producto')
        )

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return CompraWriteSerializer
        return CompraReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = CompraWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        compra = CompraService.create_purchase(
            ctx=RequestContext.from_request(request),
            **serializer.validated_data,
        )
        return Response(CompraReadSerializer(compra).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = CompraWriteSerializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        compra = CompraService.update_purchase(
            compra_id=instance.pk,
            ctx=RequestContext.from_request(request),
            **serializer.validated_data,
        )
        return Response(CompraReadSerializer(compra).data)

    def destroy(self, request, *args, **kwargs):
        CompraService.delete_purchase(
            compra_id=self.get_object().pk,
            ctx=RequestContext.from_request(request),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch', 'post'], url_path='recibir')
    def recibir(self, request, pk=None):
        ser = CompraRecibirSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        compra = CompraService.receive_purchase(
            compra_id=pk,
            ctx=RequestContext.from_request(request),
            estado_final=ser.validated_data['estado'],
        )
        return Response(CompraReadSerializer(compra).data)

    @action(detail=True, methods=['patch'], url_path='estado')
    def estado(self, request, pk=None):
        ser = CompraEstadoSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        compra = CompraService.change_status(
            compra_id=pk,
            estado=ser.validated_data['estado'],
            ctx=RequestContext.from_request(request),
        )
        return Response(CompraReadSerializer(compra).data)

    @action(detail=False, methods=['get'], url_path='filtrar')
    def filtrar(self, request):
        """Unpaginated filtered list (fecha_inicio, fecha_fin, estado, proveedor_id, sucursal_id)."""
        qs = self.filter_queryset(self.get_queryset())
        return Response(CompraReadSerializer(qs, many=True).data)
