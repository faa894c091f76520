"""
Vehiculos — Views

@file vehiculos/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Vehiculo
from .serializers import GastoVehiculoSerializer, VehiculoSerializer
from .services import VehiculoService


class VehiculoViewSet(viewsets.ModelViewSet):
    serializer_class = VehiculoSerializer
    filterset_fields = ['activo', 'tipo']
    search_fields = ['patente', 'marca', 'modelo']
    ordering_fields = ['patente', 'km_actual', 'fecha_vencimiento_seguro']
    ordering = ['patente']

    def get_queryset(self):
        return Vehiculo.objects.vigentes()

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        VehiculoService.deactivate(vehiculo_id=instance.pk, actor=self.request.user)

    @action(detail=True, methods=['get', 'post'], url_path='gastos')
    def gastos(self, request, pk=None):
        vehiculo = self.get_object()
        if request.method == 'GET':
            return Response(GastoVehiculoSerializer(vehiculo.gastos.all(), many=True).data)

        ser = GastoVehiculoSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        gasto = VehiculoService.register_expense(
            vehiculo_id=vehiculo.pk, actor=request.user, **ser.validated_data,
        )
        return Response(GastoVehiculoSerializer(gasto).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='estadisticas/resumen')
    def resumen(self, request):
        return Response(VehiculoService.summary())
