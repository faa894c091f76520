"""
Sucursales — Views

Branch CRUD (writes restricted to administrators) plus principal-branch
lookup and promotion.

@file sucursales/views.py
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import NoBranchError
from users.permissions import AdminWriteOrReadOnly, EsAdministrador

from .models import Sucursal
from .serializers import SucursalSerializer
from .services import SucursalService


class SucursalViewSet(viewsets.ModelViewSet):
    serializer_class = SucursalSerializer
    permission_classes = [AdminWriteOrReadOnly]
    filterset_fields = ['tipo', 'activa']
    search_fields = ['nombre', 'direccion']
    ordering_fields = ['nombre', 'created_at']
    ordering = ['nombre']

    def get_queryset(self):
        return Sucursal.objects.all()

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.activa = False
        instance.updated_by = self.request.user
        instance.save(update_fields=['activa', 'updated_by', 'updated_at'])

    @action(detail=False, methods=['get'], url_path='principal')
    def principal(self, request):
        sucursal = SucursalService.principal()
        if sucursal is None:
            raise NoBranchError(detail='No principal branch configured.')
        return Response(SucursalSerializer(sucursal).data)

    @action(
        detail=True,
        methods=['post'],
        url_path='marcar-principal',
        permission_classes=[IsAuthenticated, EsAdministrador],
    )
    def marcar_principal(self, request, pk=None):
        sucursal = SucursalService.set_principal(sucursal_id=pk, actor=request.user)
        return Response(SucursalSerializer(sucursal).data)
