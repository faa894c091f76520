"""
Terceros — Views

Supplier and client CRUD with search; deletes are soft.

@file terceros/views.py
"""

from rest_framework import viewsets

from .models import Cliente, Proveedor
from .serializers import ClienteSerializer, ProveedorSerializer


class _SoftDeleteViewSet(viewsets.ModelViewSet):
    model = None

    def get_queryset(self):
        return self.model.objects.vigentes()

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.soft_delete(user=self.request.user)


class ProveedorViewSet(_SoftDeleteViewSet):
    model = Proveedor
    serializer_class = ProveedorSerializer
    filterset_fields = ['activo']
    search_fields = ['nombre', 'cuit', 'contacto']
    ordering_fields = ['nombre', 'created_at']
    ordering = ['nombre']


class ClienteViewSet(_SoftDeleteViewSet):
    model = Cliente
    serializer_class = ClienteSerializer
    filterset_fields = ['activo']
    search_fields = ['nombre', 'dni_cuit', 'telefono']
    ordering_fields = ['nombre', 'created_at']
    ordering = ['nombre']
