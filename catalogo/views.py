"""
Catalogo — Views

Category and product CRUD. Products are soft-deleted; categories may only
be removed while no product references them.

@file catalogo/views.py
"""

from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.response import Response

from .models import Categoria, Producto
from .serializers import CategoriaSerializer, ProductoSerializer
from .services import CategoriaService


class CategoriaViewSet(viewsets.ModelViewSet):
    serializer_class = CategoriaSerializer
    filterset_fields = ['activa']
    search_fields = ['nombre']
    ordering_fields = ['nombre', 'created_at']
    ordering = ['nombre']

    def get_queryset(self):
        return Categoria.objects.annotate(
            num_productos=Count('productos', filter=Q(productos__is_deleted=False)),
        )

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        categoria = self.get_object()
        CategoriaService.delete_category(categoria_id=categoria.pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductoViewSet(viewsets.ModelViewSet):
    serializer_class = ProductoSerializer
    filterset_fields = ['categoria', 'activo', 'unidad_medida']
    search_fields = ['codigo', 'nombre']
    ordering_fields = ['nombre', 'codigo', 'precio_venta', 'created_at']
    ordering = ['nombre']

    def get_queryset(self):
        return Producto.objects.vigentes().select_related('categoria')

    def perform_create(self, serializer):
        instance = Producto(created_by=self.request.user, **serializer.validated_data)
        instance._current_user = self.request.user
        instance.save()
        serializer.instance = instance

    def perform_update(self, serializer):
        serializer.instance._current_user = self.request.user
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.activo = False
        instance._current_user = self.request.user
        instance.save(update_fields=['activo', 'updated_at'])
        instance.soft_delete(user=self.request.user)
