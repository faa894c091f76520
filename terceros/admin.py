"""
Terceros — Django Admin Configuration

@file terceros/admin.py
"""

from django.contrib import admin

from .models import Cliente, Proveedor


class _SoftDeleteAdmin(admin.ModelAdmin):
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by', 'deleted_at', 'deleted_by')
    show_full_result_count = False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if not request.GET.get('is_deleted__exact'):
            qs = qs.filter(is_deleted=False)
        return qs


@admin.register(Proveedor)
class ProveedorAdmin(_SoftDeleteAdmin):
    list_display = ('nombre', 'cuit', 'contacto', 'telefono', 'activo')
    list_filter = ('activo', 'is_deleted')
    search_fields = ('nombre', 'cuit')


@admin.register(Cliente)
class ClienteAdmin(_SoftDeleteAdmin):
    list_display = ('nombre', 'dni_cuit', 'telefono', 'limite_credito', 'activo')
    list_filter = ('activo', 'is_deleted')
    search_fields = ('nombre', 'dni_cuit')
