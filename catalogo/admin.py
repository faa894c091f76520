"""
Catalogo — Django Admin Configuration

@file catalogo/admin.py
"""

from django.contrib import admin

from .models import Categoria, Producto


@admin.register(Categoria)
class CategoriaAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'activa', 'created_at')
    list_filter = ('activa',)
    search_fields = ('nombre',)
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')


@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = ('codigo', 'nombre', 'categoria', 'precio_costo', 'precio_venta', 'stock_minimo', 'activo')
    list_filter = ('activo', 'categoria', 'unidad_medida', 'is_deleted')
    search_fields = ('codigo', 'nombre')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    list_select_related = ('categoria',)
    show_full_result_count = False
    list_per_page = 50

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if not request.GET.get('is_deleted__exact'):
            qs = qs.filter(is_deleted=False)
        return qs
