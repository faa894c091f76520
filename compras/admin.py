"""
Compras — Django Admin Configuration

@file compras/admin.py
"""

from django.contrib import admin

from .models import Compra, DetalleCompra


class DetalleCompraInline(admin.TabularInline):
    model = DetalleCompra
    extra = 0
    fields = ('producto', 'cantidad', 'precio_unitario', 'subtotal')
    readonly_fields = ('subtotal',)


@admin.register(Compra)
class CompraAdmin(admin.ModelAdmin):
    list_display = ('numero', 'proveedor', 'sucursal', 'fecha', 'estado', 'total', 'is_deleted')
    list_filter = ('estado', 'sucursal', 'is_deleted')
    search_fields = ('numero', 'proveedor__nombre')
    readonly_fields = (
        'id', 'numero', 'estado', 'fecha_recepcion', 'recibida_por',
        'created_at', 'updated_at', 'created_by', 'updated_by',
    )
    inlines = [DetalleCompraInline]
    date_hierarchy = 'fecha'
