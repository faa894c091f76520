"""
Ventas — Django Admin Configuration

@file ventas/admin.py
"""

from django.contrib import admin

from .models import DetalleVenta, HistorialVenta, PagoVenta, Venta


class DetalleVentaInline(admin.TabularInline):
    model = DetalleVenta
    extra = 0
    fields = ('producto', 'cantidad', 'precio_unitario', 'subtotal', 'cantidad_devuelta')
    readonly_fields = fields
    can_delete = False


class PagoVentaInline(admin.TabularInline):
    model = PagoVenta
    extra = 0
    fields = ('monto', 'metodo_pago', 'fecha', 'notas')
    readonly_fields = fields
    can_delete = False


@admin.register(Venta)
class VentaAdmin(admin.ModelAdmin):
    list_display = (
        'numero', 'sucursal', 'cliente', 'fecha', 'metodo_pago',
        'total', 'saldo_pendiente', 'estado', 'estado_pago', 'is_deleted',
    )
    list_filter = ('estado', 'estado_pago', 'metodo_pago', 'sucursal', 'is_deleted')
    search_fields = ('numero', 'cliente__nombre')
    readonly_fields = (
        'id', 'numero', 'subtotal', 'total', 'total_pagado', 'saldo_pendiente',
        'estado_pago', 'estado', 'monto_devuelto', 'motivo_eliminacion',
        'created_at', 'updated_at', 'created_by', 'updated_by',
    )
    inlines = [DetalleVentaInline, PagoVentaInline]
    date_hierarchy = 'fecha'


@admin.register(HistorialVenta)
class HistorialVentaAdmin(admin.ModelAdmin):
    list_display = ('venta', 'tipo', 'usuario', 'fecha')
    list_filter = ('tipo',)
    search_fields = ('venta__numero',)
    readonly_fields = ('id', 'venta', 'tipo', 'usuario', 'cambios', 'fecha')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
