"""
Stock — Django Admin Configuration

Branch counters are read-only here (changes go through the ledger
service); movements are insert-only and never editable.

@file stock/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import MovimientoStock, StockSucursal


@admin.register(StockSucursal)
class StockSucursalAdmin(admin.ModelAdmin):
    list_display = ('producto', 'sucursal', 'cantidad', 'stock_minimo', 'updated_at')
    list_filter = ('sucursal',)
    search_fields = ('producto__nombre', 'producto__codigo')
    readonly_fields = ('id', 'producto', 'sucursal', 'cantidad', 'created_at', 'updated_at')
    list_select_related = ('producto', 'sucursal')
    show_full_result_count = False
    list_per_page = 50

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MovimientoStock)
class MovimientoStockAdmin(admin.ModelAdmin):
    list_display = (
        'fecha', 'tipo', 'producto', 'sucursal', 'cantidad',
        'stock_anterior', 'stock_nuevo', 'motivo', 'referencia_tipo', 'usuario',
    )
    list_filter = ('tipo', 'referencia_tipo', 'sucursal', 'fecha')
    search_fields = ('motivo', 'producto__nombre', 'producto__codigo')
    readonly_fields = (
        'id', 'producto', 'sucursal', 'tipo', 'cantidad', 'stock_anterior', 'stock_nuevo',
        'motivo', 'referencia_tipo', 'referencia_id', 'usuario', 'fecha',
    )
    list_select_related = ('producto', 'sucursal', 'usuario')
    show_full_result_count = False
    list_per_page = 50
    date_hierarchy = 'fecha'
    ordering = ('-fecha',)

    fieldsets = (
        (_('Movement'), {'fields': ('id', 'tipo', 'producto', 'sucursal', 'cantidad')}),
        (_('Balance'), {'fields': ('stock_anterior', 'stock_nuevo')}),
        (_('Reference'), {'fields': ('motivo', 'referencia_tipo', 'referencia_id')}),
        (_('Audit'), {'fields': ('usuario', 'fecha')}),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
