"""
Caja — Django Admin Configuration

@file caja/admin.py
"""

from django.contrib import admin

from .models import MovimientoCaja


@admin.register(MovimientoCaja)
class MovimientoCajaAdmin(admin.ModelAdmin):
    list_display = ('fecha', 'tipo', 'monto', 'concepto', 'sucursal', 'usuario')
    list_filter = ('tipo', 'sucursal')
    search_fields = ('concepto', 'observaciones')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    date_hierarchy = 'fecha'
