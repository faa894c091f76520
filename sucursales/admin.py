"""
Sucursales — Django Admin Configuration

@file sucursales/admin.py
"""

from django.contrib import admin

from .models import Sucursal


@admin.register(Sucursal)
class SucursalAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'tipo', 'telefono', 'activa', 'created_at')
    list_filter = ('tipo', 'activa')
    search_fields = ('nombre', 'direccion')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    ordering = ('nombre',)
