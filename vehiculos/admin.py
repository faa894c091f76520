"""
Vehiculos — Django Admin Configuration

@file vehiculos/admin.py
"""

from django.contrib import admin

from .models import GastoVehiculo, Vehiculo


class GastoVehiculoInline(admin.TabularInline):
    model = GastoVehiculo
    extra = 0
    fields = ('fecha', 'categoria', 'monto', 'km', 'litros', 'descripcion')


@admin.register(Vehiculo)
class VehiculoAdmin(admin.ModelAdmin):
    list_display = ('patente', 'marca', 'modelo', 'anio', 'km_actual', 'fecha_vencimiento_seguro', 'activo')
    list_filter = ('activo', 'tipo')
    search_fields = ('patente', 'marca', 'modelo')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    inlines = [GastoVehiculoInline]
