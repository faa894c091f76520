"""
Compras — Filters

@file compras/filters.py
"""

import django_filters

from .models import Compra


class CompraFilter(django_filters.FilterSet):
    fecha_inicio = django_filters.DateFilter(field_name='fecha', lookup_expr='date__gte')
    fecha_fin = django_filters.DateFilter(field_name='fecha', lookup_expr='date__lte')
    estado = django_filters.ChoiceFilter(choices=Compra.EstadoChoices.choices)
    proveedor_id = django_filters.UUIDFilter(field_name='proveedor_id')
    sucursal_id = django_filters.UUIDFilter(field_name='sucursal_id')

    class Meta:
        model = Compra
        fields = ['fecha_inicio', 'fecha_fin', 'estado', 'proveedor_id', 'sucursal_id']
