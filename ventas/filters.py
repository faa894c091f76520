"""
Ventas — Filters

@file ventas/filters.py
"""

import django_filters

from .models import MetodoPagoChoices, Venta


class VentaFilter(django_filters.FilterSet):
    fecha_inicio = django_filters.DateFilter(field_name='fecha', lookup_expr='date__gte')
    fecha_fin = django_filters.DateFilter(field_name='fecha', lookup_expr='date__lte')
    estado = django_filters.ChoiceFilter(choices=Venta.EstadoChoices.choices)
    estado_pago = django_filters.ChoiceFilter(choices=Venta.EstadoPagoChoices.choices)
    metodo_pago = django_filters.ChoiceFilter(choices=MetodoPagoChoices.choices)
    sucursal_id = django_filters.UUIDFilter(field_name='sucursal_id')
    cliente_id = django_filters.UUIDFilter(field_name='cliente_id')

    class Meta:
        model = Venta
        fields = [
            'fecha_inicio', 'fecha_fin', 'estado', 'estado_pago',
            'metodo_pago', 'sucursal_id', 'cliente_id',
        ]
