"""
Vehiculos — Serializers

@file vehiculos/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import GastoVehiculo, Vehiculo


class VehiculoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehiculo
        fields = [
            'id', 'patente', 'marca', 'modelo', 'anio', 'tipo', 'km_actual',
            'fecha_vencimiento_seguro', 'activo', 'notas', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Uniqueness is checked case-insensitively in validate_patente.
        extra_kwargs = {'patente': {'validators': []}}

    def validate_patente(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError('Licence plate is required.')
        qs = Vehiculo.objects.filter(patente=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A vehicle with this licence plate already exists.')
        return value


class GastoVehiculoSerializer(serializers.ModelSerializer):
    monto = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = GastoVehiculo
        fields = ['id', 'vehiculo', 'categoria', 'monto', 'fecha', 'km', 'litros', 'descripcion', 'created_at']
        read_only_fields = ['id', 'vehiculo', 'created_at']
