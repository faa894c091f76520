"""
Caja — Serializers

@file caja/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import MovimientoCaja


class MovimientoCajaSerializer(serializers.ModelSerializer):
    monto = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    sucursal_id = serializers.UUIDField(required=False, allow_null=True)
    usuario_nombre = serializers.CharField(source='usuario.get_full_name', read_only=True, default=None)

    class Meta:
        model = MovimientoCaja
        fields = [
            'id', 'sucursal_id', 'tipo', 'monto', 'concepto', 'observaciones',
            'fecha', 'usuario', 'usuario_nombre', 'created_at',
        ]
        read_only_fields = ['id', 'usuario', 'created_at']


class VerificarSaldoSerializer(serializers.Serializer):
    saldo_fisico = serializers.DecimalField(max_digits=14, decimal_places=2)
