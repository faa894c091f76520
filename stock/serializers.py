"""
Stock — Serializers

@file stock/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import MovimientoStock, StockSucursal


class StockSucursalSerializer(serializers.ModelSerializer):
    producto_nombre = serializers.CharField(source='producto.nombre', read_only=True)
    producto_codigo = serializers.CharField(source='producto.codigo', read_only=True)
    sucursal_nombre = serializers.CharField(source='sucursal.nombre', read_only=True)
    bajo_minimo = serializers.BooleanField(read_only=True)
    ultima_actualizacion = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = StockSucursal
        fields = [
            'id', 'producto', 'producto_nombre', 'producto_codigo',
            'sucursal', 'sucursal_nombre', 'cantidad', 'stock_minimo',
            'bajo_minimo', 'ultima_actualizacion',
        ]
        read_only_fields = fields


class MovimientoStockSerializer(serializers.ModelSerializer):
    producto_nombre = serializers.CharField(source='producto.nombre', read_only=True)
    sucursal_nombre = serializers.CharField(source='sucursal.nombre', read_only=True)
    usuario_nombre = serializers.CharField(source='usuario.get_full_name', read_only=True, default=None)

    class Meta:
        model = MovimientoStock
        fields = [
            'id', 'producto', 'producto_nombre', 'sucursal', 'sucursal_nombre',
            'tipo', 'cantidad', 'stock_anterior', 'stock_nuevo', 'motivo',
            'referencia_tipo', 'referencia_id', 'usuario', 'usuario_nombre', 'fecha',
        ]
        read_only_fields = fields


class AjusteStockSerializer(serializers.Serializer):
    sucursal_id = serializers.UUIDField()
    producto_id = serializers.UUIDField()
    ajuste = serializers.DecimalField(max_digits=14, decimal_places=3)
    motivo = serializers.CharField(max_length=200)

    def validate_ajuste(self, value):
        if value == Decimal('0'):
            raise serializers.ValidationError('Adjustment must be non-zero.')
        return value


class TransferenciaItemSerializer(serializers.Serializer):
    producto_id = serializers.UUIDField()
    cantidad = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal('0.001'))


class TransferenciaSerializer(serializers.Serializer):
    sucursal_origen_id = serializers.UUIDField()
    sucursal_destino_id = serializers.UUIDField()
    productos = TransferenciaItemSerializer(many=True, allow_empty=False)
    motivo = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['sucursal_origen_id'] == attrs['sucursal_destino_id']:
            raise serializers.ValidationError(
                {'sucursal_destino_id': 'Origin and destination branches must differ.'},
            )
        return attrs
