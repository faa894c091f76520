"""
Ventas — Serializers

Read serializers enrich sales with client, branch and product names.
Walk-in sales show "Cliente General"; references to soft-deleted rows
show a placeholder instead of failing.

@file ventas/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from core.constants import CLIENTE_GENERAL, CLIENTE_NO_ENCONTRADO, PRODUCTO_NO_ENCONTRADO

from .models import DetalleVenta, HistorialVenta, MetodoPagoChoices, PagoVenta, Venta


class DetalleVentaReadSerializer(serializers.ModelSerializer):
    producto_nombre = serializers.SerializerMethodField()
    producto_codigo = serializers.SerializerMethodField()

    class Meta:
        model = DetalleVenta
        fields = [
            'id', 'producto', 'producto_nombre', 'producto_codigo',
            'cantidad', 'precio_unitario', 'subtotal', 'cantidad_devuelta',
        ]
        read_only_fields = fields

    def get_producto_nombre(self, obj):
        if obj.producto.is_deleted:
            return PRODUCTO_NO_ENCONTRADO
        return obj.producto.nombre

    def get_producto_codigo(self, obj):
        return None if obj.producto.is_deleted else obj.producto.codigo


class PagoVentaSerializer(serializers.ModelSerializer):
    class Meta:
        model = PagoVenta
        fields = ['id', 'venta', 'monto', 'metodo_pago', 'fecha', 'notas', 'created_at']
        read_only_fields = fields


class VentaListSerializer(serializers.ModelSerializer):
    cliente_nombre = serializers.SerializerMethodField()
    sucursal_nombre = serializers.CharField(source='sucursal.nombre', read_only=True)

    class Meta:
        model = Venta
        fields = [
            'id', 'numero', 'sucursal', 'sucursal_nombre', 'cliente', 'cliente_nombre',
            'fecha', 'metodo_pago', 'subtotal', 'descuento', 'total',
            'total_pagado', 'saldo_pendiente', 'estado_pago', 'estado',
            'monto_devuelto', 'notas',
        ]
        read_only_fields = fields

    def get_cliente_nombre(self, obj):
        if obj.cliente_id is None:
            return CLIENTE_GENERAL
        if obj.cliente.is_deleted:
            return CLIENTE_NO_ENCONTRADO
        return obj.cliente.nombre


class VentaDetailSerializer(VentaListSerializer):
    detalles = DetalleVentaReadSerializer(many=True, read_only=True)
    pagos = PagoVentaSerializer(many=True, read_only=True)

    class Meta(VentaListSerializer.Meta):
        fields = VentaListSerializer.Meta.fields + [
            'detalles', 'pagos', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class VentaEliminadaSerializer(VentaListSerializer):
    class Meta(VentaListSerializer.Meta):
        fields = VentaListSerializer.Meta.fields + [
            'motivo_eliminacion', 'deleted_at', 'deleted_by',
        ]
        read_only_fields = fields


class HistorialVentaSerializer(serializers.ModelSerializer):
    usuario_nombre = serializers.CharField(source='usuario.get_full_name', read_only=True, default=None)

    class Meta:
        model = HistorialVenta
        fields = ['id', 'venta', 'tipo', 'usuario', 'usuario_nombre', 'cambios', 'fecha']
        read_only_fields = fields


class DetalleVentaWriteSerializer(serializers.Serializer):
    producto_id = serializers.UUIDField()
    cantidad = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal('0.001'))
    precio_unitario = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False,
    )


class VentaCreateSerializer(serializers.Serializer):
    sucursal_id = serializers.UUIDField(required=False)
    cliente_id = serializers.UUIDField(required=False, allow_null=True)
    metodo_pago = serializers.ChoiceField(
        choices=MetodoPagoChoices.choices, default=MetodoPagoChoices.EFECTIVO,
    )
    descuento = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), default=Decimal('0'),
    )
    monto_pagado = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True,
    )
    fecha = serializers.DateTimeField(required=False)
    notas = serializers.CharField(required=False, allow_blank=True)
    detalles = DetalleVentaWriteSerializer(many=True, allow_empty=False)


class VentaUpdateSerializer(serializers.Serializer):
    detalles = DetalleVentaWriteSerializer(many=True, allow_empty=False, required=False)
    descuento = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False,
    )
    notas = serializers.CharField(required=False, allow_blank=True)


class PagoCreateSerializer(serializers.Serializer):
    monto = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    metodo_pago = serializers.ChoiceField(choices=MetodoPagoChoices.choices, required=False)
    notas = serializers.CharField(required=False, allow_blank=True)


class VentaEstadoSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=Venta.EstadoChoices.choices)


class DevolucionItemSerializer(serializers.Serializer):
    producto_id = serializers.UUIDField()
    cantidad = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal('0.001'))


class DevolucionParcialSerializer(serializers.Serializer):
    productos = DevolucionItemSerializer(many=True, allow_empty=False)
    motivo = serializers.CharField(required=False, allow_blank=True)


class VentaEliminarSerializer(serializers.Serializer):
    motivo = serializers.CharField(required=False, allow_blank=True, default='')
