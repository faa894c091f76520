"""
Compras — Serializers

Read serializers enrich each purchase with supplier and product names;
references to soft-deleted rows render as placeholders.

@file compras/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from core.constants import PRODUCTO_NO_ENCONTRADO, PROVEEDOR_NO_ENCONTRADO

from .models import Compra, DetalleCompra


class DetalleCompraReadSerializer(serializers.ModelSerializer):
    producto_nombre = serializers.SerializerMethodField()
    producto_codigo = serializers.SerializerMethodField()

    class Meta:
        model = DetalleCompra
        fields = [
            'id', 'producto', 'producto_nombre', 'producto_codigo',
            'cantidad', 'precio_unitario', 'subtotal',
        ]
        read_only_fields = fields

    def get_producto_nombre(self, obj):
        if obj.producto.is_deleted:
            return PRODUCTO_NO_ENCONTRADO
        return obj.producto.nombre

    def get_producto_codigo(self, obj):
        return None if obj.producto.is_deleted else obj.producto.codigo


class CompraReadSerializer(serializers.ModelSerializer):
    proveedor_nombre = serializers.SerializerMethodField()
    sucursal_nombre = serializers.CharField(source='sucursal.nombre', read_only=True, default=None)
    recibida_por_nombre = serializers.CharField(
        source='recibida_por.get_full_name', read_only=True, default=None,
    )
    detalles = DetalleCompraReadSerializer(many=True, read_only=True)

    class Meta:
        model = Compra
        fields = [
            'id', 'numero', 'proveedor', 'proveedor_nombre', 'sucursal', 'sucursal_nombre',
            'fecha', 'estado', 'subtotal', 'impuestos', 'total', 'notas',
            'fecha_recepcion', 'recibida_por', 'recibida_por_nombre', 'detalles',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_proveedor_nombre(self, obj):
        if obj.proveedor.is_deleted:
            return PROVEEDOR_NO_ENCONTRADO
        return obj.proveedor.nombre


class DetalleCompraWriteSerializer(serializers.Serializer):
    producto_id = serializers.UUIDField()
    cantidad = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal('0.001'))
    precio_unitario = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False,
    )


class CompraWriteSerializer(serializers.Serializer):
    proveedor_id = serializers.UUIDField(required=False)
    sucursal_id = serializers.UUIDField(required=False, allow_null=True)
    fecha = serializers.DateTimeField(required=False)
    estado = serializers.ChoiceField(choices=Compra.EstadoChoices.choices, required=False)
    impuestos = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False,
    )
    notas = serializers.CharField(required=False, allow_blank=True)
    detalles = DetalleCompraWriteSerializer(many=True, required=False)

    def validate(self, attrs):
        if self.instance is None:
            if not attrs.get('proveedor_id'):
                raise serializers.ValidationError({'proveedor_id': 'Supplier is required.'})
            if not attrs.get('detalles'):
                raise serializers.ValidationError({'detalles': 'A purchase needs at least one line item.'})
        return attrs


class CompraEstadoSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=Compra.EstadoChoices.choices)


class CompraRecibirSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(
        choices=[
            Compra.EstadoChoices.RECIBIDA,
            Compra.EstadoChoices.COMPLETADA,
        ],
        default=Compra.EstadoChoices.RECIBIDA,
    )
