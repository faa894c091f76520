"""
Terceros — Serializers

@file terceros/serializers.py
"""

from django.db.models import Sum
from rest_framework import serializers

from .models import Cliente, Proveedor


class ProveedorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Proveedor
        fields = [
            'id', 'nombre', 'cuit', 'contacto', 'telefono', 'email', 'direccion',
            'activo', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ClienteSerializer(serializers.ModelSerializer):
    saldo_pendiente = serializers.SerializerMethodField()

    class Meta:
        model = Cliente
        fields = [
            'id', 'nombre', 'dni_cuit', 'telefono', 'email', 'direccion',
            'limite_credito', 'saldo_pendiente', 'activo', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_saldo_pendiente(self, obj):
        total = (
            obj.ventas.vigentes()
            .exclude(estado='cancelada')
            .aggregate(total=Sum('saldo_pendiente'))['total']
        )
        return total or 0
