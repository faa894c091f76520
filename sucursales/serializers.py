"""
Sucursales — Serializers

@file sucursales/serializers.py
"""

from rest_framework import serializers

from .models import Sucursal


class SucursalSerializer(serializers.ModelSerializer):
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)

    class Meta:
        model = Sucursal
        fields = [
            'id', 'nombre', 'direccion', 'telefono', 'tipo', 'tipo_display',
            'activa', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_tipo(self, value):
        if value != Sucursal.TipoChoices.PRINCIPAL:
            return value
        qs = Sucursal.objects.filter(tipo=Sucursal.TipoChoices.PRINCIPAL)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError(
                'A principal branch already exists; use the set-principal action.',
            )
        return value
