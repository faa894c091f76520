"""
Catalogo — Serializers

@file catalogo/serializers.py
"""

from rest_framework import serializers

from .models import Categoria, Producto


class CategoriaSerializer(serializers.ModelSerializer):
    cantidad_productos = serializers.SerializerMethodField()

    class Meta:
        model = Categoria
        fields = ['id', 'nombre', 'descripcion', 'activa', 'cantidad_productos', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_cantidad_productos(self, obj):
        annotated = getattr(obj, 'num_productos', None)
        if annotated is not None:
            return annotated
        return obj.productos.vigentes().count()


class ProductoSerializer(serializers.ModelSerializer):
    categoria_nombre = serializers.CharField(source='categoria.nombre', read_only=True, default=None)

    class Meta:
        model = Producto
        fields = [
            'id', 'codigo', 'nombre', 'descripcion', 'categoria', 'categoria_nombre',
            'unidad_medida', 'precio_costo', 'precio_venta', 'stock_minimo', 'activo',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_codigo(self, value):
        value = value.strip()
        qs = Producto.objects.filter(codigo__iexact=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('Product code already in use.')
        return value

    def validate(self, attrs):
        costo = attrs.get('precio_costo', getattr(self.instance, 'precio_costo', None))
        venta = attrs.get('precio_venta', getattr(self.instance, 'precio_venta', None))
        if costo is not None and venta is not None and venta < costo:
            raise serializers.ValidationError({'precio_venta': 'Sale price is below cost price.'})
        return attrs
