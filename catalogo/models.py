"""
Catalogo — Models

Product categories and the product master. Prices and the default
minimum-stock threshold live here; quantities on hand live in the
stock ledger, per branch.

@file catalogo/models.py
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, SoftDeleteModel


class Categoria(BaseModel):
    nombre = models.CharField(_('name'), max_length=120, unique=True)
    descripcion = models.TextField(_('description'), blank=True)
    activa = models.BooleanField(_('active'), default=True)

    class Meta:
        verbose_name = _('category')
        verbose_name_plural = _('categories')
        ordering = ['nombre']

    def __str__(self):
        return self.nombre


class Producto(SoftDeleteModel):

    class UnidadChoices(models.TextChoices):
        UNIDAD = 'unidad', _('Unit')
        KG = 'kg', _('Kilogram')
        LITRO = 'litro', _('Litre')
        CAJA = 'caja', _('Box')

    codigo = models.CharField(_('code'), max_length=40, unique=True)
    nombre = models.CharField(_('name'), max_length=200, db_index=True)
    descripcion = models.TextField(_('description'), blank=True)
    categoria = models.ForeignKey(
        Categoria,
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='productos',
        verbose_name=_('category'),
    )
    unidad_medida = models.CharField(
        _('unit of measure'), max_length=10,
        choices=UnidadChoices.choices, default=UnidadChoices.UNIDAD,
    )
    precio_costo = models.DecimalField(
        _('cost price'), max_digits=14, decimal_places=2,
        default=Decimal('0'), validators=[MinValueValidator(Decimal('0'))],
    )
    precio_venta = models.DecimalField(
        _('sale price'), max_digits=14, decimal_places=2,
        default=Decimal('0'), validators=[MinValueValidator(Decimal('0'))],
    )
    stock_minimo = models.DecimalField(
        _('minimum stock'), max_digits=14, decimal_places=3, default=Decimal('5'),
    )
    activo = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['nombre']
        indexes = [
            models.Index(fields=['categoria', 'activo']),
        ]

    def __str__(self):
        return f'{self.codigo} - {self.nombre}'
