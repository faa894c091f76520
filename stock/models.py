"""
Stock — Models

StockSucursal is the authoritative on-hand counter per (product, branch).
MovimientoStock is the append-only trail written alongside every counter
change; it is never updated or deleted and is not used to derive balances.

@file stock/models.py
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class StockSucursal(BaseModel):
    """Quantity on hand for one product at one branch. updated_at = last change."""

    producto = models.ForeignKey(
        'catalogo.Producto',
        on_delete=models.PROTECT,
        related_name='stocks',
        verbose_name=_('product'),
    )
    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        on_delete=models.PROTECT,
        related_name='stocks',
        verbose_name=_('branch'),
    )
    cantidad = models.DecimalField(
        _('quantity on hand'), max_digits=14, decimal_places=3, default=Decimal('0'),
    )
    stock_minimo = models.DecimalField(
        _('minimum stock'), max_digits=14, decimal_places=3, default=Decimal('5'),
    )

    class Meta:
        verbose_name = _('branch stock')
        verbose_name_plural = _('branch stock')
        ordering = ['sucursal', 'producto']
        constraints = [
            models.UniqueConstraint(
                fields=['producto', 'sucursal'], name='stock_producto_sucursal_unico',
            ),
            models.CheckConstraint(
                condition=Q(cantidad__gte=0), name='stock_cantidad_no_negativa',
            ),
        ]

    def __str__(self):
        return f'{self.producto_id}@{self.sucursal_id}: {self.cantidad}'

    @property
    def bajo_minimo(self) -> bool:
        return self.cantidad <= self.stock_minimo


class MovimientoStock(models.Model):
    """A single immutable stock movement (insert only)."""

    class TipoChoices(models.TextChoices):
        ENTRADA = 'entrada', _('In')
        SALIDA = 'salida', _('Out')

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    producto = models.ForeignKey(
        'catalogo.Producto',
        on_delete=models.PROTECT,
        related_name='movimientos_stock',
        verbose_name=_('product'),
    )
    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        on_delete=models.PROTECT,
        related_name='movimientos_stock',
        verbose_name=_('branch'),
    )
    tipo = models.CharField(
        _('type'), max_length=8,
        choices=TipoChoices.choices, db_index=True,
    )
    cantidad = models.DecimalField(_('quantity'), max_digits=14, decimal_places=3)
    stock_anterior = models.DecimalField(_('previous stock'), max_digits=14, decimal_places=3)
    stock_nuevo = models.DecimalField(_('new stock'), max_digits=14, decimal_places=3)
    motivo = models.CharField(_('reason'), max_length=200)
    referencia_tipo = models.CharField(
        _('reference type'), max_length=40, blank=True, db_index=True,
        help_text=_('compra, venta, ajuste, transferencia'),
    )
    referencia_id = models.UUIDField(_('reference ID'), null=True, blank=True, db_index=True)
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('user'),
    )
    fecha = models.DateTimeField(_('date'), auto_now_add=True, db_index=True)
    # No updated_at: immutable record.

    class Meta:
        verbose_name = _('stock movement')
        verbose_name_plural = _('stock movements')
        ordering = ['-fecha']
        indexes = [
            models.Index(fields=['sucursal', 'producto', 'fecha'], name='mov_suc_prod_fecha_idx'),
            models.Index(fields=['referencia_tipo', 'referencia_id'], name='mov_referencia_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(cantidad__gt=0), name='mov_cantidad_positiva'),
        ]

    def __str__(self):
        return f'{self.tipo} {self.cantidad} {self.producto_id}@{self.sucursal_id} ({self.motivo})'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('MovimientoStock is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('MovimientoStock records cannot be deleted.')
