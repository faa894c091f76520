"""
Compras — Models

Supplier purchases and their line items. Stock is credited exactly once,
when the purchase moves from pendiente to recibida / completada.

@file compras/models.py
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, SoftDeleteModel


class Compra(SoftDeleteModel):

    class EstadoChoices(models.TextChoices):
        PENDIENTE = 'pendiente', _('Pending')
        RECIBIDA = 'recibida', _('Received')
        COMPLETADA = 'completada', _('Completed')
        CANCELADA = 'cancelada', _('Cancelled')

    numero = models.CharField(_('number'), max_length=20, unique=True)
    proveedor = models.ForeignKey(
        'terceros.Proveedor',
        on_delete=models.PROTECT,
        related_name='compras',
        verbose_name=_('supplier'),
    )
    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='compras',
        verbose_name=_('branch'),
        help_text=_('Falls back to the principal branch on receipt when empty'),
    )
    fecha = models.DateTimeField(_('date'), default=timezone.now, db_index=True)
    estado = models.CharField(
        _('status'), max_length=12,
        choices=EstadoChoices.choices, default=EstadoChoices.PENDIENTE,
        db_index=True,
    )
    subtotal = models.DecimalField(_('subtotal'), max_digits=14, decimal_places=2, default=Decimal('0'))
    impuestos = models.DecimalField(_('taxes'), max_digits=14, decimal_places=2, default=Decimal('0'))
    total = models.DecimalField(_('total'), max_digits=14, decimal_places=2, default=Decimal('0'))
    notas = models.TextField(_('notes'), blank=True)

    fecha_recepcion = models.DateTimeField(_('received at'), null=True, blank=True)
    recibida_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('received by'),
    )

    class Meta:
        verbose_name = _('purchase')
        verbose_name_plural = _('purchases')
        ordering = ['-fecha']
        indexes = [
            models.Index(fields=['estado', 'fecha']),
            models.Index(fields=['proveedor', 'fecha']),
        ]

    def __str__(self):
        return self.numero

    @property
    def recibida(self) -> bool:
        return self.estado in (self.EstadoChoices.RECIBIDA, self.EstadoChoices.COMPLETADA)


class DetalleCompra(BaseModel):
    compra = models.ForeignKey(
        Compra,
        on_delete=models.CASCADE,
        related_name='detalles',
        verbose_name=_('purchase'),
    )
    producto = models.ForeignKey(
        'catalogo.Producto',
        on_delete=models.PROTECT,
        related_name='detalles_compra',
        verbose_name=_('product'),
    )
    cantidad = models.DecimalField(_('quantity'), max_digits=14, decimal_places=3)
    precio_unitario = models.DecimalField(_('unit price'), max_digits=14, decimal_places=2)
    subtotal = models.DecimalField(_('subtotal'), max_digits=14, decimal_places=2)

    class Meta:
        verbose_name = _('purchase line')
        verbose_name_plural = _('purchase lines')
        ordering = ['created_at']
        constraints = [
            models.CheckConstraint(condition=Q(cantidad__gt=0), name='detalle_compra_cantidad_positiva'),
        ]

    def __str__(self):
        return f'{self.compra_id} {self.producto_id} x{self.cantidad}'
