"""
Ventas — Models

Sales, their line items, payments and the insert-only edit history.

@file ventas/models.py
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, SoftDeleteModel


class MetodoPagoChoices(models.TextChoices):
    EFECTIVO = 'efectivo', _('Cash')
    TARJETA = 'tarjeta', _('Card')
    TRANSFERENCIA = 'transferencia', _('Bank transfer')
    CREDITO = 'credito', _('Store credit')


class Venta(SoftDeleteModel):

    class EstadoChoices(models.TextChoices):
        EN_CURSO = 'en_curso', _('In progress')
        ENTREGADA = 'entregada', _('Delivered')
        COMPLETADA = 'completada', _('Completed')
        CANCELADA = 'cancelada', _('Cancelled')
        DEVUELTA = 'devuelta', _('Returned')

    class EstadoPagoChoices(models.TextChoices):
        PENDIENTE = 'pendiente', _('Pending')
        PARCIAL = 'parcial', _('Partial')
        PAGADO = 'pagado', _('Paid')

    numero = models.CharField(_('number'), max_length=20, unique=True)
    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        on_delete=models.PROTECT,
        related_name='ventas',
        verbose_name=_('branch'),
    )
    cliente = models.ForeignKey(
        'terceros.Cliente',
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='ventas',
        verbose_name=_('client'),
        help_text=_('Empty for walk-in sales'),
    )
    fecha = models.DateTimeField(_('date'), default=timezone.now, db_index=True)
    metodo_pago = models.CharField(
        _('payment method'), max_length=15,
        choices=MetodoPagoChoices.choices, default=MetodoPagoChoices.EFECTIVO,
    )
    subtotal = models.DecimalField(_('subtotal'), max_digits=14, decimal_places=2, default=Decimal('0'))
    descuento = models.DecimalField(_('discount'), max_digits=14, decimal_places=2, default=Decimal('0'))
    total = models.DecimalField(_('total'), max_digits=14, decimal_places=2, default=Decimal('0'))
    total_pagado = models.DecimalField(_('paid'), max_digits=14, decimal_places=2, default=Decimal('0'))
    saldo_pendiente = models.DecimalField(_('balance due'), max_digits=14, decimal_places=2, default=Decimal('0'))
    estado_pago = models.CharField(
        _('payment status'), max_length=10,
        choices=EstadoPagoChoices.choices, default=EstadoPagoChoices.PENDIENTE,
        db_index=True,
    )
    estado = models.CharField(
        _('status'), max_length=12,
        choices=EstadoChoices.choices, default=EstadoChoices.EN_CURSO,
        db_index=True,
    )
    monto_devuelto = models.DecimalField(_('refunded'), max_digits=14, decimal_places=2, default=Decimal('0'))
    notas = models.TextField(_('notes'), blank=True)
    motivo_eliminacion = models.TextField(_('deletion reason'), blank=True)

    class Meta:
        verbose_name = _('sale')
        verbose_name_plural = _('sales')
        ordering = ['-fecha']
        indexes = [
            models.Index(fields=['sucursal', 'fecha']),
            models.Index(fields=['estado', 'fecha']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_pagado__lte=F('total')),
                name='venta_pagado_no_supera_total',
            ),
        ]

    def __str__(self):
        return self.numero

    @property
    def tiene_devoluciones(self) -> bool:
        return self.detalles.filter(cantidad_devuelta__gt=0).exists()


class DetalleVenta(BaseModel):
    venta = models.ForeignKey(
        Venta,
        on_delete=models.CASCADE,
        related_name='detalles',
        verbose_name=_('sale'),
    )
    producto = models.ForeignKey(
        'catalogo.Producto',
        on_delete=models.PROTECT,
        related_name='detalles_venta',
        verbose_name=_('product'),
    )
    cantidad = models.DecimalField(_('quantity'), max_digits=14, decimal_places=3)
    precio_unitario = models.DecimalField(_('unit price'), max_digits=14, decimal_places=2)
    subtotal = models.DecimalField(_('subtotal'), max_digits=14, decimal_places=2)
    cantidad_devuelta = models.DecimalField(
        _('returned quantity'), max_digits=14, decimal_places=3, default=Decimal('0'),
    )

    class Meta:
        verbose_name = _('sale line')
        verbose_name_plural = _('sale lines')
        ordering = ['created_at']
        constraints = [
            models.CheckConstraint(condition=Q(cantidad__gt=0), name='detalle_venta_cantidad_positiva'),
            models.CheckConstraint(
                condition=Q(cantidad_devuelta__lte=F('cantidad')),
                name='detalle_venta_devuelta_no_supera_cantidad',
            ),
        ]

    def __str__(self):
        return f'{self.venta_id} {self.producto_id} x{self.cantidad}'

    @property
    def cantidad_neta(self) -> Decimal:
        return self.cantidad - self.cantidad_devuelta


class PagoVenta(BaseModel):
    venta = models.ForeignKey(
        Venta,
        on_delete=models.CASCADE,
        related_name='pagos',
        verbose_name=_('sale'),
    )
    monto = models.DecimalField(_('amount'), max_digits=14, decimal_places=2)
    metodo_pago = models.CharField(_('payment method'), max_length=15, choices=MetodoPagoChoices.choices)
    fecha = models.DateTimeField(_('date'), default=timezone.now)
    notas = models.TextField(_('notes'), blank=True)

    class Meta:
        verbose_name = _('sale payment')
        verbose_name_plural = _('sale payments')
        ordering = ['-fecha']
        constraints = [
            models.CheckConstraint(condition=Q(monto__gt=0), name='pago_venta_monto_positivo'),
        ]

    def __str__(self):
        return f'{self.venta_id} {self.monto}'


class HistorialVenta(models.Model):
    """Insert-only record of each edit or partial return applied to a sale."""

    class TipoChoices(models.TextChoices):
        EDICION = 'edicion', _('Edit')
        DEVOLUCION_PARCIAL = 'devolucion_parcial', _('Partial return')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venta = models.ForeignKey(
        Venta,
        on_delete=models.CASCADE,
        related_name='historial',
        verbose_name=_('sale'),
    )
    tipo = models.CharField(_('type'), max_length=20, choices=TipoChoices.choices)
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('user'),
    )
    cambios = models.JSONField(_('changes'), default=dict)
    fecha = models.DateTimeField(_('date'), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _('sale history entry')
        verbose_name_plural = _('sale history')
        ordering = ['-fecha']

    def __str__(self):
        return f'{self.venta_id} {self.tipo} @ {self.fecha}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('HistorialVenta entries are immutable.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('HistorialVenta entries cannot be deleted.')
