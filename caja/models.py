"""
Caja — Models

Cash box entries per branch.

@file caja/models.py
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class MovimientoCaja(BaseModel):

    class TipoChoices(models.TextChoices):
        INGRESO = 'ingreso', _('Income')
        EGRESO = 'egreso', _('Expense')

    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='movimientos_caja',
        verbose_name=_('branch'),
    )
    tipo = models.CharField(_('type'), max_length=10, choices=TipoChoices.choices)
    monto = models.DecimalField(_('amount'), max_digits=14, decimal_places=2)
    concepto = models.CharField(_('concept'), max_length=200)
    observaciones = models.TextField(_('remarks'), blank=True)
    fecha = models.DateTimeField(_('date'), default=timezone.now, db_index=True)
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('user'),
    )

    class Meta:
        verbose_name = _('cash movement')
        verbose_name_plural = _('cash movements')
        ordering = ['-fecha']
        constraints = [
            models.CheckConstraint(condition=Q(monto__gt=Decimal('0')), name='movimiento_caja_monto_positivo'),
        ]

    def __str__(self):
        return f'{self.tipo} {self.monto} ({self.concepto})'
