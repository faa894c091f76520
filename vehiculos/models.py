"""
Vehiculos — Models

Delivery fleet and its running costs.

@file vehiculos/models.py
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, SoftDeleteModel


class Vehiculo(SoftDeleteModel):
    patente = models.CharField(_('licence plate'), max_length=15, unique=True)
    marca = models.CharField(_('make'), max_length=60)
    modelo = models.CharField(_('model'), max_length=60)
    anio = models.PositiveSmallIntegerField(_('year'), null=True, blank=True)
    tipo = models.CharField(_('type'), max_length=40, blank=True)
    km_actual = models.PositiveIntegerField(_('odometer (km)'), default=0)
    fecha_vencimiento_seguro = models.DateField(_('insurance expiry'), null=True, blank=True)
    activo = models.BooleanField(_('active'), default=True)
    notas = models.TextField(_('notes'), blank=True)

    class Meta:
        verbose_name = _('vehicle')
        verbose_name_plural = _('vehicles')
        ordering = ['patente']

    def __str__(self):
        return f'{self.patente} ({self.marca} {self.modelo})'

    def save(self, *args, **kwargs):
        self.patente = (self.patente or '').strip().upper()
        super().save(*args, **kwargs)


class GastoVehiculo(BaseModel):

    class CategoriaChoices(models.TextChoices):
        COMBUSTIBLE = 'combustible', _('Fuel')
        SERVICIO = 'servicio', _('Service')
        SEGURO = 'seguro', _('Insurance')
        REPARACION = 'reparacion', _('Repair')
        OTRO = 'otro', _('Other')

    vehiculo = models.ForeignKey(
        Vehiculo,
        on_delete=models.CASCADE,
        related_name='gastos',
        verbose_name=_('vehicle'),
    )
    categoria = models.CharField(_('category'), max_length=15, choices=CategoriaChoices.choices)
    monto = models.DecimalField(_('amount'), max_digits=14, decimal_places=2)
    fecha = models.DateField(_('date'), default=timezone.localdate)
    km = models.PositiveIntegerField(_('odometer reading'), null=True, blank=True)
    litros = models.DecimalField(
        _('litres'), max_digits=8, decimal_places=2, null=True, blank=True,
        help_text=_('Fuel loads only'),
    )
    descripcion = models.TextField(_('description'), blank=True)

    class Meta:
        verbose_name = _('vehicle expense')
        verbose_name_plural = _('vehicle expenses')
        ordering = ['-fecha', '-created_at']
        constraints = [
            models.CheckConstraint(condition=Q(monto__gt=Decimal('0')), name='gasto_vehiculo_monto_positivo'),
        ]

    def __str__(self):
        return f'{self.vehiculo_id} {self.categoria} {self.monto}'
