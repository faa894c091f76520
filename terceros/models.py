"""
Terceros — Models

Suppliers (referenced by purchases) and clients (referenced by sales).
Both are soft-deleted so historical documents keep their references.

@file terceros/models.py
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import SoftDeleteModel


class Proveedor(SoftDeleteModel):
    nombre = models.CharField(_('name'), max_length=200, db_index=True)
    cuit = models.CharField(_('tax id (CUIT)'), max_length=20, blank=True, db_index=True)
    contacto = models.CharField(_('contact person'), max_length=120, blank=True)
    telefono = models.CharField(_('phone'), max_length=30, blank=True)
    email = models.EmailField(_('email'), blank=True)
    direccion = models.CharField(_('address'), max_length=255, blank=True)
    activo = models.BooleanField(_('active'), default=True)

    class Meta:
        verbose_name = _('supplier')
        verbose_name_plural = _('suppliers')
        ordering = ['nombre']

    def __str__(self):
        return self.nombre


class Cliente(SoftDeleteModel):
    nombre = models.CharField(_('name'), max_length=200, db_index=True)
    dni_cuit = models.CharField(_('DNI / CUIT'), max_length=20, blank=True, db_index=True)
    telefono = models.CharField(_('phone'), max_length=30, blank=True)
    email = models.EmailField(_('email'), blank=True)
    direccion = models.CharField(_('address'), max_length=255, blank=True)
    limite_credito = models.DecimalField(
        _('credit limit'), max_digits=14, decimal_places=2, default=Decimal('0'),
    )
    activo = models.BooleanField(_('active'), default=True)

    class Meta:
        verbose_name = _('client')
        verbose_name_plural = _('clients')
        ordering = ['nombre']

    def __str__(self):
        return self.nombre
