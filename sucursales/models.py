"""
Sucursales — Models

Physical store locations. Each branch keeps independent stock counters;
at most one branch is flagged as the principal one.

@file sucursales/models.py
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Sucursal(BaseModel):

    class TipoChoices(models.TextChoices):
        PRINCIPAL = 'principal', _('Main branch')
        SECUNDARIA = 'secundaria', _('Secondary branch')

    nombre = models.CharField(_('name'), max_length=120, unique=True)
    direccion = models.CharField(_('address'), max_length=255, blank=True)
    telefono = models.CharField(_('phone'), max_length=30, blank=True)
    tipo = models.CharField(
        _('type'), max_length=12,
        choices=TipoChoices.choices, default=TipoChoices.SECUNDARIA,
    )
    activa = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('branch')
        verbose_name_plural = _('branches')
        ordering = ['nombre']
        constraints = [
            models.UniqueConstraint(
                fields=['tipo'],
                condition=Q(tipo='principal'),
                name='sucursal_unica_principal',
            ),
        ]

    def __str__(self):
        return self.nombre

    @property
    def es_principal(self) -> bool:
        return self.tipo == self.TipoChoices.PRINCIPAL
