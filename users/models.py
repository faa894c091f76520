"""
Users — Models

Email-based User with a store role (admin / gerente / vendedor) and an
optional default branch used when a request carries no X-Sucursal-Id.

@file users/models.py
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import SoftDeleteModel
from users.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin, SoftDeleteModel):
    """Back-office / POS operator account."""

    class RolChoices(models.TextChoices):
        ADMIN = 'admin', _('Administrator')
        GERENTE = 'gerente', _('Manager')
        VENDEDOR = 'vendedor', _('Salesperson')

    email = models.EmailField(_('email'), unique=True)
    nombre = models.CharField(_('first name'), max_length=100, blank=True)
    apellido = models.CharField(_('last name'), max_length=100, blank=True)
    telefono = models.CharField(_('phone'), max_length=30, blank=True)

    rol = models.CharField(
        _('role'), max_length=12,
        choices=RolChoices.choices, default=RolChoices.VENDEDOR,
        db_index=True,
    )
    sucursal = models.ForeignKey(
        'sucursales.Sucursal',
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='usuarios',
        verbose_name=_('default branch'),
    )

    is_staff = models.BooleanField(_('staff status'), default=False)
    is_active = models.BooleanField(_('active'), default=True)
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['rol', 'is_deleted']),
        ]

    def __str__(self):
        return self.get_full_name()

    def get_full_name(self):
        full = f'{self.nombre} {self.apellido}'.strip()
        return full or self.email

    def get_short_name(self):
        return self.nombre or self.email

    @property
    def es_administrador(self) -> bool:
        return self.is_superuser or self.rol == self.RolChoices.ADMIN
