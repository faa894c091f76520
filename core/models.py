"""
Core — Base Models & Audit Infrastructure

Abstract bases shared by every app, the AuditLog table and the named
counters behind sale and purchase numbers.

Business documents (ventas, compras) and the master data they point at
(productos, clientes, proveedores, vehiculos, users) are never removed:
they are flagged with is_deleted and hidden from default listings, so
historical documents keep resolving their references.

@file core/models.py
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def _actor_fk(verbose_name):
    return models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=verbose_name,
    )


class BaseModel(models.Model):
    """UUID key, timestamps and the acting user for every row."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)
    created_by = _actor_fk(_('created by'))
    updated_by = _actor_fk(_('updated by'))

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):

    def vigentes(self):
        return self.filter(is_deleted=False)

    def eliminados(self):
        return self.filter(is_deleted=True)


class SoftDeleteModel(BaseModel):
    is_deleted = models.BooleanField(_('deleted'), default=False, db_index=True)
    deleted_at = models.DateTimeField(_('deleted at'), null=True, blank=True)
    deleted_by = _actor_fk(_('deleted by'))

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    def soft_delete(self, user=None):
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by = user
        self.save(update_fields=['is_deleted', 'deleted_at', 'deleted_by', 'updated_at'])


# ---------------------------------------------------------------------------
# Audit Log
# ---------------------------------------------------------------------------

class AuditLog(models.Model):
    """
    Insert-only trail of writes: document creation and edits, status
    changes, stock adjustments, soft deletes and session events.
    """

    class ActionChoices(models.TextChoices):
        CREATE = 'CREATE', _('Create')
        UPDATE = 'UPDATE', _('Update')
        DELETE = 'DELETE', _('Delete')
        SOFT_DELETE = 'SOFT_DELETE', _('Soft Delete')
        STATUS_CHANGE = 'STATUS_CHANGE', _('Status Change')
        LOGIN = 'LOGIN', _('Login')
        LOGOUT = 'LOGOUT', _('Logout')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='audit_logs',
        verbose_name=_('actor'),
    )
    action = models.CharField(_('action'), max_length=20, choices=ActionChoices.choices, db_index=True)
    model_name = models.CharField(_('model'), max_length=100, db_index=True)
    object_id = models.CharField(_('object ID'), max_length=40, db_index=True)
    old_values = models.JSONField(_('old values'), null=True, blank=True)
    new_values = models.JSONField(_('new values'), null=True, blank=True)
    # Only filled for LOGIN / LOGOUT.
    ip_address = models.GenericIPAddressField(_('IP address'), null=True, blank=True)
    user_agent = models.TextField(_('user agent'), blank=True, default='')
    timestamp = models.DateTimeField(_('timestamp'), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _('audit log')
        verbose_name_plural = _('audit logs')
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['model_name', 'object_id']),
            models.Index(fields=['actor', 'timestamp']),
        ]

    def __str__(self):
        return f'{self.action} {self.model_name}:{self.object_id} by {self.actor_id}'


# ---------------------------------------------------------------------------
# Secuencia
# ---------------------------------------------------------------------------

class Secuencia(models.Model):
    """Last issued value per document series (V-000001, COMP-000001)."""

    nombre = models.CharField(_('name'), max_length=40, primary_key=True)
    valor = models.PositiveBigIntegerField(_('last value'), default=0)

    class Meta:
        verbose_name = _('sequence')
        verbose_name_plural = _('sequences')

    def __str__(self):
        return f'{self.nombre}={self.valor}'
