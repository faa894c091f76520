"""
Core — Model Tests

Tests for AuditLog, base model mixins and document sequences.

@file core/tests/test_models.py
"""

import pytest

from core.constants import SECUENCIA_COMPRA, SECUENCIA_VENTA
from core.models import AuditLog
from core.services import AuditService, SecuenciaService
from terceros.models import Proveedor
from tests.factories import AuditLogFactory, ProveedorFactory, UserFactory


@pytest.mark.django_db
class TestAuditLog:
    def test_create_audit_log(self):
        user = UserFactory()
        log = AuditService.log(
            actor=user,
            action=AuditLog.ActionChoices.CREATE,
            model_name='TestModel',
            object_id='test-123',
            new_values={'key': 'value'},
        )
        assert log.pk is not None
        assert log.action == 'CREATE'
        assert log.actor == user

    def test_anonymous_actor_is_not_stored(self):
        log = AuditService.log(
            actor=None,
            action=AuditLog.ActionChoices.UPDATE,
            model_name='TestModel',
            object_id='x',
        )
        assert log.actor is None

    def test_audit_log_via_factory(self):
        log = AuditLogFactory()
        assert log.pk is not None

    def test_snapshot_serialises_values(self):
        user = UserFactory()
        snapshot = AuditService.snapshot(user, exclude=['password'])
        assert isinstance(snapshot, dict)
        assert snapshot['email'] == user.email
        assert 'password' not in snapshot

    def test_user_create_triggers_audit(self):
        """User creation via signal should produce an audit log."""
        before = AuditLog.objects.count()
        UserFactory()
        assert AuditLog.objects.count() > before


@pytest.mark.django_db
class TestSoftDelete:
    def test_soft_delete_flags_row(self):
        user = UserFactory()
        proveedor = ProveedorFactory()
        proveedor.soft_delete(user=user)
        proveedor.refresh_from_db()
        assert proveedor.is_deleted is True
        assert proveedor.deleted_at is not None
        assert proveedor.deleted_by == user

    def test_vigentes_and_eliminados(self):
        activo = ProveedorFactory()
        borrado = ProveedorFactory()
        borrado.soft_delete()
        assert list(Proveedor.objects.vigentes()) == [activo]
        assert list(Proveedor.objects.eliminados()) == [borrado]


@pytest.mark.django_db
class TestSecuencia:
    def test_numbers_increment_per_sequence(self):
        assert SecuenciaService.siguiente_numero(SECUENCIA_VENTA) == 'V-000001'
        assert SecuenciaService.siguiente_numero(SECUENCIA_VENTA) == 'V-000002'
        assert SecuenciaService.siguiente_numero(SECUENCIA_COMPRA) == 'COMP-000001'

