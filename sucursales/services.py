"""
Sucursales — Service Layer

Branch lookup and the principal-branch fallback used by purchase receipt.

@file sucursales/services.py
"""

import logging

from django.db import transaction

from core.constants import AUDIT_ACTION_UPDATE
from core.exceptions import NoBranchError, NotFoundError
from core.services import AuditService

from .models import Sucursal

logger = logging.getLogger('despensa')


class SucursalService:

    @staticmethod
    def principal() -> Sucursal | None:
        return Sucursal.objects.filter(
            tipo=Sucursal.TipoChoices.PRINCIPAL, activa=True,
        ).first()

    @staticmethod
    def get(sucursal_id) -> Sucursal:
        """Active branch by id or NotFoundError."""
        try:
            return Sucursal.objects.get(pk=sucursal_id, activa=True)
        except Sucursal.DoesNotExist:
            raise NotFoundError(detail=f'Branch {sucursal_id} not found.')

    @staticmethod
    def resolve(sucursal_id=None) -> Sucursal:
        """
        Target branch for a stock operation: the given branch when it
        exists, otherwise the principal branch. NoBranchError when neither
        is available.
        """
        if sucursal_id:
            sucursal = Sucursal.objects.filter(pk=sucursal_id, activa=True).first()
            if sucursal is not None:
                return sucursal
        sucursal = SucursalService.principal()
        if sucursal is None:
            raise NoBranchError(detail='No branch given and no principal branch configured.')
        return sucursal

    @staticmethod
    @transaction.atomic
    def set_principal(*, sucursal_id, actor=None) -> Sucursal:
        """Flag one branch as principal, demoting the previous one."""
        sucursal = SucursalService.get(sucursal_id)
        previous = (
            Sucursal.objects.select_for_update()
            .filter(tipo=Sucursal.TipoChoices.PRINCIPAL)
            .exclude(pk=sucursal.pk)
            .first()
        )
        if previous is not None:
            previous.tipo = Sucursal.TipoChoices.SECUNDARIA
            previous.updated_by = actor
            previous.save(update_fields=['tipo', 'updated_by', 'updated_at'])

        sucursal.tipo = Sucursal.TipoChoices.PRINCIPAL
        sucursal.updated_by = actor
        sucursal.save(update_fields=['tipo', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='Sucursal',
            object_id=str(sucursal.pk),
            old_values={'principal': str(previous.pk) if previous else None},
            new_values={'principal': str(sucursal.pk)},
        )
        logger.info('Principal branch set to %s', sucursal.pk)
        return sucursal
