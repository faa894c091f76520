"""
Caja — Service Layer

Cash entries, the daily summary, the running balance and reconciliation
against a physical count.

@file caja/services.py
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.constants import AUDIT_ACTION_CREATE
from core.context import RequestContext
from core.services import AuditService

from .models import MovimientoCaja

logger = logging.getLogger('despensa')

ZERO = Decimal('0')

Tipo = MovimientoCaja.TipoChoices


def _totales(qs) -> tuple[Decimal, Decimal]:
    agg = qs.aggregate(
        ingresos=Sum('monto', filter=Q(tipo=Tipo.INGRESO)),
        egresos=Sum('monto', filter=Q(tipo=Tipo.EGRESO)),
    )
    return agg['ingresos'] or ZERO, agg['egresos'] or ZERO


class CajaService:

    @staticmethod
    def _scope(sucursal_id=None):
        qs = MovimientoCaja.objects.all()
        if sucursal_id:
            qs = qs.filter(sucursal_id=sucursal_id)
        return qs

    @staticmethod
    @transaction.atomic
    def registrar(*, ctx: RequestContext, tipo: str, monto, concepto: str, observaciones: str = '',
                  fecha=None, sucursal_id=None) -> MovimientoCaja:
        monto = Decimal(str(monto))
        if monto <= ZERO:
            raise ValidationError({'monto': ['Amount must be positive.']})
        if not (concepto or '').strip():
            raise ValidationError({'concepto': ['Concept is required.']})

        movimiento = MovimientoCaja.objects.create(
            sucursal_id=sucursal_id or ctx.sucursal_id,
            tipo=tipo,
            monto=monto,
            concepto=concepto.strip(),
            observaciones=observaciones or '',
            fecha=fecha or timezone.now(),
            usuario=ctx.actor,
            created_by=ctx.actor,
        )
        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_CREATE,
            model_name='MovimientoCaja',
            object_id=str(movimiento.pk),
            new_values={'tipo': tipo, 'monto': str(monto), 'concepto': movimiento.concepto},
        )
        logger.info('Caja %s %s (%s)', tipo, monto, movimiento.concepto)
        return movimiento

    @staticmethod
    def resumen(*, fecha=None, sucursal_id=None) -> dict:
        fecha = fecha or timezone.localdate()
        ingresos, egresos = _totales(CajaService._scope(sucursal_id).filter(fecha__date=fecha))
        return {
            'fecha': fecha.isoformat(),
            'ingresos': ingresos,
            'egresos': egresos,
            'saldo': ingresos - egresos,
        }

    @staticmethod
    def saldo_acumulado(*, sucursal_id=None) -> dict:
        ingresos, egresos = _totales(CajaService._scope(sucursal_id))
        return {
            'total_ingresos': ingresos,
            'total_egresos': egresos,
            'saldo': ingresos - egresos,
        }

    @staticmethod
    def verificar_saldo(*, saldo_fisico, sucursal_id=None) -> dict:
        saldo_fisico = Decimal(str(saldo_fisico))
        saldo = CajaService.saldo_acumulado(sucursal_id=sucursal_id)['saldo']
        diferencia = saldo_fisico - saldo
        return {
            'saldo_sistema': saldo,
            'saldo_fisico': saldo_fisico,
            'diferencia': diferencia,
            'coincide': diferencia == ZERO,
        }
