"""
Vehiculos — Service Layer

@file vehiculos/services.py
"""

import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_SOFT_DELETE
from core.exceptions import NotFoundError
from core.services import AuditService

from .models import GastoVehiculo, Vehiculo

logger = logging.getLogger('despensa')

DIAS_AVISO_SEGURO = 30


class VehiculoService:

    @staticmethod
    def get(vehiculo_id) -> Vehiculo:
        try:
            return Vehiculo.objects.vigentes().get(pk=vehiculo_id)
        except Vehiculo.DoesNotExist:
            raise NotFoundError(detail=f'Vehicle {vehiculo_id} not found.')

    @staticmethod
    @transaction.atomic
    def register_expense(*, vehiculo_id, actor, **data) -> GastoVehiculo:
        """Record an expense; a reading above the odometer moves km_actual forward."""
        vehiculo = Vehiculo.objects.vigentes().select_for_update().filter(pk=vehiculo_id).first()
        if vehiculo is None:
            raise NotFoundError(detail=f'Vehicle {vehiculo_id} not found.')

        gasto = GastoVehiculo.objects.create(vehiculo=vehiculo, created_by=actor, **data)
        km = data.get('km')
        if km is not None and km > vehiculo.km_actual:
            vehiculo.km_actual = km
            vehiculo.updated_by = actor
            vehiculo.save(update_fields=['km_actual', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='GastoVehiculo',
            object_id=str(gasto.pk),
            new_values={'vehiculo_id': str(vehiculo.pk), 'categoria': gasto.categoria, 'monto': str(gasto.monto)},
        )
        return gasto

    @staticmethod
    @transaction.atomic
    def deactivate(*, vehiculo_id, actor) -> None:
        vehiculo = VehiculoService.get(vehiculo_id)
        vehiculo.activo = False
        vehiculo.save(update_fields=['activo', 'updated_at'])
        vehiculo.soft_delete(user=actor)
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_SOFT_DELETE,
            model_name='Vehiculo',
            object_id=str(vehiculo.pk),
            old_values={'patente': vehiculo.patente},
        )
        logger.info('Vehiculo %s deactivated', vehiculo.patente)

    @staticmethod
    def summary() -> dict:
        por_categoria = {c: Decimal('0') for c in GastoVehiculo.CategoriaChoices.values}
        gastos = GastoVehiculo.objects.filter(vehiculo__is_deleted=False)
        for row in gastos.values('categoria').annotate(total=Sum('monto')):
            por_categoria[row['categoria']] = row['total']

        hoy = timezone.localdate()
        vencimientos = (
            Vehiculo.objects.filter(
                is_deleted=False,
                activo=True,
                fecha_vencimiento_seguro__isnull=False,
                fecha_vencimiento_seguro__lte=hoy + timedelta(days=DIAS_AVISO_SEGURO),
            )
            .order_by('fecha_vencimiento_seguro')
        )
        return {
            'total_gastos': sum(por_categoria.values(), Decimal('0')),
            'gastos_por_categoria': por_categoria,
            'litros_combustible': gastos.filter(
                categoria=GastoVehiculo.CategoriaChoices.COMBUSTIBLE,
            ).aggregate(total=Sum('litros'))['total'] or Decimal('0'),
            'vehiculos_activos': Vehiculo.objects.vigentes().filter(activo=True).count(),
            'seguros_por_vencer': [
                {
                    'id': str(v.pk),
                    'patente': v.patente,
                    'fecha_vencimiento_seguro': v.fecha_vencimiento_seguro.isoformat(),
                    'vencido': v.fecha_vencimiento_seguro < hoy,
                }
                for v in vencimientos
            ],
        }
