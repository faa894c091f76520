"""
Compras — Service Layer

Purchase lifecycle: create, update (line items only while pendiente),
receive (credit branch stock once), status change, delete.

Receipt credits every line through the stock ledger and updates the
purchase status inside the same transaction; any failure leaves the
purchase in its previous status with no stock written.

@file compras/services.py
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from catalogo.services import ProductoService
from core.constants import (
    AUDIT_ACTION_CREATE,
    AUDIT_ACTION_SOFT_DELETE,
    AUDIT_ACTION_STATUS_CHANGE,
    AUDIT_ACTION_UPDATE,
    MOTIVO_RECEPCION_COMPRA,
    REFERENCIA_COMPRA,
    SECUENCIA_COMPRA,
)
from core.context import RequestContext
from core.exceptions import AlreadyProcessedError, InvalidStateError, NoBranchError, NotFoundError
from core.services import AuditService, SecuenciaService
from stock.services import StockService
from sucursales.models import Sucursal
from sucursales.services import SucursalService
from terceros.models import Proveedor

from .models import Compra, DetalleCompra

logger = logging.getLogger('despensa')

Estado = Compra.EstadoChoices

ESTADOS_RECIBIDOS = {Estado.RECIBIDA, Estado.COMPLETADA}

# Valid status transitions: from_status -> set of allowed to_status
COMPRA_TRANSITIONS = {
    Estado.PENDIENTE: {Estado.RECIBIDA, Estado.COMPLETADA, Estado.CANCELADA},
    Estado.RECIBIDA: {Estado.COMPLETADA},
    Estado.COMPLETADA: set(),
    Estado.CANCELADA: set(),
}


def _assert_transition(compra: Compra, nuevo_estado: str) -> None:
    allowed = COMPRA_TRANSITIONS.get(compra.estado, set())
    if nuevo_estado not in allowed:
        raise InvalidStateError(
            detail=f'Cannot change purchase {compra.numero} from {compra.estado} to {nuevo_estado}.',
        )


def _lock(compra_id) -> Compra:
    try:
        return Compra.objects.vigentes().select_for_update().get(pk=compra_id)
    except Compra.DoesNotExist:
        raise NotFoundError(detail=f'Purchase {compra_id} not found.')


def _replace_detalles(compra: Compra, detalles: list[dict], actor) -> Decimal:
    """Rewrite the purchase lines; returns the new subtotal."""
    if not detalles:
        raise ValidationError({'detalles': ['A purchase needs at least one line item.']})
    productos = ProductoService.get_many(d['producto_id'] for d in detalles)

    compra.detalles.all().delete()
    subtotal = Decimal('0')
    rows = []
    for d in detalles:
        producto = productos[str(d['producto_id'])]
        cantidad = Decimal(str(d['cantidad']))
        if cantidad <= 0:
            raise ValidationError({'detalles': [f'Quantity for product {producto.pk} must be positive.']})
        precio = d.get('precio_unitario')
        precio = Decimal(str(precio)) if precio is not None else producto.precio_costo
        linea = (cantidad * precio).quantize(Decimal('0.01'))
        rows.append(DetalleCompra(
            compra=compra,
            producto=producto,
            cantidad=cantidad,
            precio_unitario=precio,
            subtotal=linea,
            created_by=actor,
        ))
        subtotal += linea
    DetalleCompra.objects.bulk_create(rows)
    return subtotal


class CompraService:
    """Purchase lifecycle and one-time stock credit on receipt."""

    @staticmethod
    @transaction.atomic
    def create_purchase(
        *,
        ctx: RequestContext,
        proveedor_id=None,
        detalles: list[dict] | None = None,
        sucursal_id=None,
        estado: str = Estado.PENDIENTE,
        fecha=None,
        impuestos=Decimal('0'),
        notas: str = '',
    ) -> Compra:
        if not proveedor_id:
            raise ValidationError({'proveedor_id': ['Supplier is required.']})
        if not detalles:
            raise ValidationError({'detalles': ['A purchase needs at least one line item.']})
        if estado not in Estado.values:
            raise ValidationError({'estado': [f'Invalid status: {estado}.']})
        try:
            proveedor = Proveedor.objects.vigentes().get(pk=proveedor_id)
        except Proveedor.DoesNotExist:
            raise NotFoundError(detail=f'Supplier {proveedor_id} not found.')

        if sucursal_id:
            sucursal = SucursalService.get(sucursal_id)
        else:
            sucursal = SucursalService.principal()
            if ctx.sucursal_id:
                sucursal = Sucursal.objects.filter(pk=ctx.sucursal_id, activa=True).first() or sucursal

        compra = Compra(
            numero=SecuenciaService.siguiente_numero(SECUENCIA_COMPRA),
            proveedor=proveedor,
            sucursal=sucursal,
            fecha=fecha or timezone.now(),
            estado=Estado.PENDIENTE,
            impuestos=Decimal(str(impuestos or 0)),
            notas=notas or '',
            created_by=ctx.actor,
        )
        compra.save()
        compra.subtotal = _replace_detalles(compra, detalles, ctx.actor)
        compra.total = compra.subtotal + compra.impuestos
        compra.save(update_fields=['subtotal', 'total'])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_CREATE,
            model_name='Compra',
            object_id=str(compra.pk),
            new_values={'numero': compra.numero, 'total': str(compra.total), 'estado': compra.estado},
        )
        logger.info('Compra %s created (%d lines)', compra.numero, len(detalles))

        if estado in ESTADOS_RECIBIDOS:
            compra = CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx, estado_final=estado)
        elif estado == Estado.CANCELADA:
            compra = CompraService.change_status(compra_id=compra.pk, estado=estado, ctx=ctx)
        return compra

    @staticmethod
    @transaction.atomic
    def update_purchase(
        *,
        compra_id,
        ctx: RequestContext,
        detalles: list[dict] | None = None,
        estado: str | None = None,
        **fields,
    ) -> Compra:
        """Edit header fields; line items only while pendiente; delegate status changes."""
        compra = _lock(compra_id)
        old_values = AuditService.snapshot(compra)

        if detalles is not None and compra.estado != Estado.PENDIENTE:
            raise InvalidStateError(
                detail=f'Purchase {compra.numero} is {compra.estado}; line items can no longer change.',
            )

        if 'proveedor_id' in fields:
            proveedor_id = fields.pop('proveedor_id')
            if compra.recibida and str(proveedor_id) != str(compra.proveedor_id):
                raise InvalidStateError(detail='Supplier of a received purchase cannot change.')
            try:
                compra.proveedor = Proveedor.objects.vigentes().get(pk=proveedor_id)
            except Proveedor.DoesNotExist:
                raise NotFoundError(detail=f'Supplier {proveedor_id} not found.')
        if 'sucursal_id' in fields:
            sucursal_id = fields.pop('sucursal_id')
            if compra.recibida:
                raise InvalidStateError(detail='Branch of a received purchase cannot change.')
            compra.sucursal = SucursalService.get(sucursal_id) if sucursal_id else None

        for field in ('fecha', 'notas', 'impuestos'):
            if field in fields:
                setattr(compra, field, fields[field])

        if detalles is not None:
            compra.subtotal = _replace_detalles(compra, detalles, ctx.actor)
        compra.total = compra.subtotal + compra.impuestos
        compra.updated_by = ctx.actor
        compra.save()

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='Compra',
            object_id=str(compra.pk),
            old_values=old_values,
            new_values=AuditService.snapshot(compra),
        )

        if estado and estado != compra.estado:
            compra = CompraService.change_status(compra_id=compra.pk, estado=estado, ctx=ctx)
        return compra

    @staticmethod
    @transaction.atomic
    def receive_purchase(*, compra_id, ctx: RequestContext, estado_final: str = Estado.RECIBIDA) -> Compra:
        """
        Credit branch stock for every line and mark the purchase received.

        Rejects purchases already received or completed (AlreadyProcessedError),
        cancelled purchases (InvalidStateError), purchases without lines
        (ValidationError) and purchases with no resolvable branch (NoBranchError).
        """
        if estado_final not in ESTADOS_RECIBIDOS:
            raise ValidationError({'estado': [f'{estado_final} is not a receipt status.']})

        compra = _lock(compra_id)
        if compra.recibida:
            raise AlreadyProcessedError(
                detail=f'Purchase {compra.numero} was already {compra.estado}.',
            )
        if compra.estado == Estado.CANCELADA:
            raise InvalidStateError(detail=f'Purchase {compra.numero} is cancelled.')

        detalles = list(compra.detalles.all())
        if not detalles:
            raise ValidationError({'detalles': ['The purchase has no line items.']})

        try:
            sucursal = SucursalService.resolve(compra.sucursal_id)
        except NoBranchError:
            raise NoBranchError(
                detail=f'Purchase {compra.numero} has no branch and no principal branch exists.',
            )

        StockService.apply_deltas(
            sucursal_id=sucursal.pk,
            deltas=[(d.producto_id, d.cantidad) for d in detalles],
            motivo=MOTIVO_RECEPCION_COMPRA,
            referencia_tipo=REFERENCIA_COMPRA,
            referencia_id=compra.pk,
            actor=ctx.actor,
        )

        old_estado = compra.estado
        compra.estado = estado_final
        compra.sucursal = sucursal
        compra.fecha_recepcion = timezone.now()
        compra.recibida_por = ctx.actor
        compra.updated_by = ctx.actor
        compra.save(update_fields=[
            'estado', 'sucursal', 'fecha_recepcion', 'recibida_por', 'updated_by', 'updated_at',
        ])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='Compra',
            object_id=str(compra.pk),
            old_values={'estado': old_estado},
            new_values={'estado': estado_final, 'sucursal_id': str(sucursal.pk), 'lineas': len(detalles)},
        )
        logger.info(
            'Compra %s received at sucursal=%s (%d lines)',
            compra.numero, sucursal.pk, len(detalles),
        )
        return compra

    @staticmethod
    @transaction.atomic
    def change_status(*, compra_id, estado: str, ctx: RequestContext) -> Compra:
        if estado not in Estado.values:
            raise ValidationError({'estado': [f'Invalid status: {estado}.']})

        compra = _lock(compra_id)
        if estado in ESTADOS_RECIBIDOS and compra.recibida:
            if not (compra.estado == Estado.RECIBIDA and estado == Estado.COMPLETADA):
                raise AlreadyProcessedError(
                    detail=f'Purchase {compra.numero} was already {compra.estado}.',
                )
        elif estado in ESTADOS_RECIBIDOS:
            return CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx, estado_final=estado)

        _assert_transition(compra, estado)
        old_estado = compra.estado
        compra.estado = estado
        compra.updated_by = ctx.actor
        compra.save(update_fields=['estado', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='Compra',
            object_id=str(compra.pk),
            old_values={'estado': old_estado},
            new_values={'estado': estado},
        )
        return compra

    @staticmethod
    @transaction.atomic
    def delete_purchase(*, compra_id, ctx: RequestContext) -> None:
        compra = _lock(compra_id)
        if compra.recibida:
            raise InvalidStateError(
                detail=f'Purchase {compra.numero} already credited stock and cannot be deleted.',
            )
        compra.soft_delete(user=ctx.actor)
        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_SOFT_DELETE,
            model_name='Compra',
            object_id=str(compra.pk),
            old_values={'estado': compra.estado},
        )
