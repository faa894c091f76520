"""
Stock — Service Layer

Per-branch stock ledger: get_stock, apply_delta, apply_deltas, adjust,
transfer, low_stock.

Every counter change happens inside one transaction that (1) takes a
PostgreSQL advisory lock on the (product, branch) pair, (2) re-reads the
counter with SELECT ... FOR UPDATE, (3) validates, and (4) writes the
counter, one MovimientoStock row and one audit row. The CHECK constraint
on StockSucursal.cantidad backs the validation at the database level.

@file stock/services.py
"""

import hashlib
import logging
from decimal import Decimal
from uuid import UUID

from django.conf import settings
from django.db import connection, transaction
from django.db.models import F

from core.constants import (
    AUDIT_ACTION_CREATE,
    MOTIVO_TRANSFERENCIA,
    REFERENCIA_AJUSTE,
    REFERENCIA_TRANSFERENCIA,
)
from core.exceptions import BusinessRuleViolation, InsufficientStockError
from core.services import AuditService

from .models import MovimientoStock, StockSucursal

logger = logging.getLogger('despensa')

ZERO = Decimal('0')


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _advisory_lock_key(producto_id, sucursal_id) -> int:
    """Stable bigint key for PostgreSQL advisory lock (same product+branch = same key)."""
    raw = f'stock:{producto_id}:{sucursal_id}'.encode()
    h = hashlib.sha256(raw).digest()[:8]
    return int.from_bytes(h, 'big') % (2**63)


def _lock_pair(producto_id, sucursal_id) -> None:
    if connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute(
                'SELECT pg_advisory_xact_lock(%s)',
                [_advisory_lock_key(producto_id, sucursal_id)],
            )


class StockService:
    """Branch stock counters and their movement trail."""

    @staticmethod
    def get_stock(producto_id: UUID, sucursal_id: UUID) -> Decimal:
        """Quantity on hand; 0 when the product was never stocked at the branch."""
        cantidad = (
            StockSucursal.objects
            .filter(producto_id=producto_id, sucursal_id=sucursal_id)
            .values_list('cantidad', flat=True)
            .first()
        )
        return cantidad if cantidad is not None else ZERO

    @staticmethod
    @transaction.atomic
    def apply_delta(
        *,
        producto_id: UUID,
        sucursal_id: UUID,
        cantidad,
        motivo: str,
        referencia_tipo: str = '',
        referencia_id: UUID | None = None,
        actor=None,
    ) -> MovimientoStock:
        """
        Add a signed quantity to the (product, branch) counter and append
        the matching movement. Negative results raise InsufficientStockError
        and leave nothing written.
        """
        delta = _as_decimal(cantidad)
        if delta == ZERO:
            raise BusinessRuleViolation(detail='Stock delta must be non-zero.')
        if not motivo:
            raise BusinessRuleViolation(detail='A reason is required for every stock movement.')

        _lock_pair(producto_id, sucursal_id)
        registro = (
            StockSucursal.objects.select_for_update()
            .filter(producto_id=producto_id, sucursal_id=sucursal_id)
            .first()
        )
        anterior = registro.cantidad if registro is not None else ZERO
        nuevo = anterior + delta
        if nuevo < ZERO:
            raise InsufficientStockError(
                producto_id=producto_id, disponible=anterior, solicitado=-delta,
            )

        if registro is None:
            registro = StockSucursal.objects.create(
                producto_id=producto_id,
                sucursal_id=sucursal_id,
                cantidad=nuevo,
                stock_minimo=settings.STOCK_MINIMO_DEFAULT,
                created_by=actor,
            )
        else:
            registro.cantidad = nuevo
            registro.updated_by = actor
            registro.save(update_fields=['cantidad', 'updated_by', 'updated_at'])

        movimiento = MovimientoStock(
            producto_id=producto_id,
            sucursal_id=sucursal_id,
            tipo=(
                MovimientoStock.TipoChoices.ENTRADA if delta > ZERO
                else MovimientoStock.TipoChoices.SALIDA
            ),
            cantidad=abs(delta),
            stock_anterior=anterior,
            stock_nuevo=nuevo,
            motivo=motivo,
            referencia_tipo=referencia_tipo or '',
            referencia_id=referencia_id,
            usuario=actor,
        )
        movimiento.save()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='MovimientoStock',
            object_id=str(movimiento.pk),
            old_values={'cantidad': str(anterior)},
            new_values={
                'producto_id': str(producto_id),
                'sucursal_id': str(sucursal_id),
                'cantidad': str(nuevo),
                'delta': str(delta),
                'motivo': motivo,
                'referencia': f'{referencia_tipo}:{referencia_id}' if referencia_id else referencia_tipo,
            },
        )
        logger.info(
            'Stock %s producto=%s sucursal=%s delta=%s %s->%s (%s)',
            movimiento.tipo, producto_id, sucursal_id, delta, anterior, nuevo, motivo,
        )
        return movimiento

    @staticmethod
    @transaction.atomic
    def apply_deltas(
        *,
        sucursal_id: UUID,
        deltas,
        motivo: str,
        referencia_tipo: str = '',
        referencia_id: UUID | None = None,
        actor=None,
    ) -> list[MovimientoStock]:
        """
        Apply several (producto_id, cantidad) deltas on one branch,
        all-or-nothing. Locks are taken in product-id order.
        """
        ordered = sorted(
            ((producto_id, _as_decimal(cantidad)) for producto_id, cantidad in deltas),
            key=lambda item: str(item[0]),
        )
        return [
            StockService.apply_delta(
                producto_id=producto_id,
                sucursal_id=sucursal_id,
                cantidad=cantidad,
                motivo=motivo,
                referencia_tipo=referencia_tipo,
                referencia_id=referencia_id,
                actor=actor,
            )
            for producto_id, cantidad in ordered
            if cantidad != ZERO
        ]

    @staticmethod
    @transaction.atomic
    def adjust(*, producto_id: UUID, sucursal_id: UUID, ajuste, motivo: str, actor=None) -> MovimientoStock:
        """Manual correction after a physical count."""
        return StockService.apply_delta(
            producto_id=producto_id,
            sucursal_id=sucursal_id,
            cantidad=ajuste,
            motivo=motivo,
            referencia_tipo=REFERENCIA_AJUSTE,
            actor=actor,
        )

    @staticmethod
    @transaction.atomic
    def transfer(
        *,
        sucursal_origen_id: UUID,
        sucursal_destino_id: UUID,
        items,
        motivo: str = '',
        actor=None,
    ) -> list[tuple[MovimientoStock, MovimientoStock]]:
        """
        Move quantities between branches. Each item is (producto_id, cantidad)
        with cantidad > 0. Rolls back every line if any origin runs short.
        """
        if str(sucursal_origen_id) == str(sucursal_destino_id):
            raise BusinessRuleViolation(detail='Origin and destination branches must differ.')
        if not items:
            raise BusinessRuleViolation(detail='At least one product is required.')

        motivo = motivo or MOTIVO_TRANSFERENCIA
        pares = []
        for producto_id, cantidad in sorted(items, key=lambda item: str(item[0])):
            cantidad = _as_decimal(cantidad)
            if cantidad <= ZERO:
                raise BusinessRuleViolation(detail='Transfer quantities must be positive.')
            salida = StockService.apply_delta(
                producto_id=producto_id,
                sucursal_id=sucursal_origen_id,
                cantidad=-cantidad,
                motivo=motivo,
                referencia_tipo=REFERENCIA_TRANSFERENCIA,
                referencia_id=sucursal_destino_id,
                actor=actor,
            )
            entrada = StockService.apply_delta(
                producto_id=producto_id,
                sucursal_id=sucursal_destino_id,
                cantidad=cantidad,
                motivo=motivo,
                referencia_tipo=REFERENCIA_TRANSFERENCIA,
                referencia_id=sucursal_origen_id,
                actor=actor,
            )
            pares.append((salida, entrada))
        logger.info(
            'Transfer %s -> %s: %d product(s)',
            sucursal_origen_id, sucursal_destino_id, len(pares),
        )
        return pares

    @staticmethod
    def low_stock(sucursal_id: UUID | None = None):
        qs = StockSucursal.objects.filter(
            cantidad__lte=F('stock_minimo'),
            producto__is_deleted=False,
        ).select_related('producto', 'sucursal')
        if sucursal_id:
            qs = qs.filter(sucursal_id=sucursal_id)
        return qs.order_by('cantidad')
