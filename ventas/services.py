"""
Ventas — Service Layer

Sale lifecycle: create, edit with stock reconciliation, payments, status
changes, partial returns, deletion, search and daily statistics.

Every operation that moves stock runs in one transaction with the sale
row locked; stock is validated and written through StockService so a
failure leaves both the sale and the branch counters untouched.

@file ventas/services.py
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from catalogo.services import ProductoService
from core.constants import (
    AUDIT_ACTION_CREATE,
    AUDIT_ACTION_SOFT_DELETE,
    AUDIT_ACTION_STATUS_CHANGE,
    AUDIT_ACTION_UPDATE,
    MOTIVO_CANCELACION_VENTA,
    MOTIVO_DEVOLUCION_PARCIAL,
    MOTIVO_DEVOLUCION_VENTA,
    MOTIVO_EDICION_VENTA,
    MOTIVO_ELIMINACION_VENTA,
    MOTIVO_VENTA,
    REFERENCIA_VENTA,
    SECUENCIA_VENTA,
)
from core.context import RequestContext
from core.exceptions import InvalidStateError, NotFoundError
from core.services import AuditService, SecuenciaService
from stock.services import StockService
from sucursales.services import SucursalService
from terceros.models import Cliente

from .models import DetalleVenta, HistorialVenta, MetodoPagoChoices, PagoVenta, Venta
from .reconciliation import compute_stock_changes, validate_available_stock
from .tasks import registrar_historial_venta

logger = logging.getLogger('despensa')

ZERO = Decimal('0')
CENT = Decimal('0.01')

Estado = Venta.EstadoChoices
EstadoPago = Venta.EstadoPagoChoices

ESTADOS_FINALES = {Estado.CANCELADA, Estado.DEVUELTA}

# Valid status transitions: from_status -> set of allowed to_status
VENTA_TRANSITIONS = {
    Estado.EN_CURSO: {Estado.ENTREGADA, Estado.COMPLETADA, Estado.CANCELADA, Estado.DEVUELTA},
    Estado.ENTREGADA: {Estado.DEVUELTA},
    Estado.COMPLETADA: {Estado.DEVUELTA},
    Estado.CANCELADA: set(),
    Estado.DEVUELTA: set(),
}

MOTIVO_POR_ESTADO = {
    Estado.CANCELADA: MOTIVO_CANCELACION_VENTA,
    Estado.DEVUELTA: MOTIVO_DEVOLUCION_VENTA,
}


def _assert_transition(venta: Venta, nuevo_estado: str) -> None:
    allowed = VENTA_TRANSITIONS.get(venta.estado, set())
    if nuevo_estado not in allowed:
        raise InvalidStateError(
            detail=f'Cannot change sale {venta.numero} from {venta.estado} to {nuevo_estado}.',
        )


def _lock(venta_id) -> Venta:
    try:
        return Venta.objects.vigentes().select_for_update().get(pk=venta_id)
    except Venta.DoesNotExist:
        raise NotFoundError(detail=f'Sale {venta_id} not found.')


def _estado_pago(total: Decimal, pagado: Decimal) -> str:
    if pagado >= total:
        return EstadoPago.PAGADO
    if pagado > ZERO:
        return EstadoPago.PARCIAL
    return EstadoPago.PENDIENTE


def _build_detalles(venta: Venta, detalles: list[dict], actor, precios_previos=None):
    """Unsaved DetalleVenta rows and their subtotal."""
    if not detalles:
        raise ValidationError({'detalles': ['A sale needs at least one line item.']})
    precios_previos = precios_previos or {}
    productos = ProductoService.get_many(d['producto_id'] for d in detalles)

    rows = []
    subtotal = ZERO
    for d in detalles:
        producto = productos[str(d['producto_id'])]
        cantidad = Decimal(str(d['cantidad']))
        if cantidad <= ZERO:
            raise ValidationError({'detalles': [f'Quantity for product {producto.pk} must be positive.']})
        precio = d.get('precio_unitario')
        if precio is None:
            precio = precios_previos.get(str(producto.pk), producto.precio_venta)
        precio = Decimal(str(precio))
        linea = (cantidad * precio).quantize(CENT)
        rows.append(DetalleVenta(
            venta=venta,
            producto=producto,
            cantidad=cantidad,
            precio_unitario=precio,
            subtotal=linea,
            created_by=actor,
        ))
        subtotal += linea
    return rows, subtotal


def _restaurar_stock(venta: Venta, motivo: str, actor) -> None:
    """Return the not-yet-returned quantity of every line to the branch."""
    deltas = [
        (d.producto_id, d.cantidad_neta)
        for d in venta.detalles.all()
        if d.cantidad_neta > ZERO
    ]
    StockService.apply_deltas(
        sucursal_id=venta.sucursal_id,
        deltas=deltas,
        motivo=motivo,
        referencia_tipo=REFERENCIA_VENTA,
        referencia_id=venta.pk,
        actor=actor,
    )


def _encolar_historial(venta: Venta, tipo: str, cambios: dict, ctx: RequestContext) -> None:
    """Queue the history entry once the surrounding transaction commits."""
    venta_id = str(venta.pk)
    usuario_id = str(ctx.actor_id) if ctx.actor_id else None

    def _enqueue():
        try:
            registrar_historial_venta.delay(venta_id, tipo, cambios, usuario_id)
        except Exception:
            logger.exception('Could not record %s history for venta=%s', tipo, venta_id)

    transaction.on_commit(_enqueue)


class VentaService:
    """Sale lifecycle and its effect on branch stock."""

    @staticmethod
    @transaction.atomic
    def create_sale(
        *,
        ctx: RequestContext,
        detalles: list[dict] | None = None,
        sucursal_id=None,
        cliente_id=None,
        metodo_pago: str = MetodoPagoChoices.EFECTIVO,
        descuento=ZERO,
        monto_pagado=None,
        fecha=None,
        notas: str = '',
    ) -> Venta:
        target = sucursal_id or ctx.sucursal_id
        if not target:
            raise ValidationError({'sucursal_id': ['A branch is required to register a sale.']})
        sucursal = SucursalService.get(target)

        cliente = None
        if cliente_id:
            try:
                cliente = Cliente.objects.vigentes().get(pk=cliente_id)
            except Cliente.DoesNotExist:
                raise NotFoundError(detail=f'Client {cliente_id} not found.')

        venta = Venta(
            numero=SecuenciaService.siguiente_numero(SECUENCIA_VENTA),
            sucursal=sucursal,
            cliente=cliente,
            fecha=fecha or timezone.now(),
            metodo_pago=metodo_pago,
            descuento=Decimal(str(descuento or 0)),
            notas=notas or '',
            created_by=ctx.actor,
        )
        rows, subtotal = _build_detalles(venta, detalles, ctx.actor)
        total = subtotal - venta.descuento
        if total < ZERO:
            raise ValidationError({'descuento': ['Discount cannot exceed the subtotal.']})

        if monto_pagado is None:
            pagado = ZERO if metodo_pago == MetodoPagoChoices.CREDITO else total
        else:
            pagado = Decimal(str(monto_pagado))
        if pagado < ZERO or pagado > total:
            raise ValidationError({'monto_pagado': ['Initial payment must be between 0 and the sale total.']})

        venta.subtotal = subtotal
        venta.total = total
        venta.total_pagado = pagado
        venta.saldo_pendiente = total - pagado
        venta.estado_pago = _estado_pago(total, pagado)
        venta.save()
        DetalleVenta.objects.bulk_create(rows)

        if pagado > ZERO:
            PagoVenta.objects.create(
                venta=venta, monto=pagado, metodo_pago=metodo_pago,
                fecha=venta.fecha, created_by=ctx.actor,
            )

        StockService.apply_deltas(
            sucursal_id=sucursal.pk,
            deltas=[(row.producto_id, -row.cantidad) for row in rows],
            motivo=MOTIVO_VENTA,
            referencia_tipo=REFERENCIA_VENTA,
            referencia_id=venta.pk,
            actor=ctx.actor,
        )

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_CREATE,
            model_name='Venta',
            object_id=str(venta.pk),
            new_values={
                'numero': venta.numero,
                'sucursal_id': str(sucursal.pk),
                'total': str(venta.total),
                'total_pagado': str(venta.total_pagado),
            },
        )
        logger.info('Venta %s created at sucursal=%s total=%s', venta.numero, sucursal.pk, venta.total)
        return venta

    @staticmethod
    @transaction.atomic
    def update_sale(
        *,
        venta_id,
        ctx: RequestContext,
        detalles: list[dict] | None = None,
        descuento=None,
        notas: str | None = None,
    ) -> Venta:
        """
        Edit an in-progress sale.

        Line item changes are diffed per product against the stored lines,
        validated against current branch stock (counting what the sale
        already holds) and applied as stock deltas before the lines are
        replaced. Sales in any other status, or with partial returns,
        cannot be edited.
        """
        venta = _lock(venta_id)
        if venta.estado != Estado.EN_CURSO:
            raise InvalidStateError(
                detail=f'Sale {venta.numero} is {venta.estado} and can no longer be edited.',
            )
        if venta.tiene_devoluciones:
            raise InvalidStateError(
                detail=f'Sale {venta.numero} has partial returns and can no longer be edited.',
            )

        actuales = list(venta.detalles.all())
        total_anterior = venta.total
        nuevo_descuento = venta.descuento if descuento is None else Decimal(str(descuento))

        cambios = []
        rows = None
        subtotal = venta.subtotal
        if detalles is not None:
            precios = {str(d.producto_id): d.precio_unitario for d in actuales}
            rows, subtotal = _build_detalles(venta, detalles, ctx.actor, precios_previos=precios)
            cambios = compute_stock_changes(
                [(d.producto_id, d.cantidad) for d in actuales],
                [(row.producto_id, row.cantidad) for row in rows],
            )

        total = subtotal - nuevo_descuento
        if total < ZERO:
            raise ValidationError({'descuento': ['Discount cannot exceed the subtotal.']})
        if total < venta.total_pagado:
            raise ValidationError({
                'total': [f'New total {total} is below the amount already paid ({venta.total_pagado}).'],
            })

        if cambios:
            validate_available_stock(cambios, sucursal_id=venta.sucursal_id)
            StockService.apply_deltas(
                sucursal_id=venta.sucursal_id,
                deltas=[(c.producto_id, c.delta) for c in cambios],
                motivo=MOTIVO_EDICION_VENTA,
                referencia_tipo=REFERENCIA_VENTA,
                referencia_id=venta.pk,
                actor=ctx.actor,
            )
        if rows is not None:
            venta.detalles.all().delete()
            DetalleVenta.objects.bulk_create(rows)

        venta.subtotal = subtotal
        venta.descuento = nuevo_descuento
        venta.total = total
        venta.saldo_pendiente = total - venta.total_pagado
        venta.estado_pago = _estado_pago(total, venta.total_pagado)
        if notas is not None:
            venta.notas = notas
        venta.updated_by = ctx.actor
        venta.save()

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='Venta',
            object_id=str(venta.pk),
            old_values={'total': str(total_anterior)},
            new_values={'total': str(total), 'cambios_stock': len(cambios)},
        )
        _encolar_historial(
            venta,
            HistorialVenta.TipoChoices.EDICION,
            {
                'total_anterior': str(total_anterior),
                'total_nuevo': str(total),
                'descuento': str(nuevo_descuento),
                'cambios_stock': [c.as_dict() for c in cambios],
                'productos_anterior': len(actuales),
                'productos_nuevo': len(rows) if rows is not None else len(actuales),
            },
            ctx,
        )
        logger.info('Venta %s edited: %d stock change(s)', venta.numero, len(cambios))
        return venta

    @staticmethod
    @transaction.atomic
    def register_payment(
        *,
        venta_id,
        monto,
        ctx: RequestContext,
        metodo_pago: str | None = None,
        notas: str = '',
    ) -> PagoVenta:
        monto = Decimal(str(monto))
        if monto <= ZERO:
            raise ValidationError({'monto': ['Payment amount must be positive.']})

        venta = _lock(venta_id)
        if venta.estado in ESTADOS_FINALES:
            raise InvalidStateError(detail=f'Sale {venta.numero} is {venta.estado}; payments are closed.')
        if monto > venta.saldo_pendiente:
            raise ValidationError({
                'monto': [f'Payment exceeds the balance due ({venta.saldo_pendiente}).'],
            })

        pago = PagoVenta.objects.create(
            venta=venta,
            monto=monto,
            metodo_pago=metodo_pago or venta.metodo_pago,
            notas=notas or '',
            created_by=ctx.actor,
        )
        venta.total_pagado += monto
        venta.saldo_pendiente = venta.total - venta.total_pagado
        venta.estado_pago = _estado_pago(venta.total, venta.total_pagado)
        venta.updated_by = ctx.actor
        venta.save(update_fields=['total_pagado', 'saldo_pendiente', 'estado_pago', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_CREATE,
            model_name='PagoVenta',
            object_id=str(pago.pk),
            new_values={'venta_id': str(venta.pk), 'monto': str(monto), 'saldo': str(venta.saldo_pendiente)},
        )
        return pago

    @staticmethod
    @transaction.atomic
    def change_status(*, venta_id, estado: str, ctx: RequestContext) -> Venta:
        """Move a sale along its lifecycle; cancel and return give stock back."""
        if estado not in Estado.values:
            raise ValidationError({'estado': [f'Invalid status: {estado}.']})

        venta = _lock(venta_id)
        _assert_transition(venta, estado)

        if estado in MOTIVO_POR_ESTADO:
            _restaurar_stock(venta, MOTIVO_POR_ESTADO[estado], ctx.actor)

        old_estado = venta.estado
        venta.estado = estado
        venta.updated_by = ctx.actor
        venta.save(update_fields=['estado', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='Venta',
            object_id=str(venta.pk),
            old_values={'estado': old_estado},
            new_values={'estado': estado},
        )
        return venta

    @staticmethod
    @transaction.atomic
    def partial_return(*, venta_id, items: list[dict], ctx: RequestContext, motivo: str = '') -> Venta:
        """
        Return part of a sale. Each item is {producto_id, cantidad}; the
        quantity may not exceed what was sold minus what was already
        returned for that product.
        """
        if not items:
            raise ValidationError({'productos': ['At least one product is required.']})

        venta = _lock(venta_id)
        if venta.estado in ESTADOS_FINALES:
            raise InvalidStateError(detail=f'Sale {venta.numero} is {venta.estado}.')

        lineas = {}
        for detalle in venta.detalles.select_for_update():
            lineas.setdefault(str(detalle.producto_id), []).append(detalle)

        deltas = []
        devuelto = []
        monto = ZERO
        for item in items:
            key = str(item['producto_id'])
            cantidad = Decimal(str(item['cantidad']))
            if cantidad <= ZERO:
                raise ValidationError({'productos': [f'Quantity for product {key} must be positive.']})
            detalles = lineas.get(key)
            if not detalles:
                raise ValidationError({'productos': [f'Product {key} is not part of sale {venta.numero}.']})
            pendiente = sum((d.cantidad_neta for d in detalles), ZERO)
            if cantidad > pendiente:
                raise ValidationError({
                    'productos': [f'Cannot return {cantidad} of product {key}; only {pendiente} left.'],
                })

            restante = cantidad
            for detalle in detalles:
                if restante <= ZERO:
                    break
                parte = min(restante, detalle.cantidad_neta)
                if parte <= ZERO:
                    continue
                detalle.cantidad_devuelta += parte
                detalle.save(update_fields=['cantidad_devuelta', 'updated_at'])
                monto += (parte * detalle.precio_unitario).quantize(CENT)
                restante -= parte
            deltas.append((detalles[0].producto_id, cantidad))
            devuelto.append({'producto_id': key, 'cantidad': str(cantidad)})

        StockService.apply_deltas(
            sucursal_id=venta.sucursal_id,
            deltas=deltas,
            motivo=MOTIVO_DEVOLUCION_PARCIAL,
            referencia_tipo=REFERENCIA_VENTA,
            referencia_id=venta.pk,
            actor=ctx.actor,
        )

        old_estado = venta.estado
        venta.monto_devuelto += monto
        if all(d.cantidad_neta <= ZERO for grupo in lineas.values() for d in grupo):
            venta.estado = Estado.DEVUELTA
        venta.updated_by = ctx.actor
        venta.save(update_fields=['monto_devuelto', 'estado', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='Venta',
            object_id=str(venta.pk),
            old_values={'estado': old_estado},
            new_values={'estado': venta.estado, 'monto_devuelto': str(venta.monto_devuelto)},
        )
        _encolar_historial(
            venta,
            HistorialVenta.TipoChoices.DEVOLUCION_PARCIAL,
            {'productos': devuelto, 'monto': str(monto), 'motivo': motivo or ''},
            ctx,
        )
        return venta

    @staticmethod
    @transaction.atomic
    def delete_sale(*, venta_id, ctx: RequestContext, motivo: str = '') -> None:
        venta = _lock(venta_id)
        if venta.estado not in ESTADOS_FINALES:
            _restaurar_stock(venta, MOTIVO_ELIMINACION_VENTA, ctx.actor)

        venta.motivo_eliminacion = motivo or ''
        venta.save(update_fields=['motivo_eliminacion', 'updated_at'])
        venta.soft_delete(user=ctx.actor)

        AuditService.log(
            actor=ctx.actor,
            action=AUDIT_ACTION_SOFT_DELETE,
            model_name='Venta',
            object_id=str(venta.pk),
            old_values={'estado': venta.estado, 'total': str(venta.total)},
            new_values={'motivo': venta.motivo_eliminacion},
        )
        logger.info('Venta %s deleted: %s', venta.numero, venta.motivo_eliminacion or '-')

    @staticmethod
    def search(termino: str, sucursal_id=None):
        qs = (
            Venta.objects.vigentes()
            .filter(Q(numero__icontains=termino) | Q(cliente__nombre__icontains=termino))
            .select_related('cliente', 'sucursal')
        )
        if sucursal_id:
            qs = qs.filter(sucursal_id=sucursal_id)
        return qs.order_by('-fecha')

    @staticmethod
    def daily_stats(*, fecha=None, sucursal_id=None) -> dict:
        fecha = fecha or timezone.localdate()
        ventas = (
            Venta.objects.vigentes().filter(fecha__date=fecha)
            .exclude(estado=Estado.CANCELADA)
        )
        pagos = PagoVenta.objects.filter(
            fecha__date=fecha,
            venta__is_deleted=False,
        ).exclude(venta__estado=Estado.CANCELADA)
        if sucursal_id:
            ventas = ventas.filter(sucursal_id=sucursal_id)
            pagos = pagos.filter(venta__sucursal_id=sucursal_id)

        agregados = ventas.aggregate(
            total_ventas=Count('id'),
            monto_total=Sum('total'),
            saldo_pendiente_total=Sum('saldo_pendiente'),
            ventas_con_saldo_pendiente=Count('id', filter=Q(saldo_pendiente__gt=0)),
            clientes_atendidos=Count('cliente', distinct=True),
        )
        por_metodo = {metodo: ZERO for metodo in MetodoPagoChoices.values}
        for row in ventas.values('metodo_pago').annotate(monto=Sum('total')):
            por_metodo[row['metodo_pago']] = row['monto'] or ZERO

        total_ventas = agregados['total_ventas']
        monto_total = agregados['monto_total'] or ZERO
        return {
            'fecha': fecha.isoformat(),
            'sucursal_id': str(sucursal_id) if sucursal_id else None,
            'total_ventas': total_ventas,
            'monto_total': monto_total,
            'por_metodo_pago': por_metodo,
            'clientes_atendidos': agregados['clientes_atendidos'],
            'promedio_venta': (monto_total / total_ventas).quantize(CENT) if total_ventas else ZERO,
            'total_pagado_hoy': pagos.aggregate(total=Sum('monto'))['total'] or ZERO,
            'saldo_pendiente_total': agregados['saldo_pendiente_total'] or ZERO,
            'ventas_con_saldo_pendiente': agregados['ventas_con_saldo_pendiente'],
        }
