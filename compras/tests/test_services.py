"""
Tests — CompraService: create, update, receive (one-time stock credit),
status changes and deletion.

@file compras/tests/test_services.py
"""

import uuid
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from compras.models import Compra
from compras.services import CompraService
from core.context import RequestContext
from core.exceptions import AlreadyProcessedError, InvalidStateError, NoBranchError, NotFoundError
from stock.models import MovimientoStock
from stock.services import StockService
from tests.factories import (
    CompraFactory,
    DetalleCompraFactory,
    ProductoFactory,
    ProveedorFactory,
    SucursalFactory,
)


pytestmark = pytest.mark.django_db


def _compra_con_linea(sucursal, cantidad=Decimal('5'), **kwargs):
    compra = CompraFactory(sucursal=sucursal, **kwargs)
    detalle = DetalleCompraFactory(compra=compra, cantidad=cantidad)
    return compra, detalle.producto


class TestCreatePurchase:

    def test_create_pending_purchase(self, ctx):
        producto = ProductoFactory()
        compra = CompraService.create_purchase(
            ctx=ctx,
            proveedor_id=ProveedorFactory().pk,
            detalles=[{'producto_id': producto.pk, 'cantidad': 4, 'precio_unitario': Decimal('50')}],
            impuestos=Decimal('42'),
        )
        assert compra.numero == 'COMP-000001'
        assert compra.estado == Compra.EstadoChoices.PENDIENTE
        assert compra.subtotal == Decimal('200.00')
        assert compra.total == Decimal('242.00')
        assert compra.sucursal_id == ctx.sucursal_id
        assert StockService.get_stock(producto.pk, ctx.sucursal_id) == 0

    def test_price_defaults_to_cost(self, ctx):
        producto = ProductoFactory(precio_costo=Decimal('75'))
        compra = CompraService.create_purchase(
            ctx=ctx,
            proveedor_id=ProveedorFactory().pk,
            detalles=[{'producto_id': producto.pk, 'cantidad': 2}],
        )
        assert compra.detalles.get().precio_unitario == Decimal('75')

    def test_supplier_required(self, ctx):
        with pytest.raises(ValidationError):
            CompraService.create_purchase(
                ctx=ctx, detalles=[{'producto_id': ProductoFactory().pk, 'cantidad': 1}],
            )

    def test_lines_required(self, ctx):
        with pytest.raises(ValidationError):
            CompraService.create_purchase(ctx=ctx, proveedor_id=ProveedorFactory().pk, detalles=[])

    def test_unknown_supplier(self, ctx):
        with pytest.raises(NotFoundError):
            CompraService.create_purchase(
                ctx=ctx,
                proveedor_id=uuid.uuid4(),
                detalles=[{'producto_id': ProductoFactory().pk, 'cantidad': 1}],
            )

    def test_create_as_received_credits_stock(self, ctx):
        producto = ProductoFactory()
        compra = CompraService.create_purchase(
            ctx=ctx,
            proveedor_id=ProveedorFactory().pk,
            detalles=[{'producto_id': producto.pk, 'cantidad': 6}],
            estado=Compra.EstadoChoices.RECIBIDA,
        )
        assert compra.estado == Compra.EstadoChoices.RECIBIDA
        assert StockService.get_stock(producto.pk, ctx.sucursal_id) == Decimal('6')


class TestReceivePurchase:

    def test_round_trip_credits_stock_once(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal, Decimal('5'))
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)

        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('5')
        movimientos = MovimientoStock.objects.filter(referencia_tipo='compra', referencia_id=compra.pk)
        assert movimientos.count() == 1
        movimiento = movimientos.get()
        assert movimiento.motivo == 'Recepción de compra'
        assert movimiento.tipo == MovimientoStock.TipoChoices.ENTRADA
        assert movimiento.cantidad == Decimal('5')

        compra.refresh_from_db()
        assert compra.estado == Compra.EstadoChoices.RECIBIDA
        assert compra.fecha_recepcion is not None
        assert compra.recibida_por == ctx.actor

    def test_one_entry_per_line(self, ctx, sucursal):
        compra = CompraFactory(sucursal=sucursal)
        cantidades = {}
        for cantidad in (Decimal('2'), Decimal('7'), Decimal('12')):
            detalle = DetalleCompraFactory(compra=compra, cantidad=cantidad)
            cantidades[detalle.producto_id] = cantidad

        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)

        movimientos = MovimientoStock.objects.filter(referencia_tipo='compra', referencia_id=compra.pk)
        assert movimientos.count() == 3
        for movimiento in movimientos:
            assert movimiento.tipo == MovimientoStock.TipoChoices.ENTRADA
            assert movimiento.cantidad == cantidades[movimiento.producto_id]
        for producto_id, cantidad in cantidades.items():
            assert StockService.get_stock(producto_id, sucursal.pk) == cantidad

    def test_second_receipt_rejected_and_stock_unchanged(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal, Decimal('5'))
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)

        with pytest.raises(AlreadyProcessedError):
            CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('5')
        assert MovimientoStock.objects.filter(referencia_id=compra.pk).count() == 1

    def test_completed_purchase_rejected(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal, estado=Compra.EstadoChoices.COMPLETADA)
        with pytest.raises(AlreadyProcessedError):
            CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        assert StockService.get_stock(producto.pk, sucursal.pk) == 0

    def test_cancelled_purchase_rejected(self, ctx, sucursal):
        compra, _ = _compra_con_linea(sucursal, estado=Compra.EstadoChoices.CANCELADA)
        with pytest.raises(InvalidStateError):
            CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)

    def test_purchase_without_lines_rejected(self, ctx, sucursal):
        compra = CompraFactory(sucursal=sucursal)
        with pytest.raises(ValidationError):
            CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)

    def test_missing_branch_falls_back_to_principal(self, ctx, sucursal):
        compra, producto = _compra_con_linea(None, Decimal('3'))
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        compra.refresh_from_db()
        assert compra.sucursal == sucursal
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('3')

    def test_no_branch_at_all(self):
        SucursalFactory()
        compra, _ = _compra_con_linea(None)
        with pytest.raises(NoBranchError):
            CompraService.receive_purchase(compra_id=compra.pk, ctx=RequestContext())
        compra.refresh_from_db()
        assert compra.estado == Compra.EstadoChoices.PENDIENTE
        assert not MovimientoStock.objects.exists()


class TestStatusAndUpdates:

    def test_received_to_completed_moves_no_stock(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal, Decimal('5'))
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        compra = CompraService.change_status(compra_id=compra.pk, estado='completada', ctx=ctx)
        assert compra.estado == Compra.EstadoChoices.COMPLETADA
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('5')

    def test_status_to_received_runs_receipt(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal, Decimal('2'))
        CompraService.change_status(compra_id=compra.pk, estado='recibida', ctx=ctx)
        assert StockService.get_stock(producto.pk, sucursal.pk) == Decimal('2')

    def test_received_to_received_is_already_processed(self, ctx, sucursal):
        compra, _ = _compra_con_linea(sucursal)
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        with pytest.raises(AlreadyProcessedError):
            CompraService.change_status(compra_id=compra.pk, estado='recibida', ctx=ctx)

    def test_cancelled_is_terminal(self, ctx, sucursal):
        compra, _ = _compra_con_linea(sucursal)
        CompraService.change_status(compra_id=compra.pk, estado='cancelada', ctx=ctx)
        with pytest.raises(InvalidStateError):
            CompraService.change_status(compra_id=compra.pk, estado='pendiente', ctx=ctx)

    def test_lines_frozen_after_receipt(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal)
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        with pytest.raises(InvalidStateError):
            CompraService.update_purchase(
                compra_id=compra.pk, ctx=ctx,
                detalles=[{'producto_id': producto.pk, 'cantidad': 50}],
            )

    def test_update_pending_lines(self, ctx, sucursal):
        compra, producto = _compra_con_linea(sucursal)
        compra = CompraService.update_purchase(
            compra_id=compra.pk, ctx=ctx,
            detalles=[{'producto_id': producto.pk, 'cantidad': 10, 'precio_unitario': Decimal('10')}],
            notas='Ajustado',
        )
        assert compra.total == Decimal('100.00')
        assert compra.notas == 'Ajustado'
        assert compra.detalles.count() == 1

    def test_delete_received_rejected(self, ctx, sucursal):
        compra, _ = _compra_con_linea(sucursal)
        CompraService.receive_purchase(compra_id=compra.pk, ctx=ctx)
        with pytest.raises(InvalidStateError):
            CompraService.delete_purchase(compra_id=compra.pk, ctx=ctx)

    def test_delete_pending_is_soft(self, ctx, sucursal):
        compra, _ = _compra_con_linea(sucursal)
        CompraService.delete_purchase(compra_id=compra.pk, ctx=ctx)
        compra.refresh_from_db()
        assert compra.is_deleted is True
