"""
Tests — per-product stock deltas for sale edits and the availability
check that counts the quantity a sale already holds.

@file ventas/tests/test_reconciliation.py
"""

import uuid
from decimal import Decimal

import pytest

from core.exceptions import InsufficientStockError
from stock.services import StockService
from tests.factories import ProductoFactory, SucursalFactory
from ventas.reconciliation import CambioStock, compute_stock_changes, validate_available_stock

A = uuid.UUID('00000000-0000-0000-0000-00000000000a')
B = uuid.UUID('00000000-0000-0000-0000-00000000000b')
C = uuid.UUID('00000000-0000-0000-0000-00000000000c')


class TestComputeStockChanges:

    def test_increase_is_reduction(self):
        [cambio] = compute_stock_changes([(A, 3)], [(A, 7)])
        assert cambio.delta == Decimal('-4')
        assert cambio.tipo_cambio == 'reduccion'
        assert cambio.cantidad_cambio == Decimal('4')

    def test_decrease_is_return(self):
        [cambio] = compute_stock_changes([(A, 5)], [(A, 2)])
        assert cambio.delta == Decimal('3')
        assert cambio.tipo_cambio == 'devolucion'

    def test_removed_and_added_products(self):
        cambios = compute_stock_changes([(A, 2), (B, 4)], [(B, 4), (C, 1)])
        by_id = {c.producto_id: c for c in cambios}
        assert set(by_id) == {str(A), str(C)}
        assert by_id[str(A)].delta == Decimal('2')
        assert by_id[str(C)].delta == Decimal('-1')

    def test_unchanged_yields_nothing(self):
        assert compute_stock_changes([(A, 2), (B, 1)], [(B, 1), (A, 2)]) == []

    def test_duplicate_lines_are_summed(self):
        [cambio] = compute_stock_changes([(A, 1), (A, 2)], [(A, 5)])
        assert cambio.cantidad_original == Decimal('3')
        assert cambio.delta == Decimal('-2')

    def test_as_dict(self):
        cambio = CambioStock(str(A), Decimal('3'), Decimal('7'))
        assert cambio.as_dict() == {
            'producto_id': str(A),
            'cantidad_original': '3',
            'cantidad_nueva': '7',
            'tipo_cambio': 'reduccion',
            'cantidad_cambio': '4',
        }


@pytest.mark.django_db
class TestValidateAvailableStock:

    def _seed(self, cantidad):
        producto = ProductoFactory()
        sucursal = SucursalFactory()
        StockService.apply_delta(
            producto_id=producto.pk, sucursal_id=sucursal.pk,
            cantidad=cantidad, motivo='Carga inicial',
        )
        return producto, sucursal

    def test_reserved_quantity_counts_as_available(self):
        producto, sucursal = self._seed(Decimal('10'))
        cambios = [CambioStock(producto.pk, Decimal('3'), Decimal('13'))]
        validate_available_stock(cambios, sucursal_id=sucursal.pk)

    def test_above_available_fails_with_context(self):
        producto, sucursal = self._seed(Decimal('10'))
        cambios = [CambioStock(producto.pk, Decimal('3'), Decimal('20'))]
        with pytest.raises(InsufficientStockError) as excinfo:
            validate_available_stock(cambios, sucursal_id=sucursal.pk)
        assert excinfo.value.disponible == Decimal('13')
        assert excinfo.value.solicitado == Decimal('20')

    def test_returns_are_not_checked(self):
        producto, sucursal = self._seed(Decimal('1'))
        validate_available_stock(
            [CambioStock(producto.pk, Decimal('9'), Decimal('0'))], sucursal_id=sucursal.pk,
        )
