"""
Ventas — Stock Reconciliation

Turns an edit of a sale's line items into per-product stock deltas and
checks them against the branch before anything is written.

Quantities already held by the sale count as available to the same sale:
raising a line from 3 to 7 with 10 on hand needs 7 <= 10 + 3.

@file ventas/reconciliation.py
"""

from dataclasses import dataclass
from decimal import Decimal

from core.exceptions import InsufficientStockError
from stock.services import StockService

ZERO = Decimal('0')

TIPO_DEVOLUCION = 'devolucion'
TIPO_REDUCCION = 'reduccion'


@dataclass(frozen=True)
class CambioStock:
    producto_id: object
    cantidad_original: Decimal
    cantidad_nueva: Decimal

    @property
    def delta(self) -> Decimal:
        """Positive restores stock to the branch, negative consumes it."""
        return self.cantidad_original - self.cantidad_nueva

    @property
    def tipo_cambio(self) -> str:
        return TIPO_DEVOLUCION if self.delta > ZERO else TIPO_REDUCCION

    @property
    def cantidad_cambio(self) -> Decimal:
        return abs(self.delta)

    def as_dict(self) -> dict:
        return {
            'producto_id': str(self.producto_id),
            'cantidad_original': str(self.cantidad_original),
            'cantidad_nueva': str(self.cantidad_nueva),
            'tipo_cambio': self.tipo_cambio,
            'cantidad_cambio': str(self.cantidad_cambio),
        }


def _sum_by_product(lineas) -> dict:
    totales = {}
    for producto_id, cantidad in lineas:
        key = str(producto_id)
        totales[key] = totales.get(key, ZERO) + Decimal(str(cantidad))
    return totales


def compute_stock_changes(originales, nuevos) -> list[CambioStock]:
    """
    Diff two iterables of (producto_id, cantidad) keyed by product.

    Removed products restore their whole quantity, added products consume
    theirs, changed ones move by the difference. Unchanged products yield
    no entry. Output is ordered by product id.
    """
    antes = _sum_by_product(originales)
    despues = _sum_by_product(nuevos)
    cambios = []
    for producto_id in sorted(antes.keys() | despues.keys()):
        original = antes.get(producto_id, ZERO)
        nueva = despues.get(producto_id, ZERO)
        if original != nueva:
            cambios.append(CambioStock(producto_id, original, nueva))
    return cambios


def validate_available_stock(cambios, *, sucursal_id) -> None:
    """Raise InsufficientStockError on the first reduction the branch cannot cover."""
    for cambio in cambios:
        if cambio.tipo_cambio != TIPO_REDUCCION:
            continue
        actual = StockService.get_stock(cambio.producto_id, sucursal_id)
        disponible = actual + cambio.cantidad_original
        if cambio.cantidad_nueva > disponible:
            raise InsufficientStockError(
                producto_id=cambio.producto_id,
                disponible=disponible,
                solicitado=cambio.cantidad_nueva,
            )
