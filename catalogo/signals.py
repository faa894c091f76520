"""
Catalogo — Signals

Product edits are audited; price changes are also logged.

@file catalogo/signals.py
"""

import logging

from core.signals import audit_model_changes

from .models import Producto

logger = logging.getLogger('despensa')


def _log_price_change(instance, old, new):
    for field in ('precio_costo', 'precio_venta'):
        if old.get(field) != new.get(field):
            logger.info('Producto %s %s %s -> %s', instance.codigo, field, old.get(field), new.get(field))


audit_model_changes(Producto, on_change=_log_price_change)
