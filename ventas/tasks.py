"""
Ventas — Celery Tasks

@file ventas/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('despensa')


@shared_task(name='ventas.registrar_historial_venta')
def registrar_historial_venta(venta_id, tipo, cambios, usuario_id=None):
    """
    Append one HistorialVenta row. Queued on commit after an edit or a
    partial return; the sale itself is already persisted.
    """
    from .models import HistorialVenta

    entrada = HistorialVenta.objects.create(
        venta_id=venta_id,
        tipo=tipo,
        cambios=cambios,
        usuario_id=usuario_id,
    )
    logger.info('HistorialVenta %s recorded for venta=%s (%s)', entrada.pk, venta_id, tipo)
    return str(entrada.pk)
