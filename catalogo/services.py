"""
Catalogo — Service Layer

@file catalogo/services.py
"""

import logging

from django.db import transaction

from core.constants import AUDIT_ACTION_DELETE
from core.exceptions import BusinessRuleViolation, NotFoundError
from core.services import AuditService

from .models import Categoria, Producto

logger = logging.getLogger('despensa')


class CategoriaService:

    @staticmethod
    @transaction.atomic
    def delete_category(*, categoria_id, actor=None) -> None:
        """Categories referenced by any product cannot be removed."""
        try:
            categoria = Categoria.objects.select_for_update().get(pk=categoria_id)
        except Categoria.DoesNotExist:
            raise NotFoundError(detail='Category not found.')

        en_uso = Producto.objects.vigentes().filter(categoria=categoria).count()
        if en_uso:
            raise BusinessRuleViolation(
                detail=f'Category "{categoria.nombre}" has {en_uso} product(s) and cannot be deleted.',
            )

        snapshot = AuditService.snapshot(categoria)
        categoria_pk = categoria.pk
        # Soft-deleted products still hold the FK; detach them first.
        Producto.objects.filter(categoria=categoria).update(categoria=None)
        categoria.delete()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DELETE,
            model_name='Categoria',
            object_id=str(categoria_pk),
            old_values=snapshot,
        )


class ProductoService:

    @staticmethod
    def get_active(producto_id) -> Producto:
        try:
            return Producto.objects.vigentes().get(pk=producto_id)
        except Producto.DoesNotExist:
            raise NotFoundError(detail=f'Product {producto_id} not found.')

    @staticmethod
    def get_many(producto_ids) -> dict:
        """Map id -> Producto for every requested id; NotFoundError lists the missing ones."""
        ids = {str(pid) for pid in producto_ids}
        productos = {
            str(p.pk): p
            for p in Producto.objects.vigentes().filter(pk__in=ids)
        }
        missing = sorted(ids - set(productos))
        if missing:
            raise NotFoundError(detail=f'Products not found: {", ".join(missing)}.')
        return productos
