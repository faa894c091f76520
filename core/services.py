"""
Core — Shared Services

AuditService writes audit log entries from any app; SecuenciaService
hands out gap-free document numbers (V-000001, COMP-000001).

@file core/services.py
"""

import logging
from decimal import Decimal
from typing import Any

from django.db import transaction
from django.forms.models import model_to_dict

from core.models import AuditLog, Secuencia

logger = logging.getLogger('despensa')


class AuditService:
    """Centralised audit logging for every write operation."""

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str = '',
    ) -> AuditLog:
        return AuditLog.objects.create(
            actor=actor if getattr(actor, 'is_authenticated', False) else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @staticmethod
    def snapshot(instance, fields=None, exclude=None) -> dict[str, Any]:
        """
        Serialise a model instance to a plain dict suitable for JSON
        storage. Decimals and UUIDs are stringified, datetimes ISO-formatted,
        M2M values reduced to lists of PKs.
        """
        data = model_to_dict(instance, fields=fields, exclude=exclude)
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                cleaned[key] = None
            elif isinstance(value, Decimal):
                cleaned[key] = str(value)
            elif hasattr(value, 'isoformat'):
                cleaned[key] = value.isoformat()
            elif hasattr(value, 'hex'):
                cleaned[key] = str(value)
            elif hasattr(value, 'all'):
                cleaned[key] = [str(obj.pk) for obj in value.all()]
            elif isinstance(value, (list, tuple)):
                cleaned[key] = [str(v.pk) if hasattr(v, 'pk') else v for v in value]
            else:
                cleaned[key] = value
        return cleaned

    @staticmethod
    def get_client_ip(request) -> str | None:
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')


class SecuenciaService:

    @staticmethod
    @transaction.atomic
    def siguiente(nombre: str) -> int:
        """Increment and return the named counter under a row lock."""
        secuencia, _ = Secuencia.objects.select_for_update().get_or_create(nombre=nombre)
        secuencia.valor += 1
        secuencia.save(update_fields=['valor'])
        return secuencia.valor

    @staticmethod
    def siguiente_numero(secuencia: tuple[str, str]) -> str:
        nombre, prefijo = secuencia
        return f'{prefijo}-{SecuenciaService.siguiente(nombre):06d}'
