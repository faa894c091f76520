"""
Core — Request Context

Explicit (actor, branch) pair handed to every service call that touches
stock. Views build it once from the authenticated user and the
`X-Sucursal-Id` header; services never look at the request themselves.

@file core/context.py
"""

import uuid
from dataclasses import dataclass
from typing import Any

from rest_framework.exceptions import ValidationError

from core.constants import SUCURSAL_HEADER


@dataclass(frozen=True)
class RequestContext:
    actor: Any = None
    sucursal_id: uuid.UUID | None = None

    @property
    def actor_id(self):
        return getattr(self.actor, 'pk', None)

    @property
    def is_admin(self) -> bool:
        return bool(getattr(self.actor, 'es_administrador', False))

    def with_sucursal(self, sucursal_id) -> 'RequestContext':
        return RequestContext(actor=self.actor, sucursal_id=_parse_uuid(sucursal_id))

    @classmethod
    def from_request(cls, request, sucursal_id=None) -> 'RequestContext':
        """
        Branch precedence: explicit argument, then the X-Sucursal-Id
        header, then the user's default branch.
        """
        user = request.user if request.user and request.user.is_authenticated else None
        raw = sucursal_id or request.META.get(SUCURSAL_HEADER) or None
        if raw is None and user is not None:
            raw = getattr(user, 'sucursal_id', None)
        return cls(actor=user, sucursal_id=_parse_uuid(raw))


def _parse_uuid(value) -> uuid.UUID | None:
    if value in (None, ''):
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError({'sucursal_id': ['Invalid branch identifier.']})
