"""
Users — Service Layer

Account management and auth event logging.

@file users/services.py
"""

import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from core.constants import AUDIT_ACTION_UPDATE
from core.exceptions import NotFoundError
from core.services import AuditService

from .models import User

logger = logging.getLogger('despensa')


class UserService:
    """CRUD for operator accounts."""

    @staticmethod
    @transaction.atomic
    def create_user(*, email: str, password: str | None = None, actor=None, **extra_fields) -> User:
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError({'email': [f'Email {email} already registered.']})

        user = User(email=User.objects.normalize_email(email), created_by=actor, **extra_fields)
        user._current_user = actor
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save()
        return user

    @staticmethod
    @transaction.atomic
    def update_user(*, user_id, actor=None, password: str | None = None, **fields) -> User:
        try:
            user = User.objects.select_for_update().get(pk=user_id, is_deleted=False)
        except User.DoesNotExist:
            raise NotFoundError(detail='User not found.')

        old_snapshot = AuditService.snapshot(user, exclude=['password'])

        for field, value in fields.items():
            if hasattr(user, field) and field not in ('id', 'pk', 'password'):
                setattr(user, field, value)
        if password:
            user.set_password(password)

        user.updated_by = actor
        user._current_user = actor
        user.save()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='User',
            object_id=str(user.pk),
            old_values=old_snapshot,
            new_values=AuditService.snapshot(user, exclude=['password']),
        )
        return user


class AuthService:

    @staticmethod
    def log_auth_event(*, action: str, user=None, ip_address=None, user_agent=''):
        AuditService.log(
            actor=user,
            action=action,
            model_name='User',
            object_id=str(user.pk) if user else '',
            ip_address=ip_address,
            user_agent=user_agent,
        )
