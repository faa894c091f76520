"""
Users — Signals

Account changes are audited; role and branch reassignments are also
logged since they change what the user can sell and where.

@file users/signals.py
"""

import logging

from core.signals import audit_model_changes
from users.models import User

logger = logging.getLogger('despensa')


def _log_access_change(instance, old, new):
    for field in ('rol', 'sucursal', 'is_active'):
        if old.get(field) != new.get(field):
            logger.info('User %s %s: %s -> %s', instance.email, field, old.get(field), new.get(field))


audit_model_changes(User, exclude=['password', 'last_login'], on_change=_log_access_change)
