"""
Core — Audited Model Signals

`audit_model_changes(Model)` connects pre_save / post_save receivers that
write one CREATE or UPDATE AuditLog row per effective change. Saves that
change nothing are skipped. The acting user is read from
`instance._current_user` when the caller set it.

@file core/signals.py
"""

from django.db.models.signals import post_save, pre_save

from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_UPDATE
from core.services import AuditService


def audit_model_changes(model, *, exclude=(), on_change=None):
    """
    Audit every save of `model`.

    exclude: fields kept out of the snapshots (hashes, timestamps).
    on_change: optional callable(instance, old, new) run after an UPDATE
    row is written, with both snapshots.
    """
    exclude = list(exclude)
    pending: dict[str, dict] = {}
    uid = f'audit-{model._meta.label_lower}'

    def _pre_save(sender, instance, raw=False, **kwargs):
        if raw or instance._state.adding:
            return
        old = sender.objects.filter(pk=instance.pk).first()
        if old is not None:
            pending[str(instance.pk)] = AuditService.snapshot(old, exclude=exclude)

    def _post_save(sender, instance, created, raw=False, **kwargs):
        if raw:
            return
        old = pending.pop(str(instance.pk), None)
        new = AuditService.snapshot(instance, exclude=exclude)
        if not created and old == new:
            return
        AuditService.log(
            actor=getattr(instance, '_current_user', None),
            action=AUDIT_ACTION_CREATE if created else AUDIT_ACTION_UPDATE,
            model_name=sender.__name__,
            object_id=str(instance.pk),
            old_values=old,
            new_values=new,
        )
        if on_change is not None and old is not None:
            on_change(instance, old, new)

    pre_save.connect(_pre_save, sender=model, weak=False, dispatch_uid=uid)
    post_save.connect(_post_save, sender=model, weak=False, dispatch_uid=uid)
