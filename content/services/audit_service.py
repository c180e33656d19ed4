from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Type

from asgiref.local import Local
from django.contrib.contenttypes.models import ContentType
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.db.models.signals import post_delete, post_save, pre_save

from ..models import AuditLog

logger = logging.getLogger(__name__)

EXCLUDED_FIELDS = {"password"}
_STORED_ATTR = "_audit_stored_values"
_MISSING = object()

_request_context = Local()


def set_request_context(user_id=None, ip_address=None, user_agent=""):
    _request_context.user_id = user_id
    _request_context.ip_address = ip_address
    _request_context.user_agent = user_agent


def clear_request_context():
    for attr in ("user_id", "ip_address", "user_agent"):
        if hasattr(_request_context, attr):
            delattr(_request_context, attr)


def get_request_context() -> Dict[str, Any]:
    return {
        "user_id": getattr(_request_context, "user_id", None),
        "ip_address": getattr(_request_context, "ip_address", None),
        "user_agent": getattr(_request_context, "user_agent", "") or "",
    }


def _raw_values(instance, attnames=None) -> Dict[str, Any]:
    values = {}
    for field in instance._meta.concrete_fields:
        if field.attname in EXCLUDED_FIELDS:
            continue
        if attnames is not None and field.attname not in attnames:
            continue
        value = instance.__dict__.get(field.attname, _MISSING)
        if value is not _MISSING:
            values[field.attname] = value
    return values


def _json_safe(values: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(json.dumps(values, cls=DjangoJSONEncoder))


def _written_attnames(instance, update_fields=None):
    """Attribute names a save will write, minus excluded and deferred fields."""
    deferred = instance.get_deferred_fields()
    attnames = []
    for field in instance._meta.concrete_fields:
        if field.primary_key or field.attname in EXCLUDED_FIELDS or field.attname in deferred:
            continue
        if update_fields is not None and not {field.name, field.attname} & set(update_fields):
            continue
        attnames.append(field.attname)
    return attnames


class AuditService:
    @staticmethod
    def load_stored(instance, update_fields=None) -> Optional[Dict[str, Any]]:
        """Read the persisted values of the fields this save will write."""
        attnames = _written_attnames(instance, update_fields)
        if not attnames:
            return {}
        row = type(instance)._base_manager.filter(pk=instance.pk).values(*attnames).first()
        return _json_safe(row) if row is not None else None

    @staticmethod
    def changes(instance, stored: Dict[str, Any]):
        """Return ``(old, new)`` dicts limited to fields that differ from ``stored``."""
        current = _json_safe(_raw_values(instance, stored.keys()))
        old, new = {}, {}
        for key, value in current.items():
            if stored[key] != value:
                old[key] = stored[key]
                new[key] = value
        return old, new

    @staticmethod
    def record(action: str, instance, old_values=None, new_values=None) -> AuditLog:
        context = get_request_context()
        entry = AuditLog.objects.create(
            user_id=context["user_id"],
            action=action,
            auditable_type=ContentType.objects.get_for_model(instance),
            auditable_id=str(instance.pk),
            old_values=old_values or {},
            new_values=new_values or {},
            ip_address=context["ip_address"],
            user_agent=context["user_agent"],
        )
        logger.debug(f"Audit {action} {instance._meta.label}#{instance.pk}")
        return entry


def _on_pre_save(sender, instance, raw=False, update_fields=None, **kwargs):
    instance.__dict__.pop(_STORED_ATTR, None)
    if raw or instance._state.adding or instance.pk is None:
        return
    instance.__dict__[_STORED_ATTR] = AuditService.load_stored(instance, update_fields)


def _on_post_save(sender, instance, created, raw=False, **kwargs):
    stored = instance.__dict__.pop(_STORED_ATTR, None)
    if raw:
        return
    if created or stored is None:
        AuditService.record(
            AuditLog.Action.CREATED, instance, new_values=_json_safe(_raw_values(instance))
        )
        return
    old, new = AuditService.changes(instance, stored)
    if new:
        AuditService.record(AuditLog.Action.UPDATED, instance, old_values=old, new_values=new)


def _on_post_delete(sender, instance, **kwargs):
    AuditService.record(
        AuditLog.Action.DELETED, instance, old_values=_json_safe(_raw_values(instance))
    )


def register_audited(model: Type[models.Model]) -> None:
    uid = f"content.audit.{model._meta.label_lower}"
    pre_save.connect(_on_pre_save, sender=model, dispatch_uid=f"{uid}.pre_save")
    post_save.connect(_on_post_save, sender=model, dispatch_uid=f"{uid}.post_save")
    post_delete.connect(_on_post_delete, sender=model, dispatch_uid=f"{uid}.post_delete")
