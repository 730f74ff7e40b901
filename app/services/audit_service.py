"""Audit log helpers."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from app.models import AuditLog, User

SKIPPED_COLUMNS: set[str] = {"created_at", "updated_at", "deleted_at"}


def snapshot(instance: Any | None) -> dict[str, Any] | None:
    """Return JSON-safe column values of an ORM instance."""
    if instance is None:
        return None
    values = {
        attr.key: getattr(instance, attr.key)
        for attr in inspect(instance).mapper.column_attrs
        if attr.key not in SKIPPED_COLUMNS
    }
    return jsonable_encoder(values)


def log_action(
    db: Session,
    *,
    actor: User | None,
    action_type: str,
    company_id: int | None = None,
    entity_id: int | None = None,
    before_snapshot: dict[str, Any] | None = None,
    after_snapshot: dict[str, Any] | None = None,
) -> None:
    actor_identifier = "anonymous"
    actor_id = None
    if actor is not None:
        actor_id = actor.id
        actor_identifier = actor.email or actor.username

    db.add(
        AuditLog(
            actor_user_id=actor_id,
            actor_identifier=actor_identifier,
            action_type=action_type,
            company_id=company_id,
            entity_id=entity_id,
            before_snapshot=before_snapshot,
            after_snapshot=after_snapshot,
        )
    )
