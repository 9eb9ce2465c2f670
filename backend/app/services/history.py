"""History (audit) log: append-only record of create / update / delete actions.

``log_history`` does NOT call db.commit(); the row is written as part of the
caller's unit of work so the history entry and the change it describes
commit or roll back together.
"""

from __future__ import annotations

import enum
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from backend.app.models.history import History, HistoryAction

logger = logging.getLogger(__name__)

_EXCLUDED_FIELDS = {"id", "created_at", "updated_at", "password"}
_NAME_FIELDS = ("name", "title", "client_name", "email", "id")


def _json_safe(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    return value


def snapshot(obj: object) -> dict[str, Any]:
    """Return a JSON-safe dict of the column values of an ORM instance."""
    mapper = inspect(obj).mapper
    return {
        attr.key: _json_safe(getattr(obj, attr.key))
        for attr in mapper.column_attrs
    }


def compute_changes(
    action: HistoryAction,
    old_value: dict[str, Any] | None,
    new_value: dict[str, Any] | None,
) -> dict[str, dict[str, Any]]:
    """Summarise a change as ``{field: {"old": ..., "new": ...}}``.

    Updates keep only the fields whose string form differs; creates record
    every new value and deletes every old one.
    """
    changes: dict[str, dict[str, Any]] = {}
    if action == HistoryAction.UPDATE and old_value is not None and new_value is not None:
        for key in sorted(set(old_value) | set(new_value)):
            if key in _EXCLUDED_FIELDS:
                continue
            old, new = old_value.get(key), new_value.get(key)
            old_str = None if old is None else str(old)
            new_str = None if new is None else str(new)
            if old_str != new_str:
                changes[key] = {"old": old, "new": new}
    elif action == HistoryAction.CREATE and new_value is not None:
        for key, value in new_value.items():
            if key not in _EXCLUDED_FIELDS:
                changes[key] = {"new": value}
    elif action == HistoryAction.DELETE and old_value is not None:
        for key, value in old_value.items():
            if key not in _EXCLUDED_FIELDS:
                changes[key] = {"old": value}
    return changes


def _entity_name(value: dict[str, Any] | None, entity_type: str) -> str:
    if not value:
        return entity_type
    for field in _NAME_FIELDS:
        if value.get(field):
            return str(value[field])
    return entity_type


def _default_description(
    action: HistoryAction,
    entity_type: str,
    old_value: dict[str, Any] | None,
    new_value: dict[str, Any] | None,
) -> str:
    name = _entity_name(old_value or new_value, entity_type)
    verb = {
        HistoryAction.CREATE: "Created",
        HistoryAction.UPDATE: "Updated",
        HistoryAction.DELETE: "Deleted",
    }[action]
    return f"{verb} {entity_type}: {name}"


def log_history(
    db: Session,
    *,
    user_id: UUID | None,
    action: HistoryAction,
    entity_type: str,
    entity_id: UUID | None = None,
    old_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
    description: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> History | None:
    """Add a History row describing *action* on an entity."""
    if user_id is None:
        logger.warning("History logging skipped for %s %s: no user", action.value, entity_type)
        return None

    changes = compute_changes(action, old_value, new_value)
    entry = History(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description
        or _default_description(action, entity_type, old_value, new_value),
        changes=changes or None,
        meta=metadata or None,
    )
    db.add(entry)
    return entry


def list_history(
    db: Session,
    *,
    user_id: UUID | None = None,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    action: HistoryAction | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[History]:
    """Return history rows, newest first."""
    query = db.query(History)
    if user_id is not None:
        query = query.filter(History.user_id == user_id)
    if entity_type is not None:
        query = query.filter(History.entity_type == entity_type)
    if entity_id is not None:
        query = query.filter(History.entity_id == entity_id)
    if action is not None:
        query = query.filter(History.action == action)
    return (
        query.order_by(History.timestamp.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
