from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
import hashlib
import json

import logging
from sqlalchemy.orm import Session
from sqlalchemy import desc

from dental_intake.models.diagnosis_event import DiagnosisEvent
from dental_intake.schemas.diagnosis import DiagnosticResult

logger = logging.getLogger("dental_intake")

IDEMPOTENCY_WINDOW_SECONDS = 10


def input_key(reason: str, symptom_ids: Iterable[str], urgency: str, has_photo: bool) -> str:
    payload = json.dumps(
        {"reason": reason, "symptoms": sorted(set(symptom_ids or [])), "urgency": urgency, "photo": bool(has_photo)},
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def window_cutoff(dialect_name: str, now: Optional[datetime] = None) -> datetime:
    """Oldest created_at still inside the idempotency window.

    Postgres compares timestamptz against an aware value; a naive one would be
    read in the session TimeZone. SQLite stores CURRENT_TIMESTAMP as naive UTC.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(seconds=IDEMPOTENCY_WINDOW_SECONDS)
    if dialect_name == "postgresql":
        return cutoff
    return cutoff.replace(tzinfo=None)


def save_diagnosis_event(
    db: Session,
    reason: str,
    symptom_ids: Iterable[str],
    urgency: str,
    has_photo: bool,
    result: DiagnosticResult,
) -> DiagnosisEvent:
    """Insert a DiagnosisEvent with an idempotency window of 10 seconds.

    If an event with the same input key exists within the window, reuse it
    instead of inserting a duplicate row.
    """
    symptom_ids = list(symptom_ids or [])
    key = input_key(reason, symptom_ids, urgency, has_photo)
    cutoff = window_cutoff(db.get_bind().dialect.name)

    existing = (
        db.query(DiagnosisEvent)
        .filter(DiagnosisEvent.input_key == key, DiagnosisEvent.created_at >= cutoff)
        .order_by(desc(DiagnosisEvent.created_at))
        .first()
    )
    if existing:
        logger.info({
            "function": "save_diagnosis_event",
            "status": "reused",
            "event_id": str(existing.id),
            "key": key[:16],
        })
        return existing

    ev = DiagnosisEvent(
        input_key=key,
        reason=reason,
        urgency=urgency,
        has_photo=bool(has_photo),
        symptom_ids=symptom_ids,
        route_key=result.route_key,
        result_json=result.model_dump(),
    )
    try:
        db.add(ev)
        db.commit()
        db.refresh(ev)
    except Exception:
        db.rollback()
        raise
    logger.info({
        "function": "save_diagnosis_event",
        "status": "inserted",
        "event_id": str(ev.id),
        "route_key": ev.route_key,
        "key": key[:16],
    })
    return ev


__all__ = ["save_diagnosis_event", "input_key", "window_cutoff"]
