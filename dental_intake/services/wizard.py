"""Intake wizard as an explicit session value with pure transitions.

Each function takes a WizardSession and returns a new one; nothing is
mutated or stored server-side.
"""
import logging
from typing import Iterable, List, Optional

from dental_intake.schemas.wizard import PhotoMeta, WizardSession
from dental_intake.services.diagnosis import generate_diagnosis
from dental_intake.services.catalog import Catalog

logger = logging.getLogger("dental_intake")

STEPS = [
    (1, "Motivo"),
    (2, "Síntomas"),
    (3, "Fotos"),
    (4, "Diagnóstico"),
    (5, "Inversión"),
    (6, "Tu Ruta"),
]
LAST_STEP = len(STEPS)
ANALYSIS_STEP = 3

MAX_PHOTOS = 5
MAX_PHOTO_BYTES = 10 * 1024 * 1024


class WizardError(ValueError):
    pass


def new_session() -> WizardSession:
    return WizardSession()


def step_title(step: int) -> str:
    return dict(STEPS).get(step, "")


def progress(session: WizardSession) -> float:
    return session.step / LAST_STEP * 100


def select_reason(session: WizardSession, reason: str) -> WizardSession:
    # picking a reason auto-advances to the symptoms step
    return session.model_copy(update={"reason": reason, "step": 2})


def toggle_symptom(session: WizardSession, symptom_id: str) -> WizardSession:
    ids = list(session.symptom_ids)
    if symptom_id in ids:
        ids.remove(symptom_id)
    else:
        ids.append(symptom_id)
    return session.model_copy(update={"symptom_ids": ids})


def set_urgency(session: WizardSession, urgency: str) -> WizardSession:
    return session.model_copy(update={"urgency": urgency})


def is_valid_photo(photo: PhotoMeta) -> bool:
    return (photo.content_type or "").lower().startswith("image/") and photo.size_bytes <= MAX_PHOTO_BYTES


def add_photos(session: WizardSession, photos: Iterable[PhotoMeta]) -> WizardSession:
    """Append valid images (image/*, max 10 MB), keeping at most five."""
    valid = [p for p in photos if is_valid_photo(p)]
    if not valid:
        return session
    merged: List[PhotoMeta] = [*session.photos, *valid][:MAX_PHOTOS]
    return session.model_copy(update={"photos": merged})


def remove_photo(session: WizardSession, index: int) -> WizardSession:
    if not 0 <= index < len(session.photos):
        raise WizardError(f"No photo at index {index}")
    photos = [p for i, p in enumerate(session.photos) if i != index]
    return session.model_copy(update={"photos": photos})


def can_proceed(session: WizardSession) -> bool:
    step = session.step
    if step == 1:
        return session.reason is not None
    if step == 2:
        # symptoms are optional, urgency is not
        return session.urgency is not None
    if step == 3:
        # photos are optional; the session is client-held so re-check the inputs
        return session.reason is not None and session.urgency is not None
    if step in (4, 5):
        return session.diagnosis is not None
    return step == LAST_STEP


def advance(session: WizardSession, catalog: Optional[Catalog] = None) -> WizardSession:
    if not can_proceed(session):
        raise WizardError("Completa este paso: selecciona una opción para continuar")

    if session.step == ANALYSIS_STEP:
        diagnosis = generate_diagnosis(
            session.reason,
            session.symptom_ids,
            session.urgency,
            len(session.photos) > 0,
            catalog=catalog,
        )
        logger.info({
            "function": "wizard_advance",
            "route_key": diagnosis.route_key,
            "tags_count": diagnosis.tags_count,
        })
        return session.model_copy(update={"diagnosis": diagnosis, "step": ANALYSIS_STEP + 1})

    if session.step < LAST_STEP:
        return session.model_copy(update={"step": session.step + 1})
    return session


def back(session: WizardSession) -> WizardSession:
    if session.step > 1:
        return session.model_copy(update={"step": session.step - 1})
    return session


__all__ = [
    "WizardError",
    "new_session",
    "step_title",
    "progress",
    "select_reason",
    "toggle_symptom",
    "set_urgency",
    "add_photos",
    "remove_photo",
    "can_proceed",
    "advance",
    "back",
]
