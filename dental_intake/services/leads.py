from __future__ import annotations

import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from dental_intake.models.lead import Lead
from dental_intake.schemas.leads import LeadCreate
from dental_intake.services.providers import BookingProvider, NullBookingProvider

logger = logging.getLogger("dental_intake")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_MIN_DIGITS = 8
PHONE_MAX_DIGITS = 12


class LeadValidationError(ValueError):
    pass


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def phone_digits(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def validate_contact(name: Optional[str], email: Optional[str], phone: Optional[str], required_label: str) -> str:
    """Check the shared contact fields and return the digits-only phone."""
    if not _clean(name) or not _clean(email) or not _clean(phone):
        raise LeadValidationError(f"Missing required fields: {required_label}")
    if not is_valid_email(email.strip()):
        raise LeadValidationError("Invalid email format")
    digits = phone_digits(phone)
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        raise LeadValidationError("Invalid phone number format")
    return digits


def create_lead(db: Session, payload: LeadCreate, provider: Optional[BookingProvider] = None) -> Lead:
    phone = validate_contact(payload.name, payload.email, payload.phone, "name, email, phone")

    lead = Lead(
        name=payload.name.strip(),
        email=payload.email.strip().lower(),
        phone=phone,
        rut=_clean(payload.rut),
        reason=_clean(payload.reason),
        origin=_clean(payload.origin) or "web",
        route_key=_clean(payload.route_key),
        utm_source=_clean(payload.utm_source) or "direct",
        utm_medium=_clean(payload.utm_medium),
        utm_campaign=_clean(payload.utm_campaign),
        landing_path=_clean(payload.landing_path),
        status="LEAD",
    )

    provider = provider or NullBookingProvider()
    # sync first so the external id lands with the insert; failures are non-fatal
    lead.dentalink_patient_id = provider.register_patient(lead)

    try:
        db.add(lead)
        db.commit()
        db.refresh(lead)
    except Exception:
        db.rollback()
        raise
    logger.info({
        "function": "create_lead",
        "status": "inserted",
        "lead_id": str(lead.id),
        "origin": lead.origin,
        "synced": lead.dentalink_patient_id is not None,
    })
    return lead


__all__ = ["LeadValidationError", "create_lead", "validate_contact", "is_valid_email", "phone_digits"]
