"""Ports to third-party systems, kept apart from the intake rules.

Only the booking side is wired today: new leads are registered as patients
in the practice-management system (Dentalink) when an API key is configured.
"""
import logging
import os
from typing import Optional, Protocol

import httpx

logger = logging.getLogger("dental_intake")

DENTALINK_API_URL = (os.getenv("DENTALINK_API_URL") or "https://api.dentalink.healthatom.com/api/v1").rstrip("/")
DENTALINK_TIMEOUT_S = float(os.getenv("DENTALINK_TIMEOUT_S", "10"))


class PatientRecord(Protocol):
    name: str
    email: str
    phone: str
    rut: Optional[str]
    reason: Optional[str]


class BookingProvider(Protocol):
    def register_patient(self, patient: PatientRecord) -> Optional[str]:
        """Create or update the patient; return the external id or None."""
        ...


class NullBookingProvider:
    def register_patient(self, patient: PatientRecord) -> Optional[str]:
        return None


def split_name(full_name: str) -> tuple[str, str]:
    parts = (full_name or "").split()
    if not parts:
        return "", "-"
    return parts[0], " ".join(parts[1:]) or "-"


class DentalinkBookingProvider:
    def __init__(self, api_key: str, base_url: str = DENTALINK_API_URL, client: Optional[httpx.Client] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client

    def _post(self, path: str, payload: dict) -> httpx.Response:
        headers = {"Authorization": f"Token {self.api_key}"}
        if self._client is not None:
            return self._client.post(f"{self.base_url}{path}", json=payload, headers=headers)
        with httpx.Client(timeout=DENTALINK_TIMEOUT_S) as client:
            return client.post(f"{self.base_url}{path}", json=payload, headers=headers)

    def register_patient(self, patient: PatientRecord) -> Optional[str]:
        first, last = split_name(patient.name)
        payload = {
            "nombre": first,
            "apellido": last,
            "email": patient.email,
            "telefono": patient.phone,
            "rut": patient.rut or None,
            "notas": patient.reason or "",
        }
        try:
            resp = self._post("/pacientes", payload)
        except httpx.HTTPError as e:
            logger.error({"function": "dentalink_register_patient", "status": "error", "error": str(e)})
            return None
        if resp.status_code >= 400:
            logger.error({
                "function": "dentalink_register_patient",
                "status": resp.status_code,
                "body": resp.text[:500],
            })
            return None
        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning({"function": "dentalink_register_patient", "status": "invalid_json"})
            return None
        patient_id = data.get("id")
        logger.info({"function": "dentalink_register_patient", "status": "ok", "patient_id": patient_id})
        return str(patient_id) if patient_id is not None else None


def get_booking_provider() -> BookingProvider:
    api_key = (os.getenv("DENTALINK_API_KEY") or "").strip()
    if not api_key:
        logger.info({"function": "get_booking_provider", "status": "disabled", "reason": "DENTALINK_API_KEY not configured"})
        return NullBookingProvider()
    return DentalinkBookingProvider(api_key)


__all__ = [
    "BookingProvider",
    "NullBookingProvider",
    "DentalinkBookingProvider",
    "get_booking_provider",
    "split_name",
]
