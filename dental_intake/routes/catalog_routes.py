# dental_intake/routes/catalog_routes.py
from typing import List, Optional

from fastapi import APIRouter

from dental_intake.schemas.catalog import (
    FeeOut,
    ProgramOption,
    ReasonOption,
    ReasonTag,
    SymptomOption,
    UrgencyOption,
)
from dental_intake.services.catalog import load_catalog
from dental_intake.services.diagnosis import symptoms_for_reason
from dental_intake.services.formatting import format_clp

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/reasons", response_model=List[ReasonOption])
def list_reasons():
    return list(load_catalog().reasons)


@router.get("/urgencies", response_model=List[UrgencyOption])
def list_urgencies():
    return list(load_catalog().urgencies)


@router.get("/symptoms", response_model=List[SymptomOption])
def list_symptoms(reason: Optional[ReasonTag] = None):
    """Symptoms shown for a consultation reason; the full catalog without one."""
    if reason is None:
        return list(load_catalog().symptoms)
    return symptoms_for_reason(reason)


@router.get("/programs", response_model=List[ProgramOption])
def list_programs():
    return list(load_catalog().programs)


@router.get("/fees", response_model=List[FeeOut])
def list_fees():
    return [FeeOut(**fee.model_dump(), price_display=format_clp(fee.price)) for fee in load_catalog().fees]
