# dental_intake/routes/diagnosis_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dental_intake.db.session import get_db
from dental_intake.schemas.diagnosis import (
    CallToAction,
    DiagnosisRequest,
    DiagnosisResponse,
    FinancingQuote,
    FinancingRequest,
)
from dental_intake.services.contact import booking_url, whatsapp_url_for_diagnosis
from dental_intake.services.diagnosis import generate_diagnosis
from dental_intake.services.diagnosis_events import save_diagnosis_event
from dental_intake.services.financing import FinancingError, simulate_financing
from dental_intake.services.formatting import format_price_range
from dental_intake.utils.limiter import limiter, DIAGNOSIS_RATE_LIMIT

router = APIRouter(prefix="/api", tags=["diagnosis"])
logger = logging.getLogger("dental_intake")


@router.post("/diagnosis", response_model=DiagnosisResponse, status_code=status.HTTP_200_OK)
@limiter.limit(DIAGNOSIS_RATE_LIMIT)
def diagnose(
    request: Request,
    payload: DiagnosisRequest,
    db: Session = Depends(get_db),
):
    """Score the intake answers, persist the event and return the recommended route."""
    result = generate_diagnosis(payload.reason, payload.symptom_ids, payload.urgency, payload.has_photo)
    event = save_diagnosis_event(
        db, payload.reason, payload.symptom_ids, payload.urgency, payload.has_photo, result
    )
    logger.info({
        "function": "diagnose",
        "route_key": result.route_key,
        "confidence": round(result.confidence, 3),
        "tags_count": result.tags_count,
    })
    return DiagnosisResponse(
        event_id=str(event.id),
        diagnosis=result,
        price_display=format_price_range(result.price_estimate),
        financing=simulate_financing(result.price_estimate),
        cta=CallToAction(
            whatsapp_url=whatsapp_url_for_diagnosis(result.program.name, result.urgency),
            booking_url=booking_url(),
        ),
    )


@router.post("/financing/simulate", response_model=FinancingQuote)
def simulate(payload: FinancingRequest):
    try:
        return simulate_financing(payload.price_estimate, payload.amount, payload.installments)
    except FinancingError as e:
        raise HTTPException(status_code=400, detail=str(e))
