# dental_intake/routes/lead_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dental_intake.db.session import get_db
from dental_intake.schemas.leads import LeadCreate, LeadOut
from dental_intake.services.leads import LeadValidationError, create_lead
from dental_intake.services.providers import BookingProvider, get_booking_provider
from dental_intake.utils.limiter import limiter, LEAD_RATE_LIMIT

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(LEAD_RATE_LIMIT)
def capture_lead(
    request: Request,
    payload: LeadCreate,
    db: Session = Depends(get_db),
    provider: BookingProvider = Depends(get_booking_provider),
):
    try:
        return create_lead(db, payload, provider=provider)
    except LeadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
