# dental_intake/schemas/diagnosis.py
from pydantic import BaseModel, Field
from typing import List, Optional

from dental_intake.schemas.catalog import PriceRange, ProgramOption, ReasonTag, UrgencyTag


class DiagnosticResult(BaseModel):
    """Outcome of one scoring run. Confidence is a bounded heuristic, not a probability."""

    route_key: str = Field(..., description="Id of the recommended program.")
    program: ProgramOption
    confidence: float = Field(..., ge=0.0, le=1.0)
    tags: List[str] = Field(..., description="Unique tags of the selected symptoms, first-seen order.")
    tags_count: int
    urgency: str
    recommendations: List[str]
    price_estimate: PriceRange

    class Config:
        frozen = True


class DiagnosisRequest(BaseModel):
    reason: ReasonTag
    symptom_ids: List[str] = Field(default_factory=list, max_length=50)
    urgency: UrgencyTag
    has_photo: bool = False


class FinancingRequest(BaseModel):
    price_estimate: PriceRange
    amount: Optional[int] = Field(None, ge=0)
    installments: Optional[int] = None


class FinancingQuote(BaseModel):
    amount: int
    installments: int
    monthly_rate: float
    monthly_payment: int
    total: int
    min: int
    max: int
    amount_display: str
    monthly_payment_display: str
    total_display: str


class CallToAction(BaseModel):
    whatsapp_url: str
    booking_url: str


class DiagnosisResponse(BaseModel):
    event_id: Optional[str] = None
    diagnosis: DiagnosticResult
    price_display: str = Field(..., description="Formatted price range, e.g. '$85.000 - $350.000'.")
    financing: FinancingQuote
    cta: CallToAction
