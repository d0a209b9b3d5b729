# dental_intake/schemas/second_opinion.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

FlowType = Literal["ia_only", "ia_plus_specialist"]


class SecondOpinionCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=40)
    reason: Optional[str] = Field(None, max_length=5000)
    current_diagnosis: Optional[str] = Field(None, max_length=5000)
    external_budget_amount: Optional[int] = Field(None, ge=0)
    external_clinic_name: Optional[str] = Field(None, max_length=200)
    flow_type: FlowType = "ia_only"


class RadiographOut(BaseModel):
    id: str
    filename: str
    content_type: str
    size_bytes: int
    stored_name: str

    class Config:
        from_attributes = True


class IAReport(BaseModel):
    """Orientative report; never a clinical diagnosis."""

    assessment: str
    key_findings: List[str]
    recommendations: List[str]
    comparison_notes: Optional[str] = None
    estimated_savings: Optional[int] = None
    urgency: Literal["low", "moderate", "high"]
    cta_evaluation_premium: bool
    disclaimer: str


class SecondOpinionOut(BaseModel):
    id: str
    name: str
    email: str
    status: str
    flow_type: str
    current_diagnosis: Optional[str] = None
    external_budget_amount: Optional[int] = None
    external_clinic_name: Optional[str] = None
    ia_report: Optional[IAReport] = None
    ia_completed_at: Optional[datetime] = None
    files: List[RadiographOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RadiographUploadOut(BaseModel):
    second_opinion_id: str
    uploaded: List[RadiographOut]
    total_files: int


class IAReportOut(BaseModel):
    id: str
    status: str
    ia_report: IAReport
