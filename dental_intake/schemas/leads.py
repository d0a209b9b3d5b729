# dental_intake/schemas/leads.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class LeadCreate(BaseModel):
    # presence and format are checked by the lead service so the API answers
    # with the funnel's own 400 messages instead of a generic 422
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=40)
    rut: Optional[str] = Field(None, max_length=20)
    reason: Optional[str] = Field(None, max_length=1000)
    origin: Optional[str] = Field(None, max_length=50)
    route_key: Optional[str] = Field(None, max_length=50, description="Program recommended by the wizard, if any.")
    utm_source: Optional[str] = Field(None, max_length=100)
    utm_medium: Optional[str] = Field(None, max_length=100)
    utm_campaign: Optional[str] = Field(None, max_length=100)
    landing_path: Optional[str] = Field(None, max_length=255)


class LeadOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    rut: Optional[str] = None
    reason: Optional[str] = None
    origin: str
    route_key: Optional[str] = None
    utm_source: str
    dentalink_patient_id: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
