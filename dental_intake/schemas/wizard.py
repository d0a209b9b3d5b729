# dental_intake/schemas/wizard.py
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from dental_intake.schemas.catalog import ReasonTag, UrgencyTag
from dental_intake.schemas.diagnosis import DiagnosticResult

WizardAction = Literal[
    "select_reason",
    "toggle_symptom",
    "set_urgency",
    "add_photos",
    "remove_photo",
    "next",
    "back",
]


class PhotoMeta(BaseModel):
    filename: str
    content_type: str
    size_bytes: int = Field(..., ge=0)


class WizardSession(BaseModel):
    """Whole intake wizard state; transitions return a new instance."""

    step: int = Field(1, ge=1, le=6)
    reason: Optional[ReasonTag] = None
    symptom_ids: List[str] = Field(default_factory=list)
    urgency: Optional[UrgencyTag] = None
    photos: List[PhotoMeta] = Field(default_factory=list)
    diagnosis: Optional[DiagnosticResult] = None


class WizardTransitionRequest(BaseModel):
    session: WizardSession
    action: WizardAction
    reason: Optional[ReasonTag] = None
    symptom_id: Optional[str] = None
    urgency: Optional[UrgencyTag] = None
    photos: List[PhotoMeta] = Field(default_factory=list)
    index: Optional[int] = None


class WizardState(BaseModel):
    session: WizardSession
    step_title: str
    can_proceed: bool
    progress: float = Field(..., ge=0.0, le=100.0)
