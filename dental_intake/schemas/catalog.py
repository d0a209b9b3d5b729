# dental_intake/schemas/catalog.py
from pydantic import BaseModel, Field
from typing import Literal, Tuple

ReasonTag = Literal[
    "dolor",
    "estetica",
    "implantes",
    "ortodoncia",
    "prevencion",
    "segunda-opinion",
    "otro",
]

UrgencyTag = Literal["inmediata", "esta-semana", "este-mes", "solo-consulta"]


class SymptomOption(BaseModel):
    """A selectable symptom and the clinical tags it contributes."""

    id: str
    label: str
    reasons: Tuple[str, ...] = Field(..., description="Consultation reasons this symptom is listed under.")
    weight: int
    tags: Tuple[str, ...] = Field(..., description="Matching tokens shared with program keywords.")

    class Config:
        frozen = True


class ProgramOption(BaseModel):
    """One of the clinic's treatment programs used as recommendation target."""

    id: str
    name: str
    tagline: str
    description: str
    url: str
    keywords: Tuple[str, ...]

    class Config:
        frozen = True


class ReasonOption(BaseModel):
    id: str
    title: str
    description: str

    class Config:
        frozen = True


class UrgencyOption(BaseModel):
    id: str
    title: str
    description: str
    priority: int = Field(..., ge=1, description="1 is the most urgent.")

    class Config:
        frozen = True


class PriceRange(BaseModel):
    min: int
    max: int

    class Config:
        frozen = True


class FeeItem(BaseModel):
    id: str
    name: str
    price: int
    description: str
    includes: Tuple[str, ...]

    class Config:
        frozen = True


class FeeOut(FeeItem):
    price_display: str
