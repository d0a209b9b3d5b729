"""DiagnosisEvent: one persisted run of the recommendation engine."""

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from dental_intake.db.session import Base
from dental_intake.models.types import uuid_col_type, json_col_type, new_id


class DiagnosisEvent(Base):
    __tablename__ = "diagnosis_events"

    id = Column(uuid_col_type(), primary_key=True, default=new_id)
    input_key = Column(String(64), nullable=False, index=True)
    reason = Column(String(30), nullable=False)
    urgency = Column(String(30), nullable=False)
    has_photo = Column(Boolean, nullable=False, default=False)
    symptom_ids = Column(json_col_type(), nullable=False)
    route_key = Column(String(50), nullable=False, index=True)
    result_json = Column(json_col_type(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
