from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from dental_intake.db.session import Base
from dental_intake.models.types import uuid_col_type, new_id


class Lead(Base):
    __tablename__ = "funnel_leads"

    id: Mapped[str] = mapped_column(uuid_col_type(), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    rut: Mapped[Optional[str]] = mapped_column(String(20))
    reason: Mapped[Optional[str]] = mapped_column(String(1000))
    origin: Mapped[str] = mapped_column(String(50), nullable=False, default="web")
    route_key: Mapped[Optional[str]] = mapped_column(String(50))
    utm_source: Mapped[str] = mapped_column(String(100), nullable=False, default="direct")
    utm_medium: Mapped[Optional[str]] = mapped_column(String(100))
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(100))
    landing_path: Mapped[Optional[str]] = mapped_column(String(255))
    dentalink_patient_id: Mapped[Optional[str]] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="LEAD")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
