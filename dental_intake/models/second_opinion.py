from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, DateTime, Integer, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from dental_intake.db.session import Base
from dental_intake.models.types import uuid_col_type, json_col_type, new_id


class SecondOpinion(Base):
    __tablename__ = "second_opinions"

    id: Mapped[str] = mapped_column(uuid_col_type(), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    current_diagnosis: Mapped[Optional[str]] = mapped_column(Text)
    external_budget_amount: Mapped[Optional[int]] = mapped_column(Integer)
    external_clinic_name: Mapped[Optional[str]] = mapped_column(String(200))
    flow_type: Mapped[str] = mapped_column(String(30), nullable=False, default="ia_only")
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending")
    ia_report: Mapped[Optional[dict]] = mapped_column(json_col_type())
    ia_completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    files: Mapped[List["SecondOpinionFile"]] = relationship(
        back_populates="second_opinion",
        cascade="all, delete-orphan",
        order_by="SecondOpinionFile.created_at",
    )


class SecondOpinionFile(Base):
    __tablename__ = "second_opinion_files"

    id: Mapped[str] = mapped_column(uuid_col_type(), primary_key=True, default=new_id)
    second_opinion_id: Mapped[str] = mapped_column(
        ForeignKey("second_opinions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    stored_name: Mapped[str] = mapped_column(String(255), nullable=False)
    stored_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    second_opinion: Mapped[SecondOpinion] = relationship(back_populates="files")
