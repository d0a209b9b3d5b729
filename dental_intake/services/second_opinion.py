"""Second-opinion requests: intake, radiograph uploads and the orientative report."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from PIL import Image
from sqlalchemy.orm import Session

from dental_intake.models.second_opinion import SecondOpinion, SecondOpinionFile
from dental_intake.schemas.second_opinion import IAReport, SecondOpinionCreate
from dental_intake.services import storage
from dental_intake.services.catalog import Catalog, load_catalog
from dental_intake.services.formatting import format_thousands, round_half_up
from dental_intake.services.leads import is_valid_email, phone_digits

logger = logging.getLogger("dental_intake")

MAX_RADIOGRAPHS = 10
MAX_RADIOGRAPH_BYTES = 20 * 1024 * 1024

PREMIUM_RECOMMENDATIONS = [
    "Evaluación Presencial Premium para diagnóstico definitivo con IA en vivo",
    "Visualización de alternativas de tratamiento sobre sus propias imágenes",
    "Plan de tratamiento personalizado con financiamiento flexible",
]


class SecondOpinionError(ValueError):
    pass


@dataclass
class Upload:
    filename: str
    content_type: str
    data: bytes


def create_second_opinion(db: Session, payload: SecondOpinionCreate) -> SecondOpinion:
    required = (payload.name, payload.email, payload.phone, payload.reason)
    if not all((v or "").strip() for v in required):
        raise SecondOpinionError("Missing required fields: name, email, phone, reason")
    if not is_valid_email(payload.email.strip()):
        raise SecondOpinionError("Invalid email format")
    phone = phone_digits(payload.phone)
    if not phone:
        raise SecondOpinionError("Invalid phone number format")

    opinion = SecondOpinion(
        name=payload.name.strip(),
        email=payload.email.strip().lower(),
        phone=phone,
        reason=payload.reason.strip(),
        current_diagnosis=(payload.current_diagnosis or "").strip() or None,
        external_budget_amount=payload.external_budget_amount,
        external_clinic_name=(payload.external_clinic_name or "").strip() or None,
        flow_type=payload.flow_type,
        status="pending",
    )
    try:
        db.add(opinion)
        db.commit()
        db.refresh(opinion)
    except Exception:
        db.rollback()
        raise
    logger.info({
        "function": "create_second_opinion",
        "status": "created",
        "second_opinion_id": str(opinion.id),
        "flow_type": opinion.flow_type,
        "has_external_budget": bool(opinion.external_budget_amount),
    })
    return opinion


def get_second_opinion(db: Session, second_opinion_id: str) -> Optional[SecondOpinion]:
    return db.query(SecondOpinion).filter(SecondOpinion.id == second_opinion_id).first()


def _check_image(upload: Upload) -> None:
    if not upload.data:
        raise SecondOpinionError("Empty file")
    if not (upload.content_type or "").lower().startswith("image/"):
        raise SecondOpinionError(f"{upload.filename}: only image files are accepted")
    if len(upload.data) > MAX_RADIOGRAPH_BYTES:
        raise SecondOpinionError(f"{upload.filename}: file exceeds 20 MB")
    try:
        with Image.open(io.BytesIO(upload.data)) as img:
            img.verify()
    except Exception as e:
        raise SecondOpinionError(f"{upload.filename}: not a readable image") from e


def attach_radiographs(db: Session, opinion: SecondOpinion, uploads: List[Upload]) -> List[SecondOpinionFile]:
    """Validate every upload first, then store and record them."""
    if not uploads:
        raise SecondOpinionError("At least one radiograph is required")
    if len(opinion.files) + len(uploads) > MAX_RADIOGRAPHS:
        raise SecondOpinionError(f"At most {MAX_RADIOGRAPHS} radiographs per request")
    for upload in uploads:
        _check_image(upload)

    saved: List[SecondOpinionFile] = []
    for upload in uploads:
        stored_path, stored_name = storage.store_local_upload(
            upload.data, upload.filename, subdir=str(opinion.id), content_type=upload.content_type
        )
        record = SecondOpinionFile(
            second_opinion_id=opinion.id,
            filename=upload.filename or "radiografia",
            content_type=upload.content_type.lower(),
            size_bytes=len(upload.data),
            stored_name=stored_name,
            stored_path=stored_path,
        )
        opinion.files.append(record)
        saved.append(record)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    for record in saved:
        db.refresh(record)
    logger.info({
        "function": "attach_radiographs",
        "second_opinion_id": str(opinion.id),
        "uploaded": len(saved),
        "total": len(opinion.files),
    })
    return saved


def build_report(
    current_diagnosis: Optional[str],
    external_budget_amount: Optional[int],
    catalog: Optional[Catalog] = None,
) -> IAReport:
    catalog = catalog or load_catalog()
    params = catalog.second_opinion
    findings: List[str] = []
    recommendations: List[str] = []

    if current_diagnosis:
        findings.append(f"Diagnóstico reportado: {current_diagnosis}")
        findings.append("Se requiere validación clínica presencial para confirmar hallazgos")
    else:
        findings.append("Sin diagnóstico previo proporcionado")
        findings.append("Recomendamos una evaluación completa")

    savings = None
    if external_budget_amount and external_budget_amount > 0:
        savings = round_half_up(external_budget_amount * float(params.get("savings_ratio", 0.15)))
        findings.append(f"Presupuesto externo: ${format_thousands(external_budget_amount)} CLP")
        recommendations.append(f"Potencial ahorro estimado: ${format_thousands(savings)} CLP")
        recommendations.append("Comparamos opciones de tratamiento con tecnología de última generación")

    recommendations.extend(PREMIUM_RECOMMENDATIONS)

    return IAReport(
        assessment="Basado en la información proporcionada, hemos analizado su caso.",
        key_findings=findings,
        recommendations=recommendations,
        comparison_notes=(
            "Su presupuesto externo ha sido analizado. En la Evaluación Premium le mostraremos "
            "alternativas con tecnología IA."
            if savings is not None
            else None
        ),
        estimated_savings=savings,
        urgency="moderate",
        cta_evaluation_premium=True,
        disclaimer=str(params.get("disclaimer") or ""),
    )


def generate_report(db: Session, opinion: SecondOpinion, catalog: Optional[Catalog] = None) -> SecondOpinion:
    opinion.status = "ia_processing"
    db.commit()
    try:
        report = build_report(opinion.current_diagnosis, opinion.external_budget_amount, catalog=catalog)
        opinion.ia_report = report.model_dump()
        opinion.ia_completed_at = datetime.now(timezone.utc)
        opinion.status = "ia_done"
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(opinion)
    logger.info({
        "function": "generate_report",
        "second_opinion_id": str(opinion.id),
        "urgency": report.urgency,
        "has_savings": report.estimated_savings is not None,
    })
    return opinion


__all__ = [
    "SecondOpinionError",
    "Upload",
    "create_second_opinion",
    "get_second_opinion",
    "attach_radiographs",
    "build_report",
    "generate_report",
]
