# dental_intake/routes/second_opinion_routes.py
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from dental_intake.db.session import get_db
from dental_intake.schemas.second_opinion import (
    IAReportOut,
    RadiographOut,
    RadiographUploadOut,
    SecondOpinionCreate,
    SecondOpinionOut,
)
from dental_intake.services import second_opinion as so_service
from dental_intake.utils.limiter import limiter, UPLOAD_RATE_LIMIT

router = APIRouter(prefix="/api/second-opinions", tags=["second-opinion"])


def _get_or_404(db: Session, second_opinion_id: str):
    opinion = so_service.get_second_opinion(db, second_opinion_id)
    if not opinion:
        raise HTTPException(status_code=404, detail="Second opinion not found")
    return opinion


@router.post("", response_model=SecondOpinionOut, status_code=status.HTTP_201_CREATED)
def create_second_opinion(payload: SecondOpinionCreate, db: Session = Depends(get_db)):
    try:
        return so_service.create_second_opinion(db, payload)
    except so_service.SecondOpinionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{second_opinion_id}", response_model=SecondOpinionOut)
def get_second_opinion(second_opinion_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, second_opinion_id)


@router.post(
    "/{second_opinion_id}/radiographs",
    response_model=RadiographUploadOut,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(UPLOAD_RATE_LIMIT)
async def upload_radiographs(
    request: Request,
    second_opinion_id: str,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
):
    opinion = _get_or_404(db, second_opinion_id)
    uploads = [
        so_service.Upload(
            filename=f.filename or "radiografia",
            content_type=(f.content_type or "").lower(),
            data=await f.read(),
        )
        for f in files
    ]
    try:
        saved = so_service.attach_radiographs(db, opinion, uploads)
    except so_service.SecondOpinionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RadiographUploadOut(
        second_opinion_id=str(opinion.id),
        uploaded=[RadiographOut.model_validate(f) for f in saved],
        total_files=len(opinion.files),
    )


@router.post("/{second_opinion_id}/report", response_model=IAReportOut)
def generate_report(second_opinion_id: str, db: Session = Depends(get_db)):
    opinion = _get_or_404(db, second_opinion_id)
    opinion = so_service.generate_report(db, opinion)
    return IAReportOut(id=str(opinion.id), status=opinion.status, ia_report=opinion.ia_report)
