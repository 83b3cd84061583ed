# app/routers/job_descriptions.py
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.deps import get_db
from app.models.job_description import JobDescription
from app.routers.common import BodyValidationError, error_response, errors_response, parse_body
from app.schemas.job_description import JobDescriptionCreate, JobDescriptionOut, JobDescriptionUpdate

router = APIRouter(prefix="/api/job_descriptions", tags=["job-descriptions"])

NOT_FOUND = "Job description not found"


def current_job_description(db: Session) -> JobDescription | None:
    """활성 JD 중 첫 번째"""
    return (
        db.query(JobDescription)
        .filter(JobDescription.active.is_(True))
        .order_by(JobDescription.id.asc())
        .first()
    )


@router.get("", response_model=List[JobDescriptionOut])
def list_job_descriptions(db: Session = Depends(get_db)):
    return (
        db.query(JobDescription)
        .filter(JobDescription.active.is_(True))
        .order_by(JobDescription.id.asc())
        .all()
    )


# /{id} 보다 먼저 등록해야 "current"가 id로 해석되지 않음
@router.get("/current", response_model=JobDescriptionOut)
def get_current_job_description(db: Session = Depends(get_db)):
    jd = current_job_description(db)
    if not jd:
        return error_response(status.HTTP_404_NOT_FOUND, "No active job description found")
    return jd


@router.get("/{job_description_id}", response_model=JobDescriptionOut)
def get_job_description(job_description_id: int, db: Session = Depends(get_db)):
    jd = db.get(JobDescription, job_description_id)
    if not jd:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return jd


# 새 JD 등록 시 기존 JD 전부 비활성화
@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobDescriptionOut)
def create_job_description(payload: Any = Body(...), db: Session = Depends(get_db)):
    try:
        data = parse_body(payload, "job_description", JobDescriptionCreate)
    except BodyValidationError as e:
        return errors_response(e.errors)

    db.query(JobDescription).update({JobDescription.active: False}, synchronize_session=False)
    jd = JobDescription(**data.model_dump())
    db.add(jd)
    db.commit()
    db.refresh(jd)
    return jd


@router.api_route("/{job_description_id}", methods=["PUT", "PATCH"], response_model=JobDescriptionOut)
def update_job_description(job_description_id: int, payload: Any = Body(...), db: Session = Depends(get_db)):
    jd = db.get(JobDescription, job_description_id)
    if not jd:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)

    try:
        data = parse_body(payload, "job_description", JobDescriptionUpdate)
    except BodyValidationError as e:
        return errors_response(e.errors)

    for name, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(jd, name, value)
    db.commit()
    db.refresh(jd)
    return jd


@router.delete("/{job_description_id}")
def delete_job_description(job_description_id: int, db: Session = Depends(get_db)):
    jd = db.get(JobDescription, job_description_id)
    if not jd:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)

    jd.active = False
    db.commit()
    return {"message": "Job description deactivated successfully"}
