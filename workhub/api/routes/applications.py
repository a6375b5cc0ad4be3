"""
Job application endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from workhub.core.auth_dependency import get_db, get_current_principal, get_current_student, Principal
from workhub.core.outcomes import raise_for_outcome
from workhub.db.models.student import Student
from workhub.schemas.application import (
    ApplicationResponse,
    AppliedJobsResponse,
    EmployerApplicationListResponse,
    EmployerApplicationResponse,
)
from workhub.services.application_service import (
    apply_to_job,
    list_applied_job_ids,
    list_employer_applications,
)
from workhub.services.file_storage import save_upload

router = APIRouter(tags=["Applications"])

CV_CONTENT_TYPES = ("application/pdf",)


def _require_self_or_admin(principal: Principal, role: str, email: str):
    if principal.role != "admin" and not (principal.role == role and principal.subject == email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view these applications")


@router.post("/apply-job", status_code=status.HTTP_201_CREATED)
async def apply_job(
    job_id: int = Form(...),
    use_existing: bool = Form(False),
    cv: Optional[UploadFile] = File(None),
    student: Student = Depends(get_current_student),
    db: Session = Depends(get_db)
):
    """
    Apply to an Active job.

    Send a PDF as "cv", or set use_existing to apply with the CV already on
    the profile. A new CV replaces the profile CV.
    """
    cv_url = None
    if not use_existing:
        if cv is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "cv_required", "message": "No PDF uploaded", "cvRequired": True}
            )
        cv_url = await save_upload(cv, "cvs", allowed_types=CV_CONTENT_TYPES)

    outcome = raise_for_outcome(
        await run_in_threadpool(apply_to_job, db, student.email, job_id, cv_url)
    )
    return {
        "success": True,
        "message": outcome.message,
        "application": ApplicationResponse.model_validate(outcome.data["application"]),
    }


@router.get("/employer/applications/{email}", response_model=EmployerApplicationListResponse)
def get_employer_applications(
    email: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    _require_self_or_admin(principal, "employer", email)

    applications = list_employer_applications(db, email)
    return EmployerApplicationListResponse(
        applications=[EmployerApplicationResponse(**a) for a in applications],
        total=len(applications),
    )


@router.get("/student/applications/{email}", response_model=AppliedJobsResponse)
def get_student_applications(
    email: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    _require_self_or_admin(principal, "student", email)
    return AppliedJobsResponse(applied_job_ids=list_applied_job_ids(db, email))
