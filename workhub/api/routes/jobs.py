"""
Job posting, promotion, editing and listing endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from workhub.core.auth_dependency import get_db, get_current_employer
from workhub.core.outcomes import raise_for_outcome
from workhub.db.models.employer import Employer
from workhub.schemas.job import (
    JobCreate,
    JobListResponse,
    JobResponse,
    JobUpdate,
    JobUpdateResponse,
    PostJobResponse,
    PromoteJobRequest,
    PromoteJobResponse,
)
from workhub.services.job_posting_service import (
    close_job,
    delete_job,
    list_employer_jobs,
    list_public_jobs,
    try_post_job,
    try_promote_job,
    update_job,
)

router = APIRouter(tags=["Jobs"])


@router.post("/post-job", response_model=PostJobResponse, status_code=status.HTTP_201_CREATED)
def post_job(
    payload: JobCreate,
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    """
    Post a job for the authenticated employer.

    Returns 403 with limitReached when the plan's active post quota is used up,
    and 403 with boostLimitReached when a premium post has no boost left.
    """
    job_attrs = payload.model_dump(exclude={"is_premium"})
    outcome = raise_for_outcome(
        try_post_job(db, employer.email, job_attrs, is_premium=payload.is_premium)
    )
    return PostJobResponse(
        job=JobResponse.model_validate(outcome.data["job"]),
        job_posts_remaining=outcome.data["job_posts_remaining"],
        boosts_remaining=outcome.data["boosts_remaining"],
    )


@router.post("/promote-job", response_model=PromoteJobResponse)
def promote_job(
    payload: PromoteJobRequest,
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    outcome = raise_for_outcome(try_promote_job(db, payload.job_id, employer.email))
    return PromoteJobResponse(
        job=JobResponse.model_validate(outcome.data["job"]),
        boosts_remaining=outcome.data["boosts_remaining"],
    )


@router.get("/jobs", response_model=JobListResponse)
def get_jobs(db: Session = Depends(get_db)):
    """Public job board. Active jobs first, boosted jobs on top."""
    jobs = list_public_jobs(db)
    return JobListResponse(jobs=[JobResponse.model_validate(j) for j in jobs], total=len(jobs))


@router.get("/my-jobs", response_model=JobListResponse)
def get_my_jobs(
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    jobs = list_employer_jobs(db, employer.email)
    return JobListResponse(jobs=[JobResponse.model_validate(j) for j in jobs], total=len(jobs))


@router.put("/jobs/{job_id}", response_model=JobUpdateResponse)
def edit_job(
    job_id: int,
    payload: JobUpdate,
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    """
    Edit one of the employer's jobs, including its status.

    Setting a Closed job back to Active is refused with limitReached when the
    plan has no active post left.
    """
    changes = payload.model_dump(exclude_unset=True)
    outcome = raise_for_outcome(update_job(db, job_id, employer.email, changes))
    return JobUpdateResponse(job=JobResponse.model_validate(outcome.data["job"]))


@router.post("/jobs/{job_id}/close", response_model=JobUpdateResponse)
def close_own_job(
    job_id: int,
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    outcome = raise_for_outcome(close_job(db, job_id, employer.email))
    return JobUpdateResponse(job=JobResponse.model_validate(outcome.data["job"]))


@router.delete("/jobs/{job_id}")
def delete_own_job(
    job_id: int,
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    raise_for_outcome(delete_job(db, job_id, employer.email))
    return {"success": True, "job_id": job_id}
