"""
Job posting guard.

Enforces plan quota and boost availability at the moment a job is posted,
promoted or reopened. The check and the write happen in one transaction
while holding the employer's lock, and every boost decrement is a
conditional UPDATE that cannot take the counter below zero.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import case, update
from sqlalchemy.orm import Session

from workhub.core.config import MAX_JOB_DURATION_DAYS, LOW_QUOTA_WARNING_THRESHOLD
from workhub.core.locks import employer_lock
from workhub.core.outcomes import Outcome, FailureReason
from workhub.core.plan_limits import get_plan_entitlement
from workhub.db.models.application import Application
from workhub.db.models.employer import Employer
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.notification import NotificationType
from workhub.services.notification_service import notify
from workhub.services.quota_service import get_employer, remaining_posts_for, count_active_jobs
from workhub.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# Caller-supplied job fields copied onto the Job row
JOB_FIELDS = (
    "title",
    "company_name",
    "location",
    "schedule",
    "hours_per_day",
    "pay_amount",
    "pay_frequency",
    "category",
    "description",
)


def clamp_deadline(deadline: Optional[date], now: Optional[datetime] = None) -> date:
    """
    Clamp a job deadline to at most MAX_JOB_DURATION_DAYS from now.

    A missing deadline gets the maximum.
    """
    now = now or utcnow()
    latest = (now + timedelta(days=MAX_JOB_DURATION_DAYS)).date()
    if isinstance(deadline, datetime):
        deadline = deadline.date()
    if deadline is None or deadline > latest:
        return latest
    return deadline


def _consume_boost(db: Session, employer_email: str) -> bool:
    """Decrement boosts_remaining by one if it is positive. Does not commit."""
    result = db.execute(
        update(Employer)
        .where(Employer.email == employer_email, Employer.boosts_remaining > 0)
        .values(boosts_remaining=Employer.boosts_remaining - 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _no_boosts(employer: Employer) -> Outcome:
    logger.warning(f"Boost rejected, none remaining: employer={employer.email}")
    return Outcome.failure(
        FailureReason.NO_BOOSTS_REMAINING,
        "No boosts left. Upgrade your plan for more boosts.",
        plan=employer.current_plan,
    )


def _quota_exceeded(db: Session, employer_email: str, entitlement) -> Outcome:
    active = count_active_jobs(db, employer_email)
    db.rollback()
    logger.warning(
        f"Quota exceeded: employer={employer_email}, plan={entitlement.plan_id}, "
        f"limit={entitlement.post_quota}, active={active}"
    )
    return Outcome.failure(
        FailureReason.QUOTA_EXCEEDED,
        "Active job post limit reached. Upgrade your plan to post more jobs.",
        plan=entitlement.plan_id,
        limit=entitlement.post_quota,
        active=active,
    )


def try_post_job(
    db: Session,
    employer_email: str,
    job_attrs: Dict[str, Any],
    is_premium: bool = False,
    now: Optional[datetime] = None
) -> Outcome:
    """
    Post a job if the employer's plan has room for another Active job.

    Args:
        db: Database session
        employer_email: Owner of the job
        job_attrs: Job fields (see JOB_FIELDS) plus an optional "deadline"
        is_premium: Boost the job on creation (consumes one boost)
        now: Current time (defaults to UTC now)

    Returns:
        Outcome with data["job"] on success; quota_exceeded,
        no_boosts_remaining or employer_not_found otherwise
    """
    now = now or utcnow()

    with employer_lock(employer_email):
        employer = get_employer(db, employer_email, for_update=True)
        if not employer:
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        entitlement = get_plan_entitlement(employer.current_plan)
        remaining = remaining_posts_for(db, employer)

        if remaining is not None and remaining <= 0:
            return _quota_exceeded(db, employer_email, entitlement)

        if is_premium and (employer.boosts_remaining or 0) <= 0:
            db.rollback()
            return _no_boosts(employer)

        fields = {key: job_attrs.get(key) for key in JOB_FIELDS}
        fields["company_name"] = fields["company_name"] or employer.company_name

        job = Job(
            employer_email=employer_email,
            status=JobStatus.ACTIVE,
            is_premium=bool(is_premium),
            promoted_at=now if is_premium else None,
            deadline=clamp_deadline(job_attrs.get("deadline"), now),
            posted_date=now,
            **fields,
        )
        db.add(job)

        if is_premium and not _consume_boost(db, employer_email):
            db.rollback()
            return _no_boosts(employer)

        db.commit()
        db.refresh(job)
        db.refresh(employer)

    remaining_after = None if remaining is None else remaining - 1
    logger.info(
        f"Job posted: job_id={job.id}, employer={employer_email}, premium={job.is_premium}, "
        f"remaining={remaining_after if remaining_after is not None else 'unlimited'}"
    )

    notify(db, employer_email, f'Job "{job.title}" posted!', NotificationType.SUCCESS)
    if remaining_after is not None and remaining_after <= LOW_QUOTA_WARNING_THRESHOLD:
        notify(
            db,
            employer_email,
            f"Only {remaining_after} job post(s) left on your {entitlement.plan_id.upper()} plan.",
            NotificationType.WARNING,
        )

    return Outcome.success(
        "Job posted",
        job=job,
        job_posts_remaining=remaining_after,
        boosts_remaining=employer.boosts_remaining,
    )


def _owned_job(db: Session, job_id: int, employer_email: str) -> Optional[Job]:
    return db.query(Job).filter(
        Job.id == job_id,
        Job.employer_email == employer_email
    ).first()


def try_promote_job(
    db: Session,
    job_id: int,
    employer_email: str,
    now: Optional[datetime] = None
) -> Outcome:
    """
    Boost one of the employer's jobs, consuming one boost.

    Fails with job_closed for a Closed job, no_boosts_remaining when boosts
    are exhausted and already_promoted when the job is already premium; none
    of these consumes a boost.
    """
    now = now or utcnow()

    with employer_lock(employer_email):
        employer = get_employer(db, employer_email, for_update=True)
        if not employer:
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        job = _owned_job(db, job_id, employer_email)
        if not job:
            db.rollback()
            return Outcome.failure(FailureReason.JOB_NOT_FOUND, "Job not found")

        if job.status != JobStatus.ACTIVE:
            db.rollback()
            return Outcome.failure(FailureReason.JOB_CLOSED, "Closed jobs cannot be boosted", job_id=job_id)

        if (employer.boosts_remaining or 0) <= 0:
            db.rollback()
            return _no_boosts(employer)

        if job.is_premium:
            db.rollback()
            return Outcome.failure(FailureReason.ALREADY_PROMOTED, "Job is already boosted", job_id=job_id)

        if not _consume_boost(db, employer_email):
            db.rollback()
            return _no_boosts(employer)

        job.is_premium = True
        job.promoted_at = now
        db.commit()
        db.refresh(job)
        db.refresh(employer)

    logger.info(f"Job promoted: job_id={job.id}, employer={employer_email}, boosts_left={employer.boosts_remaining}")
    notify(db, employer_email, f'Job "{job.title}" is now boosted.', NotificationType.SUCCESS)

    return Outcome.success("Job promoted", job=job, boosts_remaining=employer.boosts_remaining)


def update_job(
    db: Session,
    job_id: int,
    employer_email: str,
    changes: Dict[str, Any],
    now: Optional[datetime] = None
) -> Outcome:
    """
    Edit one of the employer's jobs.

    Args:
        db: Database session
        job_id: Job to edit
        employer_email: Owner of the job
        changes: Any of JOB_FIELDS plus "deadline" and "status"; absent keys
            are left as they are
        now: Current time (defaults to UTC now)

    Reopening a Closed job counts against the plan's active post quota
    exactly like a new post. A reopened job whose deadline has passed gets
    a fresh maximum deadline unless one is supplied.
    """
    now = now or utcnow()
    new_status = changes.get("status")
    if new_status is not None and new_status not in JobStatus.ALL:
        return Outcome.failure(
            FailureReason.INVALID_JOB_STATUS,
            f"Status must be one of {', '.join(JobStatus.ALL)}",
        )

    with employer_lock(employer_email):
        employer = get_employer(db, employer_email, for_update=True)
        if not employer:
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        job = _owned_job(db, job_id, employer_email)
        if not job:
            db.rollback()
            return Outcome.failure(FailureReason.JOB_NOT_FOUND, "Job not found")

        reopening = job.status == JobStatus.CLOSED and new_status == JobStatus.ACTIVE
        if reopening:
            remaining = remaining_posts_for(db, employer)
            if remaining is not None and remaining <= 0:
                return _quota_exceeded(db, employer_email, get_plan_entitlement(employer.current_plan))

        for key in JOB_FIELDS:
            if key not in changes:
                continue
            if key == "title" and not changes[key]:
                continue
            setattr(job, key, changes[key])

        if "deadline" in changes:
            job.deadline = clamp_deadline(changes["deadline"], now)
        elif reopening and job.deadline < now.date():
            job.deadline = clamp_deadline(None, now)

        previous_status = job.status
        if new_status is not None:
            job.status = new_status

        db.commit()
        db.refresh(job)

    logger.info(
        f"Job updated: job_id={job.id}, employer={employer_email}, "
        f"status={previous_status}->{job.status}"
    )
    return Outcome.success("Job updated", job=job)


def close_job(db: Session, job_id: int, employer_email: str, now: Optional[datetime] = None) -> Outcome:
    """Close one of the employer's jobs, freeing an active post slot."""
    return update_job(db, job_id, employer_email, {"status": JobStatus.CLOSED}, now=now)


def delete_job(db: Session, job_id: int, employer_email: str) -> Outcome:
    """Delete one of the employer's jobs along with its applications."""
    with employer_lock(employer_email):
        job = _owned_job(db, job_id, employer_email)
        if not job:
            return Outcome.failure(FailureReason.JOB_NOT_FOUND, "Job not found")

        db.query(Application).filter(
            Application.job_id == job_id
        ).delete(synchronize_session=False)
        db.delete(job)
        db.commit()

    logger.info(f"Job deleted: job_id={job_id}, employer={employer_email}")
    return Outcome.success("Job deleted", job_id=job_id)


def list_public_jobs(db: Session) -> List[Job]:
    """All jobs: Active before Closed, boosted first, newest first."""
    active_first = case((Job.status == JobStatus.ACTIVE, 0), else_=1)
    return db.query(Job).order_by(
        active_first,
        Job.is_premium.desc(),
        Job.posted_date.desc(),
        Job.id.desc()
    ).all()


def list_employer_jobs(db: Session, employer_email: str) -> List[Job]:
    return db.query(Job).filter(
        Job.employer_email == employer_email
    ).order_by(Job.posted_date.desc(), Job.id.desc()).all()
