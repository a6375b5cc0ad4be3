"""
Job applications.

A student applies to an Active job with a freshly uploaded CV or with the
CV already on their profile. The newest uploaded CV becomes the profile CV.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workhub.core.outcomes import Outcome, FailureReason
from workhub.db.models.application import Application
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.notification import NotificationType
from workhub.db.models.student import Student
from workhub.services.notification_service import notify, send_email
from workhub.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def apply_to_job(
    db: Session,
    student_email: str,
    job_id: int,
    cv_url: Optional[str] = None,
    now: Optional[datetime] = None
) -> Outcome:
    """
    Record a student's application to a job.

    Args:
        db: Database session
        student_email: Applicant
        job_id: Job applied to
        cv_url: URL of a newly uploaded CV; the profile CV is used when None
        now: Current time (defaults to UTC now)

    Returns:
        Outcome with data["application"] on success; account_not_found,
        job_not_found, job_closed, cv_required or already_applied otherwise
    """
    now = now or utcnow()

    student = db.query(Student).filter(Student.email == student_email).first()
    if not student:
        return Outcome.failure(FailureReason.ACCOUNT_NOT_FOUND, "Student not found")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        return Outcome.failure(FailureReason.JOB_NOT_FOUND, "Job not found")
    if job.status != JobStatus.ACTIVE:
        return Outcome.failure(FailureReason.JOB_CLOSED, "This job is no longer accepting applications", job_id=job_id)

    if cv_url:
        student.cv_url = cv_url
    elif not student.cv_url:
        return Outcome.failure(FailureReason.CV_REQUIRED, "No CV found. Upload a PDF to apply.")

    application = Application(
        job_id=job.id,
        student_email=student_email,
        cv_url=student.cv_url,
        applied_at=now,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return Outcome.failure(FailureReason.ALREADY_APPLIED, "You have already applied to this job", job_id=job_id)
    db.refresh(application)

    logger.info(f"Application received: job_id={job.id}, student={student_email}, employer={job.employer_email}")

    notify(db, student_email, f"Applied to {job.company_name or job.title}", NotificationType.SUCCESS)
    notify(db, job.employer_email, f"New application for {job.title}", NotificationType.INFO)
    send_email(
        job.employer_email,
        "New Application",
        f"<p>You have a new applicant for {job.title}.</p>",
    )

    return Outcome.success("Application submitted", application=application)


def list_employer_applications(db: Session, employer_email: str) -> List[Dict[str, Any]]:
    """Applications to any of the employer's jobs with applicant details, newest first."""
    rows = db.query(Application, Job, Student).join(
        Job, Application.job_id == Job.id
    ).outerjoin(
        Student, Student.email == Application.student_email
    ).filter(
        Job.employer_email == employer_email
    ).order_by(Application.applied_at.desc(), Application.id.desc()).all()

    return [
        {
            "id": application.id,
            "job_id": job.id,
            "job_title": job.title,
            "student_email": application.student_email,
            "first_name": student.first_name if student else None,
            "last_name": student.last_name if student else None,
            "phone": student.phone if student else None,
            "cv_url": application.cv_url,
            "applied_at": application.applied_at,
        }
        for application, job, student in rows
    ]


def list_applied_job_ids(db: Session, student_email: str) -> List[int]:
    rows = db.query(Application.job_id).filter(
        Application.student_email == student_email
    ).order_by(Application.id).all()
    return [job_id for (job_id,) in rows]
