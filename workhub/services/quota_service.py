"""
Quota service for employer job-post and boost entitlements.

Remaining job posts are always derived from the employer's plan and the live
count of Active jobs; nothing here caches or stores a decrementing post
counter. Boosts are the exception: they are a stored counter consumed one at
a time by posting or promoting.
"""
import logging
from typing import Dict, Optional, Any
from sqlalchemy import func
from sqlalchemy.orm import Session

from workhub.core.plan_limits import get_plan_entitlement, normalize_plan
from workhub.db.models.employer import Employer
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.subscription_payment import SubscriptionPayment, PaymentStatus

logger = logging.getLogger(__name__)


def get_employer(db: Session, employer_email: str, for_update: bool = False) -> Optional[Employer]:
    """
    Fetch an employer by email.

    Args:
        db: Database session
        employer_email: Employer email
        for_update: Lock the row (SELECT ... FOR UPDATE) until commit

    Returns:
        Employer or None
    """
    query = db.query(Employer).filter(Employer.email == employer_email)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_plan_for_employer(db: Session, employer_email: str) -> str:
    """Get the employer's normalized plan, defaulting to 'free'."""
    employer = get_employer(db, employer_email)
    if not employer:
        return "free"
    return normalize_plan(employer.current_plan)


def count_active_jobs(db: Session, employer_email: str) -> int:
    """Count the employer's jobs with status Active."""
    count = db.query(func.count(Job.id)).filter(
        Job.employer_email == employer_email,
        Job.status == JobStatus.ACTIVE
    ).scalar()
    return int(count or 0)


def remaining_posts_for(db: Session, employer: Employer) -> Optional[int]:
    """
    Remaining job posts for an already-loaded employer.

    Returns:
        Remaining posts (>= 0), or None when the plan is unlimited
    """
    quota = get_plan_entitlement(employer.current_plan).post_quota
    if quota is None:
        # Unlimited plan: skip the count query
        return None

    active = count_active_jobs(db, employer.email)
    return max(0, quota - active)


def remaining_job_posts(db: Session, employer_email: str) -> Optional[int]:
    """
    Get the employer's remaining job-post capacity.

    Args:
        db: Database session
        employer_email: Employer email

    Returns:
        Remaining posts (>= 0; 0 for an unknown employer), or None for unlimited
    """
    employer = get_employer(db, employer_email)
    if not employer:
        return 0
    return remaining_posts_for(db, employer)


def remaining_boosts(db: Session, employer_email: str) -> int:
    """Get the employer's stored boost counter (0 for an unknown employer)."""
    employer = get_employer(db, employer_email)
    if not employer:
        return 0
    return max(0, employer.boosts_remaining or 0)


def get_pending_payment(db: Session, employer_email: str) -> Optional[SubscriptionPayment]:
    return db.query(SubscriptionPayment).filter(
        SubscriptionPayment.employer_email == employer_email,
        SubscriptionPayment.status == PaymentStatus.PENDING
    ).first()


def get_subscription_summary(db: Session, employer_email: str) -> Optional[Dict[str, Any]]:
    """
    Get subscription data formatted for GET /employer/subscription/{email}.

    Returns:
        Dictionary with plan, quota and pending payment details, or None if
        the employer does not exist
    """
    employer = get_employer(db, employer_email)
    if not employer:
        return None

    entitlement = get_plan_entitlement(employer.current_plan)
    remaining = remaining_posts_for(db, employer)
    pending = get_pending_payment(db, employer_email)

    return {
        "current_plan": entitlement.plan_id,
        "post_quota": entitlement.post_quota,
        "active_jobs": count_active_jobs(db, employer_email),
        "job_posts_remaining": remaining,
        "unlimited": remaining is None,
        "boosts_remaining": max(0, employer.boosts_remaining or 0),
        "expires_at": employer.subscription_expires_at,
        "pending_payment": pending,
    }
