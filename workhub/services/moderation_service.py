"""
Admin moderation of employer accounts.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from workhub.core.outcomes import Outcome, FailureReason
from workhub.db.models.employer import Employer, VerificationStatus
from workhub.db.models.notification import NotificationType
from workhub.services.notification_service import notify, send_email

logger = logging.getLogger(__name__)


def verify_employer(
    db: Session,
    employer_id: int,
    reviewer: str,
    approve: bool,
    reason: Optional[str] = None
) -> Outcome:
    """Mark an employer verified or declined and tell them about it."""
    employer = db.query(Employer).filter(Employer.id == employer_id).first()
    if not employer:
        return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

    employer.verified_by = reviewer
    if approve:
        employer.verification_status = VerificationStatus.VERIFIED
        employer.rejection_reason = None
    else:
        employer.verification_status = VerificationStatus.DECLINED
        employer.rejection_reason = reason
    db.commit()
    db.refresh(employer)

    logger.info(
        f"Employer reviewed: employer={employer.email}, "
        f"status={employer.verification_status}, reviewer={reviewer}"
    )

    if approve:
        notify(db, employer.email, "Account verified!", NotificationType.SUCCESS)
        send_email(
            employer.email,
            "Account Verified",
            f"<p>Congratulations {employer.company_name}, your account is verified!</p>",
        )
    else:
        notify(db, employer.email, f"Verification Declined: {reason or 'no reason given'}", NotificationType.ERROR)
        send_email(
            employer.email,
            "Verification Declined",
            f"<p>Your account verification was declined. Reason: {reason or 'not specified'}</p>",
        )

    return Outcome.success("Employer reviewed", employer=employer)
