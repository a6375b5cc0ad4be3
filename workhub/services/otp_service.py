"""
Email OTP verification for new accounts.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from workhub.core.config import OTP_RESEND_COOLDOWN_SECONDS
from workhub.core.logging_config import sanitize_log_data
from workhub.core.outcomes import Outcome, FailureReason
from workhub.core.security import hash_password
from workhub.services.account_repository import AccountRole, get_account_repository
from workhub.services.notification_service import send_email
from workhub.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    """Six-digit numeric code."""
    return str(100000 + secrets.randbelow(900000))


def _issue_otp(db: Session, account, now: datetime, subject: str) -> None:
    code = generate_otp()
    account.otp_code = code
    account.otp_created_at = now
    db.commit()
    send_email(account.email, subject, f"<p>Your code is: <strong>{code}</strong></p>")


def register_account(
    db: Session,
    role: AccountRole,
    email: str,
    password: str,
    fields: Dict[str, Any],
    now: Optional[datetime] = None
) -> Outcome:
    """
    Create an unverified account and email it an OTP.

    An earlier unverified registration for the same email is replaced.
    """
    now = now or utcnow()
    repo = get_account_repository(role)

    existing = repo.get_by_email(db, email)
    if existing and existing.is_email_verified:
        return Outcome.failure(FailureReason.EMAIL_ALREADY_REGISTERED, "Email already registered")
    if existing:
        db.delete(existing)
        db.flush()

    account = repo.create(
        db,
        email=email,
        password_hash=hash_password(password),
        is_email_verified=False,
        **fields,
    )
    _issue_otp(db, account, now, "Verification Code")
    db.refresh(account)

    logger.info(f"Account registered: role={repo.role.value}, email={email}")
    logger.debug(f"Registration fields: {sanitize_log_data(fields)}")
    return Outcome.success("Verification code sent", account=account, requireOtp=True)


def verify_otp(db: Session, role: AccountRole, email: str, otp: str) -> Outcome:
    """Mark the account verified if the code matches."""
    repo = get_account_repository(role)
    account = repo.get_by_email(db, email)
    if not account:
        return Outcome.failure(FailureReason.ACCOUNT_NOT_FOUND, "Account not found")

    if not account.otp_code or not secrets.compare_digest(account.otp_code, otp or ""):
        logger.warning(f"Invalid OTP: role={repo.role.value}, email={email}")
        return Outcome.failure(FailureReason.INVALID_OTP, "Invalid OTP")

    account.is_email_verified = True
    account.otp_code = None
    db.commit()
    db.refresh(account)

    repo.on_verified(db, account)
    logger.info(f"Account verified: role={repo.role.value}, email={email}")
    return Outcome.success("Email verified", profile=repo.profile(account))


def resend_otp(db: Session, role: AccountRole, email: str, now: Optional[datetime] = None) -> Outcome:
    """Issue a fresh OTP, at most once per OTP_RESEND_COOLDOWN_SECONDS."""
    now = now or utcnow()
    repo = get_account_repository(role)
    account = repo.get_by_email(db, email)
    if not account:
        return Outcome.failure(FailureReason.ACCOUNT_NOT_FOUND, "Account not found")

    if account.otp_created_at:
        elapsed = now - account.otp_created_at
        cooldown = timedelta(seconds=OTP_RESEND_COOLDOWN_SECONDS)
        if elapsed < cooldown:
            return Outcome.failure(
                FailureReason.OTP_COOLDOWN,
                "Please wait before requesting a new code",
                retry_after=int((cooldown - elapsed).total_seconds()) + 1,
            )

    _issue_otp(db, account, now, "New Verification Code")
    return Outcome.success("Verification code sent")
