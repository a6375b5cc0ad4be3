"""
Subscription lifecycle for employer plans.

Free -> pending payment -> Active(plan, expires_at) -> Free again on expiry.
A declined payment leaves the employer's plan untouched.

All transitions that change entitlements run under employer_lock() and load
the employer row FOR UPDATE. Notifications and emails are sent after the
commit and never affect the outcome.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workhub.core.config import SUBSCRIPTION_PERIOD_DAYS
from workhub.core.locks import employer_lock
from workhub.core.outcomes import Outcome, FailureReason
from workhub.core.plan_limits import (
    FREE_PLAN,
    get_plan_entitlement,
    get_post_quota,
    is_purchasable_plan,
    normalize_plan,
)
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.notification import NotificationType
from workhub.db.models.subscription_payment import SubscriptionPayment, PaymentStatus
from workhub.services.notification_service import notify, send_email
from workhub.services.quota_service import get_employer, get_pending_payment
from workhub.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def submit_payment(
    db: Session,
    employer_email: str,
    plan_type: str,
    amount: Decimal,
    receipt_url: Optional[str],
    now: Optional[datetime] = None
) -> Outcome:
    """
    Record a pending payment for a paid plan.

    Fails with duplicate_pending while another payment from the same
    employer is still pending.
    """
    now = now or utcnow()

    if not is_purchasable_plan(plan_type):
        return Outcome.failure(
            FailureReason.INVALID_PLAN,
            f"'{plan_type}' is not a purchasable plan",
            plan=plan_type,
        )
    plan_id = normalize_plan(plan_type)

    with employer_lock(employer_email):
        employer = get_employer(db, employer_email)
        if not employer:
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        if get_pending_payment(db, employer_email):
            logger.warning(f"Duplicate pending payment rejected: employer={employer_email}")
            return Outcome.failure(
                FailureReason.DUPLICATE_PENDING,
                "A payment is already awaiting review",
            )

        payment = SubscriptionPayment(
            employer_email=employer_email,
            plan_type=plan_id,
            amount=amount,
            receipt_url=receipt_url,
            status=PaymentStatus.PENDING,
            submitted_at=now,
        )
        db.add(payment)
        try:
            db.commit()
        except IntegrityError:
            # Another worker inserted a pending payment first
            db.rollback()
            logger.warning(f"Duplicate pending payment rejected by constraint: employer={employer_email}")
            return Outcome.failure(
                FailureReason.DUPLICATE_PENDING,
                "A payment is already awaiting review",
            )
        db.refresh(payment)

    expected = get_plan_entitlement(plan_id).price
    if Decimal(str(amount)) != Decimal(expected):
        logger.warning(
            f"Payment amount differs from plan price: payment_id={payment.id}, "
            f"plan={plan_id}, amount={amount}, price={expected}"
        )

    logger.info(f"Payment submitted: payment_id={payment.id}, employer={employer_email}, plan={plan_id}")

    notify(db, employer_email, "Payment submitted for review.", NotificationType.INFO)
    send_email(
        employer_email,
        "Payment Received",
        f"<p>We received your payment for the {plan_id.upper()} plan. "
        f"It will be activated once our team has reviewed the receipt.</p>",
    )

    return Outcome.success("Payment submitted for review", payment=payment)


def _load_for_review(db: Session, payment_id: int):
    payment = db.query(SubscriptionPayment).filter(SubscriptionPayment.id == payment_id).first()
    if not payment:
        return None, Outcome.failure(FailureReason.PAYMENT_NOT_FOUND, "Payment not found")
    return payment, None


def _already_reviewed(payment: SubscriptionPayment) -> Outcome:
    logger.warning(f"Payment already reviewed: payment_id={payment.id}, status={payment.status}")
    return Outcome.failure(
        FailureReason.PAYMENT_ALREADY_REVIEWED,
        f"Payment was already {payment.status}",
        status=payment.status,
    )


def approve_payment(
    db: Session,
    payment_id: int,
    reviewer: Optional[str],
    now: Optional[datetime] = None
) -> Outcome:
    """
    Approve a pending payment and activate its plan.

    Sets the plan, overwrites boosts_remaining with the plan's boost
    allowance and starts a 30-day period. A payment that is no longer
    pending is rejected with payment_already_reviewed.
    """
    now = now or utcnow()

    payment, failure = _load_for_review(db, payment_id)
    if failure:
        return failure

    with employer_lock(payment.employer_email):
        db.refresh(payment, with_for_update=True)
        if payment.status != PaymentStatus.PENDING:
            db.rollback()
            return _already_reviewed(payment)

        employer = get_employer(db, payment.employer_email, for_update=True)
        if not employer:
            db.rollback()
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        entitlement = get_plan_entitlement(payment.plan_type)
        employer.current_plan = entitlement.plan_id
        employer.boosts_remaining = entitlement.boost_allowance
        employer.subscription_expires_at = now + timedelta(days=SUBSCRIPTION_PERIOD_DAYS)

        payment.status = PaymentStatus.APPROVED
        payment.reviewed_by = reviewer
        payment.reviewed_at = now

        db.commit()
        db.refresh(employer)
        db.refresh(payment)

    logger.info(
        f"Payment approved: payment_id={payment.id}, employer={employer.email}, "
        f"plan={employer.current_plan}, expires_at={employer.subscription_expires_at}"
    )

    notify(db, employer.email, f"Subscription Active: {entitlement.plan_id.upper()}", NotificationType.SUCCESS)
    send_email(
        employer.email,
        "Subscription Activated",
        f"<p>Your {entitlement.name} is now active until "
        f"{employer.subscription_expires_at:%Y-%m-%d}.</p>",
    )

    return Outcome.success("Payment approved", payment=payment, employer=employer)


def decline_payment(
    db: Session,
    payment_id: int,
    reviewer: Optional[str],
    reason: Optional[str],
    now: Optional[datetime] = None
) -> Outcome:
    """Decline a pending payment. The employer's plan is not changed."""
    now = now or utcnow()

    payment, failure = _load_for_review(db, payment_id)
    if failure:
        return failure

    with employer_lock(payment.employer_email):
        db.refresh(payment, with_for_update=True)
        if payment.status != PaymentStatus.PENDING:
            db.rollback()
            return _already_reviewed(payment)

        payment.status = PaymentStatus.DECLINED
        payment.reviewed_by = reviewer
        payment.reviewed_at = now
        payment.decline_reason = reason
        db.commit()
        db.refresh(payment)

    logger.info(f"Payment declined: payment_id={payment.id}, employer={payment.employer_email}")

    notify(db, payment.employer_email, "Subscription Payment Declined", NotificationType.ERROR)
    send_email(
        payment.employer_email,
        "Subscription Payment Declined",
        f"<p>Your payment for the {payment.plan_type.upper()} plan was declined."
        f"{' Reason: ' + reason if reason else ''}</p>",
    )

    return Outcome.success("Payment declined", payment=payment)


def close_excess_jobs(db: Session, employer_email: str, keep: int) -> List[int]:
    """
    Close all but the newest `keep` Active jobs of an employer.

    Does not commit. Returns the ids of the jobs that were closed.
    """
    active_jobs = db.query(Job).filter(
        Job.employer_email == employer_email,
        Job.status == JobStatus.ACTIVE
    ).order_by(Job.posted_date.desc(), Job.id.desc()).all()

    closed_ids = []
    for job in active_jobs[keep:]:
        job.status = JobStatus.CLOSED
        closed_ids.append(job.id)
    return closed_ids


def expire_subscription(db: Session, employer_email: str, now: Optional[datetime] = None) -> Outcome:
    """
    Downgrade an employer whose paid subscription has lapsed.

    Resets the plan to free, zeroes boosts and closes Active jobs beyond the
    free quota, keeping the most recently posted ones. An employer that is
    already free or not yet expired is left alone (data["expired"] is False).
    """
    now = now or utcnow()

    with employer_lock(employer_email):
        employer = get_employer(db, employer_email, for_update=True)
        if not employer:
            return Outcome.failure(FailureReason.EMPLOYER_NOT_FOUND, "Employer not found")

        previous_plan = normalize_plan(employer.current_plan)
        expires_at = employer.subscription_expires_at
        if (employer.current_plan or FREE_PLAN).lower() == FREE_PLAN or expires_at is None or expires_at >= now:
            db.rollback()
            return Outcome.success("Subscription not expired", expired=False, closed_job_ids=[])

        employer.current_plan = FREE_PLAN
        employer.boosts_remaining = 0
        employer.subscription_expires_at = None

        closed_ids = close_excess_jobs(db, employer_email, keep=get_post_quota(FREE_PLAN))
        db.commit()

    logger.info(
        f"Subscription expired: employer={employer_email}, previous_plan={previous_plan}, "
        f"closed_jobs={closed_ids}"
    )

    message = "Subscription expired. Downgraded to Free Plan."
    if closed_ids:
        message += f" {len(closed_ids)} older job post(s) were closed."
    notify(db, employer_email, message, NotificationType.WARNING)
    send_email(
        employer_email,
        "Subscription Expired",
        f"<p>Your {previous_plan.upper()} subscription has expired and your account "
        f"is now on the Free plan.</p>",
    )

    return Outcome.success(
        "Subscription expired",
        expired=True,
        previous_plan=previous_plan,
        closed_job_ids=closed_ids,
    )


def list_payments(db: Session, status: Optional[str] = None) -> List[SubscriptionPayment]:
    """List subscription payments for admin review, newest first."""
    query = db.query(SubscriptionPayment)
    if status:
        query = query.filter(SubscriptionPayment.status == status)
    return query.order_by(SubscriptionPayment.submitted_at.desc(), SubscriptionPayment.id.desc()).all()
