"""
Admin endpoints: login, payment review, employer verification and a manual
reconcile trigger.
"""
import logging
import secrets
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from workhub.core import config
from workhub.core.auth_dependency import get_db, require_admin
from workhub.core.outcomes import raise_for_outcome
from workhub.core.security import create_access_token
from workhub.db.models.subscription_payment import PaymentStatus
from workhub.schemas.admin import AdminLoginRequest, VerifyEmployerRequest
from workhub.schemas.auth import TokenResponse
from workhub.schemas.subscription import (
    DeclinePaymentRequest,
    PaymentListResponse,
    PaymentResponse,
    ReviewResponse,
)
from workhub.services.moderation_service import verify_employer
from workhub.services.subscription_service import approve_payment, decline_payment, list_payments

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/login", response_model=TokenResponse)
def admin_login(payload: AdminLoginRequest):
    username_ok = secrets.compare_digest(payload.username, config.ADMIN_USERNAME)
    password_ok = secrets.compare_digest(payload.password, config.ADMIN_PASSWORD)
    if not (username_ok and password_ok):
        logger.warning(f"Admin login failed: username={payload.username}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token({"sub": payload.username, "role": "admin"})
    return TokenResponse(access_token=token)


@router.get("/subscription-payments", response_model=PaymentListResponse)
def get_subscription_payments(
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """List subscription payments, newest first, optionally by status."""
    if status_filter and status_filter not in PaymentStatus.ALL:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown status '{status_filter}'")

    payments = list_payments(db, status_filter)
    return PaymentListResponse(
        payments=[PaymentResponse.model_validate(p) for p in payments],
        total=len(payments),
    )


@router.post("/subscription-payments/{payment_id}/approve", response_model=ReviewResponse)
def approve_subscription_payment(
    payment_id: int,
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Approve a pending payment and activate the employer's plan for 30 days."""
    outcome = raise_for_outcome(approve_payment(db, payment_id, reviewer=admin))
    return ReviewResponse(
        message=outcome.message,
        payment=PaymentResponse.model_validate(outcome.data["payment"]),
    )


@router.post("/subscription-payments/{payment_id}/decline", response_model=ReviewResponse)
def decline_subscription_payment(
    payment_id: int,
    payload: Optional[DeclinePaymentRequest] = None,
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    reason = payload.reason if payload else None
    outcome = raise_for_outcome(decline_payment(db, payment_id, reviewer=admin, reason=reason))
    return ReviewResponse(
        message=outcome.message,
        payment=PaymentResponse.model_validate(outcome.data["payment"]),
    )


@router.post("/verify-employer")
def verify_employer_account(
    payload: VerifyEmployerRequest,
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    outcome = raise_for_outcome(
        verify_employer(db, payload.employer_id, admin, payload.approve, payload.reason)
    )
    employer = outcome.data["employer"]
    return {
        "success": True,
        "employer_id": employer.id,
        "verification_status": employer.verification_status,
    }


@router.post("/reconcile")
def run_reconcile(request: Request, admin: str = Depends(require_admin)):
    """
    Run the reconciler sweeps now.

    Returns the per-sweep report, or 409 if a run is already in progress.
    """
    report = request.app.state.reconciler.run_once()
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "reconcile_in_progress", "message": "A reconcile run is already in progress"}
        )

    logger.info(f"Manual reconcile triggered: admin={admin}")
    return {"success": True, "report": report}
