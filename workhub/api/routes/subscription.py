"""
Plan catalog and employer subscription endpoints.
"""
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from workhub.core.auth_dependency import get_db, get_current_principal, get_current_employer, Principal
from workhub.core.outcomes import raise_for_outcome
from workhub.core.plan_limits import list_plans
from workhub.db.models.employer import Employer
from workhub.schemas.subscription import (
    PlanListResponse,
    PlanResponse,
    PaymentResponse,
    SubscriptionResponse,
)
from workhub.services.file_storage import save_upload
from workhub.services.quota_service import get_subscription_summary
from workhub.services.subscription_service import submit_payment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Subscription"])


@router.get("/subscription/plans", response_model=PlanListResponse)
def get_plans():
    """Static dump of the plan catalog."""
    plans = [
        PlanResponse(
            id=plan.plan_id,
            name=plan.name,
            price=plan.price,
            job_posts=plan.post_quota,
            unlimited=plan.unlimited_posts,
            boosts=plan.boost_allowance,
            features=plan.features,
        )
        for plan in list_plans()
    ]
    return PlanListResponse(plans=plans)


@router.get("/employer/subscription/{email}", response_model=SubscriptionResponse)
def get_subscription(
    email: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """
    Get plan, remaining job posts, remaining boosts and any pending payment.

    Employers may only read their own subscription; admins may read any.
    """
    if principal.role != "admin" and not (principal.role == "employer" and principal.subject == email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this subscription")

    summary = get_subscription_summary(db, email)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employer not found")

    pending = summary["pending_payment"]
    summary["pending_payment"] = PaymentResponse.model_validate(pending) if pending else None
    return SubscriptionResponse(**summary)


@router.post("/subscription/submit-payment", status_code=status.HTTP_201_CREATED)
async def submit_subscription_payment(
    plan_type: str = Form(...),
    amount: Decimal = Form(..., ge=0),
    receipt: UploadFile = File(...),
    employer: Employer = Depends(get_current_employer),
    db: Session = Depends(get_db)
):
    """Submit a receipt for a paid plan. The plan activates after admin approval."""
    receipt_url = await save_upload(receipt, "receipts")

    # submit_payment blocks on the employer lock and the database
    outcome = raise_for_outcome(
        await run_in_threadpool(submit_payment, db, employer.email, plan_type, amount, receipt_url)
    )
    return {
        "success": True,
        "message": outcome.message,
        "payment": PaymentResponse.model_validate(outcome.data["payment"]),
    }
