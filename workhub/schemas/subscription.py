"""
Pydantic schemas for plan and subscription endpoints.
"""
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field


class PlanResponse(BaseModel):
    """One entry of the plan catalog."""
    id: str = Field(..., description="Plan identifier (free, bronze, gold, platinum)")
    name: str = Field(..., description="Display name")
    price: int = Field(..., description="Price per 30-day period")
    job_posts: Optional[int] = Field(None, description="Active job post quota (None for unlimited)")
    unlimited: bool = Field(..., description="Whether active job posts are unlimited")
    boosts: int = Field(..., description="Boosts granted on activation")
    features: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "gold",
                "name": "GOLD PLAN",
                "price": 7500,
                "job_posts": 10,
                "unlimited": False,
                "boosts": 3,
                "features": ["10 Active Job Posts", "3 Boosts included", "Priority Support"]
            }
        }


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]


class PaymentResponse(BaseModel):
    """Schema for a subscription payment."""
    id: int
    employer_email: str
    plan_type: str
    amount: Decimal
    receipt_url: Optional[str] = None
    status: str = Field(..., description="pending | approved | declined")
    submitted_at: datetime
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    decline_reason: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentListResponse(BaseModel):
    payments: List[PaymentResponse]
    total: int


class SubscriptionResponse(BaseModel):
    """Response schema for GET /employer/subscription/{email}."""
    current_plan: str = Field(..., description="Current plan")
    post_quota: Optional[int] = Field(None, description="Active job post quota (None for unlimited)")
    active_jobs: int = Field(..., description="Jobs currently Active")
    job_posts_remaining: Optional[int] = Field(None, description="Remaining posts (None for unlimited)")
    unlimited: bool = Field(..., description="Whether active job posts are unlimited")
    boosts_remaining: int = Field(..., description="Boosts left in the current period")
    expires_at: Optional[datetime] = Field(None, description="End of the current paid period")
    pending_payment: Optional[PaymentResponse] = Field(None, description="Payment awaiting review")

    class Config:
        json_schema_extra = {
            "example": {
                "current_plan": "bronze",
                "post_quota": 6,
                "active_jobs": 4,
                "job_posts_remaining": 2,
                "unlimited": False,
                "boosts_remaining": 1,
                "expires_at": "2026-02-14T10:00:00",
                "pending_payment": None
            }
        }


class DeclinePaymentRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000, description="Shown to the employer")


class ReviewResponse(BaseModel):
    success: bool = True
    message: str
    payment: PaymentResponse
