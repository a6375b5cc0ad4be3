"""
Pydantic schemas for job posting endpoints.
"""
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field


class JobCreate(BaseModel):
    """Schema for posting a new job."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    company_name: Optional[str] = Field(None, description="Defaults to the employer's company name")
    location: Optional[str] = Field(None, max_length=255)
    schedule: Optional[str] = Field(None, max_length=100)
    hours_per_day: Optional[int] = Field(None, ge=1, le=6, description="Working hours per day (1-6)")
    pay_amount: Optional[Decimal] = Field(None, ge=0)
    pay_frequency: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    deadline: Optional[date] = Field(None, description="Clamped to at most 30 days from today")
    is_premium: bool = Field(False, description="Boost the job on creation (uses one boost)")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Weekend Barista",
                "location": "Colombo",
                "schedule": "Weekends",
                "hours_per_day": 4,
                "pay_amount": 1500,
                "pay_frequency": "Hourly",
                "category": "Hospitality",
                "description": "Serve coffee on weekends.",
                "deadline": "2026-02-01",
                "is_premium": False
            }
        }


class JobUpdate(BaseModel):
    """Partial edit of a job. Fields left out are not changed."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    company_name: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    schedule: Optional[str] = Field(None, max_length=100)
    hours_per_day: Optional[int] = Field(None, ge=1, le=6)
    pay_amount: Optional[Decimal] = Field(None, ge=0)
    pay_frequency: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    deadline: Optional[date] = Field(None, description="Clamped to at most 30 days from today")
    status: Optional[str] = Field(None, pattern="^(Active|Closed)$", description="Active | Closed")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "Closed"
            }
        }


class PromoteJobRequest(BaseModel):
    job_id: int = Field(..., description="Job to boost")


class JobResponse(BaseModel):
    """Schema for job response."""
    id: int
    employer_email: str
    company_name: Optional[str] = None
    title: str
    location: Optional[str] = None
    schedule: Optional[str] = None
    hours_per_day: Optional[int] = None
    pay_amount: Optional[Decimal] = None
    pay_frequency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    status: str = Field(..., description="Active | Closed")
    is_premium: bool
    promoted_at: Optional[datetime] = None
    deadline: date
    posted_date: datetime

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int


class PostJobResponse(BaseModel):
    success: bool = True
    job: JobResponse
    job_posts_remaining: Optional[int] = Field(None, description="Remaining posts (None for unlimited)")
    boosts_remaining: int


class PromoteJobResponse(BaseModel):
    success: bool = True
    job: JobResponse
    boosts_remaining: int


class JobUpdateResponse(BaseModel):
    success: bool = True
    job: JobResponse
