from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    student_email: str
    cv_url: str
    applied_at: datetime

    class Config:
        from_attributes = True


class EmployerApplicationResponse(ApplicationResponse):
    """An application as the employer sees it, with applicant details."""
    job_title: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class EmployerApplicationListResponse(BaseModel):
    applications: List[EmployerApplicationResponse]
    total: int


class AppliedJobsResponse(BaseModel):
    applied_job_ids: List[int] = Field(..., description="Jobs the student has applied to")
