"""
Pydantic schemas for admin endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class VerifyEmployerRequest(BaseModel):
    employer_id: int
    approve: bool = Field(..., description="True to verify, False to decline")
    reason: Optional[str] = Field(None, description="Decline reason shown to the employer")
