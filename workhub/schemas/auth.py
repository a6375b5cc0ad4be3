"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from workhub.services.account_repository import AccountRole

PHONE_PATTERN = r"^\+94\d{9,10}$"


class _PasswordMixin(BaseModel):
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v


class StudentRegisterRequest(_PasswordMixin):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    city: Optional[str] = Field(None, max_length=100)


class EmployerRegisterRequest(_PasswordMixin):
    company_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    br_number: Optional[str] = Field(None, max_length=100)
    industry: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)

    class Config:
        json_schema_extra = {
            "example": {
                "company_name": "Expired Co",
                "email": "hr@example.com",
                "password": "SecurePass123",
                "phone": "+94771234567",
                "city": "Colombo"
            }
        }


class RegisterResponse(BaseModel):
    success: bool = True
    requireOtp: bool = True
    email: str
    role: AccountRole


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=6, max_length=6)
    role: AccountRole = AccountRole.STUDENT


class ResendOtpRequest(BaseModel):
    email: EmailStr
    role: AccountRole = AccountRole.STUDENT


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
