from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from workhub.core.auth_dependency import get_db
from workhub.core.outcomes import raise_for_outcome
from workhub.core.security import verify_password, create_access_token
from workhub.db.models.employer import VerificationStatus
from workhub.schemas.auth import (
    EmployerRegisterRequest,
    RegisterResponse,
    ResendOtpRequest,
    StudentRegisterRequest,
    VerifyOtpRequest,
)
from workhub.services.account_repository import AccountRole, get_account_repository
from workhub.services.otp_service import register_account, verify_otp, resend_otp

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_student(payload: StudentRegisterRequest, db: Session = Depends(get_db)):
    fields = payload.model_dump(exclude={"email", "password"})
    raise_for_outcome(
        register_account(db, AccountRole.STUDENT, payload.email, payload.password, fields)
    )
    return RegisterResponse(email=payload.email, role=AccountRole.STUDENT)


@router.post("/register-employer", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_employer(payload: EmployerRegisterRequest, db: Session = Depends(get_db)):
    fields = payload.model_dump(exclude={"email", "password"})
    raise_for_outcome(
        register_account(db, AccountRole.EMPLOYER, payload.email, payload.password, fields)
    )
    return RegisterResponse(email=payload.email, role=AccountRole.EMPLOYER)


@router.post("/verify-otp")
def verify_account_otp(payload: VerifyOtpRequest, db: Session = Depends(get_db)):
    outcome = raise_for_outcome(verify_otp(db, payload.role, payload.email, payload.otp))
    return {"success": True, "user": outcome.data["profile"]}


@router.post("/resend-otp")
def resend_account_otp(payload: ResendOtpRequest, db: Session = Depends(get_db)):
    outcome = raise_for_outcome(resend_otp(db, payload.role, payload.email))
    return {"success": True, "message": outcome.message}


def _login(db: Session, role: AccountRole, form_data: OAuth2PasswordRequestForm):
    # Swagger sends "username", but we treat it as email
    repo = get_account_repository(role)
    account = repo.get_by_email(db, form_data.username)

    if not account or not verify_password(form_data.password, account.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not account.is_email_verified:
        raise HTTPException(
            status_code=403,
            detail={"error": "email_not_verified", "message": "Verify your email first", "requireOtp": True}
        )

    if role == AccountRole.EMPLOYER and account.verification_status == VerificationStatus.DECLINED:
        raise HTTPException(
            status_code=403,
            detail={
                "error": "verification_declined",
                "message": "Account verification was declined",
                "reason": account.rejection_reason,
            }
        )

    token = create_access_token({"sub": account.email, "role": role.value})

    return {
        "access_token": token,
        "token_type": "bearer",
        "user": repo.profile(account),
    }


@router.post("/login")
def login_student(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    return _login(db, AccountRole.STUDENT, form_data)


@router.post("/login-employer")
def login_employer(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    return _login(db, AccountRole.EMPLOYER, form_data)
