from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from workhub.core.config import SECRET_KEY, ALGORITHM
from workhub.db.session import SessionLocal
from workhub.db.models.employer import Employer
from workhub.db.models.student import Student

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login-employer")


@dataclass(frozen=True)
class Principal:
    """Authenticated caller taken from the JWT."""
    subject: str
    role: str


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Decode the bearer token into a Principal."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    return Principal(subject=subject, role=payload.get("role", "student"))


def get_current_user(principal: Principal = Depends(get_current_principal)) -> str:
    """Get current user email from JWT token."""
    return principal.subject


def get_current_employer(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
) -> Employer:
    """Get the current Employer object from the JWT token."""
    if principal.role != "employer":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Employer account required")

    employer = db.query(Employer).filter(Employer.email == principal.subject).first()
    if not employer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employer not found")
    return employer


def get_current_student(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
) -> Student:
    if principal.role != "student":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Student account required")

    student = db.query(Student).filter(Student.email == principal.subject).first()
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


def require_admin(principal: Principal = Depends(get_current_principal)) -> str:
    """Admin session check. Returns the admin username."""
    if principal.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal.subject
