"""
Account repositories for the two account kinds.

Routes that serve both employers and students (OTP verification, resend,
login) pick a repository by AccountRole instead of choosing a table by name.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from workhub.db.models.employer import Employer
from workhub.db.models.student import Student
from workhub.db.models.notification import NotificationType
from workhub.services.notification_service import notify


class AccountRole(str, Enum):
    EMPLOYER = "employer"
    STUDENT = "student"


class AccountRepository(ABC):
    """Data access for one kind of account."""

    role: AccountRole
    model: Any

    def get_by_email(self, db: Session, email: str):
        return db.query(self.model).filter(self.model.email == email).first()

    def create(self, db: Session, **fields):
        """Add a new account to the session. Does not commit."""
        account = self.model(**fields)
        db.add(account)
        return account

    @abstractmethod
    def display_name(self, account) -> str:
        pass

    @abstractmethod
    def profile(self, account) -> Dict[str, Any]:
        """Public profile returned after login or verification."""
        pass

    def on_verified(self, db: Session, account) -> None:
        """Hook run after the account's email is verified."""
        return None


class EmployerAccountRepository(AccountRepository):
    role = AccountRole.EMPLOYER
    model = Employer

    def display_name(self, account: Employer) -> str:
        return account.company_name

    def profile(self, account: Employer) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "email": account.email,
            "name": account.company_name,
            "logo": account.logo_url,
            "verification_status": account.verification_status,
        }

    def on_verified(self, db: Session, account: Employer) -> None:
        notify(db, account.email, "Welcome! Account under review.", NotificationType.INFO)


class StudentAccountRepository(AccountRepository):
    role = AccountRole.STUDENT
    model = Student

    def display_name(self, account: Student) -> str:
        return f"{account.first_name} {account.last_name}"

    def profile(self, account: Student) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "email": account.email,
            "name": self.display_name(account),
            "cv_url": account.cv_url,
        }


_REPOSITORIES: Dict[AccountRole, AccountRepository] = {
    AccountRole.EMPLOYER: EmployerAccountRepository(),
    AccountRole.STUDENT: StudentAccountRepository(),
}


def get_account_repository(role: Optional[AccountRole]) -> AccountRepository:
    """Get the repository for a role (students when no role is given)."""
    return _REPOSITORIES[AccountRole(role) if role else AccountRole.STUDENT]
