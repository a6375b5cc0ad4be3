from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, CheckConstraint
from sqlalchemy.sql import func
from workhub.db.base import Base


class VerificationStatus:
    PENDING = "pending"
    VERIFIED = "verified"
    DECLINED = "declined"


class Employer(Base):
    """
    Employer account.

    Subscription state lives on this row: current_plan, boosts_remaining and
    subscription_expires_at. Remaining job posts are never stored; they are
    derived from the plan and the live count of Active jobs.
    """
    __tablename__ = "employers"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    br_number = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)

    # Email verification
    is_email_verified = Column(Boolean, default=False, nullable=False)
    otp_code = Column(String(10), nullable=True)
    otp_created_at = Column(DateTime, nullable=True)

    # Admin moderation
    verification_status = Column(String, default=VerificationStatus.PENDING, nullable=False)  # pending | verified | declined
    verified_by = Column(String, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Subscription
    current_plan = Column(String, default="free", nullable=False, index=True)  # free | bronze | gold | platinum
    boosts_remaining = Column(Integer, default=0, nullable=False)
    subscription_expires_at = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("boosts_remaining >= 0", name="ck_employers_boosts_non_negative"),
    )

    def __repr__(self):
        return f"<Employer(id={self.id}, email='{self.email}', plan='{self.current_plan}')>"
