from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Index, text
from workhub.db.base import Base
from workhub.utils.time_utils import utcnow


class PaymentStatus:
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    ALL = (PENDING, APPROVED, DECLINED)


class SubscriptionPayment(Base):
    """
    An employer's claim to move to a paid plan, awaiting admin review.

    Terminal once approved or declined. At most one pending payment exists per
    employer, enforced by a partial unique index.
    """
    __tablename__ = "subscription_payments"

    id = Column(Integer, primary_key=True, index=True)
    employer_email = Column(String, nullable=False, index=True)
    plan_type = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    receipt_url = Column(String, nullable=True)
    status = Column(String, default=PaymentStatus.PENDING, nullable=False, index=True)  # pending | approved | declined
    submitted_at = Column(DateTime, default=utcnow, nullable=False)
    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    decline_reason = Column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_subscription_payments_one_pending",
            "employer_email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )
