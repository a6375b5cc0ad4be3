"""
Job model for employer job posts.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Numeric, Index
from workhub.db.base import Base
from workhub.utils.time_utils import utcnow


class JobStatus:
    ACTIVE = "Active"
    CLOSED = "Closed"
    ALL = (ACTIVE, CLOSED)


class Job(Base):
    """
    A job post owned by one employer.

    employer_email is a soft reference (no foreign key). A Closed job is
    never reopened automatically; the owner may reopen it if the plan has
    room for another Active post.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_email = Column(String, nullable=False, index=True)

    company_name = Column(String, nullable=True)
    title = Column(String, nullable=False)
    location = Column(String, nullable=True)
    schedule = Column(String, nullable=True)
    hours_per_day = Column(Integer, nullable=True)
    pay_amount = Column(Numeric(10, 2), nullable=True)
    pay_frequency = Column(String, nullable=True)
    category = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    status = Column(String, default=JobStatus.ACTIVE, nullable=False, index=True)  # Active | Closed
    is_premium = Column(Boolean, default=False, nullable=False)
    promoted_at = Column(DateTime, nullable=True)
    deadline = Column(Date, nullable=False)
    posted_date = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Live active-count query for quota checks
    __table_args__ = (
        Index("idx_jobs_employer_status", "employer_email", "status"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status='{self.status}')>"
