from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from workhub.db.base import Base
from workhub.utils.time_utils import utcnow


class Application(Base):
    """
    A student's application to a job, with the CV they applied with.

    student_email is a soft reference like Job.employer_email. One
    application per student per job.
    """
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    student_email = Column(String, nullable=False, index=True)
    cv_url = Column(String, nullable=False)
    applied_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("job_id", "student_email", name="uq_applications_job_student"),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, student='{self.student_email}')>"
