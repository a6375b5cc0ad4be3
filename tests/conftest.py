"""
Shared fixtures: an in-memory SQLite database per test and factories for
employers, students and jobs.
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workhub.db.base import Base
from workhub.db.models.employer import Employer, VerificationStatus
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.student import Student
from workhub.db.init_db import init_db

# Fixed clock so expiry and deadline tests are deterministic
NOW = datetime(2026, 3, 1, 12, 0, 0)

TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    init_db(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def session_factory(db):
    """Session factory bound to the test database (for the reconciler)."""
    return TestSessionLocal


@pytest.fixture
def make_employer(db):
    """Create a verified employer on the given plan."""
    def _make(
        email="hr@example.com",
        plan="free",
        boosts=0,
        expires_at=None,
        company_name="Acme Ltd",
    ):
        employer = Employer(
            company_name=company_name,
            email=email,
            password_hash="not-a-real-hash",
            is_email_verified=True,
            verification_status=VerificationStatus.VERIFIED,
            current_plan=plan,
            boosts_remaining=boosts,
            subscription_expires_at=expires_at,
        )
        db.add(employer)
        db.commit()
        db.refresh(employer)
        return employer
    return _make


@pytest.fixture
def make_student(db):
    def _make(email="s@uni.lk", cv_url=None):
        student = Student(
            first_name="Nimal",
            last_name="Perera",
            email=email,
            phone="+94771234567",
            password_hash="not-a-real-hash",
            is_email_verified=True,
            cv_url=cv_url,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _make


@pytest.fixture
def make_job(db):
    """Insert a job directly, bypassing the posting guard."""
    def _make(
        employer_email="hr@example.com",
        title="Barista",
        status=JobStatus.ACTIVE,
        posted_date=None,
        deadline=None,
        is_premium=False,
        promoted_at=None,
    ):
        posted_date = posted_date or NOW
        job = Job(
            employer_email=employer_email,
            company_name="Acme Ltd",
            title=title,
            status=status,
            is_premium=is_premium,
            promoted_at=promoted_at,
            posted_date=posted_date,
            deadline=deadline or (posted_date + timedelta(days=30)).date(),
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        return job
    return _make
