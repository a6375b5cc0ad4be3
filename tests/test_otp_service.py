"""
Tests for account registration and OTP verification.
"""
from datetime import datetime, timedelta

from workhub.core.outcomes import FailureReason
from workhub.core.security import verify_password
from workhub.db.models.employer import Employer, VerificationStatus
from workhub.db.models.notification import Notification
from workhub.db.models.student import Student
from workhub.services.account_repository import (
    AccountRole,
    EmployerAccountRepository,
    StudentAccountRepository,
    get_account_repository,
)
from workhub.services.otp_service import generate_otp, register_account, resend_otp, verify_otp

NOW = datetime(2026, 3, 1, 12, 0, 0)

EMPLOYER_FIELDS = {"company_name": "Acme Ltd", "city": "Colombo"}
STUDENT_FIELDS = {"first_name": "Nimal", "last_name": "Perera"}


def test_generate_otp_is_six_digits():
    for _ in range(50):
        code = generate_otp()
        assert len(code) == 6
        assert code.isdigit()


def test_repository_selection():
    assert isinstance(get_account_repository(AccountRole.EMPLOYER), EmployerAccountRepository)
    assert isinstance(get_account_repository("student"), StudentAccountRepository)
    assert isinstance(get_account_repository(None), StudentAccountRepository)


def test_register_employer(db):
    outcome = register_account(db, AccountRole.EMPLOYER, "hr@acme.lk", "SecurePass123", EMPLOYER_FIELDS, now=NOW)

    assert outcome.ok
    assert outcome.data["requireOtp"] is True
    employer = db.query(Employer).filter(Employer.email == "hr@acme.lk").first()
    assert employer.is_email_verified is False
    assert employer.verification_status == VerificationStatus.PENDING
    assert employer.current_plan == "free"
    assert len(employer.otp_code) == 6
    assert employer.otp_created_at == NOW
    assert verify_password("SecurePass123", employer.password_hash)


def test_register_replaces_unverified_account(db):
    register_account(db, AccountRole.STUDENT, "s@uni.lk", "FirstPass123", STUDENT_FIELDS, now=NOW)
    outcome = register_account(db, AccountRole.STUDENT, "s@uni.lk", "SecondPass123", STUDENT_FIELDS, now=NOW)

    assert outcome.ok
    students = db.query(Student).filter(Student.email == "s@uni.lk").all()
    assert len(students) == 1
    assert verify_password("SecondPass123", students[0].password_hash)


def test_register_verified_email_is_rejected(db):
    register_account(db, AccountRole.STUDENT, "s@uni.lk", "FirstPass123", STUDENT_FIELDS, now=NOW)
    student = db.query(Student).filter(Student.email == "s@uni.lk").first()
    verify_otp(db, AccountRole.STUDENT, "s@uni.lk", student.otp_code)

    outcome = register_account(db, AccountRole.STUDENT, "s@uni.lk", "OtherPass123", STUDENT_FIELDS, now=NOW)

    assert outcome.reason == FailureReason.EMAIL_ALREADY_REGISTERED


def test_verify_employer_otp(db):
    register_account(db, AccountRole.EMPLOYER, "hr@acme.lk", "SecurePass123", EMPLOYER_FIELDS, now=NOW)
    employer = db.query(Employer).filter(Employer.email == "hr@acme.lk").first()

    outcome = verify_otp(db, AccountRole.EMPLOYER, "hr@acme.lk", employer.otp_code)

    assert outcome.ok
    assert outcome.data["profile"]["role"] == "employer"
    assert outcome.data["profile"]["name"] == "Acme Ltd"
    db.refresh(employer)
    assert employer.is_email_verified is True
    assert employer.otp_code is None
    messages = [n.message for n in db.query(Notification).filter(Notification.user_email == "hr@acme.lk")]
    assert messages == ["Welcome! Account under review."]


def test_verify_wrong_otp(db):
    register_account(db, AccountRole.STUDENT, "s@uni.lk", "FirstPass123", STUDENT_FIELDS, now=NOW)
    student = db.query(Student).filter(Student.email == "s@uni.lk").first()
    wrong = "000000" if student.otp_code != "000000" else "111111"

    outcome = verify_otp(db, AccountRole.STUDENT, "s@uni.lk", wrong)

    assert outcome.reason == FailureReason.INVALID_OTP
    db.refresh(student)
    assert student.is_email_verified is False


def test_verify_checks_the_right_table(db):
    register_account(db, AccountRole.STUDENT, "s@uni.lk", "FirstPass123", STUDENT_FIELDS, now=NOW)
    student = db.query(Student).filter(Student.email == "s@uni.lk").first()

    outcome = verify_otp(db, AccountRole.EMPLOYER, "s@uni.lk", student.otp_code)

    assert outcome.reason == FailureReason.ACCOUNT_NOT_FOUND


def test_resend_respects_cooldown(db):
    register_account(db, AccountRole.STUDENT, "s@uni.lk", "FirstPass123", STUDENT_FIELDS, now=NOW)

    too_soon = resend_otp(db, AccountRole.STUDENT, "s@uni.lk", now=NOW + timedelta(seconds=60))
    assert too_soon.reason == FailureReason.OTP_COOLDOWN
    assert too_soon.data["retry_after"] == 121

    later = NOW + timedelta(seconds=181)
    assert resend_otp(db, AccountRole.STUDENT, "s@uni.lk", now=later).ok
    student = db.query(Student).filter(Student.email == "s@uni.lk").first()
    assert student.otp_created_at == later


def test_resend_unknown_account(db):
    assert resend_otp(db, AccountRole.EMPLOYER, "ghost@acme.lk").reason == FailureReason.ACCOUNT_NOT_FOUND
