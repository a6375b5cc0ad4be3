"""
Tests for job applications: CV handling, duplicates, listings.
"""
from datetime import datetime

from workhub.core.outcomes import FailureReason
from workhub.db.models.job import JobStatus
from workhub.db.models.notification import Notification
from workhub.db.models.student import Student
from workhub.services.application_service import (
    apply_to_job,
    list_applied_job_ids,
    list_employer_applications,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)
CV = "http://files.test/uploads/cvs/1-cv.pdf"


def _messages(db, email):
    return [n.message for n in db.query(Notification).filter(Notification.user_email == email).all()]


def test_apply_with_new_cv(db, make_employer, make_student, make_job):
    make_employer()
    make_student()
    job = make_job(title="Barista")

    outcome = apply_to_job(db, "s@uni.lk", job.id, cv_url=CV, now=NOW)

    assert outcome.ok
    application = outcome.data["application"]
    assert application.cv_url == CV
    assert application.applied_at == NOW
    assert db.query(Student).filter(Student.email == "s@uni.lk").first().cv_url == CV
    assert _messages(db, "s@uni.lk") == ["Applied to Acme Ltd"]
    assert _messages(db, "hr@example.com") == ["New application for Barista"]


def test_apply_with_profile_cv(db, make_employer, make_student, make_job):
    make_employer()
    make_student(cv_url=CV)
    job = make_job()

    outcome = apply_to_job(db, "s@uni.lk", job.id, now=NOW)

    assert outcome.ok
    assert outcome.data["application"].cv_url == CV


def test_apply_without_any_cv(db, make_employer, make_student, make_job):
    make_employer()
    make_student()
    job = make_job()

    assert apply_to_job(db, "s@uni.lk", job.id, now=NOW).reason == FailureReason.CV_REQUIRED


def test_apply_twice_is_rejected(db, make_employer, make_student, make_job):
    make_employer()
    make_student(cv_url=CV)
    job = make_job()
    assert apply_to_job(db, "s@uni.lk", job.id, now=NOW).ok

    outcome = apply_to_job(db, "s@uni.lk", job.id, now=NOW)

    assert outcome.reason == FailureReason.ALREADY_APPLIED
    assert list_applied_job_ids(db, "s@uni.lk") == [job.id]


def test_apply_to_closed_job(db, make_employer, make_student, make_job):
    make_employer()
    make_student(cv_url=CV)
    job = make_job(status=JobStatus.CLOSED)

    assert apply_to_job(db, "s@uni.lk", job.id, now=NOW).reason == FailureReason.JOB_CLOSED


def test_apply_to_missing_job_or_as_unknown_student(db, make_student):
    make_student(cv_url=CV)

    assert apply_to_job(db, "s@uni.lk", 999, now=NOW).reason == FailureReason.JOB_NOT_FOUND
    assert apply_to_job(db, "ghost@uni.lk", 999, now=NOW).reason == FailureReason.ACCOUNT_NOT_FOUND


def test_employer_sees_applications_to_own_jobs(db, make_employer, make_student, make_job):
    make_employer()
    make_student(cv_url=CV)
    mine = make_job(title="Barista")
    theirs = make_job(employer_email="other@example.com", title="Waiter")
    apply_to_job(db, "s@uni.lk", mine.id, now=NOW)
    apply_to_job(db, "s@uni.lk", theirs.id, now=NOW)

    applications = list_employer_applications(db, "hr@example.com")

    assert len(applications) == 1
    assert applications[0]["job_title"] == "Barista"
    assert applications[0]["first_name"] == "Nimal"
    assert applications[0]["cv_url"] == CV
    assert sorted(list_applied_job_ids(db, "s@uni.lk")) == sorted([mine.id, theirs.id])
