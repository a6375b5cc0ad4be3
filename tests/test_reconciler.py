"""
Tests for the background reconciler sweeps.
"""
from datetime import datetime, timedelta

import workhub.services.reconciler as reconciler_module
from workhub.db.models.employer import Employer
from workhub.db.models.job import Job, JobStatus
from workhub.services.reconciler import (
    BackgroundReconciler,
    SWEEPS,
    close_expired_jobs,
    downgrade_expired_subscriptions,
    expire_stale_boosts,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)


def test_close_expired_jobs(db, make_employer, make_job):
    make_employer()
    expired = make_job(title="expired", deadline=(NOW - timedelta(days=1)).date())
    today = make_job(title="today", deadline=NOW.date())
    future = make_job(title="future", deadline=(NOW + timedelta(days=5)).date())

    result = close_expired_jobs(db, NOW)

    assert result == {"closed": 1}
    for job in (expired, today, future):
        db.refresh(job)
    assert expired.status == JobStatus.CLOSED
    assert today.status == JobStatus.ACTIVE
    assert future.status == JobStatus.ACTIVE


def test_boost_older_than_ten_days_is_cleared(db, make_employer, make_job):
    make_employer()
    stale = make_job(title="stale", is_premium=True, promoted_at=NOW - timedelta(days=11))
    fresh = make_job(title="fresh", is_premium=True, promoted_at=NOW - timedelta(days=9))

    result = expire_stale_boosts(db, NOW)

    assert result == {"cleared": 1}
    db.refresh(stale)
    db.refresh(fresh)
    assert stale.is_premium is False
    assert fresh.is_premium is True


def test_downgrade_expired_gold_employer(db, make_employer, make_job):
    make_employer(plan="gold", boosts=2, expires_at=NOW - timedelta(minutes=5))
    for i in range(5):
        make_job(title=f"Job {i}", posted_date=NOW - timedelta(days=10 - i))

    result = downgrade_expired_subscriptions(db, NOW)

    assert result == {"downgraded": ["hr@example.com"], "failed": []}
    employer = db.query(Employer).filter(Employer.email == "hr@example.com").first()
    assert employer.current_plan == "free"
    assert employer.boosts_remaining == 0
    active = db.query(Job).filter(Job.status == JobStatus.ACTIVE).order_by(Job.posted_date).all()
    assert [j.title for j in active] == ["Job 3", "Job 4"]


def test_downgrade_skips_current_and_free_employers(db, make_employer):
    make_employer(email="current@example.com", plan="gold", expires_at=NOW + timedelta(days=3))
    make_employer(email="free@example.com", plan="free")

    result = downgrade_expired_subscriptions(db, NOW)

    assert result == {"downgraded": [], "failed": []}


def test_downgrade_failure_is_isolated_per_employer(db, make_employer, monkeypatch):
    make_employer(email="a@example.com", plan="gold", expires_at=NOW - timedelta(days=1))
    make_employer(email="b@example.com", plan="bronze", expires_at=NOW - timedelta(days=1))

    original = reconciler_module.expire_subscription

    def flaky_expire(db, email, now=None):
        if email == "a@example.com":
            raise RuntimeError("boom")
        return original(db, email, now=now)

    monkeypatch.setattr(reconciler_module, "expire_subscription", flaky_expire)

    result = downgrade_expired_subscriptions(db, NOW)

    assert result["failed"] == ["a@example.com"]
    assert result["downgraded"] == ["b@example.com"]
    b = db.query(Employer).filter(Employer.email == "b@example.com").first()
    assert b.current_plan == "free"


def test_run_once_reports_every_sweep(db, session_factory, make_employer, make_job):
    make_employer(plan="bronze", boosts=1, expires_at=NOW - timedelta(days=1))
    make_job(deadline=(NOW - timedelta(days=2)).date())

    report = BackgroundReconciler(session_factory=session_factory).run_once(now=NOW)

    assert set(report) == set(SWEEPS)
    assert report["close_expired_jobs"] == {"ok": True, "closed": 1}
    assert report["expire_stale_boosts"] == {"ok": True, "cleared": 0}
    assert report["downgrade_expired_subscriptions"]["downgraded"] == ["hr@example.com"]


def test_failing_sweep_does_not_stop_the_others(db, session_factory, make_employer, make_job, monkeypatch):
    make_employer()
    job = make_job(is_premium=True, promoted_at=NOW - timedelta(days=20))

    def broken_sweep(db, now):
        raise RuntimeError("database unavailable")

    monkeypatch.setitem(SWEEPS, "close_expired_jobs", broken_sweep)

    report = BackgroundReconciler(session_factory=session_factory).run_once(now=NOW)

    assert report["close_expired_jobs"]["ok"] is False
    assert "database unavailable" in report["close_expired_jobs"]["error"]
    assert report["expire_stale_boosts"] == {"ok": True, "cleared": 1}
    db.refresh(job)
    assert job.is_premium is False


def test_overlapping_run_is_skipped(session_factory):
    reconciler = BackgroundReconciler(session_factory=session_factory)

    reconciler._run_lock.acquire()
    try:
        assert reconciler.run_once(now=NOW) is None
    finally:
        reconciler._run_lock.release()

    assert reconciler.run_once(now=NOW) is not None


def test_start_and_stop(session_factory):
    reconciler = BackgroundReconciler(session_factory=session_factory, startup_delay_seconds=3600)

    reconciler.start()
    try:
        assert reconciler.running
        job_ids = {job.id for job in reconciler._scheduler.get_jobs()}
        assert job_ids == {"reconcile-interval", "reconcile-startup"}
    finally:
        reconciler.stop()

    assert not reconciler.running
