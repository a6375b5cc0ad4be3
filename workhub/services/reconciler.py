"""
Background reconciler.

Periodic sweep that restores system-wide consistency independent of
request-time checks:
- closes Active jobs whose deadline has passed
- clears boosts older than BOOST_DURATION_DAYS
- downgrades employers whose paid subscription has lapsed

Sweeps are independent: each runs in its own session and a failure in one
is logged without stopping the others. The downgrade sweep also isolates
failures per employer.
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import func
from sqlalchemy.orm import Session

from workhub.core import config
from workhub.core.plan_limits import FREE_PLAN
from workhub.db.models.employer import Employer
from workhub.db.models.job import Job, JobStatus
from workhub.db.session import SessionLocal
from workhub.services.subscription_service import expire_subscription
from workhub.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def close_expired_jobs(db: Session, now: datetime) -> Dict[str, Any]:
    """Close every Active job whose deadline is before today."""
    closed = db.query(Job).filter(
        Job.status == JobStatus.ACTIVE,
        Job.deadline < now.date()
    ).update({Job.status: JobStatus.CLOSED}, synchronize_session=False)
    db.commit()

    if closed:
        logger.info(f"Closed expired jobs: count={closed}")
    return {"closed": closed}


def expire_stale_boosts(db: Session, now: datetime) -> Dict[str, Any]:
    """Clear is_premium on jobs promoted more than BOOST_DURATION_DAYS ago."""
    cutoff = now - timedelta(days=config.BOOST_DURATION_DAYS)
    cleared = db.query(Job).filter(
        Job.is_premium.is_(True),
        Job.promoted_at < cutoff
    ).update({Job.is_premium: False}, synchronize_session=False)
    db.commit()

    if cleared:
        logger.info(f"Expired stale boosts: count={cleared}")
    return {"cleared": cleared}


def downgrade_expired_subscriptions(db: Session, now: datetime) -> Dict[str, Any]:
    """Expire every lapsed paid subscription, one employer at a time."""
    emails = [
        email for (email,) in db.query(Employer.email).filter(
            Employer.subscription_expires_at < now,
            func.lower(Employer.current_plan) != FREE_PLAN
        ).all()
    ]

    downgraded = []
    failed = []
    for email in emails:
        try:
            outcome = expire_subscription(db, email, now=now)
            if outcome.ok and outcome.data.get("expired"):
                downgraded.append(email)
        except Exception as e:
            db.rollback()
            failed.append(email)
            logger.error(f"Subscription downgrade failed: employer={email}, error={e}", exc_info=True)

    if downgraded or failed:
        logger.info(f"Downgraded expired subscriptions: count={len(downgraded)}, failed={len(failed)}")
    return {"downgraded": downgraded, "failed": failed}


SWEEPS: Dict[str, Callable[[Session, datetime], Dict[str, Any]]] = {
    "close_expired_jobs": close_expired_jobs,
    "expire_stale_boosts": expire_stale_boosts,
    "downgrade_expired_subscriptions": downgrade_expired_subscriptions,
}


class BackgroundReconciler:
    """
    Scheduled owner of the consistency sweeps.

    run_once() never overlaps with itself: a run that starts while another is
    in progress is skipped and returns None.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_hours: int = config.RECONCILE_INTERVAL_HOURS,
        startup_delay_seconds: int = config.RECONCILE_STARTUP_DELAY_SECONDS,
    ):
        self.session_factory = session_factory
        self.interval_hours = interval_hours
        self.startup_delay_seconds = startup_delay_seconds
        self._run_lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def _run_sweep(self, name: str, sweep, now: datetime) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            result = sweep(db, now)
            return {"ok": True, **result}
        except Exception as e:
            db.rollback()
            logger.error(f"Reconciler sweep failed: sweep={name}, error={e}", exc_info=True)
            return {"ok": False, "error": str(e)}
        finally:
            db.close()

    def run_once(self, now: Optional[datetime] = None) -> Optional[Dict[str, Dict[str, Any]]]:
        """
        Run all sweeps now.

        Returns:
            Per-sweep report, or None if another run was already in progress
        """
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Reconciler run skipped: previous run still in progress")
            return None

        try:
            now = now or utcnow()
            logger.info("Reconciler run started")
            report = {name: self._run_sweep(name, sweep, now) for name, sweep in SWEEPS.items()}
            logger.info(f"Reconciler run finished: {report}")
            return report
        finally:
            self._run_lock.release()

    def start(self) -> None:
        """Schedule the daily run plus one run shortly after start."""
        if self.running:
            return

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.run_once,
            trigger="interval",
            hours=self.interval_hours,
            id="reconcile-interval",
            max_instances=1,
            coalesce=True,
        )
        scheduler.add_job(
            self.run_once,
            trigger="date",
            run_date=datetime.now() + timedelta(seconds=self.startup_delay_seconds),
            id="reconcile-startup",
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            f"Reconciler started: interval_hours={self.interval_hours}, "
            f"startup_delay_seconds={self.startup_delay_seconds}"
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Reconciler stopped")
