"""
Notification dispatcher.

Writes in-app notification rows and sends transactional email. Both are
best-effort: callers invoke them after their own commit, and any failure
here is logged and swallowed so it never undoes the primary operation.
"""
import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from email.message import EmailMessage
from typing import List, Optional
from sqlalchemy.orm import Session

from workhub.core import config
from workhub.db.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)

_email_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="email")


def notify(db: Session, user_email: str, message: str, type: str = NotificationType.INFO) -> Optional[Notification]:
    """
    Write an in-app notification.

    Returns the notification, or None if it could not be stored.
    """
    try:
        notification = Notification(user_email=user_email, message=message, type=type)
        db.add(notification)
        db.commit()
        return notification
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to store notification for {user_email}: {e}", exc_info=True)
        return None


def _deliver_email(to: str, subject: str, html: str) -> None:
    msg = EmailMessage()
    msg["From"] = config.MAIL_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30) as server:
            server.starttls()
            if config.SMTP_USER:
                server.login(config.SMTP_USER, config.SMTP_PASSWORD or "")
            server.send_message(msg)
        logger.info(f"Email sent: to={to}, subject={subject}")
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email delivery failed: to={to}, subject={subject}, error={e}")


def send_email(to: str, subject: str, html: str) -> None:
    """Queue an email for background delivery. Never blocks or raises."""
    if not config.SMTP_HOST:
        logger.debug(f"SMTP not configured, skipping email: to={to}, subject={subject}")
        return
    try:
        _email_executor.submit(_deliver_email, to, subject, html)
    except RuntimeError as e:
        # Executor already shut down
        logger.error(f"Could not queue email to {to}: {e}")


def list_notifications(db: Session, user_email: str) -> List[Notification]:
    """Get a user's notifications, newest first."""
    return db.query(Notification).filter(
        Notification.user_email == user_email
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_read(db: Session, notification_id: int, user_email: str) -> bool:
    """Mark one of the user's notifications read. Returns False if not found."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_email == user_email
    ).first()
    if not notification:
        return False

    notification.is_read = True
    db.commit()
    return True
