"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from workhub.db.models.employer import Employer, VerificationStatus
from workhub.db.models.student import Student
from workhub.db.models.job import Job, JobStatus
from workhub.db.models.subscription_payment import SubscriptionPayment, PaymentStatus
from workhub.db.models.notification import Notification, NotificationType
from workhub.db.models.application import Application

__all__ = [
    "Employer",
    "VerificationStatus",
    "Student",
    "Job",
    "JobStatus",
    "SubscriptionPayment",
    "PaymentStatus",
    "Notification",
    "NotificationType",
    "Application",
]
