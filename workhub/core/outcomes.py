"""
Operation outcomes for the quota and subscription services.

Services return an Outcome instead of raising across the service boundary.
Routes turn a failed Outcome into an HTTPException with a structured detail
via raise_for_outcome().
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status


class FailureReason(str, Enum):
    EMPLOYER_NOT_FOUND = "employer_not_found"
    QUOTA_EXCEEDED = "quota_exceeded"
    NO_BOOSTS_REMAINING = "no_boosts_remaining"
    ALREADY_PROMOTED = "already_promoted"
    DUPLICATE_PENDING = "duplicate_pending"
    PAYMENT_NOT_FOUND = "payment_not_found"
    PAYMENT_ALREADY_REVIEWED = "payment_already_reviewed"
    INVALID_PLAN = "invalid_plan"
    JOB_NOT_FOUND = "job_not_found"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_OTP = "invalid_otp"
    OTP_COOLDOWN = "otp_cooldown"
    EMAIL_ALREADY_REGISTERED = "email_already_registered"
    JOB_CLOSED = "job_closed"
    INVALID_JOB_STATUS = "invalid_job_status"
    ALREADY_APPLIED = "already_applied"
    CV_REQUIRED = "cv_required"


@dataclass(frozen=True)
class Outcome:
    """Result of a service operation."""
    ok: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "", **data) -> "Outcome":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, reason: FailureReason, message: str, **data) -> "Outcome":
        return cls(ok=False, reason=reason, message=message, data=data)


# reason -> (HTTP status, machine-readable flag for the client)
_HTTP_MAPPING: Dict[FailureReason, Tuple[int, Optional[str]]] = {
    FailureReason.EMPLOYER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, None),
    FailureReason.QUOTA_EXCEEDED: (status.HTTP_403_FORBIDDEN, "limitReached"),
    FailureReason.NO_BOOSTS_REMAINING: (status.HTTP_403_FORBIDDEN, "boostLimitReached"),
    FailureReason.ALREADY_PROMOTED: (status.HTTP_409_CONFLICT, "alreadyPromoted"),
    FailureReason.DUPLICATE_PENDING: (status.HTTP_409_CONFLICT, "pendingPaymentExists"),
    FailureReason.PAYMENT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, None),
    FailureReason.PAYMENT_ALREADY_REVIEWED: (status.HTTP_409_CONFLICT, "alreadyReviewed"),
    FailureReason.INVALID_PLAN: (status.HTTP_400_BAD_REQUEST, "invalidPlan"),
    FailureReason.JOB_NOT_FOUND: (status.HTTP_404_NOT_FOUND, None),
    FailureReason.ACCOUNT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, None),
    FailureReason.INVALID_OTP: (status.HTTP_400_BAD_REQUEST, "invalidOtp"),
    FailureReason.OTP_COOLDOWN: (status.HTTP_429_TOO_MANY_REQUESTS, "retryLater"),
    FailureReason.EMAIL_ALREADY_REGISTERED: (status.HTTP_409_CONFLICT, None),
    FailureReason.JOB_CLOSED: (status.HTTP_409_CONFLICT, "jobClosed"),
    FailureReason.INVALID_JOB_STATUS: (status.HTTP_400_BAD_REQUEST, None),
    FailureReason.ALREADY_APPLIED: (status.HTTP_409_CONFLICT, "alreadyApplied"),
    FailureReason.CV_REQUIRED: (status.HTTP_400_BAD_REQUEST, "cvRequired"),
}


def http_status_for(reason: FailureReason) -> int:
    return _HTTP_MAPPING[reason][0]


def raise_for_outcome(outcome: Outcome) -> Outcome:
    """
    Raise HTTPException for a failed outcome, return it unchanged otherwise.

    The exception detail carries the reason code, the message, the client
    flag (e.g. limitReached) and any extra outcome data.
    """
    if outcome.ok:
        return outcome

    status_code, flag = _HTTP_MAPPING[outcome.reason]
    detail: Dict[str, Any] = {
        "error": outcome.reason.value,
        "message": outcome.message,
    }
    if flag:
        detail[flag] = True
    detail.update(outcome.data)

    raise HTTPException(status_code=status_code, detail=detail)
