import threading

import pytest
from fastapi import HTTPException

from workhub.core.locks import employer_lock, _lock_for
from workhub.core.outcomes import FailureReason, Outcome, http_status_for, raise_for_outcome


def test_success_passes_through():
    outcome = Outcome.success("done", job_id=3)
    assert raise_for_outcome(outcome) is outcome
    assert outcome.data == {"job_id": 3}


def test_quota_failure_maps_to_403_with_flag():
    outcome = Outcome.failure(FailureReason.QUOTA_EXCEEDED, "Limit reached", plan="free", limit=2, active=2)

    with pytest.raises(HTTPException) as exc_info:
        raise_for_outcome(outcome)

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == {
        "error": "quota_exceeded",
        "message": "Limit reached",
        "limitReached": True,
        "plan": "free",
        "limit": 2,
        "active": 2,
    }


@pytest.mark.parametrize("reason,status_code", [
    (FailureReason.NO_BOOSTS_REMAINING, 403),
    (FailureReason.DUPLICATE_PENDING, 409),
    (FailureReason.PAYMENT_ALREADY_REVIEWED, 409),
    (FailureReason.PAYMENT_NOT_FOUND, 404),
    (FailureReason.INVALID_PLAN, 400),
    (FailureReason.OTP_COOLDOWN, 429),
])
def test_status_codes(reason, status_code):
    assert http_status_for(reason) == status_code


def test_every_reason_has_a_status():
    for reason in FailureReason:
        assert http_status_for(reason) >= 400


def test_employer_lock_is_shared_per_email():
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with employer_lock("HR@acme.lk"):
            entered.set()
            release.wait(timeout=5)

    holder = threading.Thread(target=hold)
    holder.start()
    entered.wait(timeout=5)

    assert _lock_for("hr@acme.lk").locked()
    assert not _lock_for("other@acme.lk").locked()

    release.set()
    holder.join()
    assert not _lock_for("hr@acme.lk").locked()
