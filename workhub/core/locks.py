"""
Per-employer serialization for quota-affecting operations.

Posting, promoting, approving and expiring all read an employer's
entitlements and then write against them. Holding employer_lock() across
the whole read-modify-write keeps two requests for the same employer from
both passing the same check.
"""
import threading
from contextlib import contextmanager
from typing import Dict

_registry_lock = threading.Lock()
_employer_locks: Dict[str, threading.Lock] = {}


def _lock_for(key: str) -> threading.Lock:
    with _registry_lock:
        lock = _employer_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _employer_locks[key] = lock
        return lock


@contextmanager
def employer_lock(employer_email: str):
    """Hold the process-wide lock for one employer."""
    lock = _lock_for((employer_email or "").strip().lower())
    with lock:
        yield
