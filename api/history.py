"""
api/history.py — in-memory test history, scoped by owner

Insert-or-update by test_attempt_id, so a retake overwrites its earlier
attempt. The owner id is always passed in by the caller.
"""

import logging
import threading

from testprep_cbt.models.result_model import TestResult

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_history: dict[str, dict[str, TestResult]] = {}


def save_result(owner_id: str, result: TestResult) -> bool:
    """
    Store a result for ``owner_id``.

    Returns:
        True if an earlier attempt with the same id was overwritten.
    """
    with _lock:
        entries = _history.setdefault(owner_id, {})
        updated = result.test_attempt_id in entries
        entries[result.test_attempt_id] = result
    action = "updated" if updated else "saved"
    logger.info(f"Test result {result.test_attempt_id} {action}")
    return updated


def get_history(owner_id: str) -> list[TestResult]:
    """All results of ``owner_id``, newest first."""
    with _lock:
        entries = list(_history.get(owner_id, {}).values())
    return sorted(entries, key=lambda r: r.date_completed, reverse=True)


def get_result(owner_id: str, attempt_id: str) -> TestResult | None:
    with _lock:
        return _history.get(owner_id, {}).get(attempt_id)


def delete_result(owner_id: str, attempt_id: str) -> bool:
    with _lock:
        removed = _history.get(owner_id, {}).pop(attempt_id, None)
    if removed is None:
        logger.warning(f"Test result {attempt_id} not found for deletion")
        return False
    logger.info(f"Test result {attempt_id} deleted")
    return True


def clear_history(owner_id: str) -> int:
    with _lock:
        removed = len(_history.pop(owner_id, {}))
    logger.info(f"Cleared {removed} test result(s)")
    return removed
