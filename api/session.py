"""
api/session.py — per-browser attempt slots, keyed by the cookie session id

A slot holds the running AssessmentSession and the last submitted result.
A slot idle for longer than SESSION_TTL is dropped together with the
history saved under its id, since the browser gets a new id afterwards.
"""

import threading
import time
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

import api.history as history
from config import SESSION_TTL
from testprep_cbt.models.result_model import TestResult
from testprep_cbt.services.session_service import AssessmentSession


class AttemptSlot(BaseModel):
    """What one browser is doing right now."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    engine: Optional[AssessmentSession] = None
    last_result: Optional[TestResult] = None
    # Set when the countdown submitted the attempt and no client has been told yet
    expiry_unacknowledged: bool = False
    touched_at: float = Field(default_factory=time.time)

    def is_stale(self, now: float) -> bool:
        return now - self.touched_at > SESSION_TTL


_lock = threading.Lock()
_slots: dict[str, AttemptSlot] = {}


def open_slot() -> str:
    """Register an empty slot and return its new id."""
    sid = uuid.uuid4().hex
    with _lock:
        _slots[sid] = AttemptSlot()
    return sid


def get_slot(sid: str) -> AttemptSlot | None:
    """Live slot for ``sid`` (access refreshes it); None when unknown or stale."""
    with _lock:
        slot = _slots.get(sid)
        if slot is None:
            return None
        if slot.is_stale(time.time()):
            del _slots[sid]
            slot = None
        else:
            slot.touched_at = time.time()
    if slot is None:
        history.clear_history(sid)
    return slot


def clear_slot(sid: str) -> None:
    """Stop and drop the running attempt and its result; the id stays valid."""
    with _lock:
        slot = _slots.get(sid)
        if slot is None:
            return
        if slot.engine is not None:
            slot.engine.timer.stop()
        _slots[sid] = AttemptSlot()


def cleanup_expired() -> int:
    """Drop stale slots and their history. Returns how many slots went."""
    now = time.time()
    with _lock:
        stale = [sid for sid, slot in _slots.items() if slot.is_stale(now)]
        for sid in stale:
            del _slots[sid]
    for sid in stale:
        history.clear_history(sid)
    return len(stale)
