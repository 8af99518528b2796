"""
models/session_state.py

Answer sheet of one in-progress attempt.
Pydantic BaseModel so the state can be dumped for the API.
No UI code.
"""

import time
from enum import Enum
from typing import Dict, Set

from pydantic import BaseModel, Field


class QuestionStatus(str, Enum):
    ANSWERED = "answered"
    NOT_ANSWERED = "notAnswered"
    MARKED_FOR_REVIEW = "markedForReview"
    MARKED_AND_ANSWERED = "markedAndAnswered"
    NOT_VISITED = "notVisited"


class SubjectSection(BaseModel):
    """Maximal contiguous run of same-subject questions."""

    name: str
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0, description="Inclusive")
    count: int = Field(..., ge=1)


class SessionState(BaseModel):
    """
    Per-question status of the whole attempt.

    Attributes:
        current_index:     Index of the question on screen (0-based).
        answers:           {question.id: selected option text}. Absent = unanswered.
        marked_for_review: Ids flagged by the candidate.
        visited:           Ids that have been the current question at least once.
        is_submitted:      True once a result has been produced.
        started_at:        Unix timestamp of initialization.
    """

    current_index: int = Field(
        default=0,
        ge=0,
        description="Current question index (0-based)"
    )
    answers: Dict[str, str] = Field(
        default_factory=dict,
        description="key: question.id, value: selected option text"
    )
    marked_for_review: Set[str] = Field(default_factory=set)
    visited: Set[str] = Field(default_factory=set)
    is_submitted: bool = Field(
        default=False,
        description="Final submission done"
    )
    started_at: float = Field(
        default_factory=time.time,
        description="Initialization time (Unix timestamp)"
    )
