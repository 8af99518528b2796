"""
models/result_model.py

Attempt metadata, score and the immutable result handed to persistence.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from testprep_cbt.models.question_model import AnsweredQuestion

TestType = Literal["mock", "practice"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PracticeTestConfig(_CamelModel):
    subject: str
    chapter: str
    number_of_questions: int = Field(..., ge=1)
    complexity_level: Literal["easy", "medium", "hard"] = "medium"


class AttemptInfo(_CamelModel):
    """
    What the host knows about the attempt before it starts.
    retake_attempt_id is set when the result should overwrite an earlier attempt.
    """

    test_type: TestType = "mock"
    test_title: Optional[str] = None
    original_quiz_id: Optional[str] = None
    retake_attempt_id: Optional[str] = None
    config: Optional[PracticeTestConfig] = None


class TestScore(_CamelModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    correct: int = 0
    incorrect: int = 0
    unanswered: int = 0
    total_score: int = 0
    max_score: int = 0


class TestResult(_CamelModel):
    """Final scored snapshot of a finished attempt."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    test_attempt_id: str
    original_quiz_id: Optional[str] = None
    test_type: TestType
    test_title: Optional[str] = None
    date_completed: str = Field(..., description="ISO-8601, UTC")
    score: TestScore
    questions: List[AnsweredQuestion]
    config: Optional[PracticeTestConfig] = None
    time_taken_seconds: int = Field(..., ge=0)


class SubjectScore(_CamelModel):
    subject: str
    total: int
    correct: int
    incorrect: int
    unanswered: int
    marks_obtained: int
    max_marks: int
    percentage: float


class SubjectBreakdown(_CamelModel):
    """Reporting view only; the canonical score lives in TestResult.score."""

    subjects: List[SubjectScore] = Field(default_factory=list)
    strongest: Optional[str] = None
    weakest: Optional[str] = None
