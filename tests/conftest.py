from typing import List

import pytest

from testprep_cbt.models.question_model import Question


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_question(qid: str, subject: str = "Physics", correct: str = "A") -> Question:
    return Question(
        id=qid,
        subject=subject,
        question_text=f"Question {qid}?",
        options=["A", "B", "C", "D"],
        correct_answer=correct,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sectioned_questions() -> List[Question]:
    """Physics x3, Chemistry x2, Biology x3."""
    subjects = ["Physics"] * 3 + ["Chemistry"] * 2 + ["Biology"] * 3
    return [make_question(f"q{i + 1}", subject) for i, subject in enumerate(subjects)]


@pytest.fixture
def ten_questions() -> List[Question]:
    return [make_question(f"q{i + 1}") for i in range(10)]
