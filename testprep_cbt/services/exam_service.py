"""
services/exam_service.py

Scoring and result analysis.
Pure Python functions: no UI code, no global state changes.

Negative marking: +4 correct, -1 incorrect, 0 unanswered.
An answer is correct when it equals the correct answer after trimming
whitespace and ignoring letter case.
"""

import random
import string
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from config import CORRECT_MARKS, INCORRECT_MARKS, UNANSWERED_MARKS
from testprep_cbt.models.question_model import AnsweredQuestion, Question
from testprep_cbt.models.result_model import (
    AttemptInfo, SubjectBreakdown, SubjectScore, TestResult, TestScore,
)


def _is_unanswered(question: AnsweredQuestion) -> bool:
    return not question.user_answer or not question.user_answer.strip()


def _is_correct(question: AnsweredQuestion) -> bool:
    return question.user_answer.strip().lower() == question.correct_answer.strip().lower()


def mark_for(question: AnsweredQuestion) -> int:
    """Marks awarded for a single question."""
    if _is_unanswered(question):
        return UNANSWERED_MARKS
    if _is_correct(question):
        return CORRECT_MARKS
    return INCORRECT_MARKS


def apply_answers(
    questions: Sequence[Question],
    answers: Dict[str, str],
) -> List[AnsweredQuestion]:
    """
    Snapshot every question with its final answer.

    Args:
        questions: Question set in session order.
        answers:   {question.id: selected option text}

    Returns:
        AnsweredQuestion list in the same order. Missing answers become "".
    """
    return [
        AnsweredQuestion(**q.model_dump(exclude={"user_answer"}), user_answer=answers.get(q.id, ""))
        for q in questions
    ]


def calculate_score(questions: Sequence[AnsweredQuestion]) -> TestScore:
    """
    Aggregate score of the final answer set.

    totalScore = correct * 4 - incorrect * 1, maxScore = N * 4.
    No rounding, no partial credit.
    """
    correct = incorrect = unanswered = 0
    for q in questions:
        if _is_unanswered(q):
            unanswered += 1
        elif _is_correct(q):
            correct += 1
        else:
            incorrect += 1

    return TestScore(
        correct=correct,
        incorrect=incorrect,
        unanswered=unanswered,
        total_score=correct * CORRECT_MARKS + incorrect * INCORRECT_MARKS,
        max_score=len(questions) * CORRECT_MARKS,
    )


def get_incorrect_questions(questions: Sequence[AnsweredQuestion]) -> List[AnsweredQuestion]:
    """Answered but wrong questions, original order kept (review list)."""
    return [q for q in questions if not _is_unanswered(q) and not _is_correct(q)]


def calculate_subject_scores(questions: Sequence[AnsweredQuestion]) -> List[SubjectScore]:
    """
    Per-subject counts and marks, subjects in first-seen order.

    percentage = max(0, marks_obtained / max_marks * 100), rounded to 2 places,
    so a net-negative subject shows 0%.
    """
    buckets: Dict[str, Dict[str, int]] = {}

    for q in questions:
        b = buckets.setdefault(
            q.subject,
            {"total": 0, "correct": 0, "incorrect": 0, "unanswered": 0, "marks": 0},
        )
        b["total"] += 1
        b["marks"] += mark_for(q)
        if _is_unanswered(q):
            b["unanswered"] += 1
        elif _is_correct(q):
            b["correct"] += 1
        else:
            b["incorrect"] += 1

    result = []
    for subject, b in buckets.items():
        max_marks = b["total"] * CORRECT_MARKS
        percentage = round(max(0.0, b["marks"] / max_marks * 100), 2) if max_marks else 0.0
        result.append(SubjectScore(
            subject=subject,
            total=b["total"],
            correct=b["correct"],
            incorrect=b["incorrect"],
            unanswered=b["unanswered"],
            marks_obtained=b["marks"],
            max_marks=max_marks,
            percentage=percentage,
        ))
    return result


def subject_breakdown(questions: Sequence[AnsweredQuestion]) -> SubjectBreakdown:
    """
    Subject scores plus strongest/weakest subject.

    Strongest and weakest are left empty when every subject has the same
    percentage (including the single-subject case).
    """
    subjects = calculate_subject_scores(questions)
    breakdown = SubjectBreakdown(subjects=subjects)
    if len({s.percentage for s in subjects}) > 1:
        breakdown.strongest = max(subjects, key=lambda s: s.percentage).subject
        breakdown.weakest = min(subjects, key=lambda s: s.percentage).subject
    return breakdown


def new_attempt_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"attempt-{int(time.time() * 1000)}-{suffix}"


def build_result(
    questions: Sequence[Question],
    answers: Dict[str, str],
    attempt: AttemptInfo,
    time_taken_seconds: int,
    now: Optional[datetime] = None,
) -> TestResult:
    """
    Score the final answers and wrap them into a TestResult.

    Args:
        questions:          Question set in session order.
        answers:            {question.id: selected option text}
        attempt:            Attempt metadata. retake_attempt_id, when set, is
                            reused so persistence overwrites the earlier attempt.
        time_taken_seconds: duration - remaining, clamped at 0.
        now:                Completion time (defaults to current UTC time).
    """
    answered = apply_answers(questions, answers)
    completed = now or datetime.now(timezone.utc)

    return TestResult(
        test_attempt_id=attempt.retake_attempt_id or new_attempt_id(),
        original_quiz_id=attempt.original_quiz_id,
        test_type=attempt.test_type,
        test_title=attempt.test_title,
        date_completed=completed.isoformat(),
        score=calculate_score(answered),
        questions=answered,
        config=attempt.config,
        time_taken_seconds=max(0, int(time_taken_seconds)),
    )
