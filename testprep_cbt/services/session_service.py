"""
services/session_service.py

One timed attempt: answer sheet, navigation, countdown and submission.

Single owner, single thread of control. Every operation either succeeds or
raises a SessionError without touching the state. Submission is one-shot:
after submit() the host should drop the session.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from testprep_cbt.errors import IndexOutOfRange, InvalidConfiguration, InvalidState, UnknownQuestion
from testprep_cbt.models.question_model import Question, find_unscorable
from testprep_cbt.models.result_model import AttemptInfo, TestResult
from testprep_cbt.models.session_state import QuestionStatus, SessionState, SubjectSection
from testprep_cbt.services.exam_service import build_result
from testprep_cbt.services.navigation import compute_subject_sections, next_index, section_for_index
from testprep_cbt.services.timer import CountdownTimer

logger = logging.getLogger(__name__)

StatusCounts = Dict[QuestionStatus, int]


class AssessmentSession:
    """
    Timed assessment session engine.

    Args:
        on_timer_expire:  Called when the countdown reaches zero. The host
                          decides whether to submit.
        on_status_change: Called with status_counts() after every mutation.
        clock:            Monotonic clock handed to the countdown timer.
    """

    def __init__(
        self,
        on_timer_expire: Optional[Callable[[], None]] = None,
        on_status_change: Optional[Callable[[StatusCounts], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_timer_expire = on_timer_expire
        self.on_status_change = on_status_change
        self.timer = CountdownTimer(on_expire=self._handle_expire, clock=clock)

        self.questions: List[Question] = []
        self.state = SessionState()
        self.attempt = AttemptInfo()
        self.duration_seconds = 0
        self._sections: List[SubjectSection] = []
        self._index_by_id: Dict[str, int] = {}

    # ── lifecycle ────────────────────────────────────────────────────────────

    def initialize(
        self,
        questions: Sequence[Question],
        duration_seconds: int,
        attempt: Optional[AttemptInfo] = None,
    ) -> None:
        """
        Load a question set and reset the answer sheet.

        Answers always start cleared, also on a retake where the questions
        come from a stored result that still carries user answers.

        Raises:
            InvalidConfiguration: empty question set or non-positive duration.
        """
        if not questions:
            raise InvalidConfiguration("question set is empty")
        if duration_seconds <= 0:
            raise InvalidConfiguration(f"duration must be positive, got {duration_seconds}s")

        self.timer.stop()
        self.questions = [
            Question(**q.model_dump(include=set(Question.model_fields))) for q in questions
        ]
        self._index_by_id = {q.id: i for i, q in enumerate(self.questions)}
        self._sections = compute_subject_sections(self.questions)
        self.duration_seconds = int(duration_seconds)
        self.attempt = attempt or AttemptInfo()
        self.state = SessionState()
        self.state.visited.add(self.questions[0].id)

        unscorable = find_unscorable(self.questions)
        if unscorable:
            logger.warning(
                f"{len(unscorable)} question(s) have a correct answer outside their options: "
                f"{', '.join(unscorable[:10])}"
            )
        logger.info(
            f"Session initialized: {len(self.questions)} questions, "
            f"{len(self._sections)} section(s), {self.duration_seconds}s"
        )
        self._notify()

    def start(self) -> None:
        """Start (or restart) the countdown from the full duration."""
        self._require_active()
        self.timer.start(self.duration_seconds)

    def submit(self) -> TestResult:
        """
        Stop the countdown and score the attempt. One-shot.

        Raises:
            InvalidState: nothing loaded, or already submitted.
        """
        self._require_active()
        self.timer.stop()
        result = build_result(
            self.questions,
            self.state.answers,
            self.attempt,
            time_taken_seconds=self.timer.elapsed_seconds,
        )
        self.state.is_submitted = True
        logger.info(
            f"Attempt {result.test_attempt_id} submitted: "
            f"{result.score.total_score}/{result.score.max_score} in {result.time_taken_seconds}s"
        )
        return result

    # ── answer sheet ─────────────────────────────────────────────────────────

    def set_answer(self, question_id: str, option_text: str) -> None:
        """Record the selected option. A blank or whitespace-only string clears the answer."""
        self._require_active()
        self._require_question(question_id)
        if option_text.strip():
            self.state.answers[question_id] = option_text
        else:
            self.state.answers.pop(question_id, None)
        self._notify()

    def clear_answer(self, question_id: str) -> None:
        self._require_active()
        self._require_question(question_id)
        self.state.answers.pop(question_id, None)
        self._notify()

    def toggle_mark(self, question_id: str) -> None:
        self._require_active()
        self._require_question(question_id)
        marked = self.state.marked_for_review
        if question_id in marked:
            marked.discard(question_id)
        else:
            marked.add(question_id)
        self._notify()

    def visit(self, question_id: str) -> None:
        self._require_active()
        self._require_question(question_id)
        self.state.visited.add(question_id)
        self._notify()

    def status_of(self, question_id: str) -> QuestionStatus:
        self._require_question(question_id)
        is_answered = bool(self.state.answers.get(question_id))
        is_marked = question_id in self.state.marked_for_review

        if is_answered and is_marked:
            return QuestionStatus.MARKED_AND_ANSWERED
        if is_answered:
            return QuestionStatus.ANSWERED
        if is_marked:
            return QuestionStatus.MARKED_FOR_REVIEW
        if question_id in self.state.visited:
            return QuestionStatus.NOT_ANSWERED
        return QuestionStatus.NOT_VISITED

    def status_counts(self) -> StatusCounts:
        counts = {status: 0 for status in QuestionStatus}
        for q in self.questions:
            counts[self.status_of(q.id)] += 1
        return counts

    # ── navigation ───────────────────────────────────────────────────────────

    def advance(self, mark_current_first: bool = False) -> int:
        """
        Save & Next (or Mark & Next with ``mark_current_first``).

        At the last index only the optional mark toggle happens.

        Returns:
            The current index after the move.
        """
        self._require_active()
        index = self.state.current_index
        if mark_current_first:
            self.toggle_mark(self.questions[index].id)

        target = next_index(index, len(self.questions), self._sections)
        if target is not None:
            self._move_to(target)
        return self.state.current_index

    def go_to(self, index: int) -> None:
        """Direct palette selection. No section rules apply."""
        self._require_active()
        if not 0 <= index < len(self.questions):
            raise IndexOutOfRange(f"index {index} outside [0, {len(self.questions)})")
        self._move_to(index)

    def go_to_previous(self) -> None:
        self._require_active()
        if self.state.current_index > 0:
            self._move_to(self.state.current_index - 1)

    # ── read-only views ──────────────────────────────────────────────────────

    @property
    def is_initialized(self) -> bool:
        return bool(self.questions)

    @property
    def is_submitted(self) -> bool:
        return self.state.is_submitted

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def current_question(self) -> Optional[Question]:
        """None when no question set is loaded."""
        if not self.questions:
            return None
        return self.questions[self.state.current_index]

    @property
    def is_last_question(self) -> bool:
        return bool(self.questions) and self.state.current_index == len(self.questions) - 1

    @property
    def subject_sections(self) -> List[SubjectSection]:
        return list(self._sections)

    @property
    def current_section(self) -> Optional[SubjectSection]:
        return section_for_index(self._sections, self.state.current_index)

    def answer_of(self, question_id: str) -> str:
        self._require_question(question_id)
        return self.state.answers.get(question_id, "")

    # ── internals ────────────────────────────────────────────────────────────

    def _move_to(self, index: int) -> None:
        self.state.current_index = index
        self.visit(self.questions[index].id)

    def _require_active(self) -> None:
        if not self.questions:
            raise InvalidState("session is not initialized")
        if self.state.is_submitted:
            raise InvalidState("session is already submitted")

    def _require_question(self, question_id: str) -> None:
        if question_id not in self._index_by_id:
            raise UnknownQuestion(f"question '{question_id}' is not in this set")

    def _handle_expire(self) -> None:
        logger.info("Time is up")
        if self.on_timer_expire:
            self.on_timer_expire()

    def _notify(self) -> None:
        if self.on_status_change:
            self.on_status_change(self.status_counts())
