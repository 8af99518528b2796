"""
api/routes.py — FastAPI endpoints driving the assessment engine
"""

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.history as history
import api.session as session
import config
from api.sample_questions import SAMPLE_QUESTIONS, SAMPLE_QUIZ_ID
from testprep_cbt.errors import (
    IndexOutOfRange, InvalidConfiguration, InvalidState, SchemaViolation,
    SessionError, UnknownQuestion,
)
from testprep_cbt.models.question_model import Question, generate_quiz_id, parse_question_set
from testprep_cbt.models.result_model import AttemptInfo, PracticeTestConfig, TestResult
from testprep_cbt.services.exam_service import get_incorrect_questions, subject_breakdown
from testprep_cbt.services.session_service import AssessmentSession
from testprep_cbt.services.timer import format_duration

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartExamBody(BaseModel):
    questions: Any
    duration_minutes: Optional[int] = None
    test_type: Literal["mock", "practice"] = "mock"
    test_title: Optional[str] = None
    quiz_id: Optional[str] = None
    config: Optional[PracticeTestConfig] = None

class RetakeBody(BaseModel):
    attempt_id: Optional[str] = None

class QuestionIdBody(BaseModel):
    question_id: str

class SaveAnswerBody(BaseModel):
    question_id: str
    answer: str

class NavigateBody(BaseModel):
    index: int = 0

class SaveNextBody(BaseModel):
    mark: bool = False


# ── helpers ──────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _http_error(e: SessionError) -> HTTPException:
    if isinstance(e, InvalidConfiguration):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (IndexOutOfRange, UnknownQuestion)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidState):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _default_duration(test_type: str, question_count: int) -> int:
    if test_type == "practice":
        return max(1, question_count * config.PRACTICE_TEST_MINUTES_PER_QUESTION)
    return config.MOCK_TEST_DURATION_MINUTES


def _slot(sid: str) -> session.AttemptSlot:
    slot = session.get_slot(sid)
    if slot is None:
        raise HTTPException(status_code=404, detail="Session expired.")
    return slot


def _finalize(sid: str, slot: session.AttemptSlot, by_timer: bool = False) -> TestResult:
    """Score the attempt, then persist. The result stays available even if saving fails."""
    result = slot.engine.submit()
    slot.last_result = result
    slot.expiry_unacknowledged = by_timer
    try:
        history.save_result(sid, result)
    except Exception:
        logger.exception(f"Failed to save test result {result.test_attempt_id}")
        raise HTTPException(status_code=500, detail="Result computed but could not be saved.")
    return result


def _engine(sid: str) -> AssessmentSession:
    """Running engine of this session, with the countdown caught up. Auto-submits on expiry."""
    slot = _slot(sid)
    engine = slot.engine
    if engine is None or not engine.is_initialized:
        raise HTTPException(status_code=404, detail="No exam session.")
    engine.timer.sync()
    if engine.timer.is_expired and not engine.is_submitted:
        logger.info("Time is up, submitting automatically")
        _finalize(sid, slot, by_timer=True)
    return engine


def _start(
    sid: str,
    questions: list[Question],
    duration_minutes: int,
    attempt: AttemptInfo,
) -> AssessmentSession:
    engine = AssessmentSession()
    try:
        engine.initialize(questions, duration_minutes * 60, attempt)
        engine.start()
    except SessionError as e:
        raise _http_error(e)
    slot = _slot(sid)
    if slot.engine is not None:
        slot.engine.timer.stop()
    slot.engine = engine
    slot.expiry_unacknowledged = False
    return engine


def _timer_to_dict(engine: AssessmentSession) -> dict:
    timer = engine.timer
    return {
        "state": timer.state.value,
        "seconds_remaining": timer.seconds_remaining,
        "clock": timer.format_clock(),
        "is_warning": timer.is_warning,
    }


# ── exam lifecycle ───────────────────────────────────────────────────────────

@router.get("/api/health")
async def health():
    return {"status": "ok"}


@router.post("/api/start-exam")
async def start_exam(body: StartExamBody, request: Request):
    sid = _sid(request)
    try:
        questions = parse_question_set(body.questions, id_prefix=body.test_type)
    except SchemaViolation as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    if not questions:
        raise HTTPException(status_code=400, detail="No questions to start the exam with.")

    quiz_id = body.quiz_id or generate_quiz_id(
        body.test_type,
        body.config.subject if body.config else None,
        body.config.chapter if body.config else None,
    )
    duration = body.duration_minutes
    if duration is None:
        duration = _default_duration(body.test_type, len(questions))

    attempt = AttemptInfo(
        test_type=body.test_type,
        test_title=body.test_title,
        original_quiz_id=quiz_id,
        config=body.config,
    )
    engine = _start(sid, questions, duration, attempt)
    return {"total": len(engine.questions), "quiz_id": quiz_id, "ok": True}


@router.post("/api/start-sample-exam")
async def start_sample_exam(request: Request):
    attempt = AttemptInfo(test_type="mock", test_title="Sample Test", original_quiz_id=SAMPLE_QUIZ_ID)
    engine = _start(_sid(request), SAMPLE_QUESTIONS, config.SAMPLE_TEST_DURATION_MINUTES, attempt)
    return {"total": len(engine.questions), "quiz_id": SAMPLE_QUIZ_ID, "ok": True}


@router.post("/api/retake-exam")
async def retake_exam(request: Request, body: Optional[RetakeBody] = None):
    sid = _sid(request)
    if body and body.attempt_id:
        previous = history.get_result(sid, body.attempt_id)
    else:
        previous = _slot(sid).last_result
    if previous is None:
        raise HTTPException(status_code=404, detail="No previous attempt to retake.")

    attempt = AttemptInfo(
        test_type=previous.test_type,
        test_title=previous.test_title,
        original_quiz_id=previous.original_quiz_id,
        retake_attempt_id=previous.test_attempt_id,
        config=previous.config,
    )
    duration = _default_duration(previous.test_type, len(previous.questions))
    if previous.original_quiz_id == SAMPLE_QUIZ_ID:
        duration = config.SAMPLE_TEST_DURATION_MINUTES
    engine = _start(sid, previous.questions, duration, attempt)
    return {"total": len(engine.questions), "attempt_id": previous.test_attempt_id, "ok": True}


@router.post("/api/submit-exam")
async def submit_exam(request: Request):
    sid = _sid(request)
    engine = _engine(sid)
    slot = _slot(sid)
    if engine.is_submitted:
        # The countdown beat this request; hand back what it submitted, once
        if not slot.expiry_unacknowledged:
            raise HTTPException(status_code=409, detail="Exam already submitted.")
        slot.expiry_unacknowledged = False
        result = slot.last_result
    else:
        result = _finalize(sid, slot)
    return {"attempt_id": result.test_attempt_id, "score": result.score.model_dump(), "ok": True}


@router.get("/api/results")
async def get_results(request: Request):
    result: TestResult | None = _slot(_sid(request)).last_result
    if result is None:
        raise HTTPException(status_code=404, detail="No results yet.")

    return {
        **result.model_dump(),
        "time_taken": format_duration(result.time_taken_seconds),
        "attempted": result.score.correct + result.score.incorrect,
        "subject_breakdown": subject_breakdown(result.questions).model_dump(),
        "incorrect_question_ids": [q.id for q in get_incorrect_questions(result.questions)],
    }


# ── in-progress exam ─────────────────────────────────────────────────────────

@router.get("/api/question/{index}")
async def get_question(index: int, request: Request):
    engine = _engine(_sid(request))
    if not 0 <= index < len(engine.questions):
        raise HTTPException(status_code=404, detail="Question not found.")

    q = engine.questions[index]
    d = q.model_dump(exclude={"correct_answer"})
    d.update({
        "saved_answer": engine.answer_of(q.id),
        "status": engine.status_of(q.id).value,
        "index": index,
        "total": len(engine.questions),
    })
    return d


@router.get("/api/exam-state")
async def get_exam_state(request: Request):
    engine = _engine(_sid(request))
    current = engine.current_section
    return {
        "current_index": engine.current_index,
        "total": len(engine.questions),
        "is_last_question": engine.is_last_question,
        "is_submitted": engine.is_submitted,
        "statuses": {q.id: engine.status_of(q.id).value for q in engine.questions},
        "status_counts": {s.value: n for s, n in engine.status_counts().items()},
        "sections": [s.model_dump() for s in engine.subject_sections],
        "current_section": current.name if current else None,
        "timer": _timer_to_dict(engine),
    }


@router.post("/api/save-answer")
async def save_answer(body: SaveAnswerBody, request: Request):
    engine = _engine(_sid(request))
    try:
        engine.set_answer(body.question_id, body.answer)
    except SessionError as e:
        raise _http_error(e)
    return {"ok": True, "status": engine.status_of(body.question_id).value}


@router.post("/api/clear-answer")
async def clear_answer(body: QuestionIdBody, request: Request):
    engine = _engine(_sid(request))
    try:
        engine.clear_answer(body.question_id)
    except SessionError as e:
        raise _http_error(e)
    return {"ok": True, "status": engine.status_of(body.question_id).value}


@router.post("/api/toggle-mark")
async def toggle_mark(body: QuestionIdBody, request: Request):
    engine = _engine(_sid(request))
    try:
        engine.toggle_mark(body.question_id)
    except SessionError as e:
        raise _http_error(e)
    return {"ok": True, "status": engine.status_of(body.question_id).value}


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    engine = _engine(_sid(request))
    try:
        engine.go_to(body.index)
    except SessionError as e:
        raise _http_error(e)
    return {"index": engine.current_index, "ok": True}


@router.post("/api/previous")
async def previous(request: Request):
    engine = _engine(_sid(request))
    try:
        engine.go_to_previous()
    except SessionError as e:
        raise _http_error(e)
    return {"index": engine.current_index, "ok": True}


@router.post("/api/save-next")
async def save_next(request: Request, body: Optional[SaveNextBody] = None):
    engine = _engine(_sid(request))
    try:
        index = engine.advance(mark_current_first=bool(body and body.mark))
    except SessionError as e:
        raise _http_error(e)
    return {"index": index, "is_last_question": engine.is_last_question, "ok": True}


# ── history ──────────────────────────────────────────────────────────────────

@router.get("/api/history")
async def get_history(request: Request):
    items = history.get_history(_sid(request))
    return {
        "items": [
            {
                "test_attempt_id": r.test_attempt_id,
                "original_quiz_id": r.original_quiz_id,
                "test_type": r.test_type,
                "test_title": r.test_title,
                "date_completed": r.date_completed,
                "score": r.score.model_dump(),
                "time_taken": format_duration(r.time_taken_seconds),
            }
            for r in items
        ],
    }


@router.delete("/api/history/{attempt_id}")
async def delete_history_item(attempt_id: str, request: Request):
    if not history.delete_result(_sid(request), attempt_id):
        raise HTTPException(status_code=404, detail="Test history entry not found.")
    return {"ok": True}


@router.delete("/api/history")
async def clear_history(request: Request):
    removed = history.clear_history(_sid(request))
    return {"removed": removed, "ok": True}


@router.post("/api/reset")
async def reset_session(request: Request):
    session.clear_slot(_sid(request))
    return {"ok": True}
