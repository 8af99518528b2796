"""
views/exam_view.py — test-taking screen

Layout:
  - st.sidebar : countdown + status summary + section palette + submit
  - main area  : current question card + Previous / Clear / Mark & Next / Save & Next

State:
  - st.session_state.engine   (AssessmentSession)
  - st.session_state.owner_id (history owner for this browser session)
  - the radio widget writes straight into the engine's answer sheet
"""

from __future__ import annotations

import html
import logging
import uuid
from typing import Sequence

import streamlit as st

import api.history as history
from testprep_cbt.errors import SessionError
from testprep_cbt.models.question_model import Question
from testprep_cbt.models.result_model import AttemptInfo
from testprep_cbt.services.session_service import AssessmentSession
from testprep_cbt.views.components import question_card as qcard
from testprep_cbt.views.components import sidebar as nav
from testprep_cbt.views.components import timer as tmr

logger = logging.getLogger(__name__)


def owner_id() -> str:
    """History owner of this browser session."""
    if "owner_id" not in st.session_state:
        st.session_state.owner_id = uuid.uuid4().hex
    return st.session_state.owner_id


def _clear_radio_keys() -> None:
    for k in [k for k in st.session_state if str(k).startswith("radio_")]:
        del st.session_state[k]


def start_attempt(
    questions: Sequence[Question],
    duration_minutes: int,
    attempt: AttemptInfo,
) -> bool:
    """
    Initialize a fresh engine, start the countdown and switch to the exam page.

    Returns:
        False (with an error shown) when the configuration is rejected.
    """
    engine = AssessmentSession()
    try:
        engine.initialize(questions, duration_minutes * 60, attempt)
        engine.start()
    except SessionError as e:
        st.error(f"Cannot start the test: {e}")
        return False

    _clear_radio_keys()
    st.session_state.engine = engine
    st.session_state.duration_minutes = duration_minutes
    st.session_state.result = None
    st.session_state.confirm_submit = False
    st.session_state.page = "exam"
    return True


def _go_to_result() -> None:
    """Score, persist, then move to the result page."""
    engine: AssessmentSession = st.session_state.engine
    result = engine.submit()
    st.session_state.result = result
    try:
        history.save_result(owner_id(), result)
    except Exception:
        logger.exception(f"Saving result {result.test_attempt_id} failed")
        st.session_state.save_failed = True
    st.session_state.engine = None
    st.session_state.confirm_submit = False
    st.session_state.page = "result"
    st.rerun()


def _sync_radio(engine: AssessmentSession, question_id: str) -> None:
    """Copy the radio value into the answer sheet."""
    value = st.session_state.get(qcard.radio_key(question_id))
    if value and value != engine.answer_of(question_id):
        engine.set_answer(question_id, value)


def render() -> None:
    """Render the exam screen."""

    # ── session guard ────────────────────────────────────────────────────────
    engine: AssessmentSession | None = st.session_state.get("engine")
    if engine is None or engine.current_question is None:
        st.warning("No test in progress. Go back to the home screen.")
        if st.button("Home", type="primary"):
            st.session_state.page = "home"
            st.rerun()
        return

    engine.timer.sync()
    if engine.timer.is_expired:
        st.toast("Time's up! Your test has been submitted.")
        _go_to_result()
        return

    total = len(engine.questions)
    current_idx = engine.current_index
    current_q = engine.current_question

    # ── sidebar ──────────────────────────────────────────────────────────────
    with st.sidebar:
        tmr.render(engine)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        nav.render(engine)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        if st.button("Submit Test", key="submit_sidebar", type="primary", use_container_width=True):
            _sync_radio(engine, current_q.id)
            st.session_state.confirm_submit = True
            st.rerun()

        # Confirmation before the final submit
        if st.session_state.get("confirm_submit"):
            unanswered = sum(1 for q in engine.questions if not engine.answer_of(q.id))
            if unanswered:
                st.warning(f"{unanswered} question(s) unanswered. Submit anyway?")
            else:
                st.info("Submit your test?")
            col_yes, col_no = st.columns(2)
            with col_yes:
                if st.button("Submit", key="confirm_yes", type="primary"):
                    _go_to_result()
            with col_no:
                if st.button("Cancel", key="confirm_no"):
                    st.session_state.confirm_submit = False
                    st.rerun()

    # ── header ───────────────────────────────────────────────────────────────
    title = engine.attempt.test_title or ("Mock Test" if engine.attempt.test_type == "mock" else "Practice Test")
    st.markdown(
        f"<h2 style='font-size:1.3rem; font-weight:700; color:#1a1a2e; "
        f"margin-bottom:4px;'>{html.escape(title)}</h2>",
        unsafe_allow_html=True,
    )
    st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

    # ── question card ────────────────────────────────────────────────────────
    section = engine.current_section
    selected = qcard.render(
        question=current_q,
        question_number=current_idx + 1,
        total=total,
        saved_answer=engine.answer_of(current_q.id) or None,
        section_label=section.name if section else None,
    )
    if selected and selected != engine.answer_of(current_q.id):
        engine.set_answer(current_q.id, selected)

    # ── navigation ───────────────────────────────────────────────────────────
    st.markdown("<br>", unsafe_allow_html=True)
    col_prev, col_clear, col_mark, col_next = st.columns(4)

    with col_prev:
        if st.button("← Previous", key="prev_btn", disabled=current_idx == 0, use_container_width=True):
            engine.go_to_previous()
            st.rerun()

    with col_clear:
        if st.button("Clear Response", key="clear_btn", use_container_width=True):
            engine.clear_answer(current_q.id)
            st.session_state.pop(qcard.radio_key(current_q.id), None)
            st.rerun()

    with col_mark:
        if st.button("Mark for Review & Next", key="mark_next_btn", use_container_width=True):
            _sync_radio(engine, current_q.id)
            engine.advance(mark_current_first=True)
            st.rerun()

    with col_next:
        if engine.is_last_question:
            if st.button("Submit Test →", key="submit_last", type="primary", use_container_width=True):
                _sync_radio(engine, current_q.id)
                _go_to_result()
        else:
            if st.button("Save & Next →", key="next_btn", type="primary", use_container_width=True):
                _sync_radio(engine, current_q.id)
                engine.advance()
                st.rerun()
