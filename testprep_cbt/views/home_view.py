"""
views/home_view.py — home / start screen

  - start the built-in sample test
  - upload a JSON question set (strictly validated) and start it
  - past attempts of this browser session, with retake / delete
"""

from __future__ import annotations

import json

import streamlit as st

import api.history as history
from api.sample_questions import SAMPLE_QUESTIONS, SAMPLE_QUIZ_ID
from config import MOCK_TEST_DURATION_MINUTES, PRACTICE_TEST_MINUTES_PER_QUESTION, SAMPLE_TEST_DURATION_MINUTES
from testprep_cbt.errors import SchemaViolation
from testprep_cbt.models.question_model import find_unscorable, generate_quiz_id, parse_question_set
from testprep_cbt.models.result_model import AttemptInfo
from testprep_cbt.services.timer import format_duration
from testprep_cbt.views.exam_view import owner_id, start_attempt


def _render_sample() -> None:
    st.markdown("#### Sample test")
    st.caption(
        f"{len(SAMPLE_QUESTIONS)} questions across Physics, Chemistry and Biology, "
        f"{SAMPLE_TEST_DURATION_MINUTES} minutes. +4 correct, -1 incorrect, 0 unanswered."
    )
    if st.button("Start Sample Test", key="start_sample", type="primary"):
        attempt = AttemptInfo(test_type="mock", test_title="Sample Test", original_quiz_id=SAMPLE_QUIZ_ID)
        if start_attempt(SAMPLE_QUESTIONS, SAMPLE_TEST_DURATION_MINUTES, attempt):
            st.rerun()


def _render_upload() -> None:
    st.markdown("#### Your own question set")
    uploaded = st.file_uploader("Question set (JSON)", type=["json"], key="question_upload")
    if uploaded is None:
        return

    try:
        questions = parse_question_set(json.loads(uploaded.getvalue().decode("utf-8")))
    except json.JSONDecodeError as e:
        st.error(f"Not a valid JSON file: {e}")
        return
    except SchemaViolation as e:
        st.error(str(e))
        for err in e.errors[:5]:
            st.caption(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        return

    if not questions:
        st.error("The file contains no questions.")
        return

    unscorable = find_unscorable(questions)
    if unscorable:
        st.warning(
            f"{len(unscorable)} question(s) have a correct answer that is not one of their "
            f"options and can never be scored correct: {', '.join(unscorable[:10])}"
        )

    test_type = st.radio("Test type", ["mock", "practice"], horizontal=True, key="upload_type")
    default_minutes = (
        MOCK_TEST_DURATION_MINUTES if test_type == "mock"
        else len(questions) * PRACTICE_TEST_MINUTES_PER_QUESTION
    )
    minutes = st.number_input("Duration (minutes)", min_value=1, value=default_minutes, step=1)
    title = st.text_input("Title", value=uploaded.name.rsplit(".", 1)[0])

    if st.button(f"Start Test ({len(questions)} questions)", key="start_upload", type="primary"):
        attempt = AttemptInfo(
            test_type=test_type,
            test_title=title or None,
            original_quiz_id=generate_quiz_id(test_type),
        )
        if start_attempt(questions, int(minutes), attempt):
            st.rerun()


def _render_history() -> None:
    items = history.get_history(owner_id())
    if not items:
        return

    st.markdown("#### Test history")
    for r in items:
        c1, c2, c3 = st.columns([4, 1, 1])
        with c1:
            st.markdown(
                f"**{r.test_title or r.test_type}** · {r.date_completed[:10]} · "
                f"{r.score.total_score}/{r.score.max_score} · {format_duration(r.time_taken_seconds)}"
            )
        with c2:
            if st.button("Retake", key=f"retake_{r.test_attempt_id}"):
                attempt = AttemptInfo(
                    test_type=r.test_type,
                    test_title=r.test_title,
                    original_quiz_id=r.original_quiz_id,
                    retake_attempt_id=r.test_attempt_id,
                    config=r.config,
                )
                if r.original_quiz_id == SAMPLE_QUIZ_ID:
                    minutes = SAMPLE_TEST_DURATION_MINUTES
                elif r.test_type == "mock":
                    minutes = MOCK_TEST_DURATION_MINUTES
                else:
                    minutes = len(r.questions) * PRACTICE_TEST_MINUTES_PER_QUESTION
                if start_attempt(r.questions, minutes, attempt):
                    st.rerun()
        with c3:
            if st.button("Delete", key=f"delete_{r.test_attempt_id}"):
                history.delete_result(owner_id(), r.test_attempt_id)
                st.rerun()


def render() -> None:
    """Render the home screen."""
    st.markdown(
        "<h2 style='font-size:1.5rem; font-weight:700; color:#1a1a2e;'>TestPrep CBT</h2>",
        unsafe_allow_html=True,
    )
    left, right = st.columns(2)
    with left:
        _render_sample()
    with right:
        _render_upload()

    st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
    _render_history()
