"""
views/result_view.py — test result screen

Shows:
  - total score / max score and time taken
  - correct / incorrect / unanswered counts
  - subject breakdown with strongest / weakest subject
  - every question with the chosen answer, the correct answer and its marks
  - retake / home buttons
"""

from __future__ import annotations

import streamlit as st

from testprep_cbt.models.result_model import AttemptInfo, TestResult
from testprep_cbt.services.exam_service import mark_for, subject_breakdown
from testprep_cbt.services.timer import format_duration
from testprep_cbt.views.exam_view import start_attempt


def _retake(result: TestResult) -> None:
    """Same questions, answers cleared, result overwrites this attempt."""
    attempt = AttemptInfo(
        test_type=result.test_type,
        test_title=result.test_title,
        original_quiz_id=result.original_quiz_id,
        retake_attempt_id=result.test_attempt_id,
        config=result.config,
    )
    minutes = st.session_state.get("duration_minutes") or len(result.questions)
    if start_attempt(result.questions, minutes, attempt):
        st.rerun()


def _go_home() -> None:
    for key in ["engine", "result", "confirm_submit", "save_failed"]:
        if key in st.session_state:
            del st.session_state[key]
    st.session_state.page = "home"
    st.rerun()


def _stat_card(col, label: str, value: str, color: str) -> None:
    with col:
        st.markdown(
            f"<div style='text-align:center;'>"
            f"<p style='font-size:1.6rem; font-weight:700; color:{color}; margin:0;'>{value}</p>"
            f"<p style='font-size:0.8rem; color:#9ca3af; margin:0;'>{label}</p></div>",
            unsafe_allow_html=True,
        )


def render() -> None:
    """Render the result screen."""

    # ── session guard ────────────────────────────────────────────────────────
    result: TestResult | None = st.session_state.get("result")
    if result is None:
        st.warning("No result to show.")
        if st.button("Home", type="primary"):
            _go_home()
        return

    if st.session_state.get("save_failed"):
        st.warning("Your result could not be saved to history, but the score below is final.")

    score = result.score
    _, col, _ = st.columns([0.8, 2.5, 0.8])

    with col:
        st.markdown(
            f'<p class="score-big">{score.total_score}</p>'
            f"<p style='text-align:center; font-size:0.9rem; color:#9ca3af; margin-top:-8px;'>"
            f"/ {score.max_score} · time taken {format_duration(result.time_taken_seconds)}</p>",
            unsafe_allow_html=True,
        )

        s1, s2, s3 = st.columns(3)
        _stat_card(s1, "Correct", str(score.correct), "#10b981")
        _stat_card(s2, "Incorrect", str(score.incorrect), "#ef4444")
        _stat_card(s3, "Unanswered", str(score.unanswered), "#f59e0b")

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        btn_left, btn_right = st.columns(2)
        with btn_left:
            if st.button("Retake This Test", key="retry_btn", use_container_width=True):
                _retake(result)
        with btn_right:
            if st.button("Back to Home", key="home_btn", type="primary", use_container_width=True):
                _go_home()

        # ── subject breakdown ────────────────────────────────────────────────
        breakdown = subject_breakdown(result.questions)
        st.markdown("#### Subject breakdown")
        st.table([
            {
                "Subject": s.subject,
                "Correct": s.correct,
                "Incorrect": s.incorrect,
                "Unanswered": s.unanswered,
                "Marks": f"{s.marks_obtained} / {s.max_marks}",
                "%": f"{s.percentage:.2f}",
            }
            for s in breakdown.subjects
        ])
        if breakdown.strongest:
            st.markdown(f"Strongest: **{breakdown.strongest}** · Weakest: **{breakdown.weakest}**")

        # ── detailed answers ─────────────────────────────────────────────────
        st.markdown("#### Detailed answers")
        for idx, q in enumerate(result.questions, start=1):
            mark = mark_for(q)
            badge = {4: "🟢 +4", -1: "🔴 -1"}.get(mark, "⚪ 0")
            with st.expander(f"Q{idx}. {q.question_text}  ({badge})"):
                for opt_idx, option in enumerate(q.options):
                    is_correct = option.strip().lower() == q.correct_answer.strip().lower()
                    is_choice = bool(q.user_answer) and option.strip().lower() == q.user_answer.strip().lower()
                    suffix = " ✅" if is_correct else (" ❌" if is_choice else "")
                    st.markdown(f"{chr(65 + opt_idx)}. {option}{suffix}")
                if not q.user_answer:
                    st.caption("Not answered")
