"""
views/components/sidebar.py

Question palette grouped by subject section, plus the live status summary.
Clicking a number jumps straight to that question (no section rules).
"""

from __future__ import annotations

import streamlit as st

from testprep_cbt.models.session_state import QuestionStatus
from testprep_cbt.services.session_service import AssessmentSession

STATUS_ICONS = {
    QuestionStatus.ANSWERED: "🟢",
    QuestionStatus.NOT_ANSWERED: "🔴",
    QuestionStatus.MARKED_FOR_REVIEW: "🟣",
    QuestionStatus.MARKED_AND_ANSWERED: "✅",
    QuestionStatus.NOT_VISITED: "⚪",
}

STATUS_LABELS = {
    QuestionStatus.ANSWERED: "Answered",
    QuestionStatus.NOT_ANSWERED: "Not answered",
    QuestionStatus.MARKED_FOR_REVIEW: "Marked for review",
    QuestionStatus.MARKED_AND_ANSWERED: "Answered & marked",
    QuestionStatus.NOT_VISITED: "Not visited",
}


def _render_grid(engine: AssessmentSession, start: int, end: int, cols_per_row: int = 5) -> None:
    current_idx = engine.current_index
    for row_start in range(start, end + 1, cols_per_row):
        row_end = min(row_start + cols_per_row, end + 1)
        cols = st.columns(cols_per_row)
        for col_idx, q_idx in enumerate(range(row_start, row_end)):
            q = engine.questions[q_idx]
            status = engine.status_of(q.id)
            with cols[col_idx]:
                if st.button(
                    f"{STATUS_ICONS[status]}{q_idx + 1}",
                    key=f"nav_{q_idx}",
                    type="primary" if q_idx == current_idx else "secondary",
                    help=f"Question {q_idx + 1} - {STATUS_LABELS[status]}",
                ):
                    engine.go_to(q_idx)
                    st.rerun()


def render(engine: AssessmentSession) -> None:
    """Status summary, legend and per-section palette."""
    counts = engine.status_counts()
    total = len(engine.questions)
    answered = counts[QuestionStatus.ANSWERED] + counts[QuestionStatus.MARKED_AND_ANSWERED]

    # ── progress ─────────────────────────────────────────────────────────────
    st.markdown(
        f"""
        <div style="display:flex; justify-content:space-between;
                    font-size:0.8rem; color:#6b7280; margin-bottom:4px;">
            <span>Answered</span>
            <span><b>{answered}</b> / {total}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.progress(answered / total if total > 0 else 0)

    # ── legend with live counts ──────────────────────────────────────────────
    legend = "<br>".join(
        f"{STATUS_ICONS[s]} {STATUS_LABELS[s]}: <b>{counts[s]}</b>" for s in QuestionStatus
    )
    st.markdown(
        f"<div style='margin:12px 0; font-size:0.78rem; color:#6b7280; line-height:1.9;'>{legend}</div>",
        unsafe_allow_html=True,
    )

    # ── palette, one expander per section ────────────────────────────────────
    st.markdown(
        "<p style='font-size:0.78rem; color:#9ca3af; font-weight:600; "
        "letter-spacing:0.05em; margin-bottom:8px;'>QUESTION PALETTE</p>",
        unsafe_allow_html=True,
    )

    current = engine.current_section
    for section in engine.subject_sections:
        with st.expander(f"{section.name} ({section.count})", expanded=section == current):
            _render_grid(engine, section.start_index, section.end_index)
