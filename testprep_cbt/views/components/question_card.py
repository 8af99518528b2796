"""
views/components/question_card.py

Renders one Question as a card and returns the option the user picked.
"""

from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from testprep_cbt.models.question_model import Question


def radio_key(question_id: str) -> str:
    return f"radio_{question_id}"


# Uploaded text is escaped before it goes into unsafe_allow_html markdown

def header_html(question: Question, question_number: int, total: int, section_label: Optional[str] = None) -> str:
    return f"""
        <div style="display:flex; align-items:center; gap:10px; margin-bottom:12px;">
            <span class="question-number-badge">Question {question_number} / {total}</span>
            <span style="font-size:0.8rem; color:#9ca3af;">{html.escape(section_label or question.subject)}</span>
        </div>
        """


def body_html(question: Question) -> str:
    return f"""
        <div class="question-card">
            <p style="font-size:1.05rem; font-weight:600; color:#1a1a2e;
                      line-height:1.7; margin:0;">
                {html.escape(question.question_text)}
            </p>
        </div>
        """


def render(
    question: Question,
    question_number: int,
    total: int,
    saved_answer: Optional[str] = None,
    section_label: Optional[str] = None,
) -> Optional[str]:
    """
    Render the question card and return the selected option.

    Args:
        question:        Question to render
        question_number: 1-based position in the set
        total:           Number of questions in the set
        saved_answer:    Answer already stored in the session
        section_label:   Subject section shown in the header

    Returns:
        Selected option text, None when nothing is selected
    """

    st.markdown(header_html(question, question_number, total, section_label), unsafe_allow_html=True)
    st.markdown(body_html(question), unsafe_allow_html=True)

    # ── options (radio) ──────────────────────────────────────────────────────
    key = radio_key(question.id)

    # Seed the widget from the stored answer only once (keeps the value across reruns)
    if key not in st.session_state and saved_answer in question.options:
        st.session_state[key] = saved_answer

    current_val = st.session_state.get(key, saved_answer)
    default_index = question.options.index(current_val) if current_val in question.options else None

    return st.radio(
        "Choose an option",
        options=question.options,
        index=default_index,
        key=key,
        format_func=lambda opt: f"{chr(65 + question.options.index(opt))}. {opt}",
        label_visibility="collapsed",
    )
