"""
streamlit_app.py — Streamlit entry point

    streamlit run streamlit_app.py

Routes between the home, exam and result views via st.session_state.page.
"""

import streamlit as st

from testprep_cbt.views import exam_view, home_view, result_view

st.set_page_config(page_title="TestPrep CBT", page_icon="📝", layout="wide")

st.markdown(
    """
    <style>
    .cbt-divider { border: none; border-top: 1px solid #e5e7eb; margin: 16px 0; }
    .question-card { background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 10px;
                     padding: 18px 20px; margin-bottom: 14px; }
    .question-number-badge { background: #1a1a2e; color: white; border-radius: 6px;
                             padding: 2px 10px; font-size: 0.8rem; font-weight: 600; }
    .timer-display { font-family: monospace; font-size: 1.4rem; font-weight: 700;
                     color: #1a1a2e; text-align: center; padding: 8px 0; }
    .timer-warning { color: #ef4444; }
    .score-big { font-size: 3rem; font-weight: 800; text-align: center; color: #1a1a2e; margin: 0; }
    </style>
    """,
    unsafe_allow_html=True,
)

_PAGES = {
    "home": home_view.render,
    "exam": exam_view.render,
    "result": result_view.render,
}

if "page" not in st.session_state:
    st.session_state.page = "home"

_PAGES.get(st.session_state.page, home_view.render)()
