"""
views/components/timer.py

Countdown display. Re-rendered every second as a fragment; when time runs
out it triggers a full rerun so the exam view can submit.
"""

import streamlit as st

from testprep_cbt.services.session_service import AssessmentSession


@st.fragment(run_every=1)
def render(engine: AssessmentSession) -> None:
    """Show the remaining time as HH:MM:SS, red in the last minute."""
    timer = engine.timer
    timer.sync()
    if timer.is_expired and not engine.is_submitted:
        st.rerun()

    css_class = "timer-display timer-warning" if timer.is_warning else "timer-display"
    icon = "⚠️ " if timer.is_warning else "⏱ "

    st.markdown(
        f'<div class="{css_class}">{icon}{timer.format_clock()}</div>',
        unsafe_allow_html=True,
    )

    if timer.is_warning:
        st.markdown(
            f"<p style='color:#ef4444; font-weight:600; font-size:0.85rem;'>"
            f"{timer.seconds_remaining} seconds remaining!</p>",
            unsafe_allow_html=True,
        )
