"""
Ritual - Dashboard

Run with:
    streamlit run Ritual.py
"""

from __future__ import annotations

from datetime import date

import streamlit as st

from ritual.metrics import (
    compute_completion_rate,
    compute_insights,
    compute_streak,
    daily_progress,
    integrity_matrix,
    status_tier,
)
from ritual.state import RitualApp
from ritual.ui_helpers import (
    INSIGHT_ICONS,
    STATUS_COLORS,
    app_header,
    load_app,
    progress_bar,
    toast_success,
)


st.set_page_config(
    page_title="Ritual",
    page_icon="✅",
    layout="wide",
)


def render_header(app: RitualApp, today: date) -> None:
    """
    Streak, daily target and a progress strip colored by the 30-day rate.
    """
    rate = compute_completion_rate(app.habits, app.logs, today)
    color = STATUS_COLORS[status_tier(rate)]
    progress = daily_progress(app.habits, app.logs, today)

    c1, c2, c3 = st.columns(3)
    c1.metric("Run streak", f"{compute_streak(app.habits, app.logs, today)} days")
    c2.metric("Daily target", f"{progress.completions}/{progress.target}")
    c3.metric("Integrity index (30d)", f"{rate}%")

    progress_bar(progress.progress, color)


def render_today(app: RitualApp, today: date) -> None:
    st.subheader("Today")

    if not app.habits:
        st.info("No habits yet. Create one in **Habits**.")
        return

    done_today = {l["habitId"] for l in app.logs if l["date"] == today.isoformat() and l["completed"]}

    for h in app.habits:
        if h.get("isArchived"):
            continue
        left, right = st.columns([0.75, 0.25])
        with left:
            st.write(f"**{h['name']}**")
            st.caption(f"{h['category']} • {h['priority']}")
            if h.get("notes"):
                st.caption(h["notes"])
        with right:
            done = h["id"] in done_today
            label = "Done ✅" if done else "Mark done"
            if st.button(label, key=f"done_{h['id']}"):
                now_done = app.toggle(h["id"], today)
                toast_success("Logged" if now_done else "Cleared")
                st.rerun()


def render_matrix(app: RitualApp, today: date) -> None:
    st.markdown("#### Integrity matrix")
    rows = integrity_matrix(app.habits, app.logs, today)
    if not rows:
        st.caption("Nothing tracked yet.")
        return
    for row in rows:
        strip = "".join("■" if done else "□" for done in row.strip)
        st.write(f"**{row.habit['name']}**")
        st.caption(f"{strip}  ·  30-day: {row.rate}%")


def render_insights(app: RitualApp, today: date) -> None:
    st.markdown("#### Insights")
    insights = compute_insights(app.habits, app.logs, today)
    if not insights:
        st.caption("Add a habit to start collecting insights.")
        return
    for ins in insights:
        st.write(f"{INSIGHT_ICONS[ins.kind]} **{ins.label}**")
        st.caption(ins.value)


def main() -> None:
    app_header("Ritual", "Daily habits, streaks and the patterns behind them.")

    app = load_app()
    today = app.today()

    render_header(app, today)

    st.divider()
    col1, col2 = st.columns([1.2, 1.0], gap="large")
    with col1:
        render_today(app, today)
    with col2:
        render_matrix(app, today)
        st.divider()
        render_insights(app, today)


if __name__ == "__main__":
    main()
