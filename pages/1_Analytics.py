"""
Analytics page

Completion trend, a calendar heatmap of the last weeks and the
achievement deck.
"""

from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from ritual import config
from ritual.metrics import (
    WEEKDAY_NAMES,
    calendar_frame,
    compute_achievements,
    compute_calendar_buckets,
    trend_frame,
    trend_series,
)
from ritual.ui_helpers import HEAT_COLORS, STATUS_COLORS, app_header, load_app

st.set_page_config(page_title="Analytics", page_icon="📈", layout="wide")

TIMEFRAME_LABELS = {"W": "Weekly", "M": "Monthly", "Y": "Yearly"}


def render_trend(df: pd.DataFrame) -> None:
    base = alt.Chart(df).encode(
        x=alt.X("day:T", title="Date")
    )

    area = base.mark_area(opacity=0.15, color=STATUS_COLORS["strong"]).encode(
        y=alt.Y("rate:Q", title="Completion %", scale=alt.Scale(domain=[0, 100])),
    )

    line = base.mark_line(color=STATUS_COLORS["strong"], strokeWidth=3).encode(
        y=alt.Y("rate:Q"),
        tooltip=["day:T", "rate:Q"],
    )

    st.altair_chart((area + line).interactive(), use_container_width=True)


def render_heatmap(df: pd.DataFrame) -> None:
    chart_df = df.copy()
    chart_df["weekday"] = chart_df["dow"].map(lambda i: WEEKDAY_NAMES[i][:3])
    chart_df["day"] = pd.to_datetime(chart_df["day"])

    cells = alt.Chart(chart_df).mark_rect(cornerRadius=6).encode(
        x=alt.X("weekday:O", sort=[n[:3] for n in WEEKDAY_NAMES], title=None),
        y=alt.Y("week:O", axis=None),
        color=alt.Color(
            "tier:O",
            scale=alt.Scale(domain=list(range(len(HEAT_COLORS))), range=HEAT_COLORS),
            legend=None,
        ),
        stroke=alt.condition("datum.is_today", alt.value("#1A1A1A"), alt.value(None)),
        tooltip=["day:T", "pct:Q"],
    )

    labels = alt.Chart(chart_df).mark_text(fontSize=10).encode(
        x=alt.X("weekday:O", sort=[n[:3] for n in WEEKDAY_NAMES]),
        y=alt.Y("week:O"),
        text="day_num:Q",
        color=alt.condition("datum.tier >= 6", alt.value("#FFFFFF"), alt.value("#1A1A1A")),
    )

    st.altair_chart(cells + labels, use_container_width=True)


def main() -> None:
    app_header("Analytics", "How consistently the stack is being run.")

    app = load_app()
    today = app.today()

    if not app.habits:
        st.info("Create a habit first to see analytics.")
        return

    st.subheader("Trend")
    timeframe = st.radio(
        "Timeframe",
        options=list(TIMEFRAME_LABELS),
        format_func=TIMEFRAME_LABELS.get,
        horizontal=True,
    )
    points = trend_series(app.habits, app.logs, today, timeframe)
    st.metric("Today", f"{points[-1].rate}%")
    render_trend(trend_frame(points))

    st.divider()
    left, right = st.columns([1.1, 0.9], gap="large")

    with left:
        st.subheader(f"Last {config.CALENDAR_DAYS} days")
        buckets = compute_calendar_buckets(app.habits, app.logs, today, config.CALENDAR_DAYS)
        render_heatmap(calendar_frame(buckets))

    with right:
        st.subheader("Achievements")
        achievements = compute_achievements(app.habits, app.logs, today)
        unlocked = sum(1 for a in achievements if a.unlocked)
        st.caption(f"{unlocked}/{len(achievements)} unlocked")
        for a in achievements:
            with st.container(border=True):
                status = "Honor unlocked 🏅" if a.unlocked else "Pending"
                st.write(f"**{a.title}** · {a.category}")
                st.caption(a.description)
                st.caption(f"{a.requirement} · {status}")


if __name__ == "__main__":
    main()
