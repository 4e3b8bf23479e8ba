"""
UI helpers shared across pages (Streamlit).

Keeping this separate avoids repeating small formatting bits.
"""

from __future__ import annotations

import streamlit as st

from ritual import configure_logging
from ritual.state import RitualApp

STATUS_COLORS = {
    "strong": "#10B981",
    "steady": "#F59E0B",
    "critical": "#EF4444",
}

# Heat tiers 0..7, empty day first
HEAT_COLORS = [
    "#F7F7F7",
    "#FEE2E2",
    "#FECACA",
    "#FCA5A5",
    "#FEF3C7",
    "#D1FAE5",
    "#10B981",
    "#064E3B",
]

INSIGHT_ICONS = {"positive": "🟢", "warning": "🔴", "neutral": "⚪"}


def load_app() -> RitualApp:
    """
    Fresh controller for this rerun; storage is the source of truth.
    """
    configure_logging()
    return RitualApp.load()


def app_header(title: str, subtitle: str | None = None) -> None:
    st.title(title)
    if subtitle:
        st.caption(subtitle)


def toast_success(msg: str) -> None:
    try:
        st.toast(msg, icon="✅")
    except Exception:
        st.success(msg)


def toast_error(msg: str) -> None:
    try:
        st.toast(msg, icon="⚠️")
    except Exception:
        st.error(msg)


def confirm_box(key: str, label: str = "I understand") -> bool:
    return st.checkbox(label, key=key)


def progress_bar(pct: float, color: str) -> None:
    pct = max(0.0, min(100.0, pct))
    st.markdown(
        f"""
        <div style="background:#fff;border:1px solid #EAEAEA;border-radius:999px;padding:4px;">
          <div style="width:{pct:.0f}%;min-width:2.5rem;background:{color};border-radius:999px;
                      color:#fff;font-size:0.7rem;font-weight:800;text-align:right;padding:0 0.6rem;">
            {pct:.0f}%
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )
