"""
Habits page

Create and delete habits. Deleting a habit also deletes its history.
The system wipe at the bottom resets everything to the default data set.
"""

from __future__ import annotations

import streamlit as st

from ritual.metrics import habit_completion_rate
from ritual.models import FREQUENCIES, PRIORITIES, PROTOCOL_COLORS
from ritual.ui_helpers import app_header, confirm_box, load_app, toast_error, toast_success

st.set_page_config(page_title="Habits", page_icon="📌", layout="wide")


def main() -> None:
    app_header("Habits", "The stack: what you track and how often.")

    app = load_app()
    today = app.today()

    left, right = st.columns([0.9, 1.1], gap="large")

    with left:
        st.subheader("Your habits")
        if not app.habits:
            st.info("No habits yet.")
        else:
            for h in app.habits:
                cols = st.columns([0.75, 0.25])
                with cols[0]:
                    st.write(f"**{h['name']}**")
                    rate = habit_completion_rate(h["id"], app.logs, today)
                    st.caption(f"{h['category']} • {h['priority']} • {h['frequency']} • 30-day: {rate}%")
                with cols[1]:
                    if st.button("Delete", key=f"delete_{h['id']}"):
                        st.session_state["delete_id"] = h["id"]
                        st.rerun()

        delete_id = st.session_state.get("delete_id")
        target = next((h for h in app.habits if h["id"] == delete_id), None)
        if target:
            st.warning(f"This will remove **{target['name']}** and its history.")
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Cancel"):
                    st.session_state["delete_id"] = None
                    st.rerun()
            with c2:
                if st.button("Delete permanently", type="primary"):
                    app.remove(target["id"])
                    st.session_state["delete_id"] = None
                    toast_success("Habit deleted")
                    st.rerun()

        st.divider()
        with st.expander("System wipe"):
            st.caption("All local data is deleted and the default habits are restored.")
            if confirm_box("confirm_wipe", "Delete everything") and st.button("Wipe"):
                app.reset()
                st.session_state["delete_id"] = None
                toast_success("Storage reset")
                st.rerun()

    with right:
        st.subheader("New habit")

        with st.form("new_habit", clear_on_submit=True):
            name = st.text_input("Name", placeholder="e.g. Cognitive Deep Work")
            category = st.text_input("Category", placeholder="Productivity / Health")
            priority = st.selectbox("Priority", options=list(PRIORITIES), index=1)
            frequency = st.selectbox(
                "Frequency",
                options=list(FREQUENCIES),
                help="Daily habits count toward the daily target every day.",
            )
            frequency_value = st.number_input(
                "Times per week", min_value=1, max_value=7, value=3,
                help="Only used for weekly and custom habits.",
            )
            color_name = st.selectbox("Color", options=[n for n, _ in PROTOCOL_COLORS])
            notes = st.text_area("Notes", height=90, placeholder="Optional")

            if st.form_submit_button("Save", type="primary"):
                draft = {
                    "name": name,
                    "category": category,
                    "priority": priority,
                    "frequency": frequency,
                    "frequencyValue": int(frequency_value),
                    "color": dict(PROTOCOL_COLORS)[color_name],
                    "notes": notes,
                }
                habit = app.add(draft)
                if habit is None:
                    toast_error("Please enter a name and a category.")
                else:
                    toast_success("Habit created")
                    st.rerun()


if __name__ == "__main__":
    main()
