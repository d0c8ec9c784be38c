# modules/timeline.py

import pandas as pd
import streamlit as st

from core.journal_store import BRISTOL_TYPES, QUICK_TAGS, STOOL_COLORS, delete_entry, load_history


def _rows(history):
    rows = []
    for day in history:
        for e in sorted(day["entries"], key=lambda x: x["createdAt"], reverse=True):
            rows.append({
                "date": day["date"],
                "time": e["time"],
                "type": e["type"],
                "name": BRISTOL_TYPES[e["type"]]["name"],
                "color": STOOL_COLORS.get(e.get("color"), {}).get("name", ""),
                "tags": ", ".join(QUICK_TAGS.get(t, t) for t in e.get("tags", [])),
                "notes": e.get("notes", ""),
                "id": e["id"],
            })
    return rows


def render_timeline():
    st.subheader("📜 Timeline")

    history = load_history()
    if not history:
        st.info("No logs yet. Your history will show up here.")
        return

    df = pd.DataFrame(_rows(history))
    df["date"] = pd.to_datetime(df["date"]).dt.strftime("%d %b %Y")

    st.dataframe(
        df.drop(columns=["id"]).rename(columns={
            "date": "Date",
            "time": "Time",
            "type": "Type",
            "name": "Description",
            "color": "Color",
            "tags": "Tags",
            "notes": "Notes",
        }),
        use_container_width=True,
        hide_index=True,
    )

    # --------------------------------------------------
    # Delete
    # --------------------------------------------------
    st.markdown("---")
    st.markdown("### 🗑️ Delete an entry")

    options = [
        (day["date"], e["id"], f"{day['date']} {e['time']} · Type {e['type']}")
        for day in history
        for e in day["entries"]
    ]
    choice = st.selectbox("Entry", options, format_func=lambda o: o[2])

    if st.button("Delete", type="secondary"):
        if delete_entry(choice[0], choice[1]):
            st.success("Entry deleted")
            st.rerun()
        else:
            st.error("Entry not found")
