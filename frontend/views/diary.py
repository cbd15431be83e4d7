"""
Diary page.
"""

from datetime import date

import streamlit as st

from components.panels import PanelBuilder
from models.records import DiaryEntry
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.validation import validate_diary
from .common import date_filtered, page_header, show_error


def render_diary(ctx: AppContext) -> None:
    page_header(ctx, "📔 Diary", "diary")

    with st.form("diary_form", clear_on_submit=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            title = st.text_input("Title")
        with col2:
            written_on = st.date_input("Date", value=date.today())
        message = st.text_area("Dear diary...", height=160)
        submitted = st.form_submit_button("Save entry")

    if submitted:
        try:
            fields = validate_diary(title, written_on.isoformat() if written_on else "", message)
            ctx.sync.submit(ctx.diary, DiaryEntry(**fields))
        except CompanionError as e:
            show_error(e)

    entries = date_filtered(ctx.diary.items, lambda d: d.date, key="diary")
    if not entries:
        PanelBuilder.render_empty("No entries in this period")
        return

    for entry in entries:
        item_id = ItemId.of(entry)
        with st.expander(f"{entry.date} · {entry.title}"):
            st.write(entry.message)
            if st.button("Delete entry", key=f"diary_del_{item_id.key}"):
                try:
                    ctx.sync.remove(ctx.diary, item_id)
                except CompanionError as e:
                    show_error(e)
                else:
                    st.rerun()
