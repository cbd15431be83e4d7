"""
Personal calendar page.
"""

from datetime import date

import streamlit as st

from components.panels import PanelBuilder
from models.records import Event
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.date_filter import to_day
from utils.validation import validate_event
from .common import date_filtered, page_header, show_error


def render_events(ctx: AppContext) -> None:
    page_header(ctx, "📅 Events", "events")

    with st.form("event_form", clear_on_submit=True):
        col1, col2, col3, col4 = st.columns([3, 1, 1, 1])
        with col1:
            name = st.text_input("Event")
        with col2:
            on = st.date_input("Date", value=date.today())
        with col3:
            at = st.time_input("Time", value=None)
        with col4:
            color = st.color_picker("Colour", value="#1976d2")
        description = st.text_input("Description")
        submitted = st.form_submit_button("Add event")

    if submitted:
        try:
            fields = validate_event(
                name,
                on.isoformat() if on else "",
                at.strftime("%H:%M") if at else None,
                description,
            )
            ctx.sync.submit(ctx.events, Event(color=color, **fields))
        except CompanionError as e:
            show_error(e)

    events = date_filtered(ctx.events.items, lambda e: e.date, key="events")
    if not events:
        PanelBuilder.render_empty("No events in this period")
        return

    today = date.today()
    for event in events:
        item_id = ItemId.of(event)
        day = to_day(event.date)
        past = day is not None and day < today
        with st.container(border=True):
            col1, col2 = st.columns([6, 1])
            with col1:
                st.markdown(
                    f"<span style='color:{event.color}'>●</span> **{event.name}**"
                    f"{' (past)' if past else ''}",
                    unsafe_allow_html=True,
                )
                st.caption(" ".join(filter(None, [event.date, event.time])))
                if event.description:
                    st.write(event.description)
            with col2:
                if st.button("🗑", key=f"event_del_{item_id.key}"):
                    try:
                        ctx.sync.remove(ctx.events, item_id)
                    except CompanionError as e:
                        show_error(e)
                    else:
                        st.rerun()
