"""
Dashboard: today's numbers and personal notes.
Notes never leave this device.
"""

from datetime import date, datetime

import streamlit as st

from components.charts import ChartBuilder
from components.panels import PanelBuilder
from models.records import Note
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.summary import summarize
from utils.validation import MAX_NOTE_ATTACHMENT_BYTES, read_attachment, validate_note
from .common import show_error


def render_dashboard(ctx: AppContext) -> None:
    user = ctx.session.user
    st.subheader(f"👋 Welcome back, {user.display_name}")

    PanelBuilder.render_summary(summarize(ctx.expenses, ctx.tasks, ctx.events, ctx.moods))

    if len(ctx.expenses):
        st.plotly_chart(ChartBuilder.create_expense_chart(ctx.expenses.items), use_container_width=True)

    st.divider()
    _render_notes(ctx)


def _render_notes(ctx: AppContext) -> None:
    PanelBuilder.render_header("Personal notes", "📝", "Saved on this device only")

    with st.form("note_form", clear_on_submit=True):
        text = st.text_area("Note", height=80)
        upload = st.file_uploader("Attachment (max 5 MB)")
        submitted = st.form_submit_button("Save note")

    if submitted:
        try:
            attachment = None
            if upload is not None:
                attachment = read_attachment(upload.name, upload.getvalue(), upload.type, MAX_NOTE_ATTACHMENT_BYTES)
            note = Note(
                text=validate_note(text, attachment),
                date=date.today().isoformat(),
                timestamp=datetime.now().isoformat(timespec="seconds"),
                file_data=attachment.data_uri if attachment else None,
                file_name=attachment.name if attachment else None,
            )
            ctx.sync.submit(ctx.notes, note)
        except CompanionError as e:
            show_error(e)

    if not len(ctx.notes):
        PanelBuilder.render_empty("No notes yet")
        return

    for note in ctx.notes:
        item_id = ItemId.of(note)
        with st.container(border=True):
            st.caption(note.timestamp or note.date)
            if note.text:
                st.write(note.text)
            if note.file_data:
                st.markdown(f"📎 [{note.file_name or 'attachment'}]({note.file_data})")
            if st.button("Delete", key=f"note_del_{item_id.key}"):
                ctx.sync.remove(ctx.notes, item_id)
                st.rerun()
