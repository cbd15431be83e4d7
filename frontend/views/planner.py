"""
Task planner page.
"""

from datetime import date

import streamlit as st

from components.panels import PanelBuilder
from models.records import Task
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.validation import validate_task
from .common import date_filtered, page_header, show_error


def render_planner(ctx: AppContext) -> None:
    page_header(ctx, "✅ Planner", "tasks")

    with st.form("task_form", clear_on_submit=True):
        col1, col2, col3 = st.columns([3, 1, 1])
        with col1:
            title = st.text_input("Task")
        with col2:
            due = st.date_input("Due", value=date.today())
        with col3:
            at = st.time_input("Time", value=None)
        submitted = st.form_submit_button("Add task")

    if submitted:
        try:
            fields = validate_task(
                title,
                due.isoformat() if due else "",
                at.strftime("%H:%M") if at else None,
            )
            ctx.sync.submit(ctx.tasks, Task(**fields))
        except CompanionError as e:
            show_error(e)

    tasks = date_filtered(ctx.tasks.items, lambda t: t.due_date, key="tasks")
    if not tasks:
        PanelBuilder.render_empty("Nothing planned")
        return

    done = sum(1 for t in tasks if t.completed)
    st.progress(done / len(tasks), text=f"{done} of {len(tasks)} done")

    for task in tasks:
        item_id = ItemId.of(task)
        col1, col2, col3 = st.columns([5, 2, 1])
        with col1:
            checked = st.checkbox(task.title, value=task.completed, key=f"task_done_{item_id.key}")
        col2.caption(" ".join(filter(None, [task.due_date, task.time])))
        delete = col3.button("🗑", key=f"task_del_{item_id.key}")

        try:
            if checked != task.completed:
                ctx.sync.update(ctx.tasks, item_id, {"completed": checked})
                st.rerun()
            if delete:
                ctx.sync.remove(ctx.tasks, item_id)
                st.rerun()
        except CompanionError as e:
            show_error(e)
