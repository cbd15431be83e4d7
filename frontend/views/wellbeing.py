"""
Mood log page.
"""

import streamlit as st

from components.charts import ChartBuilder
from components.panels import PanelBuilder
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.wellbeing import MOOD_EMOJI, MOODS, build_mood_log
from .common import date_filtered, page_header, show_error


def render_wellbeing(ctx: AppContext) -> None:
    page_header(ctx, "🌱 Wellbeing", "moods")

    col1, col2 = st.columns([3, 1])
    with col1:
        mood = st.radio(
            "How are you feeling?",
            MOODS,
            format_func=lambda m: f"{MOOD_EMOJI.get(m, '')} {m}",
            horizontal=True,
        )
    with col2:
        if st.button("Log mood", use_container_width=True):
            try:
                logged = ctx.sync.submit(ctx.moods, build_mood_log(mood))
            except CompanionError as e:
                show_error(e)
            else:
                st.success(logged.suggestion)
                if logged.affirmation:
                    st.info(f"Daily affirmation: {logged.affirmation}")

    moods = date_filtered(ctx.moods.items, lambda m: m.date, key="moods")
    if not moods:
        PanelBuilder.render_empty("No moods logged in this period")
        return

    st.plotly_chart(ChartBuilder.create_mood_chart(moods), use_container_width=True)

    for log in moods:
        item_id = ItemId.of(log)
        with st.container(border=True):
            col1, col2 = st.columns([6, 1])
            with col1:
                st.markdown(f"**{MOOD_EMOJI.get(log.mood, '')} {log.mood}** · {log.date}")
                if log.suggestion:
                    st.write(log.suggestion)
                if log.affirmation:
                    st.caption(f"Daily affirmation: {log.affirmation}")
            with col2:
                if st.button("🗑", key=f"mood_del_{item_id.key}"):
                    try:
                        ctx.sync.remove(ctx.moods, item_id)
                    except CompanionError as e:
                        show_error(e)
                    else:
                        st.rerun()
