import logging
from datetime import timedelta

import streamlit as st

from components.panels import PanelBuilder
from components.sync_badge import render_sync_summary
from state.context import AppContext
from state.session import PendingPasswordReset
from views import PAGES, render_auth, render_reset

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Student Companion",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Load CSS
try:
    with open("assets/style.css", "r") as f:
        st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
except FileNotFoundError:
    pass


def get_context() -> AppContext:
    """One AppContext per browser session"""
    if "ctx" not in st.session_state:
        ctx = AppContext.create()
        ctx.start()
        st.session_state.ctx = ctx
        st.session_state.current_page = "Dashboard"
    return st.session_state.ctx


def consume_reset_link(ctx: AppContext) -> None:
    """?token=..&email=.. routes to the reset form exactly once"""
    pending = PendingPasswordReset.from_query_params(st.query_params)
    if pending and st.session_state.get("reset_consumed") != pending:
        st.session_state.reset_consumed = pending
        ctx.begin_password_reset(pending)


@st.fragment(run_every=timedelta(seconds=2))
def sync_fragment(ctx: AppContext) -> None:
    """Commit finished background fetches; rerun the page if anything changed"""
    if not ctx.sync.has_pending:
        return
    if ctx.apply_completed():
        st.rerun(scope="app")


def render_sidebar(ctx: AppContext) -> str:
    with st.sidebar:
        st.markdown("""
        <div style="text-align: center; padding: 20px 0; margin-bottom: 16px; background: linear-gradient(180deg, rgba(25, 118, 210, 0.08) 0%, transparent 100%); border-radius: 12px;">
            <div style="font-size: 36px;">🎓</div>
            <div style="font-size: 18px; font-weight: 700;">STUDENT COMPANION</div>
        </div>
        """, unsafe_allow_html=True)

        PanelBuilder.render_user_card(ctx.session.user, ctx.avatar.value)

        pages = list(PAGES)
        current = st.session_state.get("current_page", pages[0])
        page = st.radio(
            "Navigate",
            pages,
            index=pages.index(current) if current in pages else 0,
            label_visibility="collapsed",
        )
        st.session_state.current_page = page

        st.markdown("### SYNC")
        if st.button("Refresh from services", use_container_width=True):
            ctx.refresh()
        render_sync_summary(ctx.sync.status.values())

    return page


def main():
    ctx = get_context()
    consume_reset_link(ctx)

    if ctx.pending_reset:
        render_reset(ctx)
        return

    if not ctx.session.is_authenticated:
        render_auth(ctx)
        return

    sync_fragment(ctx)
    page = render_sidebar(ctx)
    PAGES[page](ctx)


if __name__ == "__main__":
    main()
