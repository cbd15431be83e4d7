"""
Student board (shared feed).
"""

import streamlit as st

from components.panels import PanelBuilder
from models.records import Event, FeedCategory, FeedPost
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.validation import (
    FEED_MEDIA_TYPES,
    MAX_FEED_ATTACHMENT_BYTES,
    read_attachment,
    validate_comment,
    validate_feed_post,
)
from .common import page_header, show_error


def event_from_post(post: FeedPost) -> Event:
    """Copy an event post into the personal calendar"""
    return Event(
        name=post.event_name or post.text or "Event",
        date=post.event_date or (post.timestamp or "")[:10],
        time=post.event_time,
        description=post.event_description,
        color=post.event_color or "#1976d2",
    )


def render_board(ctx: AppContext) -> None:
    page_header(ctx, "📢 Student Board", "feed")
    _render_composer(ctx)

    if not len(ctx.feed):
        PanelBuilder.render_empty("No posts yet. Say hello!")
        return

    for post in ctx.feed:
        _render_post(ctx, post)


def _render_composer(ctx: AppContext) -> None:
    with st.form("post_form", clear_on_submit=True):
        category = st.selectbox("Category", list(FeedCategory), format_func=lambda c: c.label)
        text = st.text_area("Share something", height=80)
        with st.expander("Event details (event posts)"):
            col1, col2, col3 = st.columns(3)
            event_name = col1.text_input("Event name")
            event_date = col2.date_input("Event date", value=None)
            event_time = col3.time_input("Event time", value=None)
        upload = st.file_uploader("Attachment (image, PDF or video, max 10 MB)", type=["jpg", "jpeg", "png", "gif", "pdf", "mp4", "webm"])
        submitted = st.form_submit_button("Post")

    if not submitted:
        return
    try:
        attachment = None
        if upload is not None:
            attachment = read_attachment(
                upload.name, upload.getvalue(), upload.type, MAX_FEED_ATTACHMENT_BYTES, FEED_MEDIA_TYPES
            )
        text = validate_feed_post(text, category.value, attachment)
        post = FeedPost(
            user_name=ctx.session.user.display_name,
            text=text or None,
            category=category.value,
            media_data=attachment.data_uri if attachment else None,
            media_type=attachment.media_kind if attachment else None,
            file_name=attachment.name if attachment else None,
            file_size=attachment.size if attachment else None,
        )
        if category == FeedCategory.EVENT:
            post = post.model_copy(update={
                "event_name": event_name.strip() or None,
                "event_date": event_date.isoformat() if event_date else None,
                "event_time": event_time.strftime("%H:%M") if event_time else None,
            })
        ctx.sync.submit(ctx.feed, post)
    except CompanionError as e:
        show_error(e)


def _render_post(ctx: AppContext, post: FeedPost) -> None:
    me = ctx.session.identity
    item_id = ItemId.of(post)
    key = item_id.key

    with st.container(border=True):
        PanelBuilder.render_post_body(post)

        if post.server_id is None:
            st.caption("⏳ Not yet shared (saved on this device)")

        cols = st.columns([1, 1, 2, 1])
        liked = post.liked_by(me)
        try:
            if post.server_id and cols[0].button(f"{'❤️' if liked else '🤍'} {len(post.likes)}", key=f"like_{key}"):
                ctx.sync.toggle_like(ctx.feed, post.server_id)
                st.rerun()
            if post.is_event and cols[2].button("➕ Add to my calendar", key=f"cal_{key}"):
                ctx.sync.submit(ctx.events, event_from_post(post))
                st.toast("Added to your events")
            if post.user_id == me and cols[3].button("🗑", key=f"post_del_{key}"):
                ctx.sync.remove(ctx.feed, item_id)
                st.rerun()
        except CompanionError as e:
            show_error(e)

        cols[1].caption(f"💬 {len(post.comments)}")
        for comment in post.comments:
            ccol1, ccol2 = st.columns([8, 1])
            ccol1.markdown(f"**{comment.user_name}**: {comment.text}")
            if comment.user_id == me and comment.server_id and ccol2.button("✕", key=f"cdel_{key}_{comment.server_id}"):
                try:
                    ctx.sync.delete_comment(ctx.feed, post.server_id, comment)
                except CompanionError as e:
                    show_error(e)
                else:
                    st.rerun()

        if post.server_id:
            with st.form(f"comment_{key}", clear_on_submit=True):
                text = st.text_input("Comment", label_visibility="collapsed", placeholder="Write a comment")
                if st.form_submit_button("Comment"):
                    try:
                        ctx.sync.add_comment(ctx.feed, post.server_id, validate_comment(text))
                    except CompanionError as e:
                        show_error(e)
                    else:
                        st.rerun()
