"""
Profile page: details, avatar, stats, password reset request, logout.
"""

import streamlit as st

from components.panels import PanelBuilder
from components.sync_badge import render_sync_badge
from models.records import UserProfile
from state.context import AppContext
from state.errors import CompanionError, RemoteRejected, RemoteUnavailable
from utils.validation import FEED_MEDIA_TYPES, MAX_NOTE_ATTACHMENT_BYTES, read_attachment, validate_email
from .common import show_error

AVATAR_TYPES = {k: v for k, v in FEED_MEDIA_TYPES.items() if v == "image"}


def render_profile(ctx: AppContext) -> None:
    user = ctx.session.user
    left, right = st.columns([4, 1])
    with left:
        st.subheader("👤 Profile")
    with right:
        render_sync_badge(ctx.sync.status_for("profile"))

    PanelBuilder.render_user_card(user, ctx.avatar.value)

    _render_avatar(ctx)
    _render_details(ctx, user)
    _render_stats(ctx)

    st.divider()
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Send password reset link", use_container_width=True):
            try:
                message = ctx.api.forgot_password(validate_email(user.email))
            except CompanionError as e:
                show_error(e)
            else:
                st.success(message or "Password reset link sent to email")
    with col2:
        if st.button("Log out", type="primary", use_container_width=True):
            ctx.session.logout()
            st.rerun()


def _render_avatar(ctx: AppContext) -> None:
    upload = st.file_uploader("Change picture", type=["jpg", "jpeg", "png", "gif"], key="avatar_upload")
    if upload is None or not st.button("Save picture"):
        return
    try:
        attachment = read_attachment(upload.name, upload.getvalue(), upload.type, MAX_NOTE_ATTACHMENT_BYTES, AVATAR_TYPES)
    except CompanionError as e:
        show_error(e)
        return

    # Shown immediately from the avatar cache; the service copy is best effort
    ctx.avatar.set(attachment.data_uri)
    try:
        ctx.api.update_profile(ctx.session.identity, avatar=attachment.data_uri)
    except (RemoteUnavailable, RemoteRejected) as e:
        st.toast(f"Picture saved on this device only ({e})")
    st.rerun()


def _render_details(ctx: AppContext, user: UserProfile) -> None:
    with st.form("profile_form"):
        col1, col2 = st.columns(2)
        name = col1.text_input("Name", value=user.name or "")
        email = col2.text_input("Email", value=user.email or "")
        phone = col1.text_input("Phone", value=user.phone or "")
        department = col2.text_input("Department", value=user.department or "")
        submitted = st.form_submit_button("Save changes")

    if not submitted:
        return

    changes = {
        key: value.strip()
        for key, value in (("name", name), ("email", email), ("phone", phone), ("department", department))
        if value.strip() and value.strip() != (getattr(user, key) or "")
    }
    if not changes:
        st.info("Nothing to update")
        return
    try:
        if "email" in changes:
            validate_email(changes["email"])
        updated = ctx.api.update_profile(ctx.session.identity, **changes)
        ctx.session.update_profile(UserProfile.model_validate(updated))
    except CompanionError as e:
        show_error(e)
        return
    st.success("Profile updated")
    st.rerun()


def _render_stats(ctx: AppContext) -> None:
    with st.expander("📊 My activity"):
        try:
            stats = ctx.api.get_user_stats(ctx.session.identity)
        except CompanionError as e:
            show_error(e)
            return
        PanelBuilder.render_stats(stats)
