"""
Login, registration and password reset pages.
"""

import streamlit as st

from models.records import UserProfile
from state.context import AppContext
from state.errors import CompanionError
from utils.validation import validate_email, validate_login, validate_registration, validate_reset
from .common import show_error


def render_auth(ctx: AppContext) -> None:
    st.markdown("## 🎓 Student Companion")
    login_tab, register_tab, forgot_tab = st.tabs(["Login", "Register", "Forgot password"])

    with login_tab:
        _render_login(ctx)
    with register_tab:
        _render_register(ctx)
    with forgot_tab:
        _render_forgot(ctx)


def _render_login(ctx: AppContext) -> None:
    with st.form("login_form"):
        student_id = st.text_input("Student ID")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", use_container_width=True)

    if not submitted:
        return
    try:
        student_id, password = validate_login(student_id, password)
        user = ctx.api.login(student_id, password)
        ctx.session.login(UserProfile.model_validate(user))
    except CompanionError as e:
        show_error(e)
        return
    st.rerun()


def _render_register(ctx: AppContext) -> None:
    with st.form("register_form"):
        col1, col2 = st.columns(2)
        with col1:
            student_id = st.text_input("Student ID")
            name = st.text_input("Full name")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password", help="8+ characters, an uppercase letter and a number")
        with col2:
            phone = st.text_input("Phone")
            department = st.text_input("Department")
            batch = st.text_input("Batch")
        submitted = st.form_submit_button("Create account", use_container_width=True)

    if not submitted:
        return
    try:
        body = validate_registration(student_id, name, email, password, phone, department, batch)
        ctx.api.register(**body)
    except CompanionError as e:
        show_error(e)
        return
    st.success("Account created. You can log in now.")


def _render_forgot(ctx: AppContext) -> None:
    with st.form("forgot_form"):
        email = st.text_input("Registered email")
        submitted = st.form_submit_button("Send reset link")

    if not submitted:
        return
    try:
        message = ctx.api.forgot_password(validate_email(email))
    except CompanionError as e:
        show_error(e)
        return
    st.success(message or "Password reset link sent to email")


def render_reset(ctx: AppContext) -> None:
    """Form reached from a reset deep link"""
    pending = ctx.pending_reset
    st.markdown("## 🔑 Reset password")
    st.caption(f"Resetting the password for {pending.email}")

    with st.form("reset_form"):
        new_password = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Reset password", use_container_width=True)

    if st.button("Back to login"):
        ctx.clear_password_reset()
        st.query_params.clear()
        st.rerun()

    if not submitted:
        return
    try:
        validate_reset(new_password, confirm)
        ctx.api.reset_password(pending.email, pending.token, new_password)
    except CompanionError as e:
        show_error(e)
        return

    ctx.clear_password_reset()
    st.query_params.clear()
    st.success("Password reset. Please log in with your new password.")
