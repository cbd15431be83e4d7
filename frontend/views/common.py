"""
Widgets shared by several pages.
"""

from typing import Any, Callable, List, Sequence, TypeVar

import streamlit as st

from components.sync_badge import render_sync_badge
from state.context import AppContext
from state.errors import AuthorizationDenied, CompanionError, RemoteRejected, RemoteUnavailable, ValidationError
from utils.date_filter import DateFilterKind, filter_by_date

T = TypeVar("T")


def date_filtered(items: Sequence[T], get_date: Callable[[T], Any], key: str) -> List[T]:
    """Filter selector + the filtered items"""
    cols = st.columns([2, 1, 1])
    with cols[0]:
        kind = st.selectbox(
            "Show",
            list(DateFilterKind),
            format_func=lambda k: k.label,
            key=f"{key}_filter",
        )
    from_date = to_date = None
    if kind == DateFilterKind.RANGE:
        with cols[1]:
            from_date = st.date_input("From", value=None, key=f"{key}_from")
        with cols[2]:
            to_date = st.date_input("To", value=None, key=f"{key}_to")
    return list(filter_by_date(items, get_date, kind, from_date, to_date))


def show_error(error: CompanionError) -> None:
    if isinstance(error, ValidationError):
        st.warning(str(error))
    elif isinstance(error, AuthorizationDenied):
        st.error("You can only change your own items.")
    elif isinstance(error, RemoteRejected):
        st.error(str(error))
    elif isinstance(error, RemoteUnavailable):
        st.error("Service unavailable. Please try again later.")
    else:
        st.error(str(error))


def page_header(ctx: AppContext, title: str, collection: str) -> None:
    left, right = st.columns([4, 1])
    with left:
        st.subheader(title)
    with right:
        render_sync_badge(ctx.sync.status_for(collection))
