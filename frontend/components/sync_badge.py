"""
Sync Status Indicator Component
Shows whether a page is showing fresh service data or local copies.
"""

from typing import Iterable

import streamlit as st

from models.status import CollectionSyncStatus, SyncLevel


def render_sync_badge(status: CollectionSyncStatus, compact: bool = True) -> None:
    """
    Color coding:
    - Green: synced in the last minute
    - Yellow: synced, but a while ago
    - Blue: fetch in flight
    - Red: last call failed, showing local data
    - Gray: stored on this device only
    """
    level = status.level
    color = level.color
    animation = "animation: pulse 1.5s infinite;" if level == SyncLevel.PENDING else ""

    if compact:
        st.markdown(f"""
        <div style="display: inline-flex; align-items: center; gap: 6px; padding: 4px 10px; background: {color}22; border: 1px solid {color}44; border-radius: 12px;">
            <div style="width: 6px; height: 6px; background: {color}; border-radius: 50%; {animation}"></div>
            <span style="font-size: 10px; color: {color}; font-weight: 600;">{level.label}</span>
            <span style="font-size: 10px; color: #6b7280;">{status.display}</span>
        </div>
        """, unsafe_allow_html=True)
        return

    render_sync_badge(status, compact=True)
    if level == SyncLevel.OFFLINE:
        st.markdown(f"""
        <div style="background: rgba(239, 68, 68, 0.08); border-left: 3px solid #ef4444; padding: 8px 12px; border-radius: 0 6px 6px 0; margin-top: 8px; font-size: 12px;">
            📡 Service unreachable{': ' + status.message if status.message else ''}. Showing data saved on this device.
        </div>
        """, unsafe_allow_html=True)


def render_sync_summary(statuses: Iterable[CollectionSyncStatus]) -> None:
    """One line per collection, for the sidebar"""
    for status in statuses:
        color = status.level.color
        st.markdown(
            f"<div style='font-size:11px;display:flex;justify-content:space-between;'>"
            f"<span>{status.collection}</span>"
            f"<span style='color:{color};font-weight:600'>{status.level.label}</span></div>",
            unsafe_allow_html=True,
        )
