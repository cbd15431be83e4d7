"""
Panel Components
Cards and small information displays shared by the pages.
"""

import html
from typing import Dict, List, Optional, Tuple

import streamlit as st

from models.records import FeedCategory, FeedPost, UserProfile
from utils.summary import TodaySummary


def _esc(value: Optional[str]) -> str:
    return html.escape(value or "")


class PanelBuilder:
    """Build page panels and cards"""

    @staticmethod
    def render_header(title: str, icon: str, subtitle: str = "") -> None:
        st.markdown(f"""
        <div class="panel-header">
            <span class="panel-icon">{icon}</span>
            <span>{_esc(title)}</span>
        </div>
        """, unsafe_allow_html=True)
        if subtitle:
            st.caption(subtitle)

    @staticmethod
    def render_summary(summary: TodaySummary) -> None:
        """Today's numbers at the top of the dashboard"""
        metrics: List[Tuple[str, str]] = [
            ("Spent today", f"{summary.spent_today:,.2f}"),
            ("Spent this month", f"{summary.spent_this_month:,.2f}"),
            ("Tasks due today", str(summary.tasks_due_today)),
            ("Open tasks", str(summary.tasks_open)),
            ("Events today", str(summary.events_today)),
            ("Latest mood", summary.latest_mood or "-"),
        ]
        cols = st.columns(len(metrics))
        for col, (label, value) in zip(cols, metrics):
            with col:
                st.metric(label, value)

    @staticmethod
    def render_user_card(user: UserProfile, avatar: Optional[str] = None) -> None:
        image = avatar or user.avatar
        picture = (
            f'<img src="{image}" style="width:64px;height:64px;border-radius:50%;object-fit:cover;">'
            if image else
            '<div style="width:64px;height:64px;border-radius:50%;background:#1976d222;'
            'display:flex;align-items:center;justify-content:center;font-size:28px;">🎓</div>'
        )
        st.markdown(f"""
        <div style="display:flex;gap:16px;align-items:center;padding:12px 0;">
            {picture}
            <div>
                <div style="font-size:18px;font-weight:600;">{_esc(user.display_name)}</div>
                <div style="font-size:12px;color:#6b7280;">{_esc(user.student_id)} · {_esc(user.department)} {_esc(user.batch)}</div>
                <div style="font-size:12px;color:#6b7280;">{_esc(user.email)}</div>
            </div>
        </div>
        """, unsafe_allow_html=True)

    @staticmethod
    def render_stats(stats: Dict) -> None:
        """Counts from the profile service's user-stats endpoint"""
        rows = [
            ("Expenses", stats.get("totalExpenses", 0)),
            ("Total spent", f"{stats.get('totalExpenseAmount', 0):,.2f}"),
            ("Posts", stats.get("totalFeedPosts", 0)),
            ("Events", stats.get("totalEvents", 0)),
            ("Tasks", stats.get("totalTasks", 0)),
            ("Mood logs", stats.get("totalMoodLogs", 0)),
            ("Diary entries", stats.get("totalDiaryEntries", 0)),
        ]
        cols = st.columns(4)
        for i, (label, value) in enumerate(rows):
            with cols[i % 4]:
                st.metric(label, value)

    @staticmethod
    def render_post_body(post: FeedPost) -> None:
        try:
            category = FeedCategory(post.category).label
        except ValueError:
            category = post.category

        st.markdown(
            f"**{_esc(post.user_name)}** · {category} · "
            f"<span style='color:#6b7280;font-size:12px'>{_esc((post.timestamp or post.created_at or '')[:16])}</span>",
            unsafe_allow_html=True,
        )

        if post.is_event:
            color = post.event_color or "#1976d2"
            when = " ".join(filter(None, [post.event_date, post.event_time]))
            st.markdown(f"""
            <div style="border-left:4px solid {color};padding:8px 12px;background:{color}11;border-radius:0 8px 8px 0;">
                <div style="font-weight:600;">📅 {_esc(post.event_name)}</div>
                <div style="font-size:12px;color:#6b7280;">{_esc(when)}</div>
                <div>{_esc(post.event_description)}</div>
            </div>
            """, unsafe_allow_html=True)
        elif post.text:
            st.write(post.text)

        if post.media_data:
            if post.media_type == "image":
                st.image(post.media_data)
            elif post.media_type == "video":
                st.video(post.media_data)
            else:
                st.markdown(f"📎 [{_esc(post.file_name or 'attachment')}]({post.media_data})")

    @staticmethod
    def render_empty(message: str) -> None:
        st.markdown(f"""
        <div style="text-align:center;padding:24px;color:#6b7280;border:1px dashed #e5e7eb;border-radius:10px;">
            {_esc(message)}
        </div>
        """, unsafe_allow_html=True)
