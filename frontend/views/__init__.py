"""
Pages. Each takes the AppContext and renders from its caches.
"""

from .auth import render_auth, render_reset
from .dashboard import render_dashboard
from .expenses import render_expenses
from .planner import render_planner
from .events import render_events
from .wellbeing import render_wellbeing
from .diary import render_diary
from .board import render_board
from .profile import render_profile

PAGES = {
    "Dashboard": render_dashboard,
    "Expenses": render_expenses,
    "Planner": render_planner,
    "Events": render_events,
    "Wellbeing": render_wellbeing,
    "Diary": render_diary,
    "Board": render_board,
    "Profile": render_profile,
}

__all__ = [
    "PAGES",
    "render_auth",
    "render_reset",
    "render_dashboard",
    "render_expenses",
    "render_planner",
    "render_events",
    "render_wellbeing",
    "render_diary",
    "render_board",
    "render_profile",
]
