from .charts import ChartBuilder, daily_totals, mood_frame
from .panels import PanelBuilder
from .sync_badge import render_sync_badge, render_sync_summary

__all__ = [
    'ChartBuilder',
    'daily_totals',
    'mood_frame',
    'PanelBuilder',
    'render_sync_badge',
    'render_sync_summary',
]
