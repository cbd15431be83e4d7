"""
Chart Components
Spending and mood charts built from cached records with Plotly.
"""

from typing import Iterable, List

import pandas as pd
import plotly.graph_objects as go

from models.records import Expense, MoodLog
from utils.date_filter import to_day
from utils.wellbeing import MOOD_SCORE, MOOD_EMOJI


def expenses_frame(expenses: Iterable[Expense]) -> pd.DataFrame:
    """Expenses as a frame with a parsed `day` column; unparseable dates dropped"""
    rows = [{"title": e.title, "amount": e.amount, "date": e.date} for e in expenses]
    df = pd.DataFrame(rows, columns=["title", "amount", "date"])
    df["day"] = pd.to_datetime(df["date"].map(to_day), errors="coerce")
    return df.dropna(subset=["day"])


def daily_totals(expenses: Iterable[Expense]) -> pd.DataFrame:
    """Sum of amounts per calendar day, oldest first"""
    df = expenses_frame(expenses)
    if df.empty:
        return pd.DataFrame(columns=["day", "amount"])
    return df.groupby("day", as_index=False)["amount"].sum().sort_values("day")


def mood_frame(moods: Iterable[MoodLog]) -> pd.DataFrame:
    rows = [{"date": m.date, "mood": m.mood} for m in moods]
    df = pd.DataFrame(rows, columns=["date", "mood"])
    df["day"] = pd.to_datetime(df["date"].map(to_day), errors="coerce")
    df["score"] = df["mood"].map(MOOD_SCORE)
    return df.dropna(subset=["day", "score"]).sort_values("day")


class ChartBuilder:
    """Build the dashboard charts"""

    COLORS = {
        'bg': '#ffffff',
        'paper': '#ffffff',
        'grid': '#e5e7eb',
        'text': '#1f2937',
        'text_muted': '#6b7280',
        'accent': '#1976d2',
        'accent2': '#8b5cf6',
        'good': '#10b981',
        'bad': '#ef4444',
    }

    @staticmethod
    def get_layout_template() -> dict:
        """Shared layout for every chart"""
        return {
            'paper_bgcolor': ChartBuilder.COLORS['paper'],
            'plot_bgcolor': ChartBuilder.COLORS['bg'],
            'font': {
                'family': 'Inter, sans-serif',
                'color': ChartBuilder.COLORS['text'],
                'size': 12
            },
            'margin': {'l': 50, 'r': 20, 't': 40, 'b': 40},
            'xaxis': {
                'gridcolor': ChartBuilder.COLORS['grid'],
                'showgrid': False,
            },
            'yaxis': {
                'gridcolor': ChartBuilder.COLORS['grid'],
                'zerolinecolor': ChartBuilder.COLORS['grid'],
                'showgrid': True,
            },
            'hovermode': 'x unified',
        }

    @staticmethod
    def create_expense_chart(expenses: List[Expense], title: str = "Daily spending", height: int = 320) -> go.Figure:
        daily = daily_totals(expenses)

        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=daily['day'],
            y=daily['amount'],
            marker_color=ChartBuilder.COLORS['accent'],
            name='Spent',
            hovertemplate='%{y:.2f}<extra></extra>',
        ))

        fig.update_layout(
            **ChartBuilder.get_layout_template(),
            title={'text': title, 'font': {'size': 14}},
            height=height,
            showlegend=False,
        )
        return fig

    @staticmethod
    def create_mood_chart(moods: List[MoodLog], title: str = "Mood over time", height: int = 300) -> go.Figure:
        df = mood_frame(moods)
        ticks = sorted(MOOD_SCORE.items(), key=lambda kv: kv[1])

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=df['day'],
            y=df['score'],
            mode='lines+markers',
            line={'color': ChartBuilder.COLORS['accent2'], 'width': 2},
            marker={'size': 8},
            text=df['mood'],
            hovertemplate='%{text}<extra></extra>',
            name='Mood',
        ))

        layout = ChartBuilder.get_layout_template()
        layout['yaxis'] = {
            **layout['yaxis'],
            'tickvals': [score for _, score in ticks],
            'ticktext': [f"{MOOD_EMOJI.get(mood, '')} {mood}" for mood, _ in ticks],
            'range': [0.5, len(ticks) + 0.5],
        }
        fig.update_layout(
            **layout,
            title={'text': title, 'font': {'size': 14}},
            height=height,
            showlegend=False,
        )
        return fig
