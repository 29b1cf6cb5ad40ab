"""Dashboard module: metric cards, pages, shared context and the terminal host."""

from arbview.dashboard.badges import compute_badges
from arbview.dashboard.context import DashboardContext
from arbview.dashboard.metric_card import MetricCard
from arbview.dashboard.pages import (
    AlertsPage,
    DashboardPage,
    Page,
    SettingsPage,
    Sidebar,
    TransactionsPage,
    WalletsPage,
)
from arbview.dashboard.terminal import TerminalDashboard


__all__ = [
    "AlertsPage",
    "DashboardContext",
    "DashboardPage",
    "MetricCard",
    "Page",
    "SettingsPage",
    "Sidebar",
    "TerminalDashboard",
    "TransactionsPage",
    "WalletsPage",
    "compute_badges",
]
