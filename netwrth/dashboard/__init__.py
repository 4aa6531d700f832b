"""Dashboard data layer.

Assembles KPI totals, spending mix, monthly trend, budget usage and goal
progress for a period from a record snapshot.
"""

from netwrth.dashboard.data_provider import InsightsProvider, window_months

__all__ = [
    "InsightsProvider",
    "window_months",
]
