"""
Read-Models Package

Views that re-query the aggregator whenever the refresh bus says their data
changed.
"""

from .overview import BudgetWarning, OverviewSnapshot, OverviewView
from .reports import ReportsView

__all__ = ["BudgetWarning", "OverviewSnapshot", "OverviewView", "ReportsView"]
