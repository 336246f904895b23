"""Reports module - budget, timeline, comparison, progress and dashboard analytics."""
from practice.reports.utilization import build_budget_summary, get_budget_summary
from practice.reports.timeline import calculate_fund_utilization_timeline, get_fund_utilization
from practice.reports.comparison import build_service_comparison, get_service_comparison
from practice.reports.progress import build_progress_analysis, get_progress_analysis
from practice.reports.dashboard import get_dashboard

__all__ = [
    "build_budget_summary",
    "get_budget_summary",
    "calculate_fund_utilization_timeline",
    "get_fund_utilization",
    "build_service_comparison",
    "get_service_comparison",
    "build_progress_analysis",
    "get_progress_analysis",
    "get_dashboard",
]
