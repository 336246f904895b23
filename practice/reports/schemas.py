"""Report response schemas."""
from pydantic import BaseModel
from datetime import date, datetime
from typing import Dict, List, Literal, Optional


# ============================================================================
# BUDGET SUMMARY
# ============================================================================

class SpendingEvent(BaseModel):
    """A priced product use recorded on a session note."""
    date: date
    amount: float
    description: str
    item_code: str
    item_name: str
    category: Optional[str] = None
    session_id: str


class MonthlySpending(BaseModel):
    """Actual, target and projected spend for one plan month."""
    month: str  # YYYY-MM
    label: str
    actual_spending: float
    target_spending: float
    projected_spending: Optional[float] = None
    cumulative_actual: float
    cumulative_target: float
    cumulative_projected: Optional[float] = None
    is_projected: bool


class BudgetSummaryResponse(BaseModel):
    """Utilisation of a client's active plan."""
    plan_id: str
    plan_period_name: str
    total_budget: float
    used_budget: float
    remaining_budget: float
    utilization_percentage: float
    start_date: date
    end_date: date
    total_days: int
    days_elapsed: int
    remaining_days: int
    daily_budget: float
    daily_spend_rate: float
    projected_end_date: Optional[date] = None
    projected_overspend: Optional[float] = None
    projected_remaining_budget: float
    spending_by_category: Dict[str, float]
    top_category: Optional[str] = None
    spending_events: List[SpendingEvent]
    monthly_spending: List[MonthlySpending]


# ============================================================================
# FUND UTILISATION TIMELINE
# ============================================================================

class TimelinePoint(BaseModel):
    """Cumulative spend series at one point of the plan."""
    date: date
    day_number: int
    projected: float
    actual: Optional[float] = None
    extension: Optional[float] = None
    correction: Optional[float] = None
    is_future: bool
    percent_of_time_elapsed: float


class FundUtilizationResponse(BaseModel):
    """Timeline points and depletion metrics."""
    total_budget: float
    start_date: date
    end_date: date
    total_days: int
    days_elapsed: int
    days_remaining: int
    spent_to_date: float
    points: List[TimelinePoint]
    forecast_depletion_date: Optional[date] = None
    ideal_depletion_date: date
    days_until_depletion: int
    projected_remaining_at_end: float
    utilization_ratio: float
    status: Literal["depleting-fast", "depleting-slow", "balanced"]


# ============================================================================
# SERVICE COMPARISON
# ============================================================================

class CategoryUtilization(BaseModel):
    category: str
    total: float
    used: float
    utilization: float


class ComparisonEntry(BaseModel):
    """Utilisation profile of the client or an anonymised peer."""
    name: str
    categories: List[CategoryUtilization]
    overall_utilization: float
    total_budget: float
    used_amount: float
    top_categories: List[str]


class KeyDifference(BaseModel):
    category: str
    client_utilization: float
    cohort_average: float
    difference: float
    direction: Literal["above", "below"]


class ServiceComparisonResponse(BaseModel):
    """Client utilisation ranked against its cohort."""
    comparison_type: Literal["similar", "budget", "top"]
    client: ComparisonEntry
    peers: List[ComparisonEntry]
    rank: int
    cohort_size: int
    rank_text: str
    key_differences: List[KeyDifference]


# ============================================================================
# PROGRESS
# ============================================================================

class MilestoneProgress(BaseModel):
    milestone_id: str
    title: str
    latest_rating: Optional[int] = None
    completed: bool


class GoalProgress(BaseModel):
    goal_id: str
    goal_title: str
    progress: float
    milestones: List[MilestoneProgress]


class ProgressAnalysisResponse(BaseModel):
    """Attendance and goal progress for a client."""
    sessions_completed: int
    sessions_cancelled: int
    attendance_rate: float
    overall_progress: float
    goal_progress: List[GoalProgress]
    progress_assessment: str
    overall_assessment: str


# ============================================================================
# DASHBOARD
# ============================================================================

class AppointmentStatsEntry(BaseModel):
    period: str
    count: int
    percent_change: Optional[float] = None


class AppointmentStats(BaseModel):
    daily: List[AppointmentStatsEntry]
    weekly: List[AppointmentStatsEntry]
    monthly: List[AppointmentStatsEntry]
    yearly: List[AppointmentStatsEntry]


class ExpiringPlan(BaseModel):
    client_id: str
    client_name: str
    plan_id: str
    plan_name: str
    end_of_plan: date
    days_left: int
    unutilized_amount: float
    unutilized_percentage: float


class ExpiringPlans(BaseModel):
    count: int
    by_client: List[ExpiringPlan]


class RemainingFundsMonth(BaseModel):
    month: str  # YYYY-MM
    amount: float
    plan_count: int


class BudgetExpirationStats(BaseModel):
    expiring_next_month: ExpiringPlans
    remaining_funds: List[RemainingFundsMonth]


class DashboardResponse(BaseModel):
    """Practice-wide dashboard."""
    appointments: AppointmentStats
    budgets: BudgetExpirationStats
    last_updated: datetime
