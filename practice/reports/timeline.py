"""Fund utilisation timeline.

Four cumulative-spend series over the plan period:

- projected: linear spend from zero to the full budget at plan end
- actual: observed cumulative spend, up to today
- extension: today's spend continued at the observed daily rate
- correction: the path from today's spend to the full budget at plan end

Plus the derived depletion metrics and a pacing status.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from practice.config import settings
from practice.reports.utilization import as_date, item_totals, load_client_budget, plan_start_date

MIN_PLAN_DAYS = 30
MAX_INTERVALS = 36

FAST_THRESHOLD = 1.1
SLOW_THRESHOLD = 0.85


def utilization_status(ratio: float) -> str:
    """Pacing status from the ratio of budget spent to time elapsed."""
    if ratio > FAST_THRESHOLD:
        return "depleting-fast"
    if ratio < SLOW_THRESHOLD:
        return "depleting-slow"
    return "balanced"


def calculate_fund_utilization_timeline(
    total_budget: Optional[float],
    start_date: Optional[date],
    end_date: Optional[date],
    today: date,
    spending: Sequence[Tuple[date, float]] = (),
) -> Dict[str, Any]:
    """
    Build the timeline points and depletion metrics.

    Args:
        total_budget: Plan funds (defaults when missing)
        start_date: Plan start (defaults to 3 months before today)
        end_date: Plan end (defaults to 9 months after today)
        today: Reference date splitting actual from projected
        spending: Observed (date, amount) spending

    Returns:
        Dictionary with "points" and the derived metrics
    """
    if total_budget is None:
        total_budget = settings.DEFAULT_TOTAL_BUDGET
    if start_date is None:
        start_date = today - relativedelta(months=settings.DEFAULT_PLAN_MONTHS_BEFORE)
    if end_date is None:
        end_date = today + relativedelta(months=settings.DEFAULT_PLAN_MONTHS_AFTER)

    total_days = max((end_date - start_date).days, MIN_PLAN_DAYS)
    days_elapsed = min(max((today - start_date).days, 0), total_days)
    days_remaining = max(0, (end_date - today).days)

    ordered = sorted(spending, key=lambda s: s[0])

    def spent_by(day: date) -> float:
        return sum(amount for spent_on, amount in ordered if spent_on <= day)

    spent_today = spent_by(today)
    actual_rate = spent_today / days_elapsed if days_elapsed > 0 else 0.0
    required_rate = (total_budget - spent_today) / days_remaining if days_remaining > 0 else 0.0

    num_points = min(MAX_INTERVALS, total_days)
    interval = total_days / num_points

    points: List[Dict[str, Any]] = []
    for i in range(num_points + 1):
        day_number = int(i * interval + 0.5)
        point_date = start_date + timedelta(days=day_number)
        is_future = point_date > today
        days_from_today = (point_date - today).days

        actual = None if is_future else round(spent_by(point_date), 2)
        extension = round(spent_today + actual_rate * days_from_today, 2) if is_future else None
        correction = round(spent_today + required_rate * days_from_today, 2) if is_future else None

        points.append({
            "date": point_date,
            "day_number": day_number,
            "projected": round(total_budget * day_number / total_days, 2),
            "actual": actual,
            "extension": extension,
            "correction": correction,
            "is_future": is_future,
            "percent_of_time_elapsed": round(day_number / total_days * 100, 2),
        })

    depletion_point = next(
        (p for p in points if p["extension"] is not None and p["extension"] >= total_budget),
        None,
    )
    forecast_depletion = depletion_point["date"] if depletion_point else None
    if spent_today >= total_budget:
        # Already exhausted
        forecast_depletion = today

    if forecast_depletion:
        days_until_depletion = max(0, (forecast_depletion - today).days)
    else:
        days_until_depletion = (end_date - today).days

    final_spend = points[-1]["extension"] if points[-1]["extension"] is not None else spent_today
    projected_remaining = max(0.0, total_budget - final_spend)

    percent_spent = spent_today / total_budget * 100 if total_budget > 0 else 0.0
    percent_elapsed = days_elapsed / total_days * 100
    ratio = percent_spent / max(0.1, percent_elapsed)

    return {
        "total_budget": round(total_budget, 2),
        "start_date": start_date,
        "end_date": end_date,
        "total_days": total_days,
        "days_elapsed": days_elapsed,
        "days_remaining": days_remaining,
        "spent_to_date": round(spent_today, 2),
        "points": points,
        "forecast_depletion_date": forecast_depletion,
        "ideal_depletion_date": end_date,
        "days_until_depletion": days_until_depletion,
        "projected_remaining_at_end": round(projected_remaining, 2),
        "utilization_ratio": round(ratio, 3),
        "status": utilization_status(ratio),
    }


async def get_fund_utilization(
    db: AsyncSession,
    client_id: str,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Timeline for a client's active plan, using defaults for missing plan data."""
    plan, items, events = await load_client_budget(db, client_id)

    total_budget = None
    start_date = None
    end_date = None
    if plan is not None:
        items_total, _ = item_totals(items)
        funds = plan.ndis_funds or items_total
        total_budget = float(funds) if funds else None
        start_date = plan_start_date(plan)
        end_date = as_date(plan.end_of_plan)

    spending = [(e["date"], e["amount"]) for e in events]
    return calculate_fund_utilization_timeline(
        total_budget, start_date, end_date, today or date.today(), spending
    )
