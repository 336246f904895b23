"""Budget utilisation summary for a client's active plan.

Totals come from the plan's budget items (unit price x quantity / used quantity).
Spending events come from the products recorded on session notes, matched to
budget items by item code.
"""
import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data.client_utils import get_active_plan
from practice.data.models import BudgetItem, BudgetSettings, Session, SessionNote

# Fallback plan length when the plan period is empty or inverted
FALLBACK_PLAN_DAYS = 180
# Depletion projections are capped at one year out
MAX_DEPLETION_DAYS = 365


def as_date(value: Any) -> Optional[date]:
    """Normalise a date or datetime (naive or aware) to a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def plan_start_date(plan: BudgetSettings) -> Optional[date]:
    """A plan starts on its start_date, or the day it was created."""
    return as_date(plan.start_date) or as_date(plan.created_at)


def item_totals(items: Sequence[BudgetItem]) -> Tuple[Decimal, Decimal]:
    """Return (total, used) for a set of budget items."""
    total = sum((Decimal(str(item.unit_price)) * item.quantity for item in items), Decimal("0"))
    used = sum((Decimal(str(item.unit_price)) * (item.used_quantity or 0) for item in items), Decimal("0"))
    return total, used


def spending_by_category(items: Sequence[BudgetItem]) -> Dict[str, float]:
    """Used amount per item category."""
    result: Dict[str, float] = {}
    for item in items:
        category = item.category or "Uncategorized"
        used = float(Decimal(str(item.unit_price)) * (item.used_quantity or 0))
        result[category] = round(result.get(category, 0.0) + used, 2)
    return result


def calculate_spending_events(
    sessions_with_notes: Sequence[Tuple[Session, SessionNote]],
    items: Sequence[BudgetItem],
) -> List[Dict[str, Any]]:
    """
    Turn session-note products into dated spending events.

    Products whose code matches no budget item are ignored. A product's own
    unit price wins over the item's price. Newest events first.
    """
    item_by_code = {item.item_code: item for item in items}
    events = []

    for session, note in sessions_with_notes:
        for product in note.products or []:
            item = item_by_code.get(product.get("code"))
            if item is None:
                continue

            unit_price = Decimal(str(product.get("unit_price") or item.unit_price))
            quantity = int(product.get("quantity") or 0)
            events.append({
                "date": as_date(session.session_date),
                "amount": float(unit_price * quantity),
                "description": session.title,
                "item_code": item.item_code,
                "item_name": product.get("description") or item.description or item.item_code,
                "category": item.category,
                "session_id": session.id,
            })

    events.sort(key=lambda e: e["date"], reverse=True)
    return events


def calculate_monthly_spending(
    events: Sequence[Dict[str, Any]],
    start_date: date,
    end_date: date,
    total_budget: float,
    today: date,
) -> List[Dict[str, Any]]:
    """
    One row per month of the plan with actual, target and projected spend.

    Target spend is the budget spread evenly over the months. Months after the
    current one are projected at the average monthly spend so far.
    """
    months: List[Dict[str, Any]] = []
    current = start_date.replace(day=1)
    last = end_date.replace(day=1)

    while current <= last:
        months.append({
            "month": current.strftime("%Y-%m"),
            "label": current.strftime("%b %Y"),
            "actual_spending": 0.0,
            "target_spending": 0.0,
            "projected_spending": None,
            "cumulative_actual": 0.0,
            "cumulative_target": 0.0,
            "cumulative_projected": None,
            "is_projected": current > today,
        })
        current += relativedelta(months=1)

    if not months:
        return []

    index_by_month = {m["month"]: i for i, m in enumerate(months)}
    for event in events:
        i = index_by_month.get(event["date"].strftime("%Y-%m"))
        if i is not None:
            months[i]["actual_spending"] += event["amount"]

    monthly_target = total_budget / len(months)
    cumulative_actual = 0.0
    cumulative_target = 0.0
    for month in months:
        month["target_spending"] = monthly_target
        cumulative_actual += month["actual_spending"]
        cumulative_target += monthly_target
        month["cumulative_actual"] = cumulative_actual
        month["cumulative_target"] = cumulative_target

    current_index = index_by_month.get(today.strftime("%Y-%m"))
    if current_index is not None:
        past = months[:current_index + 1]
        spent_so_far = sum(m["actual_spending"] for m in past)
        average = spent_so_far / max(1, len(past))

        projected = spent_so_far
        for month in months[current_index + 1:]:
            projected += average
            month["projected_spending"] = average
            month["cumulative_projected"] = projected

    for month in months:
        for key in ("actual_spending", "target_spending", "cumulative_actual", "cumulative_target"):
            month[key] = round(month[key], 2)
        for key in ("projected_spending", "cumulative_projected"):
            if month[key] is not None:
                month[key] = round(month[key], 2)

    return months


def build_budget_summary(
    plan: Optional[BudgetSettings],
    items: Sequence[BudgetItem],
    events: Sequence[Dict[str, Any]],
    today: date,
) -> Optional[Dict[str, Any]]:
    """
    Summarise utilisation of the active plan.

    Returns None when there is no plan or the plan has no items.
    """
    if plan is None or not items:
        return None

    total_dec, used_dec = item_totals(items)
    total_budget = float(total_dec)
    used_budget = float(used_dec)
    remaining_budget = total_budget - used_budget
    utilization = (used_budget / total_budget * 100) if total_budget > 0 else 0.0

    start_date = plan_start_date(plan) or today
    end_date = as_date(plan.end_of_plan) or start_date + relativedelta(months=6)

    total_days = (end_date - start_date).days
    days_elapsed = max(0, min((today - start_date).days, total_days))
    remaining_days = max(0, total_days - days_elapsed)

    daily_budget = total_budget / (total_days if total_days > 0 else FALLBACK_PLAN_DAYS)
    daily_spend_rate = used_budget / days_elapsed if days_elapsed > 0 else 0.0

    projected_end_date = None
    if daily_spend_rate > 0 and remaining_budget > 0:
        days_until_depletion = min(math.floor(remaining_budget / daily_spend_rate), MAX_DEPLETION_DAYS)
        candidate = today + timedelta(days=days_until_depletion)
        if candidate < end_date:
            projected_end_date = candidate

    projected_overspend = None
    if daily_spend_rate > daily_budget:
        projected_total = used_budget + daily_spend_rate * remaining_days
        if projected_total > total_budget:
            projected_overspend = round(projected_total - total_budget, 2)

    monthly = calculate_monthly_spending(events, start_date, end_date, total_budget, today)

    projected_remaining = remaining_budget
    if monthly and monthly[-1]["cumulative_projected"] is not None:
        projected_remaining = max(0.0, total_budget - monthly[-1]["cumulative_projected"])

    by_category = spending_by_category(items)
    top_category = max(by_category, key=by_category.get) if any(by_category.values()) else None

    return {
        "plan_id": plan.id,
        "plan_period_name": plan.plan_serial_number or f"Plan from {start_date:%b %Y}",
        "total_budget": round(total_budget, 2),
        "used_budget": round(used_budget, 2),
        "remaining_budget": round(remaining_budget, 2),
        "utilization_percentage": round(utilization, 2),
        "start_date": start_date,
        "end_date": end_date,
        "total_days": total_days,
        "days_elapsed": days_elapsed,
        "remaining_days": remaining_days,
        "daily_budget": round(daily_budget, 2),
        "daily_spend_rate": round(daily_spend_rate, 2),
        "projected_end_date": projected_end_date,
        "projected_overspend": projected_overspend,
        "projected_remaining_budget": round(projected_remaining, 2),
        "spending_by_category": by_category,
        "top_category": top_category,
        "spending_events": list(events),
        "monthly_spending": monthly,
    }


def forecast_depletion_date(
    remaining: float,
    events: Sequence[Dict[str, Any]],
    today: date,
) -> date:
    """
    Date the remaining funds run out at the observed spending rate.

    The rate is total spend over the span of spending dates. Depleted funds
    forecast today; no spending history forecasts a year out.
    """
    if remaining <= 0:
        return today

    dates = [e["date"] for e in events]
    spent = sum(e["amount"] for e in events)
    if not dates or spent <= 0:
        return today + timedelta(days=MAX_DEPLETION_DAYS)

    span_days = max(1, (max(dates) - min(dates)).days)
    daily_rate = spent / span_days
    return today + timedelta(days=math.ceil(remaining / daily_rate))


async def load_client_budget(
    db: AsyncSession,
    client_id: str,
) -> Tuple[Optional[BudgetSettings], List[BudgetItem], List[Dict[str, Any]]]:
    """Load the active plan, its items and the client's spending events."""
    plan = await get_active_plan(db, client_id)
    if plan is None:
        return None, [], []

    result = await db.execute(
        select(BudgetItem).where(BudgetItem.budget_settings_id == plan.id)
    )
    items = list(result.scalars().all())

    result = await db.execute(
        select(Session, SessionNote)
        .join(SessionNote, SessionNote.session_id == Session.id)
        .where(Session.client_id == client_id)
    )
    events = calculate_spending_events(result.all(), items)
    return plan, items, events


async def get_budget_summary(
    db: AsyncSession,
    client_id: str,
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """Budget utilisation summary for a client, or None without plan data."""
    plan, items, events = await load_client_budget(db, client_id)
    return build_budget_summary(plan, items, events, today or date.today())
