"""Practice dashboard: appointment volumes and expiring plans."""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data.models import BudgetItem, BudgetSettings, Client, Session
from practice.reports.utilization import as_date, item_totals

EXPIRY_WINDOW_DAYS = 30
REMAINING_FUNDS_MONTHS = 6


def _with_percent_change(buckets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Percent change from the previous bucket; None when there is no base."""
    previous = None
    for bucket in buckets:
        if previous is None or previous == 0:
            bucket["percent_change"] = None
        else:
            bucket["percent_change"] = round((bucket["count"] - previous) / previous * 100, 1)
        previous = bucket["count"]
    return buckets


def calculate_appointment_stats(session_dates: Sequence[date], today: date) -> Dict[str, List[Dict[str, Any]]]:
    """
    Session counts per day (7), week (4), month (6) and year (3).

    Buckets run oldest to newest and end with the one containing today.
    """
    dates = [as_date(d) for d in session_dates]

    daily = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        daily.append({"period": day.isoformat(), "count": sum(1 for d in dates if d == day)})

    weekly = []
    for offset in range(3, -1, -1):
        week_end = today - timedelta(days=7 * offset)
        week_start = week_end - timedelta(days=6)
        weekly.append({
            "period": week_start.isoformat(),
            "count": sum(1 for d in dates if week_start <= d <= week_end),
        })

    monthly = []
    this_month = today.replace(day=1)
    for offset in range(5, -1, -1):
        month = this_month - relativedelta(months=offset)
        key = month.strftime("%Y-%m")
        monthly.append({"period": key, "count": sum(1 for d in dates if d.strftime("%Y-%m") == key)})

    yearly = []
    for offset in range(2, -1, -1):
        year = today.year - offset
        yearly.append({"period": str(year), "count": sum(1 for d in dates if d.year == year)})

    return {
        "daily": _with_percent_change(daily),
        "weekly": _with_percent_change(weekly),
        "monthly": _with_percent_change(monthly),
        "yearly": _with_percent_change(yearly),
    }


def _unutilized(plan: BudgetSettings, items: Sequence[BudgetItem]) -> Dict[str, float]:
    total, used = item_totals(items)
    if not items:
        total = plan.ndis_funds or 0
    total = float(total)
    remaining = max(0.0, total - float(used))
    return {
        "total": total,
        "remaining": remaining,
        "percentage": round(remaining / total * 100, 1) if total > 0 else 0.0,
    }


def calculate_budget_expiration(
    plans: Sequence[BudgetSettings],
    items_by_plan: Dict[str, Sequence[BudgetItem]],
    client_names: Dict[str, str],
    today: date,
) -> Dict[str, Any]:
    """Active plans ending in the next 30 days, and unspent funds by expiry month."""
    window_end = today + timedelta(days=EXPIRY_WINDOW_DAYS)

    expiring = []
    remaining_by_month: Dict[str, Dict[str, Any]] = {}
    this_month = today.replace(day=1)
    for offset in range(REMAINING_FUNDS_MONTHS):
        key = (this_month + relativedelta(months=offset)).strftime("%Y-%m")
        remaining_by_month[key] = {"month": key, "amount": 0.0, "plan_count": 0}

    for plan in plans:
        end = as_date(plan.end_of_plan)
        if not plan.is_active or end is None or end < today:
            continue

        funds = _unutilized(plan, items_by_plan.get(plan.id, []))

        if end <= window_end:
            expiring.append({
                "client_id": plan.client_id,
                "client_name": client_names.get(plan.client_id, ""),
                "plan_id": plan.id,
                "plan_name": plan.plan_serial_number or plan.plan_code or "Plan",
                "end_of_plan": end,
                "days_left": (end - today).days,
                "unutilized_amount": round(funds["remaining"], 2),
                "unutilized_percentage": funds["percentage"],
            })

        bucket = remaining_by_month.get(end.strftime("%Y-%m"))
        if bucket is not None:
            bucket["amount"] = round(bucket["amount"] + funds["remaining"], 2)
            bucket["plan_count"] += 1

    expiring.sort(key=lambda e: e["days_left"])
    return {
        "expiring_next_month": {"count": len(expiring), "by_client": expiring},
        "remaining_funds": list(remaining_by_month.values()),
    }


async def get_dashboard(db: AsyncSession, today: Optional[date] = None) -> Dict[str, Any]:
    """Practice-wide dashboard data."""
    today = today or date.today()

    # Oldest bucket is January of the year two years back
    earliest = datetime(today.year - 2, 1, 1, tzinfo=timezone.utc)
    result = await db.execute(
        select(Session.session_date).where(Session.session_date >= earliest)
    )
    session_dates = [row[0] for row in result.all()]

    result = await db.execute(
        select(BudgetSettings).where(BudgetSettings.is_active.is_(True))
    )
    plans = result.scalars().all()

    items_by_plan: Dict[str, List[BudgetItem]] = {}
    client_names: Dict[str, str] = {}
    if plans:
        result = await db.execute(
            select(BudgetItem).where(BudgetItem.budget_settings_id.in_([p.id for p in plans]))
        )
        for item in result.scalars().all():
            items_by_plan.setdefault(item.budget_settings_id, []).append(item)

        result = await db.execute(
            select(Client.id, Client.name).where(Client.id.in_(list({p.client_id for p in plans})))
        )
        client_names = {client_id: name for client_id, name in result.all()}

    return {
        "appointments": calculate_appointment_stats(session_dates, today),
        "budgets": calculate_budget_expiration(plans, items_by_plan, client_names, today),
        "last_updated": datetime.now(timezone.utc),
    }
