"""Client service comparison against a cohort of other clients."""
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data.models import BudgetItem, BudgetSettings, Client

COMPARISON_TYPES = ("similar", "budget", "top")

MAX_PEERS = 4
AGE_WINDOW_YEARS = 2
BUDGET_WINDOW = 0.2
# Category gaps smaller than this (percentage points) are not reported
DIFFERENCE_THRESHOLD = 15.0
TOP_CATEGORY_COUNT = 3


def calculate_age(date_of_birth: Optional[date], today: date) -> Optional[int]:
    if date_of_birth is None:
        return None
    return relativedelta(today, date_of_birth).years


def summarize_utilization(items: Sequence[BudgetItem]) -> Dict[str, Any]:
    """Per-category and overall utilisation for a set of budget items."""
    categories: Dict[str, Dict[str, float]] = {}
    for item in items:
        name = item.category or "Uncategorized"
        price = float(item.unit_price)
        entry = categories.setdefault(name, {"total": 0.0, "used": 0.0})
        entry["total"] += price * item.quantity
        entry["used"] += price * (item.used_quantity or 0)

    category_rows = []
    for name, entry in categories.items():
        utilization = entry["used"] / entry["total"] * 100 if entry["total"] > 0 else 0.0
        category_rows.append({
            "category": name,
            "total": round(entry["total"], 2),
            "used": round(entry["used"], 2),
            "utilization": round(utilization, 1),
        })
    category_rows.sort(key=lambda c: c["category"])

    total = sum(c["total"] for c in category_rows)
    used = sum(c["used"] for c in category_rows)
    ranked = sorted(category_rows, key=lambda c: c["utilization"], reverse=True)

    return {
        "categories": category_rows,
        "overall_utilization": round(used / total * 100, 1) if total > 0 else 0.0,
        "total_budget": round(total, 2),
        "used_amount": round(used, 2),
        "top_categories": [c["category"] for c in ranked[:TOP_CATEGORY_COUNT]],
    }


def select_cohort(
    target: Dict[str, Any],
    candidates: Sequence[Dict[str, Any]],
    comparison_type: str,
) -> List[Dict[str, Any]]:
    """
    Pick up to four peers for the target.

    Each profile carries "age" and "summary". `similar` keeps candidates within
    two years of age, nearest first. `budget` keeps candidates within 20% of the
    target's total budget, nearest first. `top` takes the highest utilisers.
    """
    if comparison_type == "similar":
        if target["age"] is None:
            return []
        pool = [
            c for c in candidates
            if c["age"] is not None and abs(c["age"] - target["age"]) <= AGE_WINDOW_YEARS
        ]
        pool.sort(key=lambda c: abs(c["age"] - target["age"]))
    elif comparison_type == "budget":
        budget = target["summary"]["total_budget"]
        pool = [
            c for c in candidates
            if abs(c["summary"]["total_budget"] - budget) <= budget * BUDGET_WINDOW
        ]
        pool.sort(key=lambda c: abs(c["summary"]["total_budget"] - budget))
    elif comparison_type == "top":
        pool = sorted(
            candidates,
            key=lambda c: c["summary"]["overall_utilization"],
            reverse=True,
        )
    else:
        raise ValueError(f"Unknown comparison type: {comparison_type}")

    return pool[:MAX_PEERS]


def build_service_comparison(
    target: Dict[str, Any],
    peers: Sequence[Dict[str, Any]],
    comparison_type: str,
) -> Dict[str, Any]:
    """Rank the target among its anonymised peers and report category gaps."""
    client_entry = {"name": target["name"], **target["summary"]}
    peer_entries = [
        {"name": f"Peer {i}", **peer["summary"]}
        for i, peer in enumerate(peers, start=1)
    ]

    everyone = [client_entry] + peer_entries
    ranked = sorted(everyone, key=lambda e: e["overall_utilization"], reverse=True)
    rank = ranked.index(client_entry) + 1

    key_differences = []
    for category in client_entry["categories"]:
        peer_values = [
            c["utilization"]
            for peer in peer_entries
            for c in peer["categories"]
            if c["category"] == category["category"]
        ]
        if not peer_values:
            continue

        average = sum(peer_values) / len(peer_values)
        difference = category["utilization"] - average
        if abs(difference) >= DIFFERENCE_THRESHOLD:
            key_differences.append({
                "category": category["category"],
                "client_utilization": category["utilization"],
                "cohort_average": round(average, 1),
                "difference": round(difference, 1),
                "direction": "above" if difference > 0 else "below",
            })

    return {
        "comparison_type": comparison_type,
        "client": client_entry,
        "peers": peer_entries,
        "rank": rank,
        "cohort_size": len(everyone),
        "rank_text": f"ranks {rank} of {len(everyone)} by utilisation",
        "key_differences": key_differences,
    }


async def _load_profiles(db: AsyncSession, today: date) -> Dict[str, Dict[str, Any]]:
    """Utilisation profiles for every client with an active plan that has items."""
    result = await db.execute(
        select(BudgetSettings).where(BudgetSettings.is_active.is_(True))
    )
    plans = result.scalars().all()
    if not plans:
        return {}
    plan_client = {plan.id: plan.client_id for plan in plans}

    result = await db.execute(
        select(BudgetItem).where(BudgetItem.budget_settings_id.in_(list(plan_client)))
    )
    items_by_client: Dict[str, List[BudgetItem]] = {}
    for item in result.scalars().all():
        items_by_client.setdefault(plan_client[item.budget_settings_id], []).append(item)

    result = await db.execute(
        select(Client).where(Client.id.in_(list(items_by_client)))
    )
    return {
        client.id: {
            "name": client.name,
            "age": calculate_age(client.date_of_birth, today),
            "summary": summarize_utilization(items_by_client[client.id]),
        }
        for client in result.scalars().all()
    }


async def get_service_comparison(
    db: AsyncSession,
    client_id: str,
    comparison_type: str = "similar",
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """Compare a client against its cohort, or None if it has no plan data."""
    profiles = await _load_profiles(db, today or date.today())
    target = profiles.pop(client_id, None)
    if target is None:
        return None

    peers = select_cohort(target, list(profiles.values()), comparison_type)
    return build_service_comparison(target, peers, comparison_type)
