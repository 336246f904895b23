"""Tests for the budget utilisation summary."""
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from practice.reports.utilization import (
    build_budget_summary,
    calculate_monthly_spending,
    calculate_spending_events,
    forecast_depletion_date,
    item_totals,
)


TODAY = date(2026, 7, 1)


def make_item(code, unit_price, quantity, used, category=None, description=None):
    return SimpleNamespace(
        item_code=code,
        unit_price=unit_price,
        quantity=quantity,
        used_quantity=used,
        category=category,
        description=description or f"Item {code}",
    )


def make_plan(**overrides):
    plan = dict(
        id="plan_abc",
        plan_serial_number="NDIS-2026",
        start_date=date(2026, 1, 1),
        created_at=datetime(2025, 12, 20, 9, 0),
        end_of_plan=date(2026, 12, 31),
    )
    plan.update(overrides)
    return SimpleNamespace(**plan)


@pytest.fixture
def items():
    return [
        make_item("THER", "100.00", 100, 30, category="Therapy"),
        make_item("CONS", "50.00", 100, 10, category="Consumables"),
    ]


# ============================================================================
# SPENDING EVENTS
# ============================================================================

class TestSpendingEvents:

    def test_products_become_events_newest_first(self, items):
        march = SimpleNamespace(id="session_1", title="Speech session", session_date=datetime(2026, 3, 1, 10))
        april = SimpleNamespace(id="session_2", title="OT session", session_date=datetime(2026, 4, 1, 10))
        pairs = [
            (march, SimpleNamespace(products=[
                {"code": "THER", "quantity": 2, "unit_price": "12.50"},
                {"code": "UNKNOWN", "quantity": 1},
            ])),
            (april, SimpleNamespace(products=[{"code": "CONS", "quantity": 3}])),
        ]

        events = calculate_spending_events(pairs, items)

        assert len(events) == 2
        assert events[0]["session_id"] == "session_2"
        assert events[0]["amount"] == 150.0
        assert events[0]["item_name"] == "Item CONS"
        assert events[0]["date"] == date(2026, 4, 1)
        assert events[1]["amount"] == 25.0
        assert events[1]["category"] == "Therapy"
        assert events[1]["description"] == "Speech session"

    def test_note_without_products(self, items):
        session = SimpleNamespace(id="s", title="t", session_date=datetime(2026, 3, 1))

        assert calculate_spending_events([(session, SimpleNamespace(products=None))], items) == []


# ============================================================================
# MONTHLY SPENDING
# ============================================================================

class TestMonthlySpending:

    def test_rows_and_projection(self):
        events = [
            {"date": date(2026, 2, 10), "amount": 300.0},
            {"date": date(2026, 6, 5), "amount": 400.0},
        ]

        months = calculate_monthly_spending(events, date(2026, 1, 1), date(2026, 12, 31), 12000, TODAY)

        assert len(months) == 12
        assert months[0]["month"] == "2026-01"
        assert months[0]["label"] == "Jan 2026"
        assert all(m["target_spending"] == 1000 for m in months)
        assert months[1]["actual_spending"] == 300
        assert months[5]["cumulative_actual"] == 700

        july, august, december = months[6], months[7], months[11]
        assert july["is_projected"] is False
        assert july["projected_spending"] is None
        assert august["is_projected"] is True
        assert august["projected_spending"] == 100
        assert august["cumulative_projected"] == 800
        assert december["cumulative_projected"] == 1200
        assert december["cumulative_target"] == 12000


# ============================================================================
# SUMMARY
# ============================================================================

class TestBudgetSummary:

    def test_no_plan_or_items(self, items):
        assert build_budget_summary(None, items, [], TODAY) is None
        assert build_budget_summary(make_plan(), [], [], TODAY) is None

    def test_totals(self, items):
        total, used = item_totals(items)

        assert float(total) == 15000
        assert float(used) == 3500

    def test_on_track_plan(self, items):
        summary = build_budget_summary(make_plan(), items, [], TODAY)

        assert summary["total_budget"] == 15000
        assert summary["used_budget"] == 3500
        assert summary["remaining_budget"] == 11500
        assert summary["utilization_percentage"] == pytest.approx(23.33, abs=0.01)
        assert summary["total_days"] == 364
        assert summary["days_elapsed"] == 181
        assert summary["remaining_days"] == 183
        # Depletion would fall after the plan ends
        assert summary["projected_end_date"] is None
        assert summary["projected_overspend"] is None
        assert summary["top_category"] == "Therapy"
        assert summary["spending_by_category"] == {"Therapy": 3000.0, "Consumables": 500.0}
        assert summary["plan_period_name"] == "NDIS-2026"

    def test_overspending_plan(self):
        items = [
            make_item("THER", "100.00", 100, 90, category="Therapy"),
            make_item("CONS", "50.00", 100, 10, category="Consumables"),
        ]

        summary = build_budget_summary(make_plan(), items, [], TODAY)

        assert summary["projected_overspend"] == pytest.approx(4104.97, abs=0.01)
        assert summary["projected_end_date"] == date(2026, 10, 13)

    def test_plan_starts_at_creation_without_start_date(self, items):
        summary = build_budget_summary(make_plan(start_date=None), items, [], TODAY)

        assert summary["start_date"] == date(2025, 12, 20)

    def test_days_elapsed_capped_after_plan_end(self, items):
        summary = build_budget_summary(make_plan(), items, [], date(2027, 3, 1))

        assert summary["days_elapsed"] == summary["total_days"]
        assert summary["remaining_days"] == 0


# ============================================================================
# DEPLETION FORECAST
# ============================================================================

class TestForecastDepletion:

    def test_already_depleted(self):
        assert forecast_depletion_date(0, [], TODAY) == TODAY

    def test_no_history(self):
        assert forecast_depletion_date(1000, [], TODAY) == date(2027, 7, 1)

    def test_observed_rate(self):
        events = [
            {"date": date(2026, 1, 11), "amount": 100.0},
            {"date": date(2026, 1, 1), "amount": 100.0},
        ]

        # 200 over 10 days = 20 per day; 1000 lasts 50 days
        assert forecast_depletion_date(1000, events, TODAY) == date(2026, 8, 20)
