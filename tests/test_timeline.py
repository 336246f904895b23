"""Tests for the fund utilisation timeline."""
from datetime import date, timedelta

import pytest

from practice.reports.timeline import calculate_fund_utilization_timeline, utilization_status


START = date(2026, 1, 1)
END = date(2026, 12, 31)
TODAY = date(2026, 7, 1)


@pytest.fixture
def spending():
    return [(date(2026, 2, 1), 10000.0), (date(2026, 5, 1), 20000.0)]


# ============================================================================
# STATUS
# ============================================================================

class TestUtilizationStatus:

    @pytest.mark.parametrize("ratio,status", [
        (1.5, "depleting-fast"),
        (1.11, "depleting-fast"),
        (1.1, "balanced"),
        (1.0, "balanced"),
        (0.85, "balanced"),
        (0.84, "depleting-slow"),
        (0.0, "depleting-slow"),
    ])
    def test_thresholds(self, ratio, status):
        assert utilization_status(ratio) == status


# ============================================================================
# POINTS
# ============================================================================

class TestTimelinePoints:

    def test_year_plan_has_37_points(self, spending):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, spending)

        points = result["points"]
        assert len(points) == 37
        assert points[0]["date"] == START
        assert points[-1]["date"] == END
        assert points[0]["projected"] == 0
        assert points[-1]["projected"] == pytest.approx(50000)

    def test_short_plan_is_stretched_to_30_days(self):
        result = calculate_fund_utilization_timeline(1000, START, START + timedelta(days=10), START)

        assert result["total_days"] == 30
        assert len(result["points"]) == 31
        assert [p["day_number"] for p in result["points"][:3]] == [0, 1, 2]

    def test_series_split_at_today(self, spending):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, spending)

        for point in result["points"]:
            if point["is_future"]:
                assert point["actual"] is None
                assert point["extension"] is not None
                assert point["correction"] is not None
            else:
                assert point["actual"] is not None
                assert point["extension"] is None
                assert point["correction"] is None

    def test_actual_is_cumulative(self, spending):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, spending)

        past = [p for p in result["points"] if not p["is_future"]]
        assert past[0]["actual"] == 0
        assert past[-1]["actual"] == 30000
        actuals = [p["actual"] for p in past]
        assert actuals == sorted(actuals)

    def test_correction_reaches_budget_at_plan_end(self, spending):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, spending)

        assert result["points"][-1]["correction"] == pytest.approx(50000, abs=0.01)


# ============================================================================
# METRICS
# ============================================================================

class TestTimelineMetrics:

    def test_fast_spender_depletes_before_plan_end(self, spending):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, spending)

        assert result["spent_to_date"] == 30000
        assert result["days_elapsed"] == 181
        assert result["days_remaining"] == 183
        assert result["status"] == "depleting-fast"
        assert result["utilization_ratio"] > 1.1

        depletion = result["forecast_depletion_date"]
        assert depletion is not None
        assert TODAY < depletion < END
        assert result["days_until_depletion"] == (depletion - TODAY).days
        assert result["projected_remaining_at_end"] == 0
        assert result["ideal_depletion_date"] == END

    def test_no_spending(self):
        result = calculate_fund_utilization_timeline(50000, START, END, TODAY, [])

        assert result["status"] == "depleting-slow"
        assert result["forecast_depletion_date"] is None
        assert result["days_until_depletion"] == (END - TODAY).days
        assert result["projected_remaining_at_end"] == 50000

    def test_defaults_for_missing_plan_data(self):
        result = calculate_fund_utilization_timeline(None, None, None, TODAY)

        assert result["total_budget"] == 50000
        assert result["start_date"] == date(2026, 4, 1)
        assert result["end_date"] == date(2027, 4, 1)

    def test_spending_after_today_is_ignored(self):
        result = calculate_fund_utilization_timeline(
            50000, START, END, TODAY, [(date(2026, 8, 1), 5000.0)]
        )

        assert result["spent_to_date"] == 0

    def test_overspent_plan_is_depleted_today(self):
        today = date(2026, 6, 1)
        result = calculate_fund_utilization_timeline(
            1000, START, END, today, [(date(2026, 3, 1), 1500.0)]
        )

        assert result["forecast_depletion_date"] == today
        assert result["days_until_depletion"] == 0
        assert result["projected_remaining_at_end"] == 0
        assert result["status"] == "depleting-fast"
