"""Tests for the client service comparison."""
from datetime import date
from types import SimpleNamespace

import pytest

from practice.reports.comparison import (
    build_service_comparison,
    calculate_age,
    select_cohort,
    summarize_utilization,
)


def item(category, total, used):
    return SimpleNamespace(category=category, unit_price="1.00", quantity=total, used_quantity=used)


def profile(name, age, therapy_used, consumables_used=50, total=100):
    return {
        "name": name,
        "age": age,
        "summary": summarize_utilization([
            item("Therapy", total, therapy_used),
            item("Consumables", 100, consumables_used),
        ]),
    }


# ============================================================================
# SUMMARY
# ============================================================================

class TestSummarizeUtilization:

    def test_categories_and_overall(self):
        summary = summarize_utilization([
            item("Therapy", 200, 150),
            item("Consumables", 100, 20),
            item(None, 100, 0),
        ])

        by_name = {c["category"]: c for c in summary["categories"]}
        assert by_name["Therapy"]["utilization"] == 75.0
        assert by_name["Consumables"]["utilization"] == 20.0
        assert by_name["Uncategorized"]["utilization"] == 0.0
        assert summary["total_budget"] == 400
        assert summary["used_amount"] == 170
        assert summary["overall_utilization"] == 42.5
        assert summary["top_categories"] == ["Therapy", "Consumables", "Uncategorized"]

    def test_no_items(self):
        summary = summarize_utilization([])

        assert summary["categories"] == []
        assert summary["overall_utilization"] == 0.0

    def test_age(self):
        assert calculate_age(date(2016, 7, 2), date(2026, 7, 1)) == 9
        assert calculate_age(date(2016, 7, 1), date(2026, 7, 1)) == 10
        assert calculate_age(None, date(2026, 7, 1)) is None


# ============================================================================
# COHORT
# ============================================================================

class TestSelectCohort:

    def test_similar_age_window(self):
        target = profile("Target", 8, 50)
        candidates = [
            profile("A", 11, 50),
            profile("B", 9, 50),
            profile("C", 6, 50),
            profile("D", None, 50),
        ]

        cohort = select_cohort(target, candidates, "similar")

        assert [c["name"] for c in cohort] == ["B", "C"]

    def test_similar_without_target_age(self):
        assert select_cohort(profile("Target", None, 50), [profile("A", 8, 50)], "similar") == []

    def test_budget_window(self):
        target = profile("Target", 8, 50, total=100)
        candidates = [
            profile("Near", 30, 50, total=110),
            profile("Far", 30, 50, total=200),
        ]

        cohort = select_cohort(target, candidates, "budget")

        assert [c["name"] for c in cohort] == ["Near"]

    def test_top_takes_four_highest(self):
        target = profile("Target", 8, 10)
        candidates = [profile(f"P{i}", 8, used) for i, used in enumerate([10, 90, 30, 70, 50, 80])]

        cohort = select_cohort(target, candidates, "top")

        assert [c["name"] for c in cohort] == ["P1", "P5", "P3", "P4"]

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            select_cohort(profile("Target", 8, 50), [], "random")


# ============================================================================
# COMPARISON
# ============================================================================

class TestBuildServiceComparison:

    def test_rank_and_anonymised_peers(self):
        target = profile("Sam-123456", 8, 80)
        peers = [profile("Alex-111111", 8, 20), profile("Jo-222222", 9, 95)]

        result = build_service_comparison(target, peers, "similar")

        assert result["client"]["name"] == "Sam-123456"
        assert [p["name"] for p in result["peers"]] == ["Peer 1", "Peer 2"]
        assert result["rank"] == 2
        assert result["cohort_size"] == 3
        assert result["rank_text"] == "ranks 2 of 3 by utilisation"

    def test_key_differences_threshold(self):
        target = profile("Target", 8, 80, consumables_used=55)
        peers = [profile("A", 8, 20, consumables_used=50), profile("B", 8, 40, consumables_used=50)]

        result = build_service_comparison(target, peers, "similar")

        assert len(result["key_differences"]) == 1
        difference = result["key_differences"][0]
        assert difference["category"] == "Therapy"
        assert difference["cohort_average"] == 30.0
        assert difference["difference"] == 50.0
        assert difference["direction"] == "above"

    def test_no_peers(self):
        result = build_service_comparison(profile("Target", 8, 50), [], "top")

        assert result["rank"] == 1
        assert result["key_differences"] == []
