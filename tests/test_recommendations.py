"""Tests for the recommendation rule table."""

import pytest
from decimal import Decimal

from cost_genie.models.analysis import AdvisoryTier, SpendingSnapshot
from cost_genie.recommendations import RULE_GROUPS, recommend


def snapshot(**values) -> SpendingSnapshot:
    return SpendingSnapshot(**{
        key: Decimal(str(value)) if key.endswith("_pct") else value
        for key, value in values.items()
    })


def ids(advisories) -> list[str]:
    return [a.id for a in advisories]


class TestRecommend:
    """Tests for which rules fire."""

    def test_healthy_spending_without_needs(self):
        advisories = recommend(snapshot(combined_pct=30))

        assert "healthy-saving" in ids(advisories)
        assert "track-essentials" in ids(advisories)
        assert "budget-rule" not in ids(advisories)

    def test_critical_and_high_spending_are_exclusive(self):
        critical = ids(recommend(snapshot(combined_pct=95)))
        high = ids(recommend(snapshot(combined_pct=85)))

        assert "critical-spending" in critical
        assert "high-spending" not in critical
        assert "high-spending" in high
        assert "critical-spending" not in high

    def test_boundaries_are_strict(self):
        assert "high-spending" not in ids(recommend(snapshot(combined_pct=80)))
        assert "critical-spending" not in ids(recommend(snapshot(combined_pct=90)))
        assert "healthy-saving" not in ids(recommend(snapshot(combined_pct=50)))
        assert "high-essentials" not in ids(recommend(snapshot(needs_pct=50, needs_count=1)))

    def test_moderate_spending_fires_no_overall_rule(self):
        advisories = recommend(snapshot(combined_pct=65, needs_pct=30, needs_count=1))
        assert ids(advisories) == []

    def test_low_essentials_requires_a_need(self):
        assert "low-essentials" in ids(recommend(snapshot(needs_pct=10, needs_count=2)))
        assert "low-essentials" not in ids(recommend(snapshot(needs_pct=0, needs_count=0)))

    def test_high_discretionary(self):
        advisories = recommend(snapshot(favorites_pct=31, favorites_count=4, combined_pct=60))
        assert "high-discretionary" in ids(advisories)

    def test_budget_rule_requires_both_categories(self):
        both = recommend(snapshot(needs_pct=30, needs_count=1, favorites_pct=5, favorites_count=1, combined_pct=35))
        assert "budget-rule" in ids(both)

    def test_rule_table_order_without_limit(self):
        advisories = recommend(snapshot(
            needs_pct=55, needs_count=3, favorites_pct=35, favorites_count=2, combined_pct=90.5,
        ))
        assert ids(advisories) == [
            "critical-spending",
            "high-essentials",
            "high-discretionary",
            "budget-rule",
        ]

    def test_advisory_fields(self):
        advisory = recommend(snapshot(combined_pct=95))[0]

        assert advisory.tier is AdvisoryTier.DANGER
        assert advisory.title
        assert advisory.description
        assert advisory.action


class TestRecommendationLimit:
    """Tests for truncation by tier priority."""

    def test_limit_keeps_highest_tier(self):
        advisories = recommend(
            snapshot(needs_pct=55, needs_count=3, favorites_pct=10, favorites_count=2, combined_pct=65),
            max_recommendations=1,
        )

        assert len(advisories) == 1
        assert advisories[0].id == "high-essentials"
        assert advisories[0].tier is AdvisoryTier.WARNING

    def test_ties_keep_rule_table_order(self):
        advisories = recommend(
            snapshot(needs_pct=55, needs_count=3, favorites_pct=35, favorites_count=2, combined_pct=70),
            max_recommendations=2,
        )
        assert ids(advisories) == ["high-essentials", "high-discretionary"]

    def test_sorted_when_truncated(self):
        advisories = recommend(
            snapshot(needs_pct=10, needs_count=1, favorites_pct=5, favorites_count=1, combined_pct=15),
            max_recommendations=2,
        )
        # healthy-saving and low-essentials are success, budget-rule is info
        assert ids(advisories) == ["budget-rule", "healthy-saving"]

    def test_limit_above_count_keeps_table_order(self):
        advisories = recommend(snapshot(combined_pct=30), max_recommendations=5)
        assert ids(advisories) == ["healthy-saving", "track-essentials"]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit_means_no_limit(self, limit):
        values = snapshot(needs_pct=55, needs_count=3, favorites_pct=35, favorites_count=2, combined_pct=95)

        advisories = recommend(values, max_recommendations=limit)

        assert advisories == recommend(values)
        assert len(advisories) == 4

    def test_deterministic(self):
        values = snapshot(needs_pct=55, needs_count=3, favorites_pct=35, favorites_count=2, combined_pct=95)
        assert recommend(values, 2) == recommend(values, 2)


class TestRuleGroups:

    def test_rule_ids_are_unique(self):
        rule_ids = [rule.advisory.id for group in RULE_GROUPS for rule in group]
        assert len(rule_ids) == len(set(rule_ids)) == 8
