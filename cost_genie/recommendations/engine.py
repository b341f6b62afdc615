"""
Recommendation Engine

Turns a spending snapshot into qualitative advice through a fixed rule
table. Rules are grouped: within a group the first matching rule wins,
groups are evaluated independently and in order.

    Group                 Rule                 Fires when
    overall spending      critical-spending    combined > 90
                          high-spending        combined > 80
                          healthy-saving       combined < 50
    essential spending    high-essentials      needs > 50
                          low-essentials       needs < 20 and needs_count > 0
    discretionary         high-discretionary   favorites > 30
    missing data          track-essentials     needs_count == 0
    budget rule           budget-rule          needs_count > 0 and favorites_count > 0

When a limit is given and more rules fired than it allows, advisories are
stably sorted by tier priority (danger, warning, info, success) and cut.
Otherwise they keep rule-table order. A limit of zero or less is the
same as no limit.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from cost_genie.models.analysis import Advisory, AdvisoryTier, SpendingSnapshot


@dataclass(frozen=True)
class Rule:
    advisory: Advisory
    applies: Callable[[SpendingSnapshot], bool]


def _rule(
    id: str,
    tier: AdvisoryTier,
    title: str,
    description: str,
    action: Optional[str],
    applies: Callable[[SpendingSnapshot], bool],
) -> Rule:
    return Rule(
        advisory=Advisory(
            id=id,
            tier=tier,
            title=title,
            description=description,
            action=action,
        ),
        applies=applies,
    )


RULE_GROUPS: tuple[tuple[Rule, ...], ...] = (
    # Overall financial health
    (
        _rule(
            "critical-spending",
            AdvisoryTier.DANGER,
            "Critical spending level",
            "Your expenses are extremely high relative to your income, "
            "leaving little room for savings or emergencies.",
            "Look for immediate ways to reduce expenses or increase income.",
            lambda s: s.combined_pct > 90,
        ),
        _rule(
            "high-spending",
            AdvisoryTier.DANGER,
            "High spending level",
            "Your expenses are very high relative to your income.",
            "Consider reducing non-essential spending and creating a budget.",
            lambda s: s.combined_pct > 80,
        ),
        _rule(
            "healthy-saving",
            AdvisoryTier.SUCCESS,
            "Healthy saving habits",
            "Your spending is below 50% of your income, which is great for "
            "saving and investing!",
            "Consider putting the extra money into emergency funds, "
            "retirement accounts, or investments.",
            lambda s: s.combined_pct < 50,
        ),
    ),
    # Essential spending
    (
        _rule(
            "high-essentials",
            AdvisoryTier.WARNING,
            "High essential costs",
            "Essential needs exceed 50% of your income.",
            "Look for ways to reduce essential costs where possible, such as "
            "refinancing, finding better deals, or downsizing.",
            lambda s: s.needs_pct > 50,
        ),
        _rule(
            "low-essentials",
            AdvisoryTier.SUCCESS,
            "Low essential costs",
            "Your essential costs are well-managed at less than 20% of your income.",
            "Great job keeping essentials low! This gives you flexibility for "
            "other financial goals.",
            lambda s: s.needs_pct < 20 and s.needs_count > 0,
        ),
    ),
    # Discretionary spending
    (
        _rule(
            "high-discretionary",
            AdvisoryTier.WARNING,
            "High discretionary spending",
            "Your favorite expenses take up a significant portion of your income.",
            "Consider prioritizing which favorite expenses are most important to you.",
            lambda s: s.favorites_pct > 30,
        ),
    ),
    # Missing data
    (
        _rule(
            "track-essentials",
            AdvisoryTier.INFO,
            "Track essential expenses",
            "You haven't marked any expenses as essential needs.",
            "Mark your regular essential expenses like rent, utilities, and "
            "groceries as needs for better tracking.",
            lambda s: s.needs_count == 0,
        ),
    ),
    # 50/30/20 rule
    (
        _rule(
            "budget-rule",
            AdvisoryTier.INFO,
            "Consider the 50/30/20 budget rule",
            "Financial experts often recommend spending 50% on needs, 30% on "
            "wants, and saving 20% of your income.",
            "Compare your spending patterns to this guideline to see if "
            "adjustments would help.",
            lambda s: s.needs_count > 0 and s.favorites_count > 0,
        ),
    ),
)


def recommend(
    snapshot: SpendingSnapshot,
    max_recommendations: Optional[int] = None,
) -> list[Advisory]:
    """
    Generate advisories for a spending snapshot.

    Args:
        snapshot: Aggregated needs/wants percentages and counts
        max_recommendations: Keep at most this many, highest tier first.
                             None, zero or negative means no limit.

    Returns:
        Advisories in rule-table order, or in tier-priority order when the
        limit cut the list. Empty when no rule fires.
    """
    advisories = []
    for group in RULE_GROUPS:
        for rule in group:
            if rule.applies(snapshot):
                advisories.append(rule.advisory)
                break

    if max_recommendations and 0 < max_recommendations < len(advisories):
        # sorted() is stable: equal tiers keep rule-table order
        advisories = sorted(advisories, key=lambda a: a.tier.priority)
        return advisories[:max_recommendations]

    return advisories
