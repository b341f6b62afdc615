"""Recommendation engine package."""

from cost_genie.recommendations.engine import RULE_GROUPS, Rule, recommend

__all__ = ["RULE_GROUPS", "Rule", "recommend"]
