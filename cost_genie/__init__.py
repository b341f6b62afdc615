"""
Cost Genie - Source Package

A personal cost tracker that shows what each recurring expense
really costs over a day, a week, a month and a year, measured
against the user's income.

DESIGN PRINCIPLES:
1. Money is Decimal end to end
2. Unknown is None, never zero
3. Calculations are pure; storage and UI are adapters
4. Every change to user data is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cost Genie Team"
