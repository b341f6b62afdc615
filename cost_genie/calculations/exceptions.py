"""Exceptions raised by the calculation core."""


class CalculationError(ValueError):
    """Base exception for rejected calculation inputs."""
    pass


class InvalidIncomeBase(CalculationError):
    """Percentage denominator is zero, negative or not a finite number."""

    def __init__(self, income_base: object):
        self.income_base = income_base
        super().__init__(
            f"Income base must be a positive finite number, got {income_base!r}"
        )


class InvalidAmount(CalculationError):
    """Cost amount is negative or not a finite number."""

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(
            f"Amount must be a non-negative finite number, got {amount!r}"
        )


class InvalidIncome(CalculationError):
    """Gross income is not a finite number."""

    def __init__(self, income: object):
        self.income = income
        super().__init__(f"Income must be a finite number, got {income!r}")
