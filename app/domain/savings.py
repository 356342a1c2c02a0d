"""
Savings account domain rules

A savings account stores income and expense for one bank label;
its total is always income - expense.
"""
from decimal import Decimal

from app.utils.money import to_money, sum_money


def compute_savings_total(income: Decimal, expense: Decimal) -> Decimal:
    """
    Total of a savings account.

    Not clamped: a negative total is an overdrawn account and is valid.
    """
    return to_money(to_money(income) - to_money(expense))


def apply_savings_change(
    current_income: Decimal,
    current_expense: Decimal,
    income: Decimal | None = None,
    expense: Decimal | None = None,
) -> tuple[Decimal, Decimal, Decimal]:
    """
    Partial update: a field that is not supplied keeps its stored value.

    Returns:
        (income, expense, total)
    """
    new_income = to_money(current_income if income is None else income)
    new_expense = to_money(current_expense if expense is None else expense)
    return new_income, new_expense, compute_savings_total(new_income, new_expense)


def aggregate_savings_balance(totals) -> Decimal:
    """Sum of the totals of all of an owner's savings accounts."""
    return sum_money(totals)
