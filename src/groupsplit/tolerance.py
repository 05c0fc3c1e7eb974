"""Shared tolerance handling and expense record validation.

Every comparison of a balance against zero goes through the helpers here so
that the calculator, the planner and the service agree on one dead-zone.
"""

from collections.abc import Mapping
from decimal import Decimal

from .exceptions import CustomSplitMismatchError, EmptySplitError
from .models import ExpenseRecord

# Balances within [-EPSILON, EPSILON] are treated as settled
EPSILON = Decimal("0.01")


def is_settled(value: Decimal) -> bool:
    """True if the value sits inside the dead-zone."""
    return -EPSILON <= value <= EPSILON


def is_creditor(value: Decimal) -> bool:
    """True if the group owes this balance money."""
    return value > EPSILON


def is_debtor(value: Decimal) -> bool:
    """True if this balance owes the group money."""
    return value < -EPSILON


def validate_custom_amounts(
    amount: Decimal, custom_amounts: Mapping[str, Decimal] | None
) -> None:
    """
    Check that custom shares exist and add up to the expense amount.

    Args:
        amount: Total expense amount
        custom_amounts: Mapping of member -> owed share

    Raises:
        CustomSplitMismatchError: If shares are missing or off by EPSILON or more
    """
    if not custom_amounts:
        raise CustomSplitMismatchError(
            "Custom amounts required for custom split method"
        )

    total_custom = sum(custom_amounts.values(), Decimal("0"))
    if abs(total_custom - amount) >= EPSILON:
        raise CustomSplitMismatchError(
            f"Custom amounts must sum to total amount "
            f"(got {total_custom}, expected {amount})"
        )


def validate_expense(expense: ExpenseRecord) -> None:
    """
    Reject records the balance calculator cannot account for.

    A custom split is checked against its amount. An equal split (which is
    also what a custom record without amounts falls back to) must have at
    least one participant, otherwise the per-person share is undefined.

    Raises:
        CustomSplitMismatchError: Custom shares don't sum to the amount
        EmptySplitError: Equal split with an empty split_among
    """
    if expense.split_method == "custom" and expense.custom_amounts:
        validate_custom_amounts(expense.amount, expense.custom_amounts)
        return

    if not expense.split_among:
        raise EmptySplitError(
            f"Cannot split {expense.amount} paid by '{expense.paid_by}' "
            f"among zero members"
        )
