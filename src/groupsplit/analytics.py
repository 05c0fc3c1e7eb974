"""Derived aggregates over a list of expenses."""

from collections.abc import Sequence
from decimal import Decimal

from .balances import compute_balances
from .categorizer import DEFAULT_CATEGORY
from .models import Expense, Group, GroupAnalytics, OverallAnalytics
from .settlements import compute_settlements


def total_spending(expenses: Sequence[Expense]) -> Decimal:
    """Sum of all expense amounts."""
    return sum((expense.amount for expense in expenses), Decimal("0"))


def average_expense(expenses: Sequence[Expense]) -> Decimal:
    """Mean expense amount, zero when there are no expenses."""
    if not expenses:
        return Decimal("0")
    return total_spending(expenses) / len(expenses)


def category_totals(expenses: Sequence[Expense]) -> dict[str, Decimal]:
    """Spending per category, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        category = expense.category or DEFAULT_CATEGORY
        totals[category] = totals.get(category, Decimal("0")) + expense.amount
    return totals


def recent_expenses(expenses: Sequence[Expense], limit: int) -> list[Expense]:
    """Most recent expenses first, by date then creation time."""
    ordered = sorted(
        expenses, key=lambda e: (e.date, e.created_at), reverse=True
    )
    return ordered[:limit]


def compute_group_analytics(
    group: Group,
    expenses: Sequence[Expense],
    *,
    recent_limit: int = 5,
    strict: bool = False,
) -> GroupAnalytics:
    """
    Build the analytics summary for one group.

    Args:
        group: The group whose members seed the balances
        expenses: All expenses recorded for the group
        recent_limit: How many recent expenses to include
        strict: Reject expenses referencing non-members

    Returns:
        Totals, category breakdown, balances, settlements and recent expenses
    """
    total = total_spending(expenses)
    balances = compute_balances(expenses, group.members, strict=strict)

    return GroupAnalytics(
        group_id=group.id,
        total_spending=total,
        average_expense=average_expense(expenses),
        split_per_person=(
            total / len(group.members) if group.members else Decimal("0")
        ),
        total_expenses=len(expenses),
        category_totals=category_totals(expenses),
        balances=balances,
        settlements=compute_settlements(balances),
        recent_expenses=recent_expenses(expenses, recent_limit),
    )


def compute_overall_analytics(
    groups: Sequence[Group],
    expenses: Sequence[Expense],
    *,
    recent_limit: int = 10,
) -> OverallAnalytics:
    """Build the analytics summary across all groups."""
    return OverallAnalytics(
        total_spending=total_spending(expenses),
        average_expense=average_expense(expenses),
        total_expenses=len(expenses),
        total_groups=len(groups),
        category_totals=category_totals(expenses),
        recent_expenses=recent_expenses(expenses, recent_limit),
    )
