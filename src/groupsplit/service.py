"""Service layer that composes persistence with the balance computations.

This module provides the caller-side API: it loads a group's members and
expenses from the database and hands immutable snapshots to the pure
balance and settlement functions.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal

from .analytics import compute_group_analytics, compute_overall_analytics
from .balances import check_known_members, compute_balances
from .categorizer import KeywordCategorizer
from .config import Settings
from .db import Database
from .exceptions import (
    EmptySplitError,
    ExpenseNotFoundError,
    GroupNotFoundError,
    InvalidExpenseError,
    InvalidGroupError,
)
from .models import (
    Expense,
    Group,
    GroupAnalytics,
    OverallAnalytics,
    Settlement,
    SplitMethod,
)
from .settlements import compute_settlements
from .tolerance import validate_custom_amounts

logger = logging.getLogger(__name__)


class GroupService:
    """Service for managing groups and their shared expenses."""

    def __init__(
        self,
        settings: Settings,
        database: Database,
        categorizer: KeywordCategorizer | None = None,
    ):
        """Initialize the group service."""
        self.settings = settings
        self.db = database
        self.categorizer = categorizer or KeywordCategorizer()

    # ========================================================================
    # Groups
    # ========================================================================

    def create_group(self, name: str, members: Sequence[str]) -> Group:
        """
        Create a new group.

        Args:
            name: Group name
            members: Member identifiers, in display order

        Returns:
            The saved group

        Raises:
            InvalidGroupError: If the name is blank or there are no members
        """
        name, members = _clean_group_fields(name, members)

        group = Group(name=name, members=members)
        group.id = self.db.create_group(group)

        logger.info(f"Created group {group.id} '{name}' with {len(members)} members")
        return group

    def list_groups(self) -> list[Group]:
        """List all groups, most recently updated first."""
        return self.db.list_groups()

    def get_group(self, group_id: int) -> Group:
        """Get a group or raise GroupNotFoundError."""
        group = self.db.get_group(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    def update_group(
        self,
        group_id: int,
        name: str | None = None,
        members: Sequence[str] | None = None,
    ) -> Group:
        """Rename a group and/or replace its member list."""
        group = self.get_group(group_id)

        new_name, new_members = _clean_group_fields(
            group.name if name is None else name,
            group.members if members is None else members,
        )
        updated = group.model_copy(update={"name": new_name, "members": new_members})
        self.db.update_group(updated)

        logger.info(f"Updated group {group_id}")
        return self.get_group(group_id)

    def delete_group(self, group_id: int) -> None:
        """Delete a group and all of its expenses."""
        if not self.db.delete_group(group_id):
            raise GroupNotFoundError(group_id)
        logger.info(f"Deleted group {group_id}")

    # ========================================================================
    # Expenses
    # ========================================================================

    def add_expense(
        self,
        group_id: int,
        title: str,
        amount: Decimal,
        paid_by: str,
        split_among: Sequence[str],
        date: datetime | None = None,
        split_method: SplitMethod = "equal",
        custom_amounts: Mapping[str, Decimal] | None = None,
        category: str | None = None,
    ) -> Expense:
        """
        Validate and record a new expense.

        Custom splits must supply amounts summing to the total (within
        EPSILON). Titles are auto-categorized unless a category is given.

        Returns:
            The saved expense

        Raises:
            GroupNotFoundError: Unknown group
            InvalidExpenseError: Missing fields or an unaccountable split
            UnknownMemberError: Non-member referenced with strict_members on
        """
        group = self.get_group(group_id)

        title = title.strip()
        paid_by = paid_by.strip()
        if not title or not paid_by:
            raise InvalidExpenseError("Please provide all required fields")
        if amount <= 0:
            raise InvalidExpenseError(f"Amount must be positive, got {amount}")

        if not split_among:
            raise EmptySplitError("Select at least one member to split among")

        if date is not None and date.tzinfo is not None:
            # Stored dates are naive local time
            date = date.astimezone().replace(tzinfo=None)

        expense = Expense(
            group_id=group_id,
            title=title,
            amount=amount,
            paid_by=paid_by,
            date=date or datetime.now(),
            split_among=list(split_among),
            split_method=split_method,
            custom_amounts=(
                dict(custom_amounts)
                if split_method == "custom" and custom_amounts is not None
                else None
            ),
            category=category or self.categorizer.categorize(title),
        )

        # Shares are Decimal only once the model has coerced them
        if split_method == "custom":
            validate_custom_amounts(expense.amount, expense.custom_amounts)

        if self.settings.strict_members:
            check_known_members([expense], group.members)

        expense.id = self.db.save_expense(expense)
        self.db.touch_group(group_id)

        logger.info(
            f"Added expense {expense.id} '{title}' ({amount}, {expense.category}) "
            f"to group {group_id}"
        )
        return expense

    def list_expenses(self, group_id: int | None = None) -> list[Expense]:
        """List expenses newest first, optionally for a single group."""
        if group_id is not None:
            self.get_group(group_id)
        return self.db.list_expenses(group_id)

    def get_expense(self, expense_id: int) -> Expense:
        """Get an expense or raise ExpenseNotFoundError."""
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense and bump its group's updated_at."""
        expense = self.get_expense(expense_id)
        self.db.delete_expense(expense_id)
        self.db.touch_group(expense.group_id)
        logger.info(f"Deleted expense {expense_id} from group {expense.group_id}")

    # ========================================================================
    # Balances & analytics
    # ========================================================================

    def get_balances(self, group_id: int) -> dict[str, Decimal]:
        """Compute net balances for a group, in member order."""
        group = self.get_group(group_id)
        expenses = self.db.list_expenses(group_id)
        return compute_balances(
            expenses, group.members, strict=self.settings.strict_members
        )

    def get_settlements(self, group_id: int) -> list[Settlement]:
        """Plan the transfers that settle a group."""
        settlements = compute_settlements(self.get_balances(group_id))
        logger.info(f"Group {group_id} needs {len(settlements)} settlements")
        return settlements

    def get_group_analytics(self, group_id: int) -> GroupAnalytics:
        """Totals, category breakdown, balances and settlements for a group."""
        group = self.get_group(group_id)
        expenses = self.db.list_expenses(group_id)
        return compute_group_analytics(
            group,
            expenses,
            recent_limit=self.settings.recent_expenses_limit,
            strict=self.settings.strict_members,
        )

    def get_overall_analytics(self) -> OverallAnalytics:
        """Totals and category breakdown across every group."""
        return compute_overall_analytics(
            self.db.list_groups(),
            self.db.list_expenses(),
            recent_limit=self.settings.overall_recent_expenses_limit,
        )


def _clean_group_fields(name: str, members: Sequence[str]) -> tuple[str, list[str]]:
    """Strip whitespace and require a name and at least one member."""
    name = name.strip()
    cleaned = [member.strip() for member in members if member.strip()]
    if not name or not cleaned:
        raise InvalidGroupError("Please provide group name and at least one member")
    return name, cleaned

