"""Net balance computation for a group's expenses."""

import logging
from collections.abc import Sequence
from decimal import Decimal

from .exceptions import UnknownMemberError
from .models import ExpenseRecord
from .tolerance import validate_expense

logger = logging.getLogger(__name__)


def check_known_members(
    expenses: Sequence[ExpenseRecord], members: Sequence[str]
) -> None:
    """
    Raise UnknownMemberError for the first identifier outside `members`.

    The payer, every split_among entry and every custom share key are
    checked, whatever the split method.
    """
    known = set(members)
    for expense in expenses:
        referenced = [expense.paid_by, *expense.split_among]
        if expense.custom_amounts:
            referenced.extend(expense.custom_amounts)

        for member in referenced:
            if member not in known:
                raise UnknownMemberError(member)


def compute_balances(
    expenses: Sequence[ExpenseRecord],
    members: Sequence[str],
    *,
    strict: bool = False,
) -> dict[str, Decimal]:
    """
    Compute each member's signed net balance.

    Positive balances are owed money, negative balances owe money. Every
    member starts at zero so members without expenses still appear. The
    payer is credited the full amount whatever the split method; custom
    splits debit each listed share, equal splits debit amount / n for each
    entry of split_among (repeated entries are debited again).

    Identifiers outside `members` are accumulated on new keys appended after
    the seeded members, unless `strict` is set.

    Args:
        expenses: Expense records, processed in order
        members: The group's members; fixes the key order of the result
        strict: Reject identifiers that are not in `members`

    Returns:
        Mapping of member -> net balance

    Raises:
        EmptySplitError: An equal split has no participants
        CustomSplitMismatchError: Custom shares don't sum to the amount
        UnknownMemberError: Strict mode and a non-member is referenced
    """
    # Validate everything up front so a bad record never yields a partial map
    for expense in expenses:
        validate_expense(expense)

    if strict:
        check_known_members(expenses, members)

    balances: dict[str, Decimal] = {member: Decimal("0") for member in members}

    for expense in expenses:
        payer = expense.paid_by
        balances[payer] = balances.get(payer, Decimal("0")) + expense.amount

        if expense.split_method == "custom" and expense.custom_amounts:
            for member, share in expense.custom_amounts.items():
                balances[member] = balances.get(member, Decimal("0")) - share
        else:
            share_per_person = expense.amount / len(expense.split_among)
            for member in expense.split_among:
                balances[member] = (
                    balances.get(member, Decimal("0")) - share_per_person
                )

    seeded = set(members)
    extra = [member for member in balances if member not in seeded]
    if extra:
        logger.warning(f"Balances include non-members: {', '.join(extra)}")

    logger.debug(f"Computed balances for {len(balances)} members")
    return balances
