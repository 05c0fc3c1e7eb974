"""Greedy settlement planning from net balances."""

import logging
from collections.abc import Mapping
from decimal import Decimal

from .models import Settlement
from .tolerance import EPSILON, is_creditor, is_debtor

logger = logging.getLogger(__name__)


def compute_settlements(balances: Mapping[str, Decimal]) -> list[Settlement]:
    """
    Plan transfers that bring every balance into the dead-zone.

    Steps:
    1. Split members into debtors and creditors, skipping settled balances
    2. Keep the mapping's iteration order (no sorting by magnitude)
    3. Walk both lists with one cursor each, paying min(owed, owing)
    4. Advance a cursor once its remaining amount drops below EPSILON

    This emits at most len(debtors) + len(creditors) - 1 transfers. A party
    stays current only while it has at least EPSILON remaining, so every
    transfer is at least EPSILON.

    Args:
        balances: Mapping of member -> net balance

    Returns:
        Ordered list of settlements
    """
    debtors = [[member, -bal] for member, bal in balances.items() if is_debtor(bal)]
    creditors = [
        [member, bal] for member, bal in balances.items() if is_creditor(bal)
    ]

    settlements: list[Settlement] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor[1], creditor[1])
        settlements.append(
            Settlement(from_member=debtor[0], to_member=creditor[0], amount=amount)
        )

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] < EPSILON:
            i += 1
        if creditor[1] < EPSILON:
            j += 1

    if i < len(debtors) or j < len(creditors):
        # Only reachable when the balances don't sum to zero
        logger.warning(
            f"Settlement left {len(debtors) - i} debtors and "
            f"{len(creditors) - j} creditors unmatched"
        )

    logger.debug(f"Planned {len(settlements)} settlements")
    return settlements
