"""Tests for the balance calculator."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from groupsplit.balances import compute_balances
from groupsplit.exceptions import (
    CustomSplitMismatchError,
    EmptySplitError,
    UnknownMemberError,
)
from groupsplit.models import ExpenseRecord


def make_record(
    amount: str,
    paid_by: str,
    split_among: list[str],
    custom_amounts: dict[str, str] | None = None,
) -> ExpenseRecord:
    """Create an ExpenseRecord, custom when custom_amounts is given."""
    return ExpenseRecord(
        amount=Decimal(amount),
        paid_by=paid_by,
        split_among=split_among,
        split_method="custom" if custom_amounts is not None else "equal",
        custom_amounts=(
            {k: Decimal(v) for k, v in custom_amounts.items()}
            if custom_amounts is not None
            else None
        ),
    )


class TestEqualSplit:
    """Equal split accounting."""

    def test_three_way_dinner(self):
        """90 paid by A, split among A, B, C."""
        expenses = [make_record("90", "A", ["A", "B", "C"])]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert balances == {
            "A": Decimal("60"),
            "B": Decimal("-30"),
            "C": Decimal("-30"),
        }

    def test_payer_not_in_split(self):
        """Payer gains the full amount, each participant loses amount / n."""
        expenses = [make_record("50", "A", ["B", "C"])]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert balances["A"] == Decimal("50")
        assert balances["B"] == Decimal("-25")
        assert balances["C"] == Decimal("-25")

    def test_duplicate_participants_take_extra_shares(self):
        """Each occurrence in split_among is charged one share."""
        expenses = [make_record("90", "A", ["B", "B", "C"])]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert balances["A"] == Decimal("90")
        assert balances["B"] == Decimal("-60")
        assert balances["C"] == Decimal("-30")

    def test_custom_method_without_amounts_falls_back_to_equal(self):
        """A custom record with no custom_amounts is split equally."""
        expense = ExpenseRecord(
            amount=Decimal("40"),
            paid_by="A",
            split_among=["A", "B"],
            split_method="custom",
            custom_amounts=None,
        )

        balances = compute_balances([expense], ["A", "B"])

        assert balances == {"A": Decimal("20"), "B": Decimal("-20")}

    def test_uneven_thirds_sum_to_zero(self):
        """100 split three ways doesn't divide evenly but still sums to zero."""
        expenses = [
            make_record("100", "A", ["A", "B", "C"]),
            make_record("10", "B", ["A", "B", "C"]),
            make_record("7.77", "C", ["A", "C"]),
        ]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert abs(sum(balances.values())) < Decimal("1e-6")


class TestCustomSplit:
    """Custom split accounting."""

    def test_custom_shares(self):
        """100 paid by A, A owes 20 and B owes 80."""
        expenses = [make_record("100", "A", ["A", "B"], {"A": "20", "B": "80"})]

        balances = compute_balances(expenses, ["A", "B"])

        assert balances == {"A": Decimal("80"), "B": Decimal("-80")}

    def test_payer_always_credited_full_amount(self):
        """Custom shares don't change what the payer is credited."""
        expenses = [make_record("60", "C", ["A", "B"], {"A": "45", "B": "15"})]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert balances["C"] == Decimal("60")
        assert balances["A"] == Decimal("-45")
        assert balances["B"] == Decimal("-15")

    def test_mismatched_custom_amounts_rejected(self):
        """Shares that don't add up to the amount fail fast."""
        expenses = [make_record("100", "A", ["A", "B"], {"A": "20", "B": "70"})]

        with pytest.raises(CustomSplitMismatchError, match="must sum to total"):
            compute_balances(expenses, ["A", "B"])

    def test_custom_amounts_within_tolerance_accepted(self):
        """A residual under one cent is tolerated."""
        expenses = [
            make_record(
                "10", "A", ["A", "B", "C"], {"A": "3.33", "B": "3.33", "C": "3.335"}
            )
        ]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert balances["A"] == Decimal("6.67")


class TestSeedingAndOrder:
    """Member seeding and key order."""

    def test_members_without_expenses_are_zero(self):
        """Every member appears even with no expenses."""
        balances = compute_balances([], ["A", "B", "C"])

        assert balances == {"A": Decimal("0"), "B": Decimal("0"), "C": Decimal("0")}

    def test_keys_follow_member_order(self):
        """Key order is the member order, not the order of first expense."""
        expenses = [make_record("30", "C", ["B", "C"])]

        balances = compute_balances(expenses, ["A", "B", "C"])

        assert list(balances) == ["A", "B", "C"]

    def test_recomputation_is_deterministic(self):
        """Same inputs give the same output."""
        expenses = [
            make_record("100", "A", ["A", "B", "C"]),
            make_record("42.50", "B", ["A", "B"], {"A": "12.50", "B": "30"}),
        ]

        first = compute_balances(expenses, ["A", "B", "C"])
        second = compute_balances(expenses, ["A", "B", "C"])

        assert first == second
        assert list(first) == list(second)


class TestUnknownMembers:
    """Handling of identifiers outside the member list."""

    def test_unknown_payer_added_after_members(self):
        """Permissive mode accumulates unknown payers on a new key."""
        expenses = [make_record("20", "Z", ["A", "B"])]

        balances = compute_balances(expenses, ["A", "B"])

        assert list(balances) == ["A", "B", "Z"]
        assert balances["Z"] == Decimal("20")

    def test_unknown_participant_added(self):
        """Unknown split participants also get a key."""
        expenses = [make_record("20", "A", ["A", "Y"])]

        balances = compute_balances(expenses, ["A", "B"])

        assert balances["Y"] == Decimal("-10")
        assert sum(balances.values()) == 0

    def test_strict_mode_rejects_unknown_payer(self):
        """Strict mode raises instead of adding a key."""
        expenses = [make_record("20", "Z", ["A", "B"])]

        with pytest.raises(UnknownMemberError, match="'Z' is not a member"):
            compute_balances(expenses, ["A", "B"], strict=True)

    def test_strict_mode_rejects_unknown_custom_member(self):
        """Strict mode checks custom share members too."""
        expenses = [make_record("20", "A", ["A", "B"], {"A": "10", "X": "10"})]

        with pytest.raises(UnknownMemberError) as exc_info:
            compute_balances(expenses, ["A", "B"], strict=True)

        assert exc_info.value.member == "X"

    def test_strict_mode_checks_split_among_for_custom_splits(self):
        """A custom split still rejects outsiders listed only in split_among."""
        expenses = [make_record("20", "A", ["A", "X"], {"A": "20"})]

        with pytest.raises(UnknownMemberError) as exc_info:
            compute_balances(expenses, ["A", "B"], strict=True)

        assert exc_info.value.member == "X"

    def test_strict_mode_accepts_members(self):
        """Strict mode is a no-op when everyone is a member."""
        expenses = [make_record("90", "A", ["A", "B", "C"])]

        balances = compute_balances(expenses, ["A", "B", "C"], strict=True)

        assert balances["A"] == Decimal("60")


class TestInvalidRecords:
    """Records that can't be accounted for."""

    def test_empty_split_rejected(self):
        """An equal split among nobody is rejected before dividing."""
        expenses = [make_record("90", "A", [])]

        with pytest.raises(EmptySplitError, match="among zero members"):
            compute_balances(expenses, ["A", "B"])

    def test_invalid_record_rejects_whole_batch(self):
        """A later bad record fails the call; no partial map is returned."""
        expenses = [
            make_record("90", "A", ["A", "B"]),
            make_record("10", "B", []),
        ]

        with pytest.raises(EmptySplitError):
            compute_balances(expenses, ["A", "B"])

    def test_non_positive_amount_rejected_by_model(self):
        """Amounts must be positive."""
        with pytest.raises(ValidationError):
            make_record("0", "A", ["A", "B"])
