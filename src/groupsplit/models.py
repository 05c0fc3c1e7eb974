"""Pydantic domain models for GroupSplit."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SplitMethod = Literal["equal", "custom"]

# ============================================================================
# Expense Models
# ============================================================================


class ExpenseRecord(BaseModel):
    """The part of an expense the balance calculator reads."""

    amount: Decimal = Field(gt=0)
    paid_by: str
    split_among: list[str]  # repeats are kept, one share per occurrence
    split_method: SplitMethod = "equal"
    custom_amounts: dict[str, Decimal] | None = None  # member -> owed share


class Expense(ExpenseRecord):
    """A stored group expense."""

    id: int | None = None
    group_id: int
    title: str
    date: datetime
    category: str = "Other"
    created_at: datetime = Field(default_factory=datetime.now)


# ============================================================================
# Group Models
# ============================================================================


class Group(BaseModel):
    """A group of members sharing expenses."""

    id: int | None = None
    name: str
    members: list[str]
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


# ============================================================================
# Computed Models
# ============================================================================


class Settlement(BaseModel):
    """A single recommended payment from one member to another.

    Serializes as ``{"from": ..., "to": ..., "amount": ...}`` when dumped with
    ``by_alias=True``.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_member: str = Field(alias="from")
    to_member: str = Field(alias="to")
    amount: Decimal = Field(gt=0)


class GroupAnalytics(BaseModel):
    """Aggregates for a single group."""

    group_id: int | None
    total_spending: Decimal
    average_expense: Decimal
    split_per_person: Decimal
    total_expenses: int
    category_totals: dict[str, Decimal]
    balances: dict[str, Decimal]
    settlements: list[Settlement]
    recent_expenses: list[Expense]


class OverallAnalytics(BaseModel):
    """Aggregates across every group."""

    total_spending: Decimal
    average_expense: Decimal
    total_expenses: int
    total_groups: int
    category_totals: dict[str, Decimal]
    recent_expenses: list[Expense]
