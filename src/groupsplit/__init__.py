"""GroupSplit - Track shared group expenses and settle up with minimal transfers."""

__version__ = "0.1.0"

from .balances import compute_balances
from .categorizer import KeywordCategorizer
from .config import Settings, load_settings
from .db import Database
from .models import (
    Expense,
    ExpenseRecord,
    Group,
    Settlement,
)
from .service import GroupService
from .settlements import compute_settlements
from .tolerance import EPSILON

__all__ = [
    "Settings",
    "load_settings",
    "Database",
    "Expense",
    "ExpenseRecord",
    "Group",
    "Settlement",
    "compute_balances",
    "compute_settlements",
    "EPSILON",
    "KeywordCategorizer",
    "GroupService",
]
