"""Custom exceptions for GroupSplit."""


class GroupSplitError(Exception):
    """Base exception for all GroupSplit errors."""

    pass


class ConfigurationError(GroupSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidGroupError(GroupSplitError):
    """Raised when a group is missing a name or members."""

    pass


class GroupNotFoundError(GroupSplitError):
    """Raised when a group id does not exist."""

    def __init__(self, group_id: int, message: str | None = None):
        self.group_id = group_id
        super().__init__(message or f"Group {group_id} not found")


class ExpenseNotFoundError(GroupSplitError):
    """Raised when an expense id does not exist."""

    def __init__(self, expense_id: int, message: str | None = None):
        self.expense_id = expense_id
        super().__init__(message or f"Expense {expense_id} not found")


class InvalidExpenseError(GroupSplitError):
    """Base class for expense records that cannot be accounted for."""

    pass


class EmptySplitError(InvalidExpenseError):
    """Raised when an equal split has nobody to split among."""

    pass


class CustomSplitMismatchError(InvalidExpenseError):
    """Raised when custom amounts are missing or don't sum to the expense amount."""

    pass


class UnknownMemberError(GroupSplitError):
    """Raised in strict mode when an expense references a non-member."""

    def __init__(self, member: str, message: str | None = None):
        self.member = member
        super().__init__(message or f"'{member}' is not a member of this group")
