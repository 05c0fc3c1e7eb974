"""Keyword-based expense categorization."""

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


class CategoryRule(NamedTuple):
    """A category and the title keywords that select it."""

    category: str
    keywords: tuple[str, ...]


DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("Food", ("food", "dinner", "lunch", "breakfast")),
    CategoryRule("Housing", ("rent", "hotel")),
    CategoryRule("Groceries", ("grocery", "groceries", "vegetable")),
    CategoryRule("Transport", ("transport", "uber", "taxi")),
    CategoryRule("Entertainment", ("movie", "entertainment")),
)

CATEGORIES: tuple[str, ...] = tuple(
    rule.category for rule in DEFAULT_CATEGORY_RULES
) + (DEFAULT_CATEGORY,)


class KeywordCategorizer:
    """
    Categorizes expense titles by case-insensitive substring matching.

    Rules are checked in order and the first matching rule wins. Titles that
    match nothing fall back to the default category.
    """

    def __init__(
        self,
        rules: tuple[CategoryRule, ...] = DEFAULT_CATEGORY_RULES,
        default: str = DEFAULT_CATEGORY,
    ):
        """
        Initialize the categorizer.

        Args:
            rules: Ordered (category, keywords) pairs
            default: Category for titles that match no rule
        """
        self.rules = tuple(
            CategoryRule(rule.category, tuple(k.lower() for k in rule.keywords))
            for rule in rules
        )
        self.default = default

    @property
    def categories(self) -> list[str]:
        """All categories this categorizer can return, default last."""
        names = dict.fromkeys(rule.category for rule in self.rules)
        names.pop(self.default, None)
        return [*names, self.default]

    def categorize(self, title: str) -> str:
        """Return the category for an expense title."""
        lower = title.lower()
        for rule in self.rules:
            if any(keyword in lower for keyword in rule.keywords):
                logger.debug(f"Categorized '{title}' as {rule.category}")
                return rule.category

        return self.default
