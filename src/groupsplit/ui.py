"""Terminal rendering and interactive prompts for the CLI."""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from rich.console import Console
from rich.table import Table

from .models import Expense, Group, GroupAnalytics, OverallAnalytics, Settlement
from .tolerance import is_settled

logger = logging.getLogger(__name__)

console = Console()


def format_money(amount: Decimal, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"({symbol}[red]{abs_amount:,.2f}[/red])"
        return f"({symbol}{abs_amount:,.2f})"

    if use_color:
        return f" [green]{symbol}{abs_amount:,.2f}[/green] "
    return f" {symbol}{abs_amount:,.2f} "


def display_groups(groups: Sequence[Group]):
    """Display groups in a table."""
    table = Table(title="Groups", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=6)
    table.add_column("Name", style="cyan")
    table.add_column("Members")
    table.add_column("Updated", style="dim")

    for group in groups:
        table.add_row(
            str(group.id),
            group.name,
            ", ".join(group.members),
            group.updated_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


def display_expenses(expenses: Sequence[Expense], symbol: str = "$", title="Expenses"):
    """Display expenses in a table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=6)
    table.add_column("Date", style="dim", width=10)
    table.add_column("Title", style="cyan", width=30)
    table.add_column("Amount", justify="right", width=14)
    table.add_column("Paid by")
    table.add_column("Split")
    table.add_column("Category", style="yellow")

    for expense in expenses:
        if expense.split_method == "custom" and expense.custom_amounts:
            split = ", ".join(
                f"{member} {share:,.2f}"
                for member, share in expense.custom_amounts.items()
            )
        else:
            split = ", ".join(expense.split_among)

        table.add_row(
            str(expense.id),
            expense.date.strftime("%Y-%m-%d"),
            expense.title[:30],
            format_money(expense.amount, symbol, use_color=False),
            expense.paid_by,
            split,
            expense.category,
        )

    console.print(table)


def display_balances(balances: Mapping[str, Decimal], symbol: str = "$"):
    """Display net balances; positive means the group owes the member."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Balance", justify="right", width=16)
    table.add_column("Status")

    for member, balance in balances.items():
        if is_settled(balance):
            status = "[dim]settled[/dim]"
        elif balance > 0:
            status = "is owed"
        else:
            status = "owes"
        table.add_row(member, format_money(balance, symbol), status)

    console.print(table)


def display_settlements(settlements: Sequence[Settlement], symbol: str = "$"):
    """Display the settlement plan."""
    if not settlements:
        console.print("[green]✓ Everyone is settled up[/green]")
        return

    table = Table(title="Settlements", show_header=True, header_style="bold magenta")
    table.add_column("From", style="red")
    table.add_column("To", style="green")
    table.add_column("Amount", justify="right", width=14)

    for settlement in settlements:
        table.add_row(
            settlement.from_member,
            settlement.to_member,
            format_money(settlement.amount, symbol, use_color=False),
        )

    console.print(table)


def display_category_totals(totals: Mapping[str, Decimal], symbol: str = "$"):
    """Display spending per category."""
    table = Table(title="By Category", show_header=True, header_style="bold magenta")
    table.add_column("Category", style="yellow")
    table.add_column("Total", justify="right", width=14)

    for category, total in totals.items():
        table.add_row(category, format_money(total, symbol, use_color=False))

    console.print(table)


def display_group_analytics(
    group: Group, analytics: GroupAnalytics, symbol: str = "$"
):
    """Display the full analytics summary for a group."""
    console.print(f"\n[bold]{group.name}[/bold] [dim](group {group.id})[/dim]")
    console.print(f"  Members: {', '.join(group.members)}")
    console.print(f"  Total spending: {format_money(analytics.total_spending, symbol)}")
    console.print(f"  Expenses: {analytics.total_expenses}")
    console.print(
        f"  Average expense: {format_money(analytics.average_expense, symbol)}"
    )
    console.print(
        f"  Split per person: {format_money(analytics.split_per_person, symbol)}"
    )
    console.print()

    display_category_totals(analytics.category_totals, symbol)
    display_balances(analytics.balances, symbol)
    display_settlements(analytics.settlements, symbol)
    if analytics.recent_expenses:
        display_expenses(analytics.recent_expenses, symbol, title="Recent Expenses")


def display_overall_analytics(analytics: OverallAnalytics, symbol: str = "$"):
    """Display the analytics summary across all groups."""
    console.print("\n[bold]All Groups[/bold]")
    console.print(f"  Groups: {analytics.total_groups}")
    console.print(f"  Total spending: {format_money(analytics.total_spending, symbol)}")
    console.print(f"  Expenses: {analytics.total_expenses}")
    console.print(
        f"  Average expense: {format_money(analytics.average_expense, symbol)}"
    )
    console.print()

    display_category_totals(analytics.category_totals, symbol)
    if analytics.recent_expenses:
        display_expenses(analytics.recent_expenses, symbol, title="Recent Expenses")


class CategoryCompleter(Completer):
    """Fuzzy search completer for expense categories."""

    def __init__(self, categories: Sequence[str]):
        """Initialize the completer with available categories."""
        self.categories = list(categories)

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for category in self.categories:
            if not query or self._fuzzy_match(query, category.lower()):
                yield Completion(
                    text=category,
                    start_position=-len(document.text),
                    display=category,
                )

    def _fuzzy_match(self, query: str, text: str) -> bool:
        """
        Fuzzy match: all characters in query must appear in order in text.

        Example:
            query="gro" matches "Groceries"
            query="ent" matches "Entertainment"
        """
        query_idx = 0
        for char in text:
            if query_idx < len(query) and char == query[query_idx]:
                query_idx += 1
        return query_idx == len(query)


def select_category_interactive(
    categories: Sequence[str],
    expense_title: str,
    suggested: str | None = None,
) -> str | None:
    """
    Interactive category selection with fuzzy search.

    Args:
        categories: Available categories
        expense_title: Title of the expense being categorized
        suggested: Pre-filled category (usually the keyword match)

    Returns:
        Selected category, or None to keep the suggestion
    """
    print(f"\n📝 Categorize: {expense_title}")
    if suggested:
        print(f"   💡 Suggested: {suggested}")
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    completer = CategoryCompleter(categories)
    session: PromptSession[str] = PromptSession(completer=completer)
    lookup = {category.lower(): category for category in categories}

    try:
        default_text = suggested or ""
        while True:
            result = session.prompt(
                "Category: ",
                default=default_text,
                complete_while_typing=True,
            )

            if not result:
                return None

            category = lookup.get(result.strip().lower())
            if category:
                logger.info(f"User selected category: {category}")
                return category

            print(
                "❌ Invalid category. Please select from the list or press Tab to complete."
            )
            default_text = ""

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None
