"""CLI for GroupSplit using Typer."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal, InvalidOperation

import typer

from .config import Settings, load_settings
from .db import Database
from .exceptions import GroupSplitError
from .service import GroupService
from .ui import (
    console,
    display_balances,
    display_expenses,
    display_group_analytics,
    display_groups,
    display_overall_analytics,
    display_settlements,
    format_money,
    select_category_interactive,
)

app = typer.Typer(
    name="groupsplit",
    help="Track shared group expenses and work out who owes whom",
)
group_app = typer.Typer(help="Manage groups")
expense_app = typer.Typer(help="Manage expenses")

app.add_typer(group_app, name="group")
app.add_typer(expense_app, name="expense")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@contextmanager
def open_service(verbose: bool) -> Iterator[tuple[GroupService, Settings]]:
    """Load settings, open the database and report errors uniformly."""
    setup_logging(verbose)
    db = None
    try:
        settings = load_settings()
        db = Database(settings.database_path)
        yield GroupService(settings, db), settings
    except GroupSplitError as e:
        console.print(f"\n[bold yellow]⚠️  {e}[/bold yellow]\n")
        if verbose:
            raise
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
    finally:
        if db is not None:
            db.close()


def parse_amount(value: str) -> Decimal:
    """Parse a user-supplied money amount."""
    try:
        result = Decimal(value)
    except InvalidOperation as e:
        raise typer.BadParameter(f"'{value}' is not a valid amount") from e
    if not result.is_finite():
        raise typer.BadParameter(f"'{value}' is not a valid amount")
    return result


def parse_custom_amounts(values: list[str]) -> dict[str, Decimal]:
    """Parse MEMBER=AMOUNT pairs, keeping their order."""
    custom: dict[str, Decimal] = {}
    for value in values:
        member, sep, amount = value.rpartition("=")
        if not sep or not member.strip():
            raise typer.BadParameter(f"Expected MEMBER=AMOUNT, got '{value}'")
        custom[member.strip()] = parse_amount(amount.strip())
    return custom


def confirm(prompt: str) -> bool:
    """Simple yes/no confirmation, defaulting to no."""
    response = input(f"{prompt} [y/N] ").strip().lower()
    return response in ("y", "yes")


VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose output")


# ============================================================================
# Groups
# ============================================================================


@group_app.command("create")
def group_create(
    name: str = typer.Argument(..., help="Group name"),
    members: list[str] = typer.Option(
        ..., "--member", "-m", help="Group member (repeat for each member)"
    ),
    verbose: bool = VerboseOption,
):
    """Create a new group."""
    with open_service(verbose) as (service, _settings):
        group = service.create_group(name, members)
        console.print(
            f"[bold green]✓ Created group {group.id}:[/bold green] "
            f"{group.name} ({', '.join(group.members)})"
        )


@group_app.command("list")
def group_list(verbose: bool = VerboseOption):
    """List all groups."""
    with open_service(verbose) as (service, _settings):
        groups = service.list_groups()
        if not groups:
            console.print("[yellow]No groups yet.[/yellow]")
            return
        display_groups(groups)


@group_app.command("show")
def group_show(
    group_id: int = typer.Argument(..., help="Group ID"),
    verbose: bool = VerboseOption,
):
    """Show a group with its expenses."""
    with open_service(verbose) as (service, settings):
        group = service.get_group(group_id)
        display_groups([group])

        expenses = service.list_expenses(group_id)
        if expenses:
            display_expenses(expenses, settings.currency_symbol)
        else:
            console.print("[dim]No expenses recorded.[/dim]")


@group_app.command("update")
def group_update(
    group_id: int = typer.Argument(..., help="Group ID"),
    name: str | None = typer.Option(None, "--name", help="New group name"),
    members: list[str] | None = typer.Option(
        None, "--member", "-m", help="Replace the member list"
    ),
    verbose: bool = VerboseOption,
):
    """Rename a group or replace its members."""
    with open_service(verbose) as (service, _settings):
        group = service.update_group(group_id, name=name, members=members or None)
        console.print(f"[bold green]✓ Updated group {group.id}[/bold green]")
        display_groups([group])


@group_app.command("delete")
def group_delete(
    group_id: int = typer.Argument(..., help="Group ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    verbose: bool = VerboseOption,
):
    """Delete a group and all of its expenses."""
    with open_service(verbose) as (service, _settings):
        group = service.get_group(group_id)
        if not yes and not confirm(f"Delete group '{group.name}' and its expenses?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return
        service.delete_group(group_id)
        console.print(f"[bold green]✓ Deleted group {group_id}[/bold green]")


# ============================================================================
# Expenses
# ============================================================================


@expense_app.command("add")
def expense_add(
    group_id: int = typer.Argument(..., help="Group ID"),
    title: str = typer.Argument(..., help="What the expense was for"),
    amount: str = typer.Argument(..., help="Total amount"),
    paid_by: str = typer.Option(..., "--paid-by", "-p", help="Who paid"),
    split: list[str] | None = typer.Option(
        None, "--split", "-s", help="Member sharing the cost (default: everyone)"
    ),
    custom: list[str] | None = typer.Option(
        None, "--custom", help="Custom share as MEMBER=AMOUNT (repeatable)"
    ),
    date: datetime | None = typer.Option(None, "--date", help="Expense date"),
    category: str | None = typer.Option(
        None, "--category", help="Category (default: auto-detect from title)"
    ),
    pick_category: bool = typer.Option(
        False, "--pick-category", help="Choose the category interactively"
    ),
    verbose: bool = VerboseOption,
):
    """
    Record a new expense.

    Splits equally among --split members (or the whole group). Pass --custom
    MEMBER=AMOUNT for each member to split by explicit shares instead.
    """
    with open_service(verbose) as (service, settings):
        total = parse_amount(amount)
        custom_amounts = parse_custom_amounts(custom) if custom else None

        group = service.get_group(group_id)
        split_among = split or (
            list(custom_amounts) if custom_amounts else group.members
        )

        if pick_category:
            suggested = category or service.categorizer.categorize(title)
            category = (
                select_category_interactive(
                    service.categorizer.categories, title, suggested=suggested
                )
                or suggested
            )

        expense = service.add_expense(
            group_id=group_id,
            title=title,
            amount=total,
            paid_by=paid_by,
            split_among=split_among,
            date=date,
            split_method="custom" if custom_amounts else "equal",
            custom_amounts=custom_amounts,
            category=category,
        )

        console.print(
            f"[bold green]✓ Added expense {expense.id}:[/bold green] {expense.title} "
            f"{format_money(expense.amount, settings.currency_symbol)} "
            f"[yellow]{expense.category}[/yellow]"
        )


@expense_app.command("list")
def expense_list(
    group_id: int | None = typer.Option(None, "--group", "-g", help="Group ID"),
    verbose: bool = VerboseOption,
):
    """List expenses, newest first."""
    with open_service(verbose) as (service, settings):
        expenses = service.list_expenses(group_id)
        if not expenses:
            console.print("[yellow]No expenses found.[/yellow]")
            return
        display_expenses(expenses, settings.currency_symbol)


@expense_app.command("show")
def expense_show(
    expense_id: int = typer.Argument(..., help="Expense ID"),
    verbose: bool = VerboseOption,
):
    """Show a single expense."""
    with open_service(verbose) as (service, settings):
        expense = service.get_expense(expense_id)
        display_expenses([expense], settings.currency_symbol, title="Expense")


@expense_app.command("delete")
def expense_delete(
    expense_id: int = typer.Argument(..., help="Expense ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    verbose: bool = VerboseOption,
):
    """Delete an expense."""
    with open_service(verbose) as (service, _settings):
        expense = service.get_expense(expense_id)
        if not yes and not confirm(f"Delete expense '{expense.title}'?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return
        service.delete_expense(expense_id)
        console.print(f"[bold green]✓ Deleted expense {expense_id}[/bold green]")


# ============================================================================
# Balances & analytics
# ============================================================================


@app.command()
def balances(
    group_id: int = typer.Argument(..., help="Group ID"),
    verbose: bool = VerboseOption,
):
    """Show each member's net balance in a group."""
    with open_service(verbose) as (service, settings):
        display_balances(service.get_balances(group_id), settings.currency_symbol)


@app.command()
def settle(
    group_id: int = typer.Argument(..., help="Group ID"),
    verbose: bool = VerboseOption,
):
    """Show the transfers that settle a group."""
    with open_service(verbose) as (service, settings):
        display_settlements(
            service.get_settlements(group_id), settings.currency_symbol
        )


@app.command()
def analytics(
    group_id: int | None = typer.Argument(None, help="Group ID (default: all)"),
    verbose: bool = VerboseOption,
):
    """Show spending analytics for one group or across all groups."""
    with open_service(verbose) as (service, settings):
        if group_id is None:
            display_overall_analytics(
                service.get_overall_analytics(), settings.currency_symbol
            )
            return

        display_group_analytics(
            service.get_group(group_id),
            service.get_group_analytics(group_id),
            settings.currency_symbol,
        )


if __name__ == "__main__":
    app()
