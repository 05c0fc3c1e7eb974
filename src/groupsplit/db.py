"""SQLite database operations for GroupSplit."""

import json
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from .models import Expense, Group


class Database:
    """SQLite database manager."""

    def __init__(self, db_path: Path):
        """Initialize database connection."""
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()

        # Groups table (members stored as an ordered JSON list)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS expense_groups (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                members TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        # Expenses table (decimals stored as text to keep them exact)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                group_id INTEGER NOT NULL
                    REFERENCES expense_groups(id) ON DELETE CASCADE,
                title TEXT NOT NULL,
                amount TEXT NOT NULL,
                paid_by TEXT NOT NULL,
                date TIMESTAMP NOT NULL,
                split_among TEXT NOT NULL,
                split_method TEXT NOT NULL DEFAULT 'equal',
                custom_amounts TEXT,
                category TEXT NOT NULL DEFAULT 'Other',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        cursor.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_expenses_group_date
            ON expenses (group_id, date DESC)
        """
        )

        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    # ========================================================================
    # Group operations
    # ========================================================================

    def create_group(self, group: Group) -> int:
        """Save a new group and return its id."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO expense_groups (name, members, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                group.name,
                json.dumps(group.members),
                group.created_at.isoformat(),
                group.updated_at.isoformat(),
            ),
        )
        self.conn.commit()
        row_id = cursor.lastrowid
        if row_id is None:
            raise RuntimeError("Failed to insert group")
        return row_id

    def get_group(self, group_id: int) -> Group | None:
        """Get a group by id."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT id, name, members, created_at, updated_at
            FROM expense_groups
            WHERE id = ?
            """,
            (group_id,),
        )
        row = cursor.fetchone()
        return self._row_to_group(row) if row else None

    def list_groups(self) -> list[Group]:
        """Get all groups, most recently updated first."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT id, name, members, created_at, updated_at
            FROM expense_groups
            ORDER BY updated_at DESC, id DESC
            """
        )
        return [self._row_to_group(row) for row in cursor.fetchall()]

    def update_group(self, group: Group) -> bool:
        """Update a group's name and members. Returns False if it doesn't exist."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            UPDATE expense_groups
            SET name = ?, members = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                group.name,
                json.dumps(group.members),
                datetime.now().isoformat(),
                group.id,
            ),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def touch_group(self, group_id: int):
        """Bump a group's updated_at timestamp."""
        cursor = self.conn.cursor()
        cursor.execute(
            "UPDATE expense_groups SET updated_at = ? WHERE id = ?",
            (datetime.now().isoformat(), group_id),
        )
        self.conn.commit()

    def delete_group(self, group_id: int) -> bool:
        """Delete a group and its expenses. Returns False if it doesn't exist."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM expense_groups WHERE id = ?", (group_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    def _row_to_group(self, row: sqlite3.Row) -> Group:
        return Group(
            id=row["id"],
            name=row["name"],
            members=json.loads(row["members"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ========================================================================
    # Expense operations
    # ========================================================================

    def save_expense(self, expense: Expense) -> int:
        """Save a new expense and return its id."""
        custom_amounts = (
            json.dumps({k: str(v) for k, v in expense.custom_amounts.items()})
            if expense.custom_amounts is not None
            else None
        )

        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO expenses (
                group_id, title, amount, paid_by, date, split_among,
                split_method, custom_amounts, category, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                expense.group_id,
                expense.title,
                str(expense.amount),
                expense.paid_by,
                expense.date.isoformat(),
                json.dumps(expense.split_among),
                expense.split_method,
                custom_amounts,
                expense.category,
                expense.created_at.isoformat(),
            ),
        )
        self.conn.commit()
        row_id = cursor.lastrowid
        if row_id is None:
            raise RuntimeError("Failed to insert expense")
        return row_id

    def get_expense(self, expense_id: int) -> Expense | None:
        """Get an expense by id."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT id, group_id, title, amount, paid_by, date, split_among,
                   split_method, custom_amounts, category, created_at
            FROM expenses
            WHERE id = ?
            """,
            (expense_id,),
        )
        row = cursor.fetchone()
        return self._row_to_expense(row) if row else None

    def list_expenses(self, group_id: int | None = None) -> list[Expense]:
        """Get expenses, newest first. Limits to one group if group_id is given."""
        query = """
            SELECT id, group_id, title, amount, paid_by, date, split_among,
                   split_method, custom_amounts, category, created_at
            FROM expenses
        """
        params: tuple = ()
        if group_id is not None:
            query += " WHERE group_id = ?"
            params = (group_id,)
        query += " ORDER BY date DESC, created_at DESC, id DESC"

        cursor = self.conn.cursor()
        cursor.execute(query, params)
        return [self._row_to_expense(row) for row in cursor.fetchall()]

    def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense. Returns False if it doesn't exist."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    def _row_to_expense(self, row: sqlite3.Row) -> Expense:
        custom_amounts = (
            {k: Decimal(v) for k, v in json.loads(row["custom_amounts"]).items()}
            if row["custom_amounts"] is not None
            else None
        )
        return Expense(
            id=row["id"],
            group_id=row["group_id"],
            title=row["title"],
            amount=Decimal(row["amount"]),
            paid_by=row["paid_by"],
            date=datetime.fromisoformat(row["date"]),
            split_among=json.loads(row["split_among"]),
            split_method=row["split_method"],
            custom_amounts=custom_amounts,
            category=row["category"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
