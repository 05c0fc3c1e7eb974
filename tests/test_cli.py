"""Smoke tests for the Typer CLI."""

import pytest
from typer.testing import CliRunner

from groupsplit.cli import app, parse_amount, parse_custom_amounts

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    """Point every CLI invocation at a fresh database."""
    monkeypatch.setenv("GROUPSPLIT_DATABASE_PATH", str(tmp_path / "cli.db"))
    monkeypatch.chdir(tmp_path)


def invoke(*args: str):
    return runner.invoke(app, list(args))


class TestGroupCommands:
    """group create/list/show."""

    def test_create_and_list(self):
        result = invoke("group", "create", "Roommates", "-m", "A", "-m", "B")

        assert result.exit_code == 0
        assert "Created group 1" in result.output

        result = invoke("group", "list")

        assert result.exit_code == 0
        assert "Roommates" in result.output

    def test_show_missing_group(self):
        result = invoke("group", "show", "99")

        assert result.exit_code == 1
        assert "Group 99 not found" in result.output

    def test_delete_with_yes(self):
        invoke("group", "create", "Trip", "-m", "A")

        result = invoke("group", "delete", "1", "--yes")

        assert result.exit_code == 0
        assert "Deleted group 1" in result.output


class TestExpenseFlow:
    """Adding expenses and settling up."""

    def test_equal_split_defaults_to_whole_group(self):
        invoke("group", "create", "Roommates", "-m", "A", "-m", "B", "-m", "C")

        result = invoke("expense", "add", "1", "Team dinner", "90", "--paid-by", "A")

        assert result.exit_code == 0
        assert "Added expense 1" in result.output
        assert "Food" in result.output

        result = invoke("settle", "1")

        assert result.exit_code == 0
        assert "30.00" in result.output

    def test_custom_split(self):
        invoke("group", "create", "Pair", "-m", "A", "-m", "B")

        result = invoke(
            "expense", "add", "1", "Hotel", "100",
            "--paid-by", "A", "--custom", "A=20", "--custom", "B=80",
        )
        assert result.exit_code == 0

        result = invoke("balances", "1")

        assert result.exit_code == 0
        assert "80.00" in result.output

    def test_custom_split_mismatch_reported(self):
        invoke("group", "create", "Pair", "-m", "A", "-m", "B")

        result = invoke(
            "expense", "add", "1", "Hotel", "100",
            "--paid-by", "A", "--custom", "A=20", "--custom", "B=70",
        )

        assert result.exit_code == 1
        assert "must sum to total amount" in result.output

    def test_settled_group(self):
        invoke("group", "create", "Solo", "-m", "A")
        invoke("expense", "add", "1", "Lunch", "12", "--paid-by", "A")

        result = invoke("settle", "1")

        assert result.exit_code == 0
        assert "settled up" in result.output

    def test_analytics(self):
        invoke("group", "create", "Roommates", "-m", "A", "-m", "B")
        invoke("expense", "add", "1", "Uber", "20", "--paid-by", "B")

        result = invoke("analytics", "1")
        assert result.exit_code == 0
        assert "Transport" in result.output

        result = invoke("analytics")
        assert result.exit_code == 0
        assert "All Groups" in result.output


class TestParsing:
    """Argument parsing helpers."""

    def test_parse_custom_amounts(self):
        custom = parse_custom_amounts(["Ann=12.50", "Bob = 7.5"])

        assert list(custom) == ["Ann", "Bob"]
        assert str(custom["Ann"]) == "12.50"

    def test_parse_custom_amounts_rejects_garbage(self):
        import typer

        with pytest.raises(typer.BadParameter):
            parse_custom_amounts(["Ann"])

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf", "sNaN"])
    def test_parse_amount_rejects_non_finite(self, value):
        import typer

        with pytest.raises(typer.BadParameter, match="not a valid amount"):
            parse_amount(value)

    def test_non_finite_amount_not_recorded(self):
        invoke("group", "create", "Pair", "-m", "A", "-m", "B")

        result = invoke("expense", "add", "1", "Lunch", "NaN", "--paid-by", "A")

        assert result.exit_code == 1
        assert "not a valid amount" in result.output

        result = invoke("expense", "list")

        assert "Lunch" not in result.output
