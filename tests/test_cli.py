"""End-to-end tests for the shandu CLI against a temporary data directory."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from shandu.cli import app
from shandu.state import open_state
from shandu.store.schema import get_db_path

runner = CliRunner()


@pytest.fixture(autouse=True)
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


def test_init_refuses_to_overwrite() -> None:
    assert runner.invoke(app, ["init"]).exit_code == 0
    assert get_db_path().exists()

    result = runner.invoke(app, ["init"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_add_list_and_delete() -> None:
    result = runner.invoke(app, ["add", "income", "6000", "Salary", "-c", "Business", "-d", "2025-01-01"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["add", "expense", "250", "Fuel run", "-c", "Fuel", "-d", "2025-01-05"])
    assert result.exit_code == 0, result.output
    assert "Added new category: Fuel" in result.output

    state = open_state()
    assert len(state.transactions) == 2
    assert "Fuel" in state.categories

    result = runner.invoke(app, ["list"])
    assert "Salary" in result.output

    fuel = next(t for t in state.transactions if t.category == "Fuel")
    assert runner.invoke(app, ["delete", fuel.id[:10]]).exit_code == 0
    assert [t.description for t in open_state().transactions] == ["Salary"]


def test_add_rejects_bad_input() -> None:
    result = runner.invoke(app, ["add", "gift", "10", "Present"])
    assert result.exit_code == 1
    assert "Unknown transaction type" in result.output
    assert open_state().transactions == ()


def test_summary_shows_status() -> None:
    runner.invoke(app, ["add", "income", "500", "Tutoring"])
    result = runner.invoke(app, ["summary"])

    assert result.exit_code == 0, result.output
    assert "PROFIT" in result.output


def test_goals_are_scoped_by_mode() -> None:
    args = ["goal", "add", "--type", "save", "--title", "Laptop", "--target", "4000"]
    args += ["--deadline", "2030-01-01", "--priority", "high", "--category", "Tech"]
    assert runner.invoke(app, args).exit_code == 0

    assert runner.invoke(app, ["goal", "list"]).exit_code == 0
    assert [g.title for g in open_state().visible_goals()] == ["Laptop"]

    assert runner.invoke(app, ["mode", "business"]).exit_code == 0
    result = runner.invoke(app, ["goal", "list"])
    assert "No business goals yet" in result.output
    assert open_state().visible_goals() == []


def test_goal_add_rejects_non_positive_target() -> None:
    args = ["goal", "add", "--type", "save", "--title", "Nothing", "--target", "0"]
    args += ["--deadline", "2030-01-01", "--priority", "low", "--category", "General"]
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "positive" in result.output


def test_goal_add_rejects_type_outside_mode() -> None:
    args = ["goal", "add", "--type", "profit_increase", "--title", "More", "--target", "1000"]
    args += ["--deadline", "2030-01-01", "--priority", "low", "--category", "General"]
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "not offered in personal mode" in result.output
    assert open_state().goals == ()

    assert runner.invoke(app, ["mode", "business"]).exit_code == 0
    assert runner.invoke(app, args).exit_code == 0
    assert [g.type for g in open_state().visible_goals()] == ["profit_increase"]


def test_add_rejects_non_finite_amount() -> None:
    result = runner.invoke(app, ["add", "income", "nan", "Weird"])

    assert result.exit_code == 1
    assert "finite" in result.output
    assert open_state().transactions == ()


def test_delete_rejects_empty_id() -> None:
    assert runner.invoke(app, ["add", "income", "500", "Pay"]).exit_code == 0

    result = runner.invoke(app, ["delete", ""])

    assert result.exit_code == 1
    assert [t.description for t in open_state().transactions] == ["Pay"]


def test_theme_and_category() -> None:
    assert runner.invoke(app, ["theme", "paper"]).exit_code == 0
    assert open_state().theme == "paper"
    assert runner.invoke(app, ["theme", "vaporwave"]).exit_code == 1

    assert runner.invoke(app, ["category", "Fuel"]).exit_code == 0
    assert "already exists" in runner.invoke(app, ["category", "Fuel"]).output


def test_ask_without_api_key_falls_back() -> None:
    result = runner.invoke(app, ["ask", "Can I afford a car?"])
    assert result.exit_code == 0
    assert "Connection error" in result.output
