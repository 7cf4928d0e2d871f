"""CLI tests using typer's CliRunner."""

import orjson
import pytest
from typer.testing import CliRunner

from resultpager import __version__
from resultpager.cli.main import app

runner = CliRunner()


@pytest.fixture
def quiet_config(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text("logging:\n  level: ERROR\n", encoding="utf-8")
    return path


@pytest.fixture
def orders(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text("id,item\n1,apple\n2,pear\n3,plum\n", encoding="utf-8")
    return path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestInit:
    def test_writes_valid_config(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RESULTPAGER_LOG_LEVEL", raising=False)
        target = tmp_path / "configs" / "app.yaml"
        result = runner.invoke(app, ["init", "--path", str(target)])
        assert result.exit_code == 0
        assert target.exists()

        result = runner.invoke(app, ["config", "validate", str(target)])
        assert result.exit_code == 0

    def test_refuses_to_overwrite(self, quiet_config):
        result = runner.invoke(app, ["init", "--path", str(quiet_config)])
        assert result.exit_code == 1
        assert quiet_config.read_text(encoding="utf-8") == "logging:\n  level: ERROR\n"

        result = runner.invoke(app, ["init", "--path", str(quiet_config), "--force"])
        assert result.exit_code == 0


class TestConfig:
    def test_validate_reports_errors(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("result:\n  page_size: 0\n", encoding="utf-8")
        result = runner.invoke(app, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "page_size" in result.output

    def test_show(self, quiet_config):
        result = runner.invoke(app, ["config", "show", str(quiet_config)])
        assert result.exit_code == 0
        assert "page_size" in result.output


class TestExport:
    def test_all_rows_as_json(self, orders, quiet_config):
        result = runner.invoke(app, ["export", str(orders), "-c", str(quiet_config)])
        assert result.exit_code == 0
        assert orjson.loads(result.stdout) == [
            {"id": "1", "item": "apple"},
            {"id": "2", "item": "pear"},
            {"id": "3", "item": "plum"},
        ]

    def test_row_range_as_csv(self, orders, quiet_config):
        result = runner.invoke(
            app, ["export", str(orders), "--format", "csv", "--rows", "2:3", "-c", str(quiet_config)]
        )
        assert result.exit_code == 0
        assert result.stdout == "id,item\n2,pear\n3,plum\n"

    def test_to_file(self, orders, quiet_config, tmp_path):
        target = tmp_path / "out" / "orders.json"
        result = runner.invoke(
            app, ["export", str(orders), "-r", "1", "-o", str(target), "-c", str(quiet_config)]
        )
        assert result.exit_code == 0
        assert orjson.loads(target.read_bytes()) == [{"id": "1", "item": "apple"}]

    def test_bad_rows(self, orders, quiet_config):
        result = runner.invoke(app, ["export", str(orders), "--rows", "3:1", "-c", str(quiet_config)])
        assert result.exit_code != 0

    def test_failed_call(self, tmp_path, quiet_config):
        path = tmp_path / "broken.json"
        path.write_text('{"not": "a list"}', encoding="utf-8")
        result = runner.invoke(app, ["export", str(path), "-c", str(quiet_config)])
        assert result.exit_code == 1
        assert "Call execution failed" in result.output


def test_view_yanks_and_quits(orders, quiet_config):
    result = runner.invoke(
        app,
        ["view", str(orders), "-c", str(quiet_config)],
        input="?\nyaJ\nq\n",
    )
    assert result.exit_code == 0
    assert "1/1" in result.output
    assert "Yanked" in result.output
    assert "plum" in result.output
