"""Tests für die Kommandozeile (click CliRunner, isoliertes Dateisystem)."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import main
from main import cli
from config.defaults import DEFAULT_TITLE
from config.manager import ConfigManager
from config.templates import create_from_template
from export.tui_renderer import day_title
from models.editing import set_cell
from sharing.protocol import build_share_url


@pytest.fixture
def runner(monkeypatch):
    # Breite Ausgabe, damit Rich-Tabellen nicht umbrechen
    monkeypatch.setattr(main.console, "width", 200)
    return CliRunner()


def _university_url() -> str:
    return build_share_url(create_from_template("university"), "https://example.com/tt").url


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    @pytest.mark.parametrize("command", ["templates", "new", "decode", "show", "cell",
                                         "check-url", "config"])
    def test_commands_registered(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0

    def test_templates_lists_all(self, runner):
        result = runner.invoke(cli, ["templates"])
        assert result.exit_code == 0
        for template_id in ("elementary", "junior-high", "high-school", "university", "custom"):
            assert template_id in result.output


class TestLinkCommands:
    def test_new_prints_share_url(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["new", "custom", "--base-url", "https://example.com/tt"])
            assert result.exit_code == 0
            first_line = result.output.splitlines()[0]
            assert first_line.startswith("https://example.com/tt?v=1&t=")
            assert "safe" in result.output

    def test_new_rejects_unknown_template(self, runner):
        result = runner.invoke(cli, ["new", "kindergarten"])
        assert result.exit_code != 0

    def test_new_with_title_round_trips(self, runner):
        with runner.isolated_filesystem():
            created = runner.invoke(cli, ["new", "university", "--title", "後期"])
            url = created.output.splitlines()[0]
            decoded = runner.invoke(cli, ["decode", url, "--json"])
            assert decoded.exit_code == 0
            data = json.loads(decoded.output)
            assert data["meta"]["title"] == "後期"
            assert data["meta"]["template"] == "university"

    def test_decode_garbage_shows_advisory(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["decode", "?v=1&t=%%%invalid%%%",
                                         "--fallback", "elementary"])
            assert result.exit_code == 0
            assert "Hinweis" in result.output

    def test_decode_unsupported_version(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["decode", "?v=9&t=abc"])
            assert result.exit_code == 0
            assert "v=9" in result.output

    def test_show_day_view(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["show", _university_url(), "--day", "2"])
            assert result.exit_code == 0
            assert "微分積分学" in result.output
            assert f"{DEFAULT_TITLE} | {day_title(2)}" in result.output

    def test_show_week_view(self, runner):
        doc = set_cell(create_from_template("custom"), 3, 2, subject="統計学")
        url = build_share_url(doc, "https://example.com/tt").url
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["show", url])
            assert result.exit_code == 0
            assert "統計学" in result.output

    def test_cell_edits_link(self, runner):
        with runner.isolated_filesystem():
            edited = runner.invoke(cli, ["cell", _university_url(), "--day", "3",
                                         "--period", "2", "--subject", "統計学", "--span", "2"])
            assert edited.exit_code == 0
            url = edited.output.splitlines()[0]
            data = json.loads(runner.invoke(cli, ["decode", url, "--json"]).output)
            assert data["cells"][3][1]["subject"] == "統計学"
            assert data["cells"][3][2]["subject"] == "統計学"
            assert data["merges"][3][1] == 2

    @pytest.mark.parametrize("args", [
        ["decode", "?x=1"],
        ["show", "?x=1"],
        ["cell", "?x=1", "--day", "1", "--period", "1", "--subject", "数学"],
    ])
    def test_config_loaded_once(self, runner, monkeypatch, args):
        calls = []
        original = ConfigManager.load_or_default

        def counting(self, path=None):
            calls.append(path)
            return original(self, path)

        monkeypatch.setattr(ConfigManager, "load_or_default", counting)
        with runner.isolated_filesystem():
            result = runner.invoke(cli, args)
            assert result.exit_code == 0
        # einmal für das Log-Level der Gruppe, einmal für den Befehl
        assert len(calls) == 2

    def test_check_url_danger(self, runner):
        url = "https://example.com/tt?t=" + "a" * 1950
        result = runner.invoke(cli, ["check-url", url])
        assert result.exit_code == 0
        assert "danger" in result.output


class TestConfigCommands:
    def test_config_show_defaults(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "show"])
            assert result.exit_code == 0
            assert "Standardwerte" in result.output
            assert "junior-high" in result.output

    def test_config_init_creates_file(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "init", "--fallback", "university"])
            assert result.exit_code == 0
            assert Path("config/app_config.yaml").exists()

            shown = runner.invoke(cli, ["config", "show"])
            assert "university" in shown.output

            again = runner.invoke(cli, ["config", "init"])
            assert "existiert bereits" in again.output

    def test_config_init_rejects_bad_url(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "init", "--base-url", "ftp://x"])
            assert result.exit_code == 1
            assert not Path("config/app_config.yaml").exists()

    def test_invalid_config_aborts(self, runner):
        with runner.isolated_filesystem():
            Path("config").mkdir()
            Path("config/app_config.yaml").write_text("logging:\n  level: LOUD\n",
                                                      encoding="utf-8")
            result = runner.invoke(cli, ["new", "custom"])
            assert result.exit_code == 1

    def test_fallback_from_config(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["config", "init", "--fallback", "custom"])
            result = runner.invoke(cli, ["decode", "?x=1", "--json"])
            assert json.loads(result.output)["meta"]["template"] == "custom"
