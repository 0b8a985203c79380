"""Tests for the githistory-bridge CLI."""

import json

from click.testing import CliRunner

from githistory_bridge.cli import main


class TestCommandsCommand:
    def test_table(self):
        result = CliRunner().invoke(main, ["commands"])

        assert result.exit_code == 0
        lines = result.output.split()
        assert "getLogEntries" in lines
        assert "registerState" in lines
        assert lines == sorted(lines)

    def test_json(self):
        result = CliRunner().invoke(main, ["commands", "--format", "json"])

        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 11


class TestConfigCommand:
    def test_json_masks_token(self, monkeypatch):
        monkeypatch.setenv("GITHISTORY_BRIDGE_GITHUB_TOKEN", "secret")

        result = CliRunner().invoke(main, ["config", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["github_token"] == "***"
        assert data["default_stop_index"] == 30

    def test_config_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHISTORY_BRIDGE_DEFAULT_STOP_INDEX", raising=False)
        path = tmp_path / "bridge.yaml"
        path.write_text("default_stop_index: 75\n")

        result = CliRunner().invoke(main, ["config", "--config", str(path)])

        assert result.exit_code == 0
        assert "default_stop_index" in result.output
        assert "75" in result.output

    def test_invalid_settings(self, tmp_path):
        path = tmp_path / "bridge.yaml"
        path.write_text("default_start_index: 50\ndefault_stop_index: 10\n")

        result = CliRunner().invoke(main, ["config", "--config", str(path)])

        assert result.exit_code != 0
        assert "Invalid settings" in result.output
