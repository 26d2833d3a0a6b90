"""Tests for configuration loading and workspace preparation."""

import json
from dataclasses import replace
from pathlib import Path

import pytest

from notion_export.config import ExportSettings, load_config, prepare_workspace
from notion_export.exceptions import ConfigurationError

from conftest import SPACE_ID, USER_ID


@pytest.fixture
def credentials_env(clean_env, monkeypatch):
    monkeypatch.setenv("NOTION_TOKEN", "env-token")
    monkeypatch.setenv("NOTION_SPACE_ID", SPACE_ID)
    monkeypatch.setenv("NOTION_USER_ID", USER_ID)
    return clean_env


class TestLoadConfig:
    def test_reads_environment_with_defaults(self, credentials_env) -> None:
        settings = load_config()

        assert settings.token == "env-token"
        assert settings.space_id == SPACE_ID
        assert settings.user_id == USER_ID
        assert settings.export_format == "markdown"
        assert settings.locale == "en"
        assert settings.time_zone == "Europe/Berlin"
        assert settings.poll_interval == 2
        assert settings.export_timeout is None
        assert settings.workspace_dir == Path("workspace")

    def test_optional_environment_overrides(self, credentials_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_EXPORT_FORMAT", "html")
        monkeypatch.setenv("NOTION_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("NOTION_EXPORT_TIMEOUT", "600")
        monkeypatch.setenv("NOTION_WORKSPACE_DIR", "out/notion")

        settings = load_config()

        assert settings.export_format == "html"
        assert settings.poll_interval == 0.5
        assert settings.export_timeout == 600
        assert settings.workspace_dir == Path("out/notion")

    def test_zero_timeout_means_unbounded(self, credentials_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_EXPORT_TIMEOUT", "0")
        assert load_config().export_timeout is None

    def test_missing_credentials(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_SPACE_ID", SPACE_ID)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        message = str(exc_info.value)
        assert "NOTION_TOKEN" in message
        assert "NOTION_USER_ID" in message
        assert "NOTION_SPACE_ID" not in message

    def test_falls_back_to_config_file(self, clean_env) -> None:
        clean_env.write_text(json.dumps({
            "notion_token": "file-token",
            "space_id": SPACE_ID,
            "user_id": USER_ID,
            "locale": "de",
        }), encoding="utf-8")

        settings = load_config()

        assert settings.token == "file-token"
        assert settings.locale == "de"

    def test_environment_wins_over_file(self, credentials_env) -> None:
        credentials_env.write_text(json.dumps({"notion_token": "file-token"}), encoding="utf-8")
        assert load_config().token == "env-token"

    def test_invalid_json(self, clean_env) -> None:
        clean_env.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_poll_interval(self, credentials_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_POLL_INTERVAL", "soon")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_space_id(self, credentials_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_SPACE_ID", "my-space")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_rejects_zero_poll_interval(self, credentials_env, monkeypatch) -> None:
        monkeypatch.setenv("NOTION_POLL_INTERVAL", "0")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_rejects_zero_poll_interval_from_file(self, credentials_env) -> None:
        credentials_env.write_text(json.dumps({"poll_interval": 0}), encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config()

    @pytest.mark.parametrize("workspace_dir", [".", "..", "./"])
    def test_rejects_workspace_without_own_name(self, credentials_env, monkeypatch, tmp_path, workspace_dir) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NOTION_WORKSPACE_DIR", workspace_dir)

        with pytest.raises(ConfigurationError):
            load_config()

    def test_rejects_workspace_containing_cwd(self, credentials_env, monkeypatch, tmp_path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        monkeypatch.chdir(project)
        monkeypatch.setenv("NOTION_WORKSPACE_DIR", str(tmp_path))

        with pytest.raises(ConfigurationError):
            load_config()


class TestWorkspace:
    def test_archive_path_sits_next_to_workspace(self, tmp_path) -> None:
        settings = ExportSettings("t", SPACE_ID, USER_ID, workspace_dir=tmp_path / "workspace")
        assert settings.archive_path == tmp_path / "workspace.zip"

    def test_prepare_workspace_wipes_previous_run(self, settings) -> None:
        stale = settings.workspace_dir / "export" / "old.md"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        workspace = prepare_workspace(settings)

        assert workspace.is_dir()
        assert list(workspace.iterdir()) == []


class TestWorkspaceSafety:
    def test_prepare_workspace_refuses_current_directory(self, settings, monkeypatch, tmp_path) -> None:
        """Wiping '.' must fail before config.json and .env are touched."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.json").write_text("{}", encoding="utf-8")
        (tmp_path / ".env").write_text("NOTION_TOKEN=x", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            prepare_workspace(replace(settings, workspace_dir=Path(".")))

        assert sorted(p.name for p in tmp_path.iterdir()) == [".env", "config.json"]

    def test_prepare_workspace_refuses_parent_directory(self, settings, monkeypatch, tmp_path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / "keep.md").write_text("keep", encoding="utf-8")
        monkeypatch.chdir(project)

        with pytest.raises(ConfigurationError):
            prepare_workspace(replace(settings, workspace_dir=tmp_path))

        assert (project / "keep.md").exists()
