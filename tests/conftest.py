"""Shared fixtures: settings, fake HTTP responses and hashed export names."""

import pytest
import requests

from notion_export.config import ExportSettings

SPACE_ID = "0f0e0d0c-0b0a-0908-0706-050403020100"
USER_ID = "11111111-2222-3333-4444-555555555555"
HASH = "0123456789abcdef0123456789abcdef"


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, json_data=None, status_code=200, chunks=(), headers=None, stream_error=None):
        self._json_data = json_data
        self.status_code = status_code
        self._chunks = list(chunks)
        self.headers = headers or {}
        self._stream_error = stream_error
        self.closed = False

    def json(self):
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            yield chunk
        if self._stream_error is not None:
            raise self._stream_error

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


def task_response(task_id, state="in_progress", pages=0, error=None, export_url=None):
    """Build a ``getTasks`` response holding a single task."""
    status = {"pagesExported": pages}
    if export_url:
        status["exportURL"] = export_url
    task = {"id": task_id, "state": state, "status": status}
    if error:
        task["error"] = error
    return FakeResponse({"results": [task]})


def hashed(name, extension=""):
    """Name as the Notion exporter writes it: '<name> <32 hex><extension>'."""
    return f"{name} {HASH}{extension}"


@pytest.fixture
def settings(tmp_path):
    return ExportSettings(
        token="secret-token",
        space_id=SPACE_ID,
        user_id=USER_ID,
        poll_interval=0,
        workspace_dir=tmp_path / "workspace",
    )


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_task_response():
    return task_response


@pytest.fixture
def make_hashed():
    return hashed


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove NOTION_* variables and point the config file somewhere empty."""
    for var in (
        "NOTION_TOKEN",
        "NOTION_SPACE_ID",
        "NOTION_USER_ID",
        "NOTION_EXPORT_FORMAT",
        "NOTION_EXPORT_LOCALE",
        "NOTION_EXPORT_TIMEZONE",
        "NOTION_POLL_INTERVAL",
        "NOTION_EXPORT_TIMEOUT",
        "NOTION_WORKSPACE_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    config_file = tmp_path / "config.json"
    monkeypatch.setattr("notion_export.config.CONFIG_FILE", str(config_file))
    return config_file
