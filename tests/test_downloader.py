"""Tests for streaming the export archive to disk."""

from unittest.mock import MagicMock

import pytest
import requests

from notion_export.downloader import download_archive, round_megabytes
from notion_export.exceptions import IncompleteTransferError, TransportError


@pytest.fixture
def session():
    return MagicMock()


class TestDownloadArchive:
    def test_writes_stream_to_disk(self, tmp_path, session, fake_response) -> None:
        chunks = [b"PK\x03\x04", b"a" * 1000, b"", b"b" * 500]
        session.get.return_value = fake_response(chunks=chunks, headers={"content-length": "1504"})
        destination = tmp_path / "workspace.zip"

        archive = download_archive("https://files/export.zip", destination, session=session)

        assert destination.read_bytes() == b"".join(chunks)
        assert archive.local_path == destination
        assert archive.size_bytes == 1504
        assert archive.declared_size == 1504
        assert session.get.call_args.kwargs["stream"] is True

    def test_missing_content_length_is_not_an_error(self, tmp_path, session, fake_response) -> None:
        session.get.return_value = fake_response(chunks=[b"abc"])

        archive = download_archive("https://files/export.zip", tmp_path / "a.zip", session=session)

        assert archive.size_bytes == 3
        assert archive.declared_size is None

    def test_http_error_is_transport_error(self, tmp_path, session, fake_response) -> None:
        session.get.return_value = fake_response(status_code=403)
        destination = tmp_path / "a.zip"

        with pytest.raises(TransportError):
            download_archive("https://files/export.zip", destination, session=session)

        assert not destination.exists()

    def test_connection_error_is_transport_error(self, tmp_path, session) -> None:
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(TransportError):
            download_archive("https://files/export.zip", tmp_path / "a.zip", session=session)

    def test_broken_stream_removes_partial_file(self, tmp_path, session, fake_response) -> None:
        session.get.return_value = fake_response(
            chunks=[b"x" * 100],
            headers={"content-length": "1000"},
            stream_error=requests.exceptions.ChunkedEncodingError("connection reset"),
        )
        destination = tmp_path / "a.zip"

        with pytest.raises(IncompleteTransferError):
            download_archive("https://files/export.zip", destination, session=session)

        assert not destination.exists()

    def test_short_body_is_incomplete(self, tmp_path, session, fake_response) -> None:
        session.get.return_value = fake_response(chunks=[b"x" * 10], headers={"content-length": "20"})
        destination = tmp_path / "a.zip"

        with pytest.raises(IncompleteTransferError):
            download_archive("https://files/export.zip", destination, session=session)

        assert not destination.exists()


def test_round_megabytes() -> None:
    assert round_megabytes(10_000_000) == 10.0
    assert round_megabytes(1_234_567) == 1.23
