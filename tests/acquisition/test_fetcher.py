from __future__ import annotations

from dataclasses import dataclass

import pytest
import requests

from yomu.acquisition.errors import ArchiveTooSmall, FetchFailed
from yomu.acquisition.fetcher import ArchiveFetcher
from yomu.config import ReaderSettings


ARCHIVE_URL = "https://www.aozora.gr.jp/cards/000148/files/773_ruby_5968.zip"
PAYLOAD = b"PK\x03\x04" + b"\x00" * 200


@dataclass
class _FakeResponse:
    status_code: int
    content: bytes = b""


class _FakeSession:
    def __init__(self, responses: list[object]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, dict[str, str], float]] = []
        self.closed = False

    def get(self, url: str, *, headers: dict[str, str], timeout: float) -> object:
        self.calls.append((url, headers, timeout))
        if not self._responses:
            raise RuntimeError("No fake response configured")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def test_fetch_returns_payload_and_sends_client_identity() -> None:
    session = _FakeSession([_FakeResponse(200, PAYLOAD)])
    fetcher = ArchiveFetcher(ReaderSettings(user_agent="yomu-test/1.0"), session=session)

    payload = fetcher.fetch(ARCHIVE_URL)

    assert payload == PAYLOAD
    url, headers, timeout = session.calls[0]
    assert url == ARCHIVE_URL
    assert headers["User-Agent"] == "yomu-test/1.0"
    assert "application/zip" in headers["Accept"]
    assert timeout == 30.0


def test_fetch_retries_server_errors_with_linear_backoff_then_fails() -> None:
    delays: list[float] = []
    session = _FakeSession([_FakeResponse(500), _FakeResponse(500), _FakeResponse(500)])
    fetcher = ArchiveFetcher(session=session, sleep=delays.append)

    with pytest.raises(FetchFailed) as exc_info:
        fetcher.fetch(ARCHIVE_URL)

    assert len(session.calls) == 3
    assert delays == [1.0, 2.0]
    assert exc_info.value.status_code == 500
    assert exc_info.value.attempts == 3
    assert "after 3 attempt(s)" in str(exc_info.value)


def test_fetch_not_found_fails_immediately_without_retry() -> None:
    delays: list[float] = []
    session = _FakeSession([_FakeResponse(404), _FakeResponse(200, PAYLOAD)])
    fetcher = ArchiveFetcher(session=session, sleep=delays.append)

    with pytest.raises(FetchFailed) as exc_info:
        fetcher.fetch(ARCHIVE_URL)

    assert len(session.calls) == 1
    assert delays == []
    assert exc_info.value.status_code == 404
    assert exc_info.value.attempts == 1


@pytest.mark.parametrize("status", [401, 403])
def test_fetch_auth_statuses_are_not_retried(status: int) -> None:
    session = _FakeSession([_FakeResponse(status)])
    fetcher = ArchiveFetcher(session=session, sleep=lambda _: None)

    with pytest.raises(FetchFailed):
        fetcher.fetch(ARCHIVE_URL)

    assert len(session.calls) == 1


def test_fetch_recovers_after_transient_timeout() -> None:
    delays: list[float] = []
    session = _FakeSession([requests.Timeout("read timed out"), _FakeResponse(200, PAYLOAD)])
    fetcher = ArchiveFetcher(session=session, sleep=delays.append)

    assert fetcher.fetch(ARCHIVE_URL) == PAYLOAD
    assert delays == [1.0]


def test_fetch_exhausted_connection_errors_keep_cause() -> None:
    error = requests.ConnectionError("connection refused")
    session = _FakeSession([error, error, error])
    fetcher = ArchiveFetcher(session=session, sleep=lambda _: None)

    with pytest.raises(FetchFailed) as exc_info:
        fetcher.fetch(ARCHIVE_URL)

    assert exc_info.value.__cause__ is error
    assert exc_info.value.status_code is None


def test_fetch_rejects_small_payload_as_error_page() -> None:
    session = _FakeSession([_FakeResponse(200, b"<html>error</html>")])
    fetcher = ArchiveFetcher(session=session)

    with pytest.raises(ArchiveTooSmall) as exc_info:
        fetcher.fetch(ARCHIVE_URL)

    assert exc_info.value.size == len(b"<html>error</html>")
    assert exc_info.value.minimum == 100


@pytest.mark.parametrize("url", ["", "files/773_ruby_5968.zip", "ftp://example.org/a.zip", "https://"])
def test_fetch_rejects_relative_or_unsupported_urls(url: str) -> None:
    session = _FakeSession([])
    fetcher = ArchiveFetcher(session=session)

    with pytest.raises(FetchFailed):
        fetcher.fetch(url)

    assert session.calls == []


def test_fetcher_does_not_close_injected_session() -> None:
    session = _FakeSession([])

    with ArchiveFetcher(session=session):
        pass

    assert session.closed is False
