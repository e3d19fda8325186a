"""HTTP retrieval of single-file text archives with bounded retries."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable
from urllib.parse import urlparse

import requests

from yomu.acquisition.errors import ArchiveTooSmall, FetchFailed
from yomu.config import ReaderSettings


logger = logging.getLogger(__name__)

_NON_RETRYABLE_STATUS_CODES = {401, 403, 404}
_ACCEPT_HEADER = "application/zip, application/octet-stream, */*"


def _is_absolute_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class ArchiveFetcher:
    """Download archive bytes, retrying transient failures with linear backoff."""

    def __init__(
        self,
        settings: ReaderSettings | None = None,
        *,
        session: Any | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or ReaderSettings()
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._sleep = sleep

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self._settings.user_agent, "Accept": _ACCEPT_HEADER}

    def fetch(self, url: str) -> bytes:
        """Return the raw archive payload for *url*.

        401/403/404 fail on the first attempt. Other non-success statuses,
        timeouts and connection errors are retried up to
        ``fetch_max_attempts`` in total, waiting ``backoff * attempt`` between
        attempts.
        """

        if not _is_absolute_url(url):
            raise FetchFailed(url=url, message="Archive URL must be an absolute http(s) URL")

        max_attempts = self._settings.fetch_max_attempts
        last_error: Exception | None = None
        last_status: int | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                response = self._session.get(
                    url,
                    headers=self.headers,
                    timeout=self._settings.fetch_timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                last_status = None
                logger.warning("Fetch attempt %d/%d for %s failed: %s", attempt, max_attempts, url, exc)
            except requests.RequestException as exc:
                raise FetchFailed(url=url, message=f"Request failed: {exc}", attempts=attempt) from exc
            else:
                status = response.status_code
                if 200 <= status < 300:
                    return self._validate_payload(url, response.content)
                if status in _NON_RETRYABLE_STATUS_CODES:
                    raise FetchFailed(
                        url=url,
                        message=f"Archive not retrievable: HTTP {status}",
                        status_code=status,
                        attempts=attempt,
                    )
                last_error = None
                last_status = status
                logger.warning("Fetch attempt %d/%d for %s returned HTTP %d", attempt, max_attempts, url, status)

            if attempt < max_attempts:
                self._sleep(self._settings.fetch_backoff_seconds * attempt)

        detail = str(last_error) if last_error is not None else f"HTTP {last_status}"
        raise FetchFailed(
            url=url,
            message=f"Archive download failed after {max_attempts} attempt(s): {detail}",
            status_code=last_status,
            attempts=max_attempts,
        ) from last_error

    def _validate_payload(self, url: str, payload: bytes) -> bytes:
        size = len(payload)
        if size < self._settings.min_archive_bytes:
            raise ArchiveTooSmall(size=size, minimum=self._settings.min_archive_bytes)
        logger.info("Downloaded %s (%d bytes)", url, size)
        return payload

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "ArchiveFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
