"""HTTP client with status mapping, optional retries and streamed downloads."""

from __future__ import annotations

import logging
import math
import os
import time
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from wegli.common.constants import API_KEY_HEADER, DOWNLOAD_CHUNK_SIZE, RETRYABLE_STATUS_CODES, USER_AGENT
from wegli.common.errors import DecodeError, IoError, NotFoundError, RequestError, RetryableRequestError
from wegli.common.fs import ensure_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float | None = None
    read: float | None = None


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 1
    initial_wait: float = 0.3
    multiplier: float = 2.0
    max_wait: float = 30.0


class WaitRetryAfter:
    """Wait for the server's Retry-After value, falling back to exponential backoff."""

    def __init__(self, fallback: wait_exponential, max_wait: float) -> None:
        self.fallback = fallback
        self.max_wait = max_wait

    def __call__(self, retry_state) -> float:
        outcome = retry_state.outcome
        exc = outcome.exception() if outcome is not None else None
        retry_after = getattr(exc, "retry_after", None)
        if retry_after is not None:
            return max(0.0, min(float(retry_after), self.max_wait))
        return self.fallback(retry_state)


def _parse_retry_after(response: requests.Response) -> float | None:
    value = (response.headers or {}).get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    # Only a finite, non-negative delay in seconds is usable.
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


class HttpClient:
    def __init__(
        self,
        api_token: str | None = None,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_token = api_token
        self.timeout = timeout
        self.retry = retry or RetryConfig()
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, *, authenticated: bool, accept: str) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": accept}
        if authenticated and self.api_token:
            out[API_KEY_HEADER] = self.api_token
        return out

    def _timeout(self) -> tuple[float | None, float | None] | None:
        if self.timeout is None:
            return None
        return (self.timeout.connect, self.timeout.read)

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if status == 404:
            raise NotFoundError(f"No resource at {url}")
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableRequestError(
                f"API signals to wait (HTTP {status}) for {url}",
                status_code=status,
                retry_after=_parse_retry_after(response),
            )
        if status >= 400:
            raise RequestError(f"Unexpected HTTP status {status} for {url}", status_code=status)

    def _send(self, url: str, *, authenticated: bool, accept: str, stream: bool = False) -> requests.Response:
        try:
            response = self.session.request(
                method="GET",
                url=url,
                headers=self._headers(authenticated=authenticated, accept=accept),
                timeout=self._timeout(),
                stream=stream,
            )
        except requests.RequestException as exc:
            raise RequestError(f"Request to {url} failed: {exc}") from exc
        try:
            self._raise_for_status(response, url)
        except (RequestError, NotFoundError):
            response.close()
            raise
        return response

    def _with_retry(self, func):
        return retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=WaitRetryAfter(
                wait_exponential(
                    multiplier=self.retry.initial_wait,
                    exp_base=self.retry.multiplier,
                    max=self.retry.max_wait,
                ),
                max_wait=self.retry.max_wait,
            ),
            retry=retry_if_exception_type(RetryableRequestError),
            before_sleep=lambda state: logger.info(
                "retrying request",
                extra={"event": "REQUEST_RETRY", "status": "retry", "attempt": state.attempt_number},
            ),
            reraise=True,
        )(func)

    def _get_json(self, url: str) -> Any:
        started = time.monotonic()
        response = self._send(url, authenticated=True, accept="application/json")
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON payload from {url}") from exc
        logger.debug(
            "GET %s",
            url,
            extra={
                "event": "REQUEST",
                "status": "ok",
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return payload

    def get_json(self, url: str) -> Any:
        return self._with_retry(self._get_json)(url)

    def _download(self, url: str, target: Path) -> Path:
        ensure_dir(target.parent)
        partial = target.with_name(target.name + ".part")
        response = self._send(url, authenticated=False, accept="*/*", stream=True)
        try:
            with partial.open("wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
            os.replace(partial, target)
        except requests.RequestException as exc:
            partial.unlink(missing_ok=True)
            raise RequestError(f"Download from {url} failed: {exc}") from exc
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise IoError(f"Could not write {target}: {exc}") from exc
        finally:
            response.close()
        logger.info("downloaded %s", target, extra={"event": "DOWNLOAD", "status": "ok"})
        return target

    def download(self, url: str, target: Path) -> Path:
        """Stream ``url`` into ``target``.

        The body is written to a ``.part`` sibling first and moved into place
        once complete, so ``target`` never holds a truncated file. The API key
        is not sent, export URLs point at file storage.
        """
        return self._with_retry(self._download)(url, Path(target))
