"""HTTP transport for the Todoist API.

All calls go through :meth:`HttpTransport.send`, which owns authentication,
the per-attempt timeout and the retry loop.  One request is prepared per call
and re-sent unchanged on every attempt.  Each attempt, body included, must
finish within ``timeout`` milliseconds of being started.

Every failure counts the same for retry purposes: connection errors,
timeouts, non-2xx responses (4xx included) and undecodable JSON bodies.  When
the attempts run out the most recent failure is raised as
:class:`~tdcli.errors.TransportFailure`.
"""
from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, Final, Mapping, Optional, Union
from urllib.parse import urljoin

import requests

from ..errors import AuthenticationMissing, TransportFailure
from ..utils.config import EffectiveConfig

__all__: Final = ["HttpTransport", "JSON_CONTENT_TYPE", "FORM_CONTENT_TYPE"]

JSON_CONTENT_TYPE: Final = "application/json"
FORM_CONTENT_TYPE: Final = "application/x-www-form-urlencoded"

log = logging.getLogger(__name__)


def _drop_empty(query: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
    if not query:
        return {}
    return {key: value for key, value in query.items() if value}


class HttpTransport:
    """Authenticated request sender bound to one :class:`EffectiveConfig`."""

    def __init__(self, config: EffectiveConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def build_url(self, path: str) -> str:
        return urljoin(self.config.endpoint, path)

    def send(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, Optional[str]]] = None,
        body: Optional[Union[str, bytes]] = None,
        content_type: Optional[str] = None,
    ) -> Any:
        """Send one request with retries and return the decoded JSON (or ``None`` for 204)."""
        if not self.config.api_token:
            raise AuthenticationMissing()

        headers = {"Authorization": f"Bearer {self.config.api_token}"}
        if body is not None and content_type:
            headers["Content-Type"] = content_type

        prepared = requests.Request(
            method,
            self.build_url(path),
            params=_drop_empty(query),
            headers=headers,
            data=body,
        ).prepare()

        attempts = self.config.retries + 1
        timeout = self.config.timeout / 1000.0
        last_error = TransportFailure("Request failed")

        for attempt in range(1, attempts + 1):
            log.debug("%s %s (attempt %d/%d)", method, prepared.url, attempt, attempts)
            deadline = time.monotonic() + timeout
            try:
                response = self.session.send(prepared, timeout=timeout, stream=True)
                try:
                    self._load_body(response, deadline)
                finally:
                    response.close()
                return self._read(response)
            except TransportFailure as exc:
                last_error = exc
            except requests.RequestException as exc:
                last_error = TransportFailure(f"Request failed: {exc}")
            except ValueError as exc:
                # body claimed success but was not JSON
                last_error = TransportFailure(f"Request failed: invalid JSON response ({exc})")

            if attempt < attempts:
                log.warning("%s %s failed, retrying: %s", method, path, last_error)

        raise last_error

    def request_json(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, Optional[str]]] = None,
        payload: Optional[Any] = None,
    ) -> Any:
        if payload is None:
            return self.send(method, path, query=query)
        return self.send(
            method,
            path,
            query=query,
            body=json.dumps(payload),
            content_type=JSON_CONTENT_TYPE,
        )

    @staticmethod
    def _read(response: requests.Response) -> Any:
        if not 200 <= response.status_code < 300:
            detail = response.text or response.reason
            raise TransportFailure(
                f"Todoist API {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        if response.status_code == 204:
            return None
        return response.json()

    @staticmethod
    def _load_body(response: requests.Response, deadline: float) -> None:
        """Read the whole body, closing the response once ``deadline`` passes.

        ``requests`` timeouts only bound each socket operation, so a server
        that trickles bytes could otherwise hold an attempt open forever.
        """
        expired = threading.Event()

        def abort() -> None:
            expired.set()
            response.close()

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            abort()
            raise requests.Timeout("Request timed out before the response body was read")

        watchdog = threading.Timer(remaining, abort)
        watchdog.daemon = True
        watchdog.start()
        try:
            response.content  # reads the streamed body
        except Exception as exc:
            if not expired.is_set():
                raise
            raise requests.Timeout("Request timed out while reading the response body") from exc
        finally:
            watchdog.cancel()

        if expired.is_set():
            raise requests.Timeout("Request timed out while reading the response body")
