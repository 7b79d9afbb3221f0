"""
Request Executor
================

This module turns an HTTP verb, an endpoint URL and an optional JSON payload
into one signed call against the Semantria API.

Every call is started on its own thread and handed back to the caller as a
``concurrent.futures.Future``. The future settles exactly once:

- HTTP 200 -> ``Success(body)``. The service was configured to answer
  synchronously ("auto response"); registered *processed* listeners are
  notified with the same body after the future has settled.
- HTTP 202 -> ``Accepted(body)``. The document was queued and the result has
  to be polled for later.
- any other status -> ``RemoteRejection`` carrying the raw response body.
- a transport failure -> the original ``requests`` exception, unchanged.

Nothing is retried.
"""

from __future__ import annotations

import json
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Callable

import requests
import structlog

from .auth import AuthRequest, Credentials
from .exceptions import RemoteRejection

log = structlog.get_logger(__name__)

ProcessedListener = Callable[[str], None]


@dataclass(frozen=True)
class SignedRequest:
    """The signed URL and the headers that authenticate it."""

    query: str
    headers: dict[str, str]


@dataclass(frozen=True)
class Success:
    """HTTP 200: the analysis results were returned inline."""

    body: str
    status_code: int = 200


@dataclass(frozen=True)
class Accepted:
    """HTTP 202: the request was queued, results arrive later."""

    body: str
    status_code: int = 202


CallResult = Success | Accepted


def serialize_body(body: Any) -> bytes:
    """Serialize a payload to compact UTF-8 JSON."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def classify_response(status_code: int, body: str) -> CallResult:
    """
    Map a finished HTTP exchange onto a result, or raise ``RemoteRejection``.
    """
    if status_code == 200:
        return Success(body)
    if status_code == 202:
        return Accepted(body)
    raise RemoteRejection(body, status_code)


class RequestExecutor:
    """Runs signed requests against the Semantria API."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.credentials = credentials
        self.timeout = timeout
        self._signer = AuthRequest(credentials)
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            # Calls must not carry state into each other, so cookies are never stored
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self._session = session
        self._listeners: list[ProcessedListener] = []
        self._in_flight: set[threading.Thread] = set()
        self._lock = threading.Lock()

    def __enter__(self) -> "RequestExecutor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """
        Wait for in-flight calls, then release the session if this executor
        created it. A session passed in by the caller is left open.
        """
        with self._lock:
            in_flight = list(self._in_flight)
        for thread in in_flight:
            thread.join()
        if self._owns_session:
            self._session.close()

    def add_listener(self, listener: ProcessedListener) -> None:
        """Register a callback that receives the body of every HTTP 200 answer."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ProcessedListener) -> None:
        self._listeners.remove(listener)

    def sign(self, method: str, url: str) -> SignedRequest:
        """Sign ``url`` with a fresh nonce and timestamp."""
        nonce = self._signer.generate_nonce()
        timestamp = self._signer.generate_timestamp()
        query = self._signer.generate_query(method, url, timestamp, nonce)
        headers = self._signer.get_request_headers(method, nonce, timestamp, query)
        return SignedRequest(query=query, headers=headers)

    def execute(self, method: str, url: str, body: Any = None) -> Future:
        """
        Issue one signed request and return the future that will hold its outcome.

        The request is started on its own thread straight away; calls are
        never queued behind each other.
        """
        future: Future = Future()
        future.add_done_callback(self._notify_processed)
        thread = threading.Thread(
            target=self._run,
            args=(future, method, url, body),
            name=f"semantria-{method.lower()}",
        )
        with self._lock:
            self._in_flight.add(thread)
            thread.start()
        return future

    def execute_and_wait(self, method: str, url: str, body: Any = None) -> CallResult:
        """Blocking variant of ``execute``; raises the failure value on rejection."""
        return self.execute(method, url, body).result()

    def _run(self, future: Future, method: str, url: str, body: Any) -> None:
        try:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = self._perform(method, url, body)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(result)
        finally:
            with self._lock:
                self._in_flight.discard(threading.current_thread())

    def _perform(self, method: str, url: str, body: Any) -> CallResult:
        signed = self.sign(method, url)
        headers = dict(signed.headers)

        data = None
        if body is not None:
            data = serialize_body(body)
            # Framing headers are added after signing and are not covered by it
            headers.pop("Content-type", None)
            headers["Content-Length"] = str(len(data))
            headers["Content-Type"] = "application/json"

        log.debug("Sending request", method=method, url=url, has_body=data is not None)
        try:
            response = self._session.request(
                method,
                signed.query,
                headers=headers,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            log.warning("Transport error", method=method, url=url, error=str(e))
            raise

        response.encoding = "utf-8"
        result = classify_response(response.status_code, response.text)
        log.info(
            "Request completed",
            method=method,
            url=url,
            status_code=response.status_code,
            outcome=type(result).__name__,
        )
        return result

    def _notify_processed(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            if isinstance(error, RemoteRejection):
                log.warning(
                    "Request rejected",
                    status_code=error.status_code,
                    body=error.body,
                )
            return

        result = future.result()
        if not isinstance(result, Success):
            return
        for listener in tuple(self._listeners):
            try:
                listener(result.body)
            except Exception:
                log.exception("Processed listener failed", listener=repr(listener))
