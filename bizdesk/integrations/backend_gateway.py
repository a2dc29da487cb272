"""
Business backend REST gateway.

All outbound HTTP calls to the backend go through this class.
Direct `requests` calls in services or blueprints are FORBIDDEN.

Design:
  - Bearer token forwarded per call (the BFF holds no credentials itself)
  - No retries: a failed call raises CollaboratorError and the user re-triggers
  - Timeout: BACKEND_TIMEOUT seconds (transport default, 30 s)
  - Responses unwrapped from the backend envelope: data.data.<key> → data.data → data
  - Error message taken from the conventional nested path
    (message / error.message / error), list messages joined

Testability: pass a mock `session` to BackendGateway() in tests instead of
letting it create a real requests.Session internally.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from bizdesk.core.exceptions import CollaboratorError
from bizdesk.middleware.timing import record_backend_call

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30


def extract_error_message(body: Any) -> str | None:
    """Return the backend's human-readable error message, if it sent one."""
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if message is None:
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
        elif isinstance(error, str):
            message = error
    if isinstance(message, (list, tuple)):
        message = "; ".join(str(m) for m in message if m)
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def unwrap(body: Any, key: str | None = None) -> Any:
    """Strip the backend's response envelope.

    The backend wraps payloads inconsistently: ``{"data": [...]}``,
    ``{"data": {"data": [...]}}`` or ``{"data": {"notifications": [...]}}``.
    Plain bodies are returned unchanged.
    """
    if not isinstance(body, dict) or body.get("data") is None:
        return body
    inner = body["data"]
    if isinstance(inner, dict):
        if key and inner.get(key) is not None:
            return inner[key]
        if inner.get("data") is not None:
            return inner["data"]
    return inner


class BackendGateway:
    """Business backend REST gateway.

    Instantiate once per app (``create_app`` stores it in
    ``app.extensions``) and pass the caller's token on every call.
    Pass a custom `session` in tests to intercept HTTP calls.

    Usage:
        gateway = BackendGateway("http://127.0.0.1:3000/api")
        projects = gateway.request("GET", "/projects", token=token)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: int = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: requests.Session | None = session

    # ── HTTP session ─────────────────────────────────────────────────────────

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # ── Core request dispatcher ───────────────────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict | list | None = None,
        params: dict | None = None,
        files: dict | None = None,
        envelope_key: str | None = None,
    ) -> Any:
        """Execute one request against the backend.

        Args:
            method:       HTTP verb ("GET", "POST", "PUT", "DELETE").
            path:         Path relative to BACKEND_API_URL, e.g. "/projects/7".
            token:        Bearer token of the acting user, forwarded as-is.
            json_body:    JSON-serialisable request body (optional).
            params:       URL query params (optional).
            files:        Multipart files for uploads (optional).
            envelope_key: Key to prefer inside ``data`` when unwrapping.

        Returns:
            The unwrapped response payload (None for empty bodies).

        Raises:
            CollaboratorError: non-2xx response or network-level failure.
        """
        url = self.url(path)
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs: dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if json_body is not None:
            kwargs["json"] = json_body
        if params:
            kwargs["params"] = params
        if files:
            kwargs["files"] = files

        t0 = time.perf_counter()
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            duration_ms = (time.perf_counter() - t0) * 1000
            record_backend_call(duration_ms)
            logger.warning(
                "Backend %s %s failed after %.0fms: %s", method, path, duration_ms, exc,
                extra={"backend_url": url, "duration_ms": duration_ms},
            )
            raise CollaboratorError(f"Backend unreachable: {exc}") from exc

        duration_ms = (time.perf_counter() - t0) * 1000
        record_backend_call(duration_ms)
        body = self._parse_body(resp)

        if not resp.ok:
            message = extract_error_message(body)
            logger.warning(
                "Backend %s %s → HTTP %s (%.0fms): %s",
                method, path, resp.status_code, duration_ms, message or "no message",
                extra={"backend_url": url, "status": resp.status_code, "duration_ms": duration_ms},
            )
            if message:
                raise CollaboratorError(message, resp.status_code, structured=True)
            raise CollaboratorError(
                f"Backend returned HTTP {resp.status_code}", resp.status_code,
            )

        logger.debug(
            "Backend %s %s → HTTP %s (%.0fms)", method, path, resp.status_code, duration_ms,
            extra={"backend_url": url, "status": resp.status_code, "duration_ms": duration_ms},
        )
        return unwrap(body, envelope_key)

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    def ping(self, token: str | None = None) -> float:
        """Round-trip a cheap GET; return latency in ms. Raises on failure."""
        t0 = time.perf_counter()
        self.request("GET", "/services", token=token)
        return (time.perf_counter() - t0) * 1000
