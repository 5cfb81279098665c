"""A small JSON-over-HTTP client that gzips request bodies."""

from __future__ import annotations

import dataclasses
import gzip
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urljoin

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass
class Response:
    """Status code and raw body of an HTTP response."""

    status_code: int = 0
    body: bytes = b""


class HttpError(Exception):
    """The server answered with a status code above 399."""

    def __init__(self, message: str, response: Response) -> None:
        super().__init__(message)
        self.response = response


def _header_value(headers: Mapping[str, str] | None, name: str) -> str:
    for key, value in (headers or {}).items():
        if key.lower() == name.lower():
            return value
    return ""


def _error_message(body: bytes) -> str:
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    message = payload.get("message") if isinstance(payload, dict) else None
    if isinstance(message, str) and message:
        return message
    return f"http error: {body.decode('utf-8', errors='replace')}"


class Client:
    """Sends requests relative to a base URL with a set of default headers."""

    def __init__(
        self,
        base_url: str,
        default_headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url
        self.default_headers = dict(default_headers or {})
        self.timeout = timeout

    def request(
        self,
        method: str,
        resource_uri: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a request and return the response.

        Raises HttpError when the status code is above 399.
        """
        url = urljoin(self.base_url, resource_uri)
        request = self._build_request(method, url, body, headers)
        options = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with urllib.request.urlopen(request, **options) as reply:
                response = Response(reply.status, reply.read())
        except urllib.error.HTTPError as exc:
            response = Response(exc.code, exc.read())
        if response.status_code > 399:
            raise HttpError(_error_message(response.body), response)
        return response

    def _build_request(
        self, method: str, url: str, body: Any, headers: Mapping[str, str] | None
    ) -> urllib.request.Request:
        data = None
        request_headers: dict[str, str] = {}
        if body is not None:
            if dataclasses.is_dataclass(body) and not isinstance(body, type):
                body = dataclasses.asdict(body)
            encoded = json.dumps(body, ensure_ascii=False, separators=(",", ":")) + "\n"
            data = gzip.compress(encoded.encode("utf-8"))
            request_headers["Content-Type"] = (
                _header_value(headers, "Content-Type") or DEFAULT_CONTENT_TYPE
            )
            request_headers["Content-Encoding"] = "gzip"
        request_headers.update(self._merge_with_default_headers(headers))
        return urllib.request.Request(url, data=data, headers=request_headers, method=method)

    def _merge_with_default_headers(
        self, incoming: Mapping[str, str] | None
    ) -> dict[str, str]:
        if incoming is None:
            return dict(self.default_headers)
        return {**self.default_headers, **incoming}